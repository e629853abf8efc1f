"""
Read-only views over the library document:

    library
      borrow
        borrow_bookbatch: [batch]
          batch_id
          batch_books.books: [book]
            book_id, book_title
            book_authors: [{Authors: [author]}]
          batch_studentid.Student: [student]

``add_book_to_batch`` is the one mutating operation; it edits the tree in
place and the caller saves it.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from ..errors import BatchNotFoundError, NotFoundError
from ..storage.schema import SequenceSchema

LIBRARY_ROOT = "library"

_BATCHES = ("*", "borrow", "borrow_bookbatch")

LIBRARY_SCHEMA = SequenceSchema([
    _BATCHES,
    _BATCHES + ("batch_books", "books"),
    _BATCHES + ("batch_books", "books", "book_authors"),
    _BATCHES + ("batch_books", "books", "book_authors", "Authors"),
    _BATCHES + ("batch_studentid", "Student"),
])


def _as_list(value) -> list:
    # Guards against documents written before every sequence was normalized.
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def _mapping(value) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def get_document(tree: Dict[str, Any]) -> Dict[str, Any]:
    document = tree.get(LIBRARY_ROOT)
    if not isinstance(document, dict):
        raise NotFoundError(f"Library document not found: {LIBRARY_ROOT}")
    return document


def get_borrow(tree: Dict[str, Any]) -> Dict[str, Any]:
    borrow = get_document(tree).get("borrow")
    if not isinstance(borrow, dict):
        raise NotFoundError("Borrow data not found")
    return borrow


def _batches(tree: Dict[str, Any]) -> List[Dict[str, Any]]:
    batches = get_borrow(tree).get("borrow_bookbatch")
    if batches is None:
        raise NotFoundError("Book batches not found")
    return [b for b in _as_list(batches) if isinstance(b, dict)]


def _books(batch: Dict[str, Any]) -> List[Dict[str, Any]]:
    return _as_list(_mapping(batch.get("batch_books")).get("books"))


def _students(batch: Dict[str, Any]) -> List[Dict[str, Any]]:
    return _as_list(_mapping(batch.get("batch_studentid")).get("Student"))


def _authors(book: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    for group in _as_list(book.get("book_authors")):
        for author in _as_list(_mapping(group).get("Authors")):
            if isinstance(author, dict):
                yield author


def _full_name(person: Dict[str, Any], first: str, last: str) -> str:
    return f"{person.get(first, '')} {person.get(last, '')}".strip()


def _find_batch(tree: Dict[str, Any], batch_id) -> Dict[str, Any]:
    # Exact on the textual form: unannotated XML carries ids as strings.
    for batch in _batches(tree):
        if str(batch.get("batch_id")) == str(batch_id):
            return batch
    raise BatchNotFoundError(f"Batch {batch_id} not found")


def reshape_book(book: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "book_id": book.get("book_id"),
        "book_title": book.get("book_title"),
        "authors": [
            {"aut_id": a.get("aut_id"), "name": _full_name(a, "aut_firstname", "aut_lastname")}
            for a in _authors(book)
        ],
    }


def reshape_batch(batch: Dict[str, Any]) -> Dict[str, Any]:
    students = _students(batch)
    student: Optional[Dict[str, Any]] = students[0] if students else None
    return {
        "batch_id": batch.get("batch_id"),
        "books": [reshape_book(b) for b in _books(batch)],
        "student": student,
    }


def list_batches(tree: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [reshape_batch(b) for b in _batches(tree)]


def get_batch(tree: Dict[str, Any], batch_id) -> Dict[str, Any]:
    return reshape_batch(_find_batch(tree, batch_id))


def list_authors(tree: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Every author across every book, once per (id, first name, last name)."""
    seen = set()
    out: List[Dict[str, Any]] = []
    for batch in _batches(tree):
        for book in _books(batch):
            for author in _authors(book):
                key = (
                    str(author.get("aut_id")),
                    author.get("aut_firstname"),
                    author.get("aut_lastname"),
                )
                if key in seen:
                    continue
                seen.add(key)
                out.append({
                    "aut_id": author.get("aut_id"),
                    "aut_firstname": author.get("aut_firstname"),
                    "aut_lastname": author.get("aut_lastname"),
                    "full_name": _full_name(author, "aut_firstname", "aut_lastname"),
                })
    return out


def list_books(tree: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [book for batch in _batches(tree) for book in _books(batch)]


def list_students(tree: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [student for batch in _batches(tree) for student in _students(batch)]


def add_book_to_batch(tree: Dict[str, Any], batch_id, book: Dict[str, Any]) -> Dict[str, Any]:
    batch = _find_batch(tree, batch_id)
    holder = batch.get("batch_books")
    if not isinstance(holder, dict):
        holder = batch["batch_books"] = {}
    books = holder.get("books")
    if not isinstance(books, list):
        books = holder["books"] = _as_list(books)
    books.append(book)
    return book
