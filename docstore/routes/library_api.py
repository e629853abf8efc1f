from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from ..errors import NotFoundError
from ..extensions import get_store
from ..services.library import (
    add_book_to_batch,
    get_batch,
    get_borrow,
    get_document,
    list_authors,
    list_batches,
    list_books,
    list_students,
)

bp = Blueprint("library_api", __name__)


def _ok(data, status=200):
    return jsonify({"success": True, "data": data}), status


def _ok_list(items):
    return jsonify({"success": True, "count": len(items), "data": items})


@bp.errorhandler(NotFoundError)
def not_found(e):
    return jsonify({"error": str(e)}), 404


@bp.errorhandler(Exception)
def failed(e):
    if isinstance(e, HTTPException):
        return e
    current_app.logger.exception("Library request failed")
    return jsonify({"error": str(e)}), 500


@bp.get("/")
def library_document():
    return _ok(get_document(get_store().load()))


@bp.get("/borrow")
def borrow():
    return _ok(get_borrow(get_store().load()))


@bp.get("/book_batches/books")
def batches():
    return _ok_list(list_batches(get_store().load()))


@bp.get("/book_batches/aut_id")
def authors():
    return _ok_list(list_authors(get_store().load()))


@bp.get("/book_batches/<int:batch_id>")
def batch(batch_id):
    return _ok(get_batch(get_store().load(), batch_id))


@bp.get("/books")
def books():
    return _ok_list(list_books(get_store().load()))


@bp.get("/students")
def students():
    return _ok_list(list_students(get_store().load()))


@bp.post("/book_batches/<int:batch_id>/books")
def add_book(batch_id):
    book = request.get_json(silent=True)
    if not isinstance(book, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    with get_store().mutate() as tree:
        added = add_book_to_batch(tree, batch_id, book)
    current_app.logger.info("Added book %s to batch %s", added.get("book_id"), batch_id)
    return _ok(added, 201)
