"""
Generic CRUD over the array-valued root keys ("collections") of a document.

Every function works on an already loaded tree and mutates it in place;
persisting is up to the caller (see ``DocumentStore.mutate``).
"""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ..errors import CollectionNotFoundError, RecordNotFoundError

Record = Dict[str, Any]


def _collection(tree: Dict[str, Any], name: str) -> List[Record]:
    records = tree.get(name)
    if not isinstance(records, list):
        raise CollectionNotFoundError(f"Collection not found: {name}")
    return records


def _same_id(stored, wanted) -> bool:
    """Loose id equality: path params arrive as strings, stored ids are ints."""
    if stored is None:
        return False
    if str(stored) == str(wanted):
        return True
    try:
        return float(stored) == float(wanted)
    except (TypeError, ValueError):
        return False


def _find(records: List[Record], record_id) -> Tuple[int, Record]:
    for index, record in enumerate(records):
        if isinstance(record, dict) and _same_id(record.get("id"), record_id):
            return index, record
    raise RecordNotFoundError(f"Item not found: {record_id}")


def coerce_id(value):
    """Turn a path-supplied id into an int when it is one."""
    try:
        return int(str(value).strip())
    except ValueError:
        return value


def next_id(records: List[Record]) -> int:
    ids = []
    for record in records:
        if not isinstance(record, dict):
            continue
        try:
            ids.append(int(record.get("id")))
        except (TypeError, ValueError):
            continue
    return max(ids, default=0) + 1


def list_records(tree: Dict[str, Any], name: str) -> List[Record]:
    return _collection(tree, name)


def get_record(tree: Dict[str, Any], name: str, record_id) -> Record:
    _, record = _find(_collection(tree, name), record_id)
    return record


def insert_record(tree: Dict[str, Any], name: str, payload: Record) -> Record:
    records = _collection(tree, name)
    record = {**payload, "id": next_id(records)}
    records.append(record)
    return record


def replace_record(tree: Dict[str, Any], name: str, record_id, payload: Record) -> Record:
    records = _collection(tree, name)
    index, _ = _find(records, record_id)
    records[index] = {**payload, "id": coerce_id(record_id)}
    return records[index]


def merge_record(tree: Dict[str, Any], name: str, record_id, payload: Record) -> Record:
    records = _collection(tree, name)
    index, existing = _find(records, record_id)
    records[index] = {**existing, **payload, "id": coerce_id(record_id)}
    return records[index]


def delete_record(tree: Dict[str, Any], name: str, record_id) -> Record:
    records = _collection(tree, name)
    index, _ = _find(records, record_id)
    return records.pop(index)
