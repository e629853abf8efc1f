from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from ..errors import NotFoundError
from ..extensions import get_store
from ..services.collections import (
    delete_record,
    get_record,
    insert_record,
    list_records,
    merge_record,
    replace_record,
)

bp = Blueprint("collections_api", __name__)

TEXT = {"Content-Type": "text/plain; charset=utf-8"}


def _json_object():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else None


@bp.errorhandler(NotFoundError)
def not_found(e):
    return str(e), 404, TEXT


@bp.errorhandler(Exception)
def failed(e):
    if isinstance(e, HTTPException):
        return e
    current_app.logger.exception("Collection request failed")
    return str(e), 500, TEXT


@bp.get("/<collection>")
def list_items(collection):
    return jsonify(list_records(get_store().load(), collection))


@bp.get("/<collection>/<record_id>")
def get_item(collection, record_id):
    return jsonify(get_record(get_store().load(), collection, record_id))


@bp.post("/<collection>")
def create_item(collection):
    payload = _json_object()
    if payload is None:
        return "Request body must be a JSON object", 400, TEXT
    with get_store().mutate() as tree:
        record = insert_record(tree, collection, payload)
    current_app.logger.info("Inserted %s/%s", collection, record["id"])
    return jsonify(record), 201


@bp.put("/<collection>/<record_id>")
def replace_item(collection, record_id):
    payload = _json_object()
    if payload is None:
        return "Request body must be a JSON object", 400, TEXT
    with get_store().mutate() as tree:
        record = replace_record(tree, collection, record_id, payload)
    return jsonify(record)


@bp.patch("/<collection>/<record_id>")
def update_item(collection, record_id):
    payload = _json_object()
    if payload is None:
        return "Request body must be a JSON object", 400, TEXT
    with get_store().mutate() as tree:
        record = merge_record(tree, collection, record_id, payload)
    return jsonify(record)


@bp.delete("/<collection>/<record_id>")
def delete_item(collection, record_id):
    with get_store().mutate() as tree:
        record = delete_record(tree, collection, record_id)
    current_app.logger.info("Deleted %s/%s", collection, record_id)
    return jsonify(record)
