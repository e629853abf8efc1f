# docstore/extensions.py
from flask import current_app
from flask_cors import CORS

from .storage.document_store import DocumentStore

# Registered in create_app through init_app
cors = CORS()

STORE_KEY = "docstore"


def init_store(app, store: DocumentStore) -> DocumentStore:
    app.extensions[STORE_KEY] = store
    return store


def get_store() -> DocumentStore:
    """The DocumentStore bound to the running app."""
    return current_app.extensions[STORE_KEY]
