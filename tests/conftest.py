"""
Shared test fixtures and configuration for docstore tests.
"""
import copy
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from docstore import create_app
from docstore.config import Config
from docstore.storage.document_store import DocumentStore
from docstore.storage.schema import COLLECTIONS_SCHEMA


# Test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"

SAMPLE_DB = {
    "users": [
        {"id": 1, "name": "Ada Lovelace", "email": "ada@example.com"},
        {"id": 2, "name": "Linus Torvalds", "email": "linus@example.com", "active": True},
    ],
    "posts": [
        {"id": 1, "title": "Hello", "tags": ["intro"], "author_id": 1, "rating": 4.5, "draft": None},
    ],
    "comments": [],
}


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: storage and service tests without the Flask app")
    config.addinivalue_line("markers", "integration: tests through the Flask test client")


def make_config(db_file: Path, variant: str = "collections") -> type:
    """Config subclass pointing the app at ``db_file``."""
    return type(
        "TestConfig",
        (Config,),
        {"TESTING": True, "DB_FILE": Path(db_file), "STORE_VARIANT": variant},
    )


@pytest.fixture(params=["json", "yml", "xml"])
def db_format(request) -> str:
    """Every test depending on this runs once per on-disk encoding."""
    return request.param


@pytest.fixture
def sample_db() -> dict:
    return copy.deepcopy(SAMPLE_DB)


@pytest.fixture
def db_file(tmp_path: Path, db_format: str, sample_db: dict) -> Path:
    """Collections document written in the parametrized encoding."""
    path = tmp_path / f"db.{db_format}"
    DocumentStore(path, schema=COLLECTIONS_SCHEMA).save(sample_db)
    return path


@pytest.fixture
def app(db_file: Path) -> Flask:
    """Flask app serving the generic collections variant."""
    app = create_app(make_config(db_file))
    yield app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create a Flask test client."""
    return app.test_client()


@pytest.fixture
def runner(app: Flask):
    """Create a Flask CLI test runner."""
    return app.test_cli_runner()


@pytest.fixture
def library_file(tmp_path: Path, db_format: str) -> Path:
    """Path for a library document; it does not exist until the app seeds it."""
    return tmp_path / f"library.{db_format}"


@pytest.fixture
def library_app(library_file: Path) -> Flask:
    """Flask app serving the library variant, seeded on creation."""
    return create_app(make_config(library_file, "library"))


@pytest.fixture
def library_client(library_app: Flask) -> FlaskClient:
    return library_app.test_client()


@pytest.fixture
def fixture_copy(tmp_path: Path):
    """Copy a file from tests/fixtures into tmp_path and return the copy's path."""
    def _copy(filename: str) -> Path:
        target = tmp_path / filename
        target.write_bytes((FIXTURES_DIR / filename).read_bytes())
        return target
    return _copy


@pytest.fixture
def config_for():
    """Factory fixture: ``config_for(path, variant)`` -> config class."""
    return make_config
