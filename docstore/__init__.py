import click
from flask import Flask

from .config import Config
from .extensions import cors, get_store, init_store
from .services.library import LIBRARY_SCHEMA
from .storage.document_store import DocumentStore
from .storage.schema import COLLECTIONS_SCHEMA
from .utils.seed import default_library

COLLECTIONS = "collections"
LIBRARY = "library"


def build_store(config) -> DocumentStore:
    """DocumentStore for the configured file and variant."""
    variant = config["STORE_VARIANT"]
    if variant == COLLECTIONS:
        return DocumentStore(config["DB_FILE"], schema=COLLECTIONS_SCHEMA, root_tag=config["XML_ROOT_TAG"])
    if variant == LIBRARY:
        return DocumentStore(
            config["DB_FILE"],
            schema=LIBRARY_SCHEMA,
            seed=default_library(),
            root_tag=config["XML_ROOT_TAG"],
        )
    raise ValueError(f"Unknown STORE_VARIANT: {variant!r} (expected {COLLECTIONS!r} or {LIBRARY!r})")


def create_app(config_class: type[Config] = Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json.sort_keys = False
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Extensions
    cors.init_app(app)
    store = init_store(app, build_store(app.config))

    # Blueprints (one variant per deployment, their routes overlap)
    if app.config["STORE_VARIANT"] == LIBRARY:
        from .routes.library_api import bp as library_api

        app.register_blueprint(library_api)
        if store.bootstrap():
            app.logger.info("Seeded library document at %s", store.path)
    else:
        from .routes.collections_api import bp as collections_api

        app.register_blueprint(collections_api)

    register_commands(app)
    return app


def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create the database file if it does not exist yet."""
        store = get_store()
        seed = default_library() if app.config["STORE_VARIANT"] == LIBRARY else {}
        if store.bootstrap(seed):
            click.echo(f"Created {store.path}")
        else:
            click.echo(f"{store.path} already exists, left untouched")
