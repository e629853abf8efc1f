import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


class Config:
    BASE_DIR = Path(__file__).resolve().parent.parent
    DATA_DIR = BASE_DIR / "db_files"
    # Extension picks the encoding: db.json, db.yml / db.yaml or db.xml
    DB_FILE = Path(os.getenv("DB_FILE", str(DATA_DIR / "db.yml")))
    # "collections" (generic CRUD) or "library" (nested borrow document)
    STORE_VARIANT = os.getenv("STORE_VARIANT", "collections").strip().lower()
    XML_ROOT_TAG = os.getenv("XML_ROOT_TAG", "database")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


class DevConfig(Config):
    DEBUG = True


class ProdConfig(Config):
    DEBUG = False
