import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str):
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "default-secret")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///page_analyzer.db")
    # None means: create tables on start only for SQLite databases.
    CREATE_SCHEMA = _flag("CREATE_SCHEMA")
    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))
    URLS_PER_PAGE = int(os.getenv("URLS_PER_PAGE", "20"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
