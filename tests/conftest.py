from pathlib import Path

import pytest

from page_analyzer.app import create_app
from page_analyzer.database import HistoryStore, create_db_engine, init_schema

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def store(database_url):
    """A HistoryStore over a fresh SQLite file."""
    engine = create_db_engine(database_url)
    init_schema(engine)
    history = HistoryStore(engine)
    yield history
    history.dispose()


@pytest.fixture
def app(database_url):
    app = create_app({
        "TESTING": True,
        "DATABASE_URL": database_url,
        "CREATE_SCHEMA": True,
        "SECRET_KEY": "test",
        "URLS_PER_PAGE": 2,
    })
    yield app
    app.extensions["history_store"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_store(app):
    return app.extensions["history_store"]
