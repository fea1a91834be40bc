from .db import create_db_engine, init_schema
from .store import HistoryStore

__all__ = ["HistoryStore", "create_db_engine", "init_schema"]
