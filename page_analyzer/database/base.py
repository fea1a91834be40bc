import logging
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..errors import StorageError

logger = logging.getLogger(__name__)


def now() -> datetime:
    return datetime.now(timezone.utc)


class Repository:
    """Holds the shared engine; every operation runs in its own transaction."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def transaction(self, operation: str):
        try:
            with self.engine.begin() as conn:
                yield conn
        except SQLAlchemyError as exc:
            logger.exception("Storage operation %s failed", operation)
            raise StorageError(operation, str(exc)) from exc
