from .check_repository import CheckRepository
from .url_repository import UrlRepository


class HistoryStore(UrlRepository, CheckRepository):
    """URLs and their checks, backed by one SQLAlchemy engine."""

    def dispose(self) -> None:
        self.engine.dispose()
