"""Adding URLs and running page checks.

Both entry points return an outcome object instead of raising: the web
layer turns ``message``/``category`` into a flash and decides on the
response from ``ok``/``error``.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import (
    FetchError,
    NotFoundError,
    PageAnalyzerError,
    StorageError,
    ValidationError,
)
from .fetcher import FetchedPage, fetch_page
from .models import Check, Url
from .parser import PageSummary, parse_page
from .url_normalizer import normalize_url

logger = logging.getLogger(__name__)

MSG_URL_ADDED = "Страница успешно добавлена"
MSG_URL_EXISTS = "Страница уже существует"
MSG_URL_INVALID = "Некорректный URL"
MSG_URL_NOT_FOUND = "URL не найден"
MSG_CHECK_DONE = "Страница успешно проверена"
MSG_CHECK_FAILED = "Произошла ошибка при проверке"
MSG_STORAGE_FAILED = "Ошибка при сохранении данных"


class CheckState(enum.Enum):
    STARTED = "started"
    FETCHED = "fetched"
    ANALYZED = "analyzed"
    RECORDED = "recorded"
    FAILED = "failed"


@dataclass(frozen=True)
class UrlOutcome:
    message: str
    category: str
    url: Optional[Url] = None
    created: bool = False
    error: Optional[PageAnalyzerError] = None

    @property
    def ok(self) -> bool:
        return self.url is not None


@dataclass(frozen=True)
class CheckOutcome:
    state: CheckState
    message: str
    category: str
    check: Optional[Check] = None
    error: Optional[PageAnalyzerError] = None

    @property
    def ok(self) -> bool:
        return self.state is CheckState.RECORDED


def add_url(store, raw_url: str, assume_scheme: bool = False) -> UrlOutcome:
    try:
        name = normalize_url(raw_url, assume_scheme=assume_scheme)
    except ValidationError as exc:
        logger.warning("Rejected URL %r: %s", raw_url, exc)
        return UrlOutcome(MSG_URL_INVALID, "danger", error=exc)

    try:
        existing = store.find_url_by_name(name)
    except StorageError as exc:
        return UrlOutcome(MSG_STORAGE_FAILED, "danger", error=exc)
    if existing is not None:
        logger.info("URL %s already exists with id %s", name, existing.id)
        return UrlOutcome(MSG_URL_EXISTS, "info", url=existing)

    try:
        url = store.save_url(name)
    except StorageError as exc:
        return _added_concurrently(store, name, exc)

    logger.info("URL %s added with id %s", url.name, url.id)
    return UrlOutcome(MSG_URL_ADDED, "success", url=url, created=True)


def _added_concurrently(store, name: str, error: StorageError) -> UrlOutcome:
    # A parallel request may have inserted the same name after our lookup.
    try:
        existing = store.find_url_by_name(name)
    except StorageError:
        existing = None
    if existing is None:
        return UrlOutcome(MSG_STORAGE_FAILED, "danger", error=error)

    logger.info("URL %s was added concurrently with id %s", name, existing.id)
    return UrlOutcome(MSG_URL_EXISTS, "info", url=existing)


def build_check(url_id: int, status_code: int, summary: PageSummary) -> Check:
    return Check(
        url_id=url_id,
        status_code=status_code,
        title=summary.title,
        h1=summary.h1,
        description=summary.description,
    )


def _failed(message: str, error: PageAnalyzerError) -> CheckOutcome:
    return CheckOutcome(CheckState.FAILED, message, "danger", error=error)


def perform_check(
    store,
    url_id: int,
    fetch: Callable[..., FetchedPage] = fetch_page,
    timeout: Optional[float] = None,
) -> CheckOutcome:
    state = CheckState.STARTED
    try:
        url = store.find_url_by_id(url_id)
    except StorageError as exc:
        return _failed(MSG_STORAGE_FAILED, exc)
    if url is None:
        logger.warning("Check requested for unknown URL id %s", url_id)
        return _failed(MSG_URL_NOT_FOUND, NotFoundError(url_id))

    try:
        page = fetch(url.name, timeout=timeout)
    except FetchError as exc:
        logger.warning("Check of %s failed after %s: %s", url.name, state.value, exc)
        return _failed(MSG_CHECK_FAILED, exc)
    state = CheckState.FETCHED

    summary = parse_page(page.body)
    state = CheckState.ANALYZED

    try:
        check = store.save_check(build_check(url.id, page.status_code, summary))
    except StorageError as exc:
        logger.error("Check of %s discarded after %s: %s", url.name, state.value, exc)
        return _failed(MSG_STORAGE_FAILED, exc)

    logger.info(
        "Check %s recorded for %s with status %s", check.id, url.name, check.status_code
    )
    return CheckOutcome(CheckState.RECORDED, MSG_CHECK_DONE, "success", check=check)
