from unittest.mock import MagicMock

import pytest

from page_analyzer.checks import (
    MSG_CHECK_DONE,
    MSG_CHECK_FAILED,
    MSG_URL_ADDED,
    MSG_URL_EXISTS,
    MSG_URL_INVALID,
    CheckState,
    add_url,
    build_check,
    perform_check,
)
from page_analyzer.database import HistoryStore
from page_analyzer.errors import (
    CheckError,
    FetchError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from page_analyzer.fetcher import FetchedPage
from page_analyzer.parser import PageSummary

from .conftest import read_fixture


def fixture_fetch(name="index.html", status_code=200):
    fetch = MagicMock(return_value=FetchedPage(status_code, read_fixture(name)))
    return fetch


def failing_fetch(url, timeout=None):
    raise FetchError(url, "connection refused")


class TestAddUrl:
    def test_adds_normalized_url(self, store):
        outcome = add_url(store, "  HTTPS://Example.com:443/some/path ")

        assert outcome.ok
        assert outcome.created
        assert outcome.url.name == "https://example.com"
        assert (outcome.message, outcome.category) == (MSG_URL_ADDED, "success")
        assert store.find_url_by_name("https://example.com").id == outcome.url.id

    def test_duplicate_returns_existing(self, store):
        first = add_url(store, "https://example.com")
        second = add_url(store, "https://EXAMPLE.com/other")

        assert second.ok
        assert not second.created
        assert second.url.id == first.url.id
        assert (second.message, second.category) == (MSG_URL_EXISTS, "info")
        assert store.count_urls() == 1

    @pytest.mark.parametrize("raw", ["", "not-a-url", "ftp://x.com", "http://"])
    def test_invalid_url_is_not_stored(self, store, raw):
        outcome = add_url(store, raw)

        assert not outcome.ok
        assert isinstance(outcome.error, ValidationError)
        assert (outcome.message, outcome.category) == (MSG_URL_INVALID, "danger")
        assert store.count_urls() == 0

    def test_storage_failure_is_reported(self):
        store = MagicMock(spec=HistoryStore)
        store.find_url_by_name.return_value = None
        store.save_url.side_effect = StorageError("save_url")

        outcome = add_url(store, "https://example.com")

        assert not outcome.ok
        assert isinstance(outcome.error, StorageError)
        assert outcome.category == "danger"

    def test_lost_insert_race_reports_duplicate(self, store):
        winner = store.save_url("https://example.com")
        lookups = []

        def find_after_race(name):
            # The first lookup happens before the other request commits.
            lookups.append(name)
            return None if len(lookups) == 1 else store.find_url_by_name(name)

        racing = MagicMock(wraps=store)
        racing.find_url_by_name.side_effect = find_after_race

        outcome = add_url(racing, "https://example.com")

        assert outcome.ok
        assert not outcome.created
        assert outcome.url.id == winner.id
        assert (outcome.message, outcome.category) == (MSG_URL_EXISTS, "info")
        assert store.count_urls() == 1

    def test_lookup_failure_is_not_retried(self):
        store = MagicMock(spec=HistoryStore)
        store.find_url_by_name.side_effect = StorageError("find_url_by_name")

        outcome = add_url(store, "https://example.com")

        assert isinstance(outcome.error, StorageError)
        assert store.find_url_by_name.call_count == 1
        store.save_url.assert_not_called()


def test_build_check():
    check = build_check(7, 200, PageSummary("T", "H", "D"))

    assert (check.url_id, check.status_code) == (7, 200)
    assert (check.title, check.h1, check.description) == ("T", "H", "D")
    assert check.id is None


class TestPerformCheck:
    def test_records_check(self, store):
        url = store.save_url("https://example.com")
        fetch = fixture_fetch()

        outcome = perform_check(store, url.id, fetch=fetch, timeout=5)

        assert outcome.ok
        assert outcome.state is CheckState.RECORDED
        assert (outcome.message, outcome.category) == (MSG_CHECK_DONE, "success")
        fetch.assert_called_once_with("https://example.com", timeout=5)
        check = outcome.check
        assert check.id is not None
        assert check.url_id == url.id
        assert check.status_code == 200
        assert check.title == "Test page"
        assert check.h1 == "Test page."
        assert check.description == "all right"
        assert [c.id for c in store.all_checks_for_url(url.id)] == [check.id]

    def test_records_error_statuses(self, store):
        url = store.save_url("https://example.com")

        outcome = perform_check(store, url.id, fetch=fixture_fetch("empty.html", 404))

        assert outcome.ok
        assert outcome.check.status_code == 404
        assert (outcome.check.title, outcome.check.h1, outcome.check.description) == ("", "", "")

    def test_unknown_url(self, store):
        fetch = fixture_fetch()

        outcome = perform_check(store, 12345, fetch=fetch)

        assert outcome.state is CheckState.FAILED
        assert isinstance(outcome.error, NotFoundError)
        assert outcome.error.url_id == 12345
        fetch.assert_not_called()

    def test_failed_fetch_leaves_history_unchanged(self, store):
        url = store.save_url("https://unreachable.example")
        perform_check(store, url.id, fetch=fixture_fetch())
        before = store.count_checks(url.id)

        outcome = perform_check(store, url.id, fetch=failing_fetch)

        assert outcome.state is CheckState.FAILED
        assert not outcome.ok
        assert isinstance(outcome.error, FetchError)
        assert (outcome.message, outcome.category) == (MSG_CHECK_FAILED, "danger")
        assert store.count_checks(url.id) == before

    def test_storage_failure_after_fetch(self, store):
        url = store.save_url("https://example.com")
        broken = MagicMock(wraps=store)
        broken.save_check.side_effect = StorageError("save_check")

        outcome = perform_check(broken, url.id, fetch=fixture_fetch())

        assert outcome.state is CheckState.FAILED
        assert isinstance(outcome.error, StorageError)
        assert outcome.check is None
        assert store.count_checks(url.id) == 0

    def test_every_failure_is_a_check_error(self, store):
        url = store.save_url("https://example.com")
        outcomes = [
            perform_check(store, 999, fetch=fixture_fetch()),
            perform_check(store, url.id, fetch=failing_fetch),
        ]

        assert all(isinstance(o.error, CheckError) for o in outcomes)
