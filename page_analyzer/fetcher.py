import logging
from dataclasses import dataclass
from typing import Optional

import requests

from .errors import FetchError

logger = logging.getLogger(__name__)

USER_AGENT = "PageAnalyzer/1.0"


@dataclass(frozen=True)
class FetchedPage:
    status_code: int
    body: str


def fetch_page(url: str, timeout: Optional[float] = None) -> FetchedPage:
    """Issue a single GET to *url*.

    Any HTTP response counts as fetched, whatever its status code. Network
    and transport failures raise :class:`FetchError`; nothing is retried.
    """
    kwargs = {"headers": {"User-Agent": USER_AGENT}}
    if timeout is not None:
        kwargs["timeout"] = timeout

    try:
        response = requests.get(url, **kwargs)
    except requests.RequestException as exc:
        logger.warning("Fetch failed for %s: %s", url, exc)
        raise FetchError(url, str(exc)) from exc

    logger.debug("Fetched %s with status %s", url, response.status_code)
    return FetchedPage(status_code=response.status_code, body=response.text)
