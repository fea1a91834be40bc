from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Url:
    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Check:
    url_id: int
    status_code: int
    title: str = ""
    h1: str = ""
    description: str = ""
    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class UrlSummary:
    """A row of the URL listing: the URL plus its latest check, if any."""

    id: int
    name: str
    created_at: datetime
    last_check_at: Optional[datetime] = None
    last_status_code: Optional[int] = None
