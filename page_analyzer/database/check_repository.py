from typing import Dict, List

from sqlalchemy import Integer, String, bindparam, text

from ..errors import StorageError
from ..models import Check
from .base import Repository, now
from .schema import UtcDateTime

# One row per URL: its check with the newest created_at, then the highest id.
LATEST_CHECKS_SQL = """
    SELECT id, url_id, status_code, title, h1, description, created_at
    FROM (
        SELECT
            uc.*,
            ROW_NUMBER() OVER (
                PARTITION BY uc.url_id
                ORDER BY uc.created_at DESC, uc.id DESC
            ) AS check_rank
        FROM url_checks uc
    ) ranked
    WHERE check_rank = 1
"""

CHECK_COLUMNS = dict(
    id=Integer,
    url_id=Integer,
    status_code=Integer,
    title=String,
    h1=String,
    description=String,
    created_at=UtcDateTime,
)


def _to_check(row) -> Check:
    return Check(
        id=row.id,
        url_id=row.url_id,
        status_code=row.status_code,
        title=row.title,
        h1=row.h1,
        description=row.description,
        created_at=row.created_at,
    )


class CheckRepository(Repository):
    def save_check(self, check: Check) -> Check:
        # created_at is always stamped here, whatever the caller passed in.
        query = text(
            """
            INSERT INTO url_checks (
                url_id, status_code, title, h1, description, created_at
            )
            VALUES (:url_id, :status_code, :title, :h1, :description, :created_at)
            RETURNING id, url_id, status_code, title, h1, description, created_at;
            """
        ).bindparams(bindparam("created_at", type_=UtcDateTime)).columns(**CHECK_COLUMNS)
        values = {
            "url_id": check.url_id,
            "status_code": check.status_code,
            "title": check.title,
            "h1": check.h1,
            "description": check.description,
            "created_at": now(),
        }

        with self.transaction("save_check") as conn:
            row = conn.execute(query, values).first()
            if row is None:
                raise StorageError(
                    "save_check", f"no id returned for url_id={check.url_id}"
                )
        return _to_check(row)

    def latest_check_per_url(self) -> Dict[int, Check]:
        query = text(LATEST_CHECKS_SQL).columns(**CHECK_COLUMNS)

        with self.transaction("latest_check_per_url") as conn:
            rows = conn.execute(query).all()
        return {row.url_id: _to_check(row) for row in rows}

    def all_checks_for_url(self, url_id: int) -> List[Check]:
        query = text(
            """
            SELECT id, url_id, status_code, title, h1, description, created_at
            FROM url_checks
            WHERE url_id = :url_id
            ORDER BY created_at DESC, id DESC;
            """
        ).columns(**CHECK_COLUMNS)

        with self.transaction("all_checks_for_url") as conn:
            rows = conn.execute(query, {"url_id": url_id}).all()
        return [_to_check(row) for row in rows]

    def count_checks(self, url_id: int) -> int:
        query = text("SELECT COUNT(*) FROM url_checks WHERE url_id = :url_id;")

        with self.transaction("count_checks") as conn:
            return conn.execute(query, {"url_id": url_id}).scalar_one()

    def truncate(self) -> None:
        with self.transaction("truncate") as conn:
            conn.execute(text("DELETE FROM url_checks;"))
            conn.execute(text("DELETE FROM urls;"))
