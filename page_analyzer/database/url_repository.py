from typing import List, Optional

from sqlalchemy import Integer, String, bindparam, text

from ..errors import StorageError
from ..models import Url, UrlSummary
from .base import Repository, now
from .check_repository import LATEST_CHECKS_SQL
from .schema import UtcDateTime

URL_COLUMNS = dict(id=Integer, name=String, created_at=UtcDateTime)


def _to_url(row) -> Url:
    return Url(id=row.id, name=row.name, created_at=row.created_at)


class UrlRepository(Repository):
    def save_url(self, name: str) -> Url:
        query = text(
            """
            INSERT INTO urls (name, created_at)
            VALUES (:name, :created_at)
            RETURNING id, name, created_at;
            """
        ).bindparams(bindparam("created_at", type_=UtcDateTime)).columns(**URL_COLUMNS)

        with self.transaction("save_url") as conn:
            row = conn.execute(query, {"name": name, "created_at": now()}).first()
            if row is None:
                raise StorageError("save_url", f"no id returned for {name}")
        return _to_url(row)

    def find_url_by_name(self, name: str) -> Optional[Url]:
        query = text(
            "SELECT id, name, created_at FROM urls WHERE name = :name;"
        ).columns(**URL_COLUMNS)

        with self.transaction("find_url_by_name") as conn:
            row = conn.execute(query, {"name": name}).first()
        return _to_url(row) if row else None

    def find_url_by_id(self, id: int) -> Optional[Url]:
        query = text(
            "SELECT id, name, created_at FROM urls WHERE id = :id;"
        ).columns(**URL_COLUMNS)

        with self.transaction("find_url_by_id") as conn:
            row = conn.execute(query, {"id": id}).first()
        return _to_url(row) if row else None

    def list_urls(self) -> List[Url]:
        query = text(
            "SELECT id, name, created_at FROM urls ORDER BY id DESC;"
        ).columns(**URL_COLUMNS)

        with self.transaction("list_urls") as conn:
            rows = conn.execute(query).all()
        return [_to_url(row) for row in rows]

    def list_url_summaries(self, limit: int, offset: int = 0) -> List[UrlSummary]:
        query = text(
            f"""
            SELECT
                u.id,
                u.name,
                u.created_at,
                lc.created_at AS last_check_at,
                lc.status_code AS last_status_code
            FROM urls u
            LEFT JOIN ({LATEST_CHECKS_SQL}) lc ON lc.url_id = u.id
            ORDER BY u.id DESC
            LIMIT :limit OFFSET :offset;
            """
        ).columns(
            last_check_at=UtcDateTime,
            last_status_code=Integer,
            **URL_COLUMNS,
        )

        with self.transaction("list_url_summaries") as conn:
            rows = conn.execute(query, {"limit": limit, "offset": offset}).all()
        return [
            UrlSummary(
                id=row.id,
                name=row.name,
                created_at=row.created_at,
                last_check_at=row.last_check_at,
                last_status_code=row.last_status_code,
            )
            for row in rows
        ]

    def count_urls(self) -> int:
        with self.transaction("count_urls") as conn:
            return conn.execute(text("SELECT COUNT(*) FROM urls;")).scalar_one()

    def delete_url(self, id: int) -> bool:
        with self.transaction("delete_url") as conn:
            conn.execute(
                text("DELETE FROM url_checks WHERE url_id = :id;"), {"id": id}
            )
            result = conn.execute(
                text("DELETE FROM urls WHERE id = :id;"), {"id": id}
            )
        return result.rowcount > 0
