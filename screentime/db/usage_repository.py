"""Repository for usage bucket data access."""
from typing import Iterable, List, Optional
from ..models import UsageRecord
from .connection import get_cursor


class UsageRepository:
    """Repository for usage bucket and app label CRUD operations."""

    @staticmethod
    def insert(package_name: str, begin_ms: int, end_ms: int, foreground_ms: int) -> None:
        """Insert a new usage bucket."""
        with get_cursor() as cur:
            cur.execute(
                "INSERT INTO usage_stats (package_name, begin_ms, end_ms, foreground_ms) VALUES (?, ?, ?, ?)",
                (package_name, begin_ms, end_ms, foreground_ms)
            )

    @staticmethod
    def find_in_period(start_ms: int, end_ms: int) -> List[UsageRecord]:
        """Find all buckets overlapping [start_ms, end_ms)."""
        with get_cursor(read_only=True) as cur:
            cur.execute("""
                SELECT package_name, foreground_ms, begin_ms, end_ms
                FROM usage_stats
                WHERE begin_ms < ? AND end_ms > ?
                ORDER BY begin_ms ASC, package_name ASC
            """, (end_ms, start_ms))

            return [UsageRecord(package_name=r[0], foreground_ms=r[1], begin_ms=r[2], end_ms=r[3])
                    for r in cur.fetchall()]

    @staticmethod
    def replace_snapshot(records: Iterable[UsageRecord]) -> int:
        """
        Store buckets, replacing any bucket already recorded for the same
        package and begin time.

        Returns:
            Number of buckets written
        """
        count = 0
        with get_cursor() as cur:
            for record in records:
                if record.begin_ms is None or record.end_ms is None:
                    continue
                cur.execute(
                    "DELETE FROM usage_stats WHERE package_name = ? AND begin_ms = ?",
                    (record.package_name, record.begin_ms)
                )
                cur.execute(
                    "INSERT INTO usage_stats (package_name, begin_ms, end_ms, foreground_ms) VALUES (?, ?, ?, ?)",
                    (record.package_name, record.begin_ms, record.end_ms, record.foreground_ms)
                )
                count += 1
        return count

    @staticmethod
    def set_label(package_name: str, label: str) -> None:
        with get_cursor() as cur:
            cur.execute(
                "INSERT OR REPLACE INTO app_labels (package_name, label) VALUES (?, ?)",
                (package_name, label)
            )

    @staticmethod
    def find_label(package_name: str) -> Optional[str]:
        """Find the stored display label for a package."""
        with get_cursor(read_only=True) as cur:
            cur.execute(
                "SELECT label FROM app_labels WHERE package_name = ?",
                (package_name,)
            )
            row = cur.fetchone()
            return row[0] if row else None
