"""Usage statistics recorded in the local SQLite database."""
from typing import List
from .base import UsagePlatformBase
from ..db import UsageRepository, schema_exists, ensure_db_exists
from ..config import debug_log
from ..models import UsageRecord


class LocalPlatform(UsagePlatformBase):
    """Reads daily usage buckets previously stored in the database."""

    def __init__(self) -> None:
        self.repo = UsageRepository()

    @property
    def name(self) -> str:
        return "Local database"

    def has_usage_access(self) -> bool:
        return schema_exists()

    def request_usage_access(self) -> None:
        """Create the usage database so that recorded stats can be read."""
        ensure_db_exists()

    def query_usage(self, interval: int, start_ms: int, end_ms: int) -> List[UsageRecord]:
        if not schema_exists():
            debug_log("local query without usage tables, nothing recorded yet")
            return []
        # Only daily buckets are stored, every interval reads them
        records = self.repo.find_in_period(start_ms, end_ms)
        debug_log(f"local query [{start_ms}, {end_ms}): {len(records)} buckets")
        return records

    def get_app_label(self, package_name: str) -> str:
        label = self.repo.find_label(package_name) if schema_exists() else None
        if label is None:
            raise LookupError(package_name)
        return label
