"""Service binding usage aggregation to a usage platform."""
import datetime
from typing import Dict, List, Optional
from ..config import RANGE_OPTIONS, TIME_ZONE, settings, debug_log
from ..models import AggregatedUsage, AggregationWindow, UsageRecord, UsageSnapshot
from ..platform import UsagePlatformBase, INTERVAL_DAILY, get_platform
from .aggregation import (
    compute_window, aggregate_total, aggregate_by_application,
    top_n_by_usage, build_pie_slices, fallback_app_name
)


class UsageService:
    """Handles usage queries for a selectable day range."""

    def __init__(self, platform: Optional[UsagePlatformBase] = None,
                 tz: datetime.tzinfo = TIME_ZONE) -> None:
        self.platform = platform or get_platform()
        self.tz = tz
        self._names: Dict[str, str] = {}

    def has_permission(self) -> bool:
        return self.platform.has_usage_access()

    def request_permission(self) -> None:
        self.platform.request_usage_access()

    def resolve_app_name(self, package_name: str) -> str:
        """
        Get the display name for a package.

        Falls back to a name derived from the package identifier whenever
        the label lookup fails, whatever the reason.
        """
        if package_name not in self._names:
            try:
                name = self.platform.get_app_label(package_name)
            except Exception as e:
                name = fallback_app_name(package_name)
                debug_log(f"No label for {package_name} ({e!r}), using {name}")
            self._names[package_name] = name
        return self._names[package_name]

    def get_window(self, days: int, now: Optional[datetime.datetime] = None) -> AggregationWindow:
        if days not in RANGE_OPTIONS:
            raise ValueError(f"days must be one of {RANGE_OPTIONS}, got {days}")
        if now is None:
            now = datetime.datetime.now(self.tz)
        return compute_window(days, self.tz, now)

    def get_records(self, days: int, now: Optional[datetime.datetime] = None) -> List[UsageRecord]:
        """Query the platform for the daily buckets of the window."""
        window = self.get_window(days, now)
        return self.platform.query_usage(INTERVAL_DAILY, window.start_millis, window.end_millis)

    def get_screen_time(self, days: int, now: Optional[datetime.datetime] = None) -> int:
        """Get total foreground milliseconds across all apps."""
        return aggregate_total(self.get_records(days, now))

    def get_app_usage(self, days: int, now: Optional[datetime.datetime] = None) -> Dict[str, int]:
        """
        Get foreground milliseconds per application.

        Returns:
            Dict mapping display name to milliseconds, ordered by name
        """
        return aggregate_by_application(self.get_records(days, now), self.resolve_app_name)

    def get_snapshot(self, days: int, now: Optional[datetime.datetime] = None,
                     limit: Optional[int] = None) -> UsageSnapshot:
        """Compute totals, per-app usage and chart data from a single query."""
        window = self.get_window(days, now)
        records = self.platform.query_usage(INTERVAL_DAILY, window.start_millis, window.end_millis)
        per_app = aggregate_by_application(records, self.resolve_app_name)
        limit = settings.top_apps if limit is None else limit

        return UsageSnapshot(
            days=days,
            window=window,
            usage=AggregatedUsage(per_application_ms=per_app, total_ms=aggregate_total(records)),
            top_apps=top_n_by_usage(per_app, limit),
            pie=build_pie_slices(per_app, limit)
        )
