"""Base usage platform abstraction."""
from abc import ABC, abstractmethod
from typing import List
from ..models import UsageRecord

# Bucket granularities understood by query_usage
INTERVAL_DAILY = 0
INTERVAL_WEEKLY = 1
INTERVAL_MONTHLY = 2
INTERVAL_YEARLY = 3
INTERVAL_BEST = 4


class UsagePlatformBase(ABC):
    """Abstract base for usage-statistics sources."""

    @abstractmethod
    def query_usage(self, interval: int, start_ms: int, end_ms: int) -> List[UsageRecord]:
        """Return usage buckets of the given granularity overlapping [start_ms, end_ms)."""
        pass

    @abstractmethod
    def has_usage_access(self) -> bool:
        """Return True if usage statistics may be read."""
        pass

    @abstractmethod
    def request_usage_access(self) -> None:
        """Ask for usage access. Fire-and-forget, the result is not reported."""
        pass

    @abstractmethod
    def get_app_label(self, package_name: str) -> str:
        """Return the display label for a package, raise LookupError if unknown."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Platform name for logging."""
        pass
