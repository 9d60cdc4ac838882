"""
Data models for the application.
"""
import datetime
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass
class UsageRecord:
    """Foreground time reported for one package in one usage bucket."""
    package_name: str
    foreground_ms: int
    begin_ms: Optional[int] = None
    end_ms: Optional[int] = None


@dataclass(frozen=True)
class AggregationWindow:
    """Half-open interval [start, end) anchored to local midnight."""
    start: datetime.datetime
    end: datetime.datetime

    @property
    def start_millis(self) -> int:
        return int(self.start.timestamp() * 1000)

    @property
    def end_millis(self) -> int:
        return int(self.end.timestamp() * 1000)


@dataclass
class AggregatedUsage:
    """Per-application totals for a window, keyed by display name."""
    per_application_ms: Dict[str, int] = field(default_factory=dict)
    total_ms: int = 0


@dataclass
class PieSlice:
    """One slice of the usage breakdown chart."""
    name: str
    millis: int
    percentage: int
    start_angle: float
    sweep_angle: float
    color: str


@dataclass
class UsageSnapshot:
    """Everything the presentation layer needs for one refresh."""
    days: int
    window: AggregationWindow
    usage: AggregatedUsage
    top_apps: List[Tuple[str, int]]
    pie: List[PieSlice]
