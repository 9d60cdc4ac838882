"""
Pure usage aggregation functions.

Everything here works on records already fetched from a platform, so it is
safe to call on every refresh tick and trivial to test.
"""
import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple
from ..config import PIE_COLORS, PIE_TOP_N
from ..models import AggregationWindow, PieSlice, UsageRecord

MS_PER_MINUTE = 60_000


def _to_local(now: datetime.datetime, tz: datetime.tzinfo) -> datetime.datetime:
    """Express 'now' in tz. Naive values are taken to already be local."""
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def compute_window(days: int, tz: datetime.tzinfo, now: datetime.datetime) -> AggregationWindow:
    """
    Get the aggregation window for the last 'days' days, inclusive of today.

    Start is local midnight (days - 1) days before now's local date,
    end is now. days=1 therefore means "today since midnight", not the
    last 24 hours.
    """
    if days < 1:
        raise ValueError(f"days must be >= 1, got {days}")

    local_now = _to_local(now, tz)
    first_day = local_now.date() - datetime.timedelta(days=days - 1)
    start = datetime.datetime.combine(first_day, datetime.time.min, tzinfo=tz)
    return AggregationWindow(start=start, end=local_now)


def next_midnight(tz: datetime.tzinfo, now: datetime.datetime) -> datetime.datetime:
    """Get the first local midnight strictly after now."""
    local_now = _to_local(now, tz)
    tomorrow = local_now.date() + datetime.timedelta(days=1)
    return datetime.datetime.combine(tomorrow, datetime.time.min, tzinfo=tz)


def seconds_until_next_midnight(tz: datetime.tzinfo, now: datetime.datetime) -> float:
    return (next_midnight(tz, now) - _to_local(now, tz)).total_seconds()


def aggregate_total(records: Iterable[UsageRecord]) -> int:
    """Sum foreground time across all records (0 for none)."""
    return sum(record.foreground_ms for record in records)


def aggregate_by_application(
    records: Iterable[UsageRecord],
    resolve_name: Callable[[str], str]
) -> Dict[str, int]:
    """
    Sum foreground time per display name.

    Records without foreground time are skipped. Distinct packages that
    resolve to the same display name are merged into one entry.

    Returns:
        Dict mapping display name to milliseconds, ordered by name
    """
    totals: Dict[str, int] = {}
    for record in records:
        if record.foreground_ms <= 0:
            continue
        name = resolve_name(record.package_name)
        totals[name] = totals.get(name, 0) + record.foreground_ms

    return dict(sorted(totals.items()))


def top_n_by_usage(aggregated: Dict[str, int], n: int) -> List[Tuple[str, int]]:
    """
    Get the n most used applications.

    Sorted by milliseconds descending; equal usage is ordered by name.
    """
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    sorted_apps = sorted(aggregated.items(), key=lambda x: (-x[1], x[0]))
    return sorted_apps[:n]


def format_duration(millis: int) -> str:
    """
    Format milliseconds as whole hours and minutes.

    Minutes are floored and never pluralised differently:
    90000 -> "1 minutes", 3_900_000 -> "1 hours, 5 minutes".
    """
    if millis < 0:
        raise ValueError(f"millis must be >= 0, got {millis}")
    total_minutes = millis // MS_PER_MINUTE
    hours = total_minutes // 60
    minutes = total_minutes % 60
    if hours > 0:
        return f"{hours} hours, {minutes} minutes"
    return f"{minutes} minutes"


def fallback_app_name(package_name: str) -> str:
    """
    Derive a display name from a package identifier.

    Uses the second dot-separated segment, capitalised
    ("com.whatsapp.w4b" -> "Whatsapp"); single-segment names are kept as is.
    An empty second segment gives an empty name ("com." -> "").
    """
    parts = package_name.split(".")
    if len(parts) >= 2:
        return parts[1][:1].upper() + parts[1][1:]
    return package_name


def build_pie_slices(
    aggregated: Dict[str, int],
    n: int = PIE_TOP_N,
    colors: Optional[Sequence[str]] = None
) -> List[PieSlice]:
    """
    Build chart slices for the top n applications.

    Percentages and angles are relative to the displayed slices only,
    so the visible slices always fill the whole circle.
    """
    palette = list(colors) if colors else PIE_COLORS
    entries = top_n_by_usage(aggregated, n)
    shown_total = sum(millis for _, millis in entries)

    slices: List[PieSlice] = []
    start_angle = 0.0
    for index, (name, millis) in enumerate(entries):
        if shown_total > 0:
            sweep = millis / shown_total * 360.0
            percentage = int(millis / shown_total * 100)
        else:
            sweep = 0.0
            percentage = 0
        slices.append(PieSlice(
            name=name,
            millis=millis,
            percentage=percentage,
            start_angle=start_angle,
            sweep_angle=sweep,
            color=palette[index % len(palette)]
        ))
        start_angle += sweep

    return slices
