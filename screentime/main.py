#!/usr/bin/env python3
"""
Main entrypoint for the ScreenTime command line.

    screentime [report] [--days N] [--watch]   print usage, optionally every midnight
    screentime record                          store today's adb stats locally
    screentime serve                           run the web API
"""
import argparse
import sys
import threading
from typing import List, Optional
from .config import RANGE_OPTIONS, settings
from .db import UsageRepository, ensure_db_exists
from .models import UsageSnapshot
from .platform import AdbPlatform, INTERVAL_DAILY, detect_platform
from .services import MidnightRefresher, UsageService
from .services.aggregation import format_duration


def print_snapshot(snapshot: UsageSnapshot) -> None:
    """Print a usage snapshot as a plain text report."""
    window = snapshot.window
    print(f"Usage Stats ({snapshot.days} Day{'s' if snapshot.days > 1 else ''}, "
          f"since {window.start.isoformat(timespec='minutes')})")
    print(f"Total Screen Time: {format_duration(snapshot.usage.total_ms)}")

    if not snapshot.pie:
        print("No app usage recorded")
        return

    for s in snapshot.pie:
        print(f"  {s.name}: {format_duration(s.millis)} ({s.percentage}%)")


def report(days: int, watch: bool) -> int:
    service = UsageService(detect_platform())

    if not service.has_permission():
        print("Permission required to access screen time")
        service.request_permission()
        return 1

    if not watch:
        print_snapshot(service.get_snapshot(days))
        return 0

    refresher = MidnightRefresher(service, days, print_snapshot)
    refresher.start()
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        refresher.stop()
    return 0


def record() -> int:
    """Copy the device's daily buckets into the local database."""
    adb = AdbPlatform()
    if not adb.has_usage_access():
        print("No authorised Android device attached")
        return 1

    ensure_db_exists()
    window = UsageService(adb).get_window(1)
    records = adb.query_usage(INTERVAL_DAILY, window.start_millis, window.end_millis)
    count = UsageRepository.replace_snapshot(records)
    print(f"Recorded {count} usage buckets")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="screentime", description="Per-app screen time statistics")
    parser.add_argument("command", nargs="?", default="report", choices=["report", "record", "serve"])
    parser.add_argument("--days", type=int, choices=RANGE_OPTIONS, default=settings.default_days)
    parser.add_argument("--watch", action="store_true", help="reprint the report at every midnight")
    args = parser.parse_args(argv)

    if args.command == "record":
        return record()
    if args.command == "serve":
        from .web.server import main as serve
        serve()
        return 0
    return report(args.days, args.watch)


if __name__ == "__main__":
    sys.exit(main())
