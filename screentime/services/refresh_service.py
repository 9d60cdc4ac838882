"""Recompute usage at every local midnight."""
import datetime
import threading
from typing import Callable, Optional
from ..config import debug_log
from ..models import UsageSnapshot
from .aggregation import seconds_until_next_midnight
from .usage_service import UsageService


class MidnightRefresher:
    """
    Keeps a usage snapshot current across day boundaries.

    start() refreshes once and then schedules a refresh for every local
    midnight in the service's time zone. Refreshes never overlap and
    stop() cancels the pending one.
    """

    def __init__(self, service: UsageService, days: int,
                 on_refresh: Callable[[UsageSnapshot], None]) -> None:
        self.service = service
        self.days = days
        self.on_refresh = on_refresh
        self.timer: Optional[threading.Timer] = None
        self.running = False
        self._lock = threading.Lock()

    def start(self) -> None:
        self.running = True
        self.refresh()

    def stop(self) -> None:
        """Cancel the pending refresh."""
        with self._lock:
            self.running = False
            if self.timer:
                self.timer.cancel()
                self.timer = None

    def set_days(self, days: int) -> None:
        """Switch to another range and refresh immediately."""
        self.service.get_window(days)  # validates the range
        self.days = days
        if self.running:
            self.refresh()

    def refresh(self) -> None:
        """
        Recompute the snapshot, schedule the next midnight, then notify.

        A failed refresh is reported and the next midnight is still
        scheduled. The callback runs outside the lock so it may call
        stop() or set_days().
        """
        with self._lock:
            if not self.running:
                return
            if self.timer:
                self.timer.cancel()
                self.timer = None

            try:
                snapshot: Optional[UsageSnapshot] = self.service.get_snapshot(self.days)
            except Exception as e:
                print(f"Usage refresh failed: {e}")
                snapshot = None
            finally:
                self._schedule_next()

        if snapshot is not None:
            try:
                self.on_refresh(snapshot)
            except Exception as e:
                print(f"Usage refresh callback failed: {e}")

    def _schedule_next(self) -> None:
        delay = seconds_until_next_midnight(self.service.tz, datetime.datetime.now(self.service.tz))
        debug_log(f"Next refresh in {delay:.0f}s")
        self.timer = threading.Timer(delay, self.refresh)
        self.timer.daemon = True
        self.timer.start()
