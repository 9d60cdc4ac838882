"""
Android usage statistics over the Android Debug Bridge.

Reads `dumpsys usagestats` from the attached device. The in-memory
stats only cover the current bucket of each granularity, so longer
daily history comes from snapshots recorded into the local database.
"""
import re
import shutil
import datetime
import subprocess
from typing import Dict, List, Optional
from .base import (
    UsagePlatformBase, INTERVAL_DAILY, INTERVAL_WEEKLY, INTERVAL_MONTHLY,
    INTERVAL_YEARLY, INTERVAL_BEST
)
from ..config import ADB_TIMEOUT_SECONDS, TIME_ZONE, debug_log
from ..models import UsageRecord

USAGE_ACCESS_SETTINGS = "android.settings.USAGE_ACCESS_SETTINGS"

SECTION_TITLES: Dict[int, str] = {
    INTERVAL_DAILY: "In-memory daily stats",
    INTERVAL_WEEKLY: "In-memory weekly stats",
    INTERVAL_MONTHLY: "In-memory monthly stats",
    INTERVAL_YEARLY: "In-memory yearly stats",
    INTERVAL_BEST: "In-memory daily stats",
}

# Matches package lines inside a stats section, e.g.
#   package=com.android.chrome totalTimeUsed="01:02:03" lastTimeUsed="2024-03-10 14:58:12"
_RE_PACKAGE_LINE = re.compile(
    r'package=(\S+)\s+totalTimeUsed="([\d:]+)"\s+lastTimeUsed="([\d-]+ [\d:]+)"'
)


def find_adb() -> str:
    """Locate the adb executable, falling back to the bare name."""
    return shutil.which("adb") or "adb"


def parse_elapsed(text: str) -> int:
    """Convert "H:MM:SS" or "MM:SS" to milliseconds."""
    seconds = 0
    for part in text.split(":"):
        seconds = seconds * 60 + int(part)
    return seconds * 1000


def parse_usagestats(output: str, interval: int = INTERVAL_DAILY) -> List[UsageRecord]:
    """
    Parse the package lines of one in-memory section of `dumpsys usagestats`.

    Each package becomes one bucket spanning the local day of its
    last use. Sections for other granularities are ignored.
    """
    wanted = SECTION_TITLES.get(interval, SECTION_TITLES[INTERVAL_DAILY])
    records: List[UsageRecord] = []
    in_section = False

    for line in output.splitlines():
        stripped = line.strip()
        if stripped.startswith("In-memory ") and stripped.endswith(" stats"):
            in_section = stripped == wanted
            continue
        if stripped.startswith("user="):
            in_section = False
            continue
        if not in_section:
            continue

        match = _RE_PACKAGE_LINE.search(stripped)
        if not match:
            continue

        package_name, total, last_used = match.groups()
        last_used_ts = datetime.datetime.fromisoformat(last_used).replace(tzinfo=TIME_ZONE)
        day_start = datetime.datetime.combine(last_used_ts.date(), datetime.time.min, tzinfo=TIME_ZONE)
        begin_ms = int(day_start.timestamp() * 1000)
        records.append(UsageRecord(
            package_name=package_name,
            foreground_ms=parse_elapsed(total),
            begin_ms=begin_ms,
            end_ms=begin_ms + 24 * 3600 * 1000
        ))

    return records


class AdbPlatform(UsagePlatformBase):
    """Usage statistics from an Android device attached over adb."""

    def __init__(self, adb_path: Optional[str] = None) -> None:
        self.adb_path = adb_path or find_adb()

    @property
    def name(self) -> str:
        return "Android (adb)"

    def run_host(self, args: List[str]) -> str:
        """Run an adb command that does NOT go through the device shell."""
        return self._run([self.adb_path] + args)

    def run_shell(self, command: str) -> str:
        """Run an adb *shell* command and return its stdout."""
        return self._run([self.adb_path, "shell"] + command.split())

    def _run(self, cmd: List[str]) -> str:
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=ADB_TIMEOUT_SECONDS
            )
        except FileNotFoundError:
            raise RuntimeError(
                "ADB not found. Install Android Platform Tools and add to PATH."
            )
        except subprocess.TimeoutExpired:
            raise RuntimeError(f"ADB command timed out: {' '.join(cmd[1:])}")

        if result.returncode != 0 and result.stderr.strip():
            raise RuntimeError(f"ADB error: {result.stderr.strip()}")
        return result.stdout

    def is_device_connected(self) -> bool:
        """Return True if at least one device is attached and authorised."""
        try:
            output = self.run_host(["devices"])
        except RuntimeError:
            return False
        # Each connected device line looks like:  <serial>\tdevice
        lines = output.strip().splitlines()[1:]
        return any(line.endswith("\tdevice") for line in lines)

    def has_usage_access(self) -> bool:
        return self.is_device_connected()

    def request_usage_access(self) -> None:
        """Open the usage access settings screen on the device."""
        try:
            self.run_shell(f"am start -a {USAGE_ACCESS_SETTINGS}")
        except RuntimeError as e:
            print(f"Could not open usage access settings: {e}")

    def query_usage(self, interval: int, start_ms: int, end_ms: int) -> List[UsageRecord]:
        output = self.run_shell("dumpsys usagestats")
        records = [
            r for r in parse_usagestats(output, interval)
            if r.begin_ms is not None and r.end_ms is not None
            and r.begin_ms < end_ms and r.end_ms > start_ms
        ]
        debug_log(f"adb query [{start_ms}, {end_ms}): {len(records)} buckets")
        return records

    def get_app_label(self, package_name: str) -> str:
        # Application labels live in APK resources and are not exposed by the shell
        raise LookupError(package_name)
