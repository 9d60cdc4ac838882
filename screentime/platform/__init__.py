"""Usage platform detection and factory."""
from typing import Optional
from .base import (
    UsagePlatformBase, INTERVAL_DAILY, INTERVAL_WEEKLY, INTERVAL_MONTHLY,
    INTERVAL_YEARLY, INTERVAL_BEST
)
from .adb import AdbPlatform
from .local import LocalPlatform
from ..config import settings


_platform_instance: Optional[UsagePlatformBase] = None


def detect_platform(choice: Optional[str] = None) -> UsagePlatformBase:
    """
    Select the usage platform and cache it.

    Detection order:
    1. Explicit choice ("adb" or "local") from the argument or settings
    2. An authorised Android device attached over adb
    3. Fallback to the local database
    """
    global _platform_instance

    if _platform_instance is not None:
        return _platform_instance

    choice = choice or settings.platform

    if choice == "adb":
        _platform_instance = AdbPlatform()
    elif choice == "local":
        _platform_instance = LocalPlatform()
    else:
        adb = AdbPlatform()
        _platform_instance = adb if adb.is_device_connected() else LocalPlatform()

    print(f"Detected platform: {_platform_instance.name}")
    return _platform_instance


def get_platform() -> UsagePlatformBase:
    """Get current platform instance (cached)."""
    return detect_platform()


__all__ = [
    "UsagePlatformBase", "AdbPlatform", "LocalPlatform", "get_platform", "detect_platform",
    "INTERVAL_DAILY", "INTERVAL_WEEKLY", "INTERVAL_MONTHLY", "INTERVAL_YEARLY", "INTERVAL_BEST",
]
