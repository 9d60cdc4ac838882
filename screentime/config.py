import os
import json
import datetime
from typing import Any, Dict, List, Tuple
from zoneinfo import ZoneInfo

DB_PATH: str = os.path.expanduser(os.environ.get("SCREENTIME_DB", "~/.local/share/screentime.db"))

# All day boundaries are anchored to IST
TIME_ZONE_NAME: str = "Asia/Kolkata"
TIME_ZONE: datetime.tzinfo = ZoneInfo(TIME_ZONE_NAME)

# Selectable lookback windows, in days (inclusive of today)
RANGE_OPTIONS: Tuple[int, ...] = (1, 7, 10)

PIE_TOP_N: int = 7
PIE_COLORS: List[str] = [
    "#5442F4",  # blue
    "#DB4437",  # red
    "#F4B400",  # yellow
    "#0F9D58",  # green
    "#7B1FA2",  # purple
    "#0097A7",  # cyan
    "#E65100",  # orange
]

ADB_TIMEOUT_SECONDS: int = 10
WEB_PORTS: Tuple[int, ...] = (5050, 8080, 5000)

# User configuration file path
USER_CONFIG_PATH: str = os.path.expanduser("~/.config/screentime/settings.json")

# Debug mode - logs detailed query and refresh information
DEBUG_MODE: bool = os.environ.get("SCREENTIME_DEBUG", "0") == "1"
DEBUG_LOG_PATH: str = os.path.expanduser("~/.local/share/screentime_debug.log")


def debug_log(message: str) -> None:
    """Write debug message to log file if debug mode is enabled."""
    if DEBUG_MODE:
        timestamp = datetime.datetime.now().isoformat(timespec='milliseconds')
        with open(DEBUG_LOG_PATH, 'a') as f:
            f.write(f"[{timestamp}] {message}\n")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# --- Dynamic Configuration Class ---

class Config:
    """
    Manages dynamic application settings loaded from the user's JSON file.

    This class holds settings that can be reloaded at runtime.
    """
    DEFAULT_DAYS: int = 1
    DEFAULT_TOP_APPS: int = PIE_TOP_N
    DEFAULT_PLATFORM: str = "auto"
    DEFAULT_WEB_PORT: int = 0

    def __init__(self, config_path: str = USER_CONFIG_PATH):
        self.config_path = config_path
        self._user_config: Dict[str, Any] = {}

        self.default_days: int = self.DEFAULT_DAYS
        self.top_apps: int = self.DEFAULT_TOP_APPS
        self.platform: str = self.DEFAULT_PLATFORM
        self.web_port: int = self.DEFAULT_WEB_PORT

        self.reload()

    def _load_user_config(self) -> Dict[str, Any]:
        """Load user configuration from file."""
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r') as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    return loaded
                print(f"Ignoring config file {self.config_path}: expected a JSON object")
            except (json.JSONDecodeError, IOError) as e:
                print(f"Ignoring broken config file {self.config_path}: {e}")
        return {}

    def reload(self) -> None:
        """
        Reload configuration from disk, updating this object's attributes.

        Values that are missing or out of range fall back to the class defaults.
        """
        self._user_config = self._load_user_config()

        days = self._user_config.get('default_days', self.DEFAULT_DAYS)
        self.default_days = days if _is_int(days) and days in RANGE_OPTIONS else self.DEFAULT_DAYS

        top_apps = self._user_config.get('top_apps', self.DEFAULT_TOP_APPS)
        self.top_apps = top_apps if _is_int(top_apps) and top_apps >= 0 else self.DEFAULT_TOP_APPS

        platform = self._user_config.get('platform', self.DEFAULT_PLATFORM)
        self.platform = platform if platform in ("auto", "adb", "local") else self.DEFAULT_PLATFORM

        web_port = self._user_config.get('web_port', self.DEFAULT_WEB_PORT)
        self.web_port = web_port if _is_int(web_port) and 0 <= web_port <= 65535 else self.DEFAULT_WEB_PORT


# Shared instance imported by the rest of the application
settings = Config()
