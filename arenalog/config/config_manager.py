#!/usr/bin/env python3
"""
Configuration for arenalog.

Two layers:
- IngestionConfig: the four knobs the ingestion loop understands. Built in
  code, or from the environment (a .env file is honoured via python-dotenv).
- RunnerPreferences: settings for the command-line runner (where to write
  replays, which card database to use), persisted as JSON under
  ~/.arenalog so they survive between runs.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".arenalog"
PREFS_FILE = CONFIG_DIR / "preferences.json"

ENV_PLAYER_LOG = "ARENALOG_PLAYER_LOG"
ENV_FOLLOW = "ARENALOG_FOLLOW"
ENV_POLL_INTERVAL = "ARENALOG_POLL_INTERVAL"
ENV_WATCH_ROTATION = "ARENALOG_WATCH_ROTATION"

DEFAULT_POLL_INTERVAL = 1.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} should be a boolean, got {value!r}")


@dataclass(frozen=True)
class IngestionConfig:
    """
    Settings for one ingestion run.

    Attributes:
        player_log_path: Path to Player.log
        follow: Keep polling for new lines; when False, stop at the first idle tick
        poll_interval: Seconds between polls
        watch_rotation: Detect Arena replacing or truncating the log
    """

    player_log_path: str
    follow: bool = True
    poll_interval: float = DEFAULT_POLL_INTERVAL
    watch_rotation: bool = True

    def __post_init__(self):
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {self.poll_interval}")

    def with_follow(self, follow: bool) -> "IngestionConfig":
        return replace(self, follow=follow)

    def with_poll_interval(self, poll_interval: float) -> "IngestionConfig":
        return replace(self, poll_interval=poll_interval)

    def with_rotation_watch(self, watch_rotation: bool) -> "IngestionConfig":
        return replace(self, watch_rotation=watch_rotation)

    @classmethod
    def from_env(cls, player_log_path: Optional[str] = None) -> "IngestionConfig":
        """
        Build a config from ARENALOG_* environment variables.

        An explicit ``player_log_path`` wins over the environment; with
        neither, the platform default location is tried.
        """
        load_dotenv()
        path = player_log_path or os.getenv(ENV_PLAYER_LOG) or detect_player_log_path()
        if not path:
            raise ValueError(f"No Player.log path given and none found; set {ENV_PLAYER_LOG}")

        poll_interval = os.getenv(ENV_POLL_INTERVAL)
        return cls(
            player_log_path=str(path),
            follow=_env_bool(ENV_FOLLOW, True),
            poll_interval=float(poll_interval) if poll_interval else DEFAULT_POLL_INTERVAL,
            watch_rotation=_env_bool(ENV_WATCH_ROTATION, True),
        )


def detect_player_log_path() -> Optional[str]:
    """Detect the Arena Player.log file based on OS."""
    home = Path.home()
    if os.name == 'nt':
        profile = os.getenv('USERPROFILE')
        if profile:
            windows_path = Path(profile) / "AppData/LocalLow/Wizards Of The Coast/MTGA/Player.log"
            if windows_path.exists():
                return str(windows_path)
    elif os.name == 'posix' and os.uname().sysname == 'Darwin':
        macos_path = home / "Library/Logs/Wizards Of The Coast/MTGA/Player.log"
        if macos_path.exists():
            return str(macos_path)
    elif os.name == 'posix':
        user = os.getenv('USER', '')
        possible_paths = [
            # Linux (Steam)
            home / ".steam/steam/steamapps/compatdata/2141910/pfx/drive_c/users/steamuser/AppData/LocalLow/Wizards Of The Coast/MTGA/Player.log",
            home / ".local/share/Steam/steamapps/compatdata/2141910/pfx/drive_c/users/steamuser/AppData/LocalLow/Wizards Of The Coast/MTGA/Player.log",
            # Linux (Bottles/Lutris)
            home / f".var/app/com.usebottles.bottles/data/bottles/bottles/MTG-Arena/drive_c/users/{user}/AppData/LocalLow/Wizards Of The Coast/MTGA/Player.log",
            home / f"Games/magic-the-gathering-arena/drive_c/users/{user}/AppData/LocalLow/Wizards Of The Coast/MTGA/Player.log",
        ]
        for path in possible_paths:
            if path.exists():
                return str(path)
    return None


@dataclass
class RunnerPreferences:
    """Preferences for the command-line runner."""

    output_dir: str = str(CONFIG_DIR / "matches")
    draft_output_dir: str = str(CONFIG_DIR / "drafts")
    cards_db_path: str = ""
    log_level: str = "INFO"
    player_log_path: str = ""

    @classmethod
    def load(cls, path: Path = PREFS_FILE) -> "RunnerPreferences":
        """Load preferences from file or create defaults."""
        if not path.exists():
            logger.info("No preferences file found. Using defaults.")
            return cls()
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load preferences: {e}. Using defaults.")
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown preferences: {sorted(unknown)}")
        logger.debug(f"Loaded preferences from {path}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def save(self, path: Path = PREFS_FILE):
        """Save preferences to file."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w') as f:
                json.dump(asdict(self), f, indent=2)
            logger.debug(f"Saved preferences to {path}")
        except OSError as e:
            logger.error(f"Failed to save preferences: {e}")
