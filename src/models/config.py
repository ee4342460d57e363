# File: src/models/config.py
"""
Data models for Second Brain configuration.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .enums import StreakMode


@dataclass
class AppConfig:
    """Runtime settings for one application session."""
    data_dir: Path
    timezone: str = "UTC"
    streak_mode: StreakMode = StreakMode.CALENDAR
    categories: List[str] = field(default_factory=list)
    colors: List[str] = field(default_factory=list)
    icons: List[str] = field(default_factory=list)
    reminder_interval_seconds: int = 60
    seed_on_first_run: bool = True

    def __post_init__(self):
        """Convert string values to their typed form."""
        if isinstance(self.data_dir, str):
            self.data_dir = Path(self.data_dir)

        if isinstance(self.streak_mode, str):
            try:
                self.streak_mode = StreakMode(self.streak_mode.lower())
            except ValueError:
                self.streak_mode = StreakMode.CALENDAR

        if self.reminder_interval_seconds <= 0:
            raise ValueError("Reminder interval must be positive")

    @classmethod
    def from_dict(cls, data: dict) -> 'AppConfig':
        """Create AppConfig from dictionary (e.g., loaded from JSON)."""
        return cls(
            data_dir=data.get('data_dir', 'data'),
            timezone=data.get('timezone', 'UTC'),
            streak_mode=data.get('streak_mode', StreakMode.CALENDAR.value),
            categories=list(data.get('categories', [])),
            colors=list(data.get('colors', [])),
            icons=list(data.get('icons', [])),
            reminder_interval_seconds=int(data.get('reminder_interval_seconds', 60)),
            seed_on_first_run=bool(data.get('seed_on_first_run', True)),
        )

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Create AppConfig from the environment-backed Config class."""
        from src.core.config_manager import Config

        return cls(
            data_dir=Config.DATA_DIR,
            timezone=Config.TARGET_TIMEZONE,
            streak_mode=Config.STREAK_MODE,
            categories=list(Config.CATEGORIES),
            colors=list(Config.COLORS),
            icons=list(Config.ICONS),
            reminder_interval_seconds=Config.REMINDER_INTERVAL_SECONDS,
            seed_on_first_run=Config.SEED_ON_FIRST_RUN,
        )
