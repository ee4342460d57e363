# File: src/core/config_manager.py
"""
Centralized configuration management for Second Brain.
Loads settings from environment variables and the .env file.
"""

import os
from pathlib import Path
from typing import List

import pytz
from dotenv import load_dotenv

from src.models.enums import HabitCategory, HabitColor, StreakMode, Theme
from src.utils.logger import setup_logger

# Load environment variables
load_dotenv()

logger = setup_logger(__name__)


class Config:
    """Application configuration singleton."""

    # Base directories
    BASE_DIR = Path(__file__).parent.parent.parent  # Go up 3 levels from src/core/

    DATA_DIR = Path(os.getenv("HABIT_DATA_DIR", str(BASE_DIR / "data")))
    ENV_FILE = BASE_DIR / ".env"

    # Storage keys
    HABITS_KEY = "second_brain_db"
    THEME_KEY = "theme"

    # API Keys
    GROQ_API_KEY = os.getenv("GROQ_API_KEY")

    # Application Settings
    TARGET_TIMEZONE = os.getenv("TIMEZONE", "UTC")
    STREAK_MODE = os.getenv("STREAK_MODE", StreakMode.CALENDAR.value)
    REMINDER_INTERVAL_SECONDS = int(os.getenv("REMINDER_INTERVAL_SECONDS", "60"))
    SEED_ON_FIRST_RUN = os.getenv("SEED_ON_FIRST_RUN", "true").strip().lower() in ['yes', 'true', '1', 'on']
    DEFAULT_THEME = Theme.DARK.value

    # LLM Settings
    GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"
    MODEL_ID = os.getenv("ADVICE_MODEL_ID", "llama-3.1-8b-instant")
    ADVICE_MAX_TOKENS = 200
    ADVICE_TIMEOUT_SECONDS = 20
    ADVICE_LANGUAGE = os.getenv("ADVICE_LANGUAGE", "Portuguese (Brazil)")

    # Presentation vocabularies (validated at the UI boundary only)
    CATEGORIES: List[str] = [c.value for c in HabitCategory]
    COLORS: List[str] = [c.value for c in HabitColor]
    ICONS: List[str] = ["⚡", "🧠", "📚", "💪", "🧘", "🎯", "⚙️", "🌙"]
    DEFAULT_ICON = "⚡"
    DEFAULT_COLOR = HabitColor.INDIGO.value
    DEFAULT_CATEGORY = HabitCategory.DEEP_WORK.value

    @classmethod
    def validate(cls) -> bool:
        """Validate that all required configuration is present."""
        errors = []

        if not cls.GROQ_API_KEY:
            # Advice falls back to a static sentence, so this is not fatal
            logger.warning("GROQ_API_KEY not set; advice will use the offline fallback")

        try:
            pytz.timezone(cls.TARGET_TIMEZONE)
        except pytz.UnknownTimeZoneError:
            errors.append(f"Unknown TIMEZONE '{cls.TARGET_TIMEZONE}'")

        if cls.STREAK_MODE not in [m.value for m in StreakMode]:
            errors.append(f"STREAK_MODE must be one of {[m.value for m in StreakMode]}")

        if cls.REMINDER_INTERVAL_SECONDS <= 0:
            errors.append("REMINDER_INTERVAL_SECONDS must be positive")

        if errors:
            for error in errors:
                logger.error(f"Configuration Error: {error}")
            return False

        return True
