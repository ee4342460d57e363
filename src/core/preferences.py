# File: src/core/preferences.py

import json

from src.core.config_manager import Config
from src.models.enums import Theme
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class ThemePreference:
    """Light/dark display preference kept next to the habit list."""

    def __init__(self, storage):
        self.storage = storage

    def get(self) -> Theme:
        raw = self.storage.read(Config.THEME_KEY)
        if raw is None:
            return Theme(Config.DEFAULT_THEME)
        try:
            return Theme(raw.strip().strip('"').lower())
        except ValueError:
            logger.warning(f"Unknown stored theme {raw!r}, using {Config.DEFAULT_THEME}")
            return Theme(Config.DEFAULT_THEME)

    def set(self, theme: Theme) -> Theme:
        if isinstance(theme, str):
            theme = Theme(theme.lower())
        self.storage.write(Config.THEME_KEY, json.dumps(theme.value))
        logger.debug(f"Theme set to {theme.value}")
        return theme

    def toggle(self) -> Theme:
        current = self.get()
        return self.set(Theme.LIGHT if current == Theme.DARK else Theme.DARK)
