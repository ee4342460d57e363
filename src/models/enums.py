# File: src/models/enums.py

from enum import Enum


class HabitCategory(Enum):
    """Default protocol categories. Stored on habits as plain strings."""
    BIO_HACKING = "BIO-OPTIMIZATION"
    DEEP_WORK = "DEEP WORK"
    SKILL_ACQUISITION = "SKILL ACQ"
    SYSTEMS = "SYSTEMS"
    STRATEGY = "STRATEGY"
    HEALTH = "HEALTH"
    MINDFULNESS = "MINDFULNESS"


class HabitColor(Enum):
    """Display color tags."""
    INDIGO = "indigo"
    ROSE = "rose"
    EMERALD = "emerald"
    AMBER = "amber"
    VIOLET = "violet"
    CYAN = "cyan"
    SLATE = "slate"


class Theme(Enum):
    """Display theme preference."""
    LIGHT = "light"
    DARK = "dark"


class StreakMode(Enum):
    """How missed days break a streak."""
    CALENDAR = "calendar"    # every calendar day counts
    SCHEDULED = "scheduled"  # only the habit's scheduled weekdays count
