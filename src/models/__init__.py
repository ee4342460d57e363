from .enums import HabitCategory, HabitColor, Theme, StreakMode
from .common import parse_day, format_day, is_valid_day, is_valid_time, js_weekday
from .habits import Habit, habit_from_dict, ALL_WEEKDAYS
from .config import AppConfig
from .api import ValidationError, HabitValidationError, AdviceResponse

__all__ = [
    "HabitCategory",
    "HabitColor",
    "Theme",
    "StreakMode",
    "parse_day",
    "format_day",
    "is_valid_day",
    "is_valid_time",
    "js_weekday",
    "Habit",
    "habit_from_dict",
    "ALL_WEEKDAYS",
    "AppConfig",
    "ValidationError",
    "HabitValidationError",
    "AdviceResponse"
]
