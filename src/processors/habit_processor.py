# File: src/processors/habit_processor.py
"""
Habit processing module for Second Brain.
Selects habits by schedule and reminder time, and validates form input.
"""

import datetime
from typing import List, Optional, Sequence

from src.models.api import ValidationError
from src.models.common import is_valid_time
from src.models.config import AppConfig
from src.models.habits import Habit
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


def habits_scheduled_today(habits: List[Habit], today: datetime.date) -> List[Habit]:
    """
    Filters habits down to those whose frequency includes today's weekday.

    Habits with an empty frequency are treated as scheduled every day.

    Args:
        habits: Habits to filter
        today: The local calendar day

    Returns:
        List of habits scheduled for today
    """
    today_weekday_name = today.strftime("%A")
    scheduled = [h for h in habits if h.is_scheduled_on(today)]

    logger.debug(
        f"{len(scheduled)} of {len(habits)} habits scheduled for {today_weekday_name}"
    )
    return scheduled


def habits_due_for_reminder(habits: List[Habit], now: datetime.datetime) -> List[Habit]:
    """
    Select habits that should trigger a reminder at this minute.

    A habit is due when:
    - its notificationTime equals the current HH:MM
    - today is one of its scheduled weekdays
    - it has not been completed today

    Args:
        habits: Current habit list
        now: Current local datetime

    Returns:
        Habits needing a reminder now

    Example:
        >>> habit.notification_time = "07:30"
        >>> habits_due_for_reminder([habit], datetime.datetime(2025, 11, 18, 7, 30))
        [habit]
    """
    current_time = now.strftime("%H:%M")
    today = now.date()

    due = []
    for habit in habits_scheduled_today(habits, today):
        if habit.notification_time != current_time:
            continue
        if habit.is_completed_on(today):
            logger.debug(f"Skipping reminder for completed habit: {habit.title}")
            continue
        due.append(habit)

    if due:
        logger.info(f"{len(due)} habit reminder(s) due at {current_time}")
    return due


def validate_habit_form(
    title: str,
    category: Optional[str],
    color: Optional[str],
    icon: Optional[str],
    frequency: Optional[Sequence[int]],
    notification_time: Optional[str],
    config: AppConfig
) -> List[ValidationError]:
    """
    Check user input against the configured vocabularies.

    Category, color and icon are opaque to the store; the allow-lists are
    enforced here, at the input boundary. Empty allow-lists accept anything.

    Returns:
        List of problems (empty when the input is acceptable)
    """
    errors: List[ValidationError] = []

    if not title or not title.strip():
        errors.append(ValidationError("title", "Title cannot be empty"))

    if category is not None and config.categories and category not in config.categories:
        errors.append(ValidationError("category", f"Unknown category '{category}'"))

    if color is not None and config.colors and color not in config.colors:
        errors.append(ValidationError("color", f"Unknown color '{color}'"))

    if icon is not None and config.icons and icon not in config.icons:
        errors.append(ValidationError("icon", f"Unknown icon '{icon}'"))

    if frequency is not None:
        if not frequency:
            errors.append(ValidationError("frequency", "Pick at least one weekday"))
        elif any(not isinstance(d, int) or d < 0 or d > 6 for d in frequency):
            errors.append(ValidationError("frequency", "Weekdays must be between 0 and 6"))

    if notification_time and not is_valid_time(notification_time):
        errors.append(ValidationError("notificationTime", "Time must use HH:MM format"))

    for error in errors:
        logger.debug(f"Form validation: {error}")
    return errors
