# File: src/core/seed_data.py
"""
Default protocols used the first time the app runs with empty storage.
"""

from datetime import datetime
from typing import List

from src.models.enums import HabitCategory, HabitColor
from src.models.habits import Habit

# id, title, category, icon, color
DEFAULT_HABITS = [
    ['1', 'READ TECHNICAL MANUAL', HabitCategory.SKILL_ACQUISITION.value, '📚', HabitColor.INDIGO.value],
    ['2', 'DEEP WORK SESSION (4H)', HabitCategory.DEEP_WORK.value, '🧠', HabitColor.VIOLET.value],
]


def default_habits(now: datetime) -> List[Habit]:
    """Build the seed list; every seed starts with no completions."""
    created_at = now.isoformat()
    return [
        Habit(
            id=habit_id,
            title=title,
            category=category,
            created_at=created_at,
            icon=icon,
            color=color,
        )
        for habit_id, title, category, icon, color in DEFAULT_HABITS
    ]
