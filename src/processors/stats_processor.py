# File: src/processors/stats_processor.py
"""
Dashboard numbers: the 7-day completion series and today's counters.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List

from src.core.streak import longest_streak
from src.models.common import format_day
from src.models.habits import Habit


@dataclass
class DayStat:
    """Completions recorded on one day."""
    day: date
    label: str  # short weekday name, e.g. "Mon"
    completed: int
    is_today: bool = False

    @property
    def day_str(self) -> str:
        return format_day(self.day)


def last_seven_days(habits: List[Habit], today: date) -> List[DayStat]:
    """Completion counts for the six days before today and today, oldest first."""
    stats = []
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        key = format_day(day)
        completed = sum(1 for h in habits if key in h.completed_dates)
        stats.append(DayStat(day=day, label=day.strftime("%a"), completed=completed, is_today=offset == 0))
    return stats


def completed_today(habits: List[Habit], today: date) -> int:
    key = format_day(today)
    return sum(1 for h in habits if key in h.completed_dates)


def completion_rate(habits: List[Habit], today: date) -> int:
    """Percentage of habits done today, halves rounded up; 0 when there are no habits."""
    if not habits:
        return 0
    return int(completed_today(habits, today) * 100 / len(habits) + 0.5)


def best_streak(habits: List[Habit]) -> int:
    """Highest current streak across habits."""
    return max((h.streak for h in habits), default=0)


def longest_run(habit: Habit) -> int:
    """Longest consecutive-day run in the habit's whole history."""
    return longest_streak(habit.completed_dates)
