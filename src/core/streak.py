# File: src/core/streak.py
"""
Streak calculation for Second Brain protocols.

A streak is the run of consecutive completed days ending at the most recent
completion. It stays alive while that completion is today or yesterday, so
not having marked a habit yet today does not zero it until the day is over.
"""

from datetime import date, timedelta
from typing import Iterable, Optional, Sequence, Set

from src.models.common import DayLike, js_weekday, parse_day
from src.models.enums import StreakMode

ONE_DAY = timedelta(days=1)


def compute_streak(
    completed_dates: Iterable[DayLike],
    today: DayLike,
    frequency: Optional[Sequence[int]] = None,
    mode: StreakMode = StreakMode.CALENDAR
) -> int:
    """
    Count the current streak for a completion set.

    Args:
        completed_dates: Days the habit was marked done (dates or YYYY-MM-DD)
        today: The local calendar day to evaluate against
        frequency: Scheduled weekdays (0 = Sunday); only used in SCHEDULED mode
        mode: CALENDAR counts every day, SCHEDULED lets unscheduled days pass

    Returns:
        Number of consecutive completed days ending at the last completion
    """
    days = {parse_day(d) for d in completed_dates}
    if not days:
        return 0

    today = parse_day(today)

    if mode == StreakMode.SCHEDULED:
        return _scheduled_streak(days, today, set(frequency or []))
    return _calendar_streak(days, today)


def _calendar_streak(days: Set[date], today: date) -> int:
    last = max(days)
    if last != today and last != today - ONE_DAY:
        return 0

    streak = 0
    check = last
    while check in days:
        streak += 1
        check -= ONE_DAY
    return streak


def _scheduled_streak(days: Set[date], today: date, frequency: Set[int]) -> int:
    def scheduled(day: date) -> bool:
        return not frequency or js_weekday(day) in frequency

    last = max(days)
    if last > today:
        return 0

    # A scheduled day missed between the last completion and today breaks it
    check = today - ONE_DAY
    while check > last:
        if scheduled(check):
            return 0
        check -= ONE_DAY

    # Nothing before the earliest completion can extend the run
    earliest = min(days)
    streak = 0
    check = last
    while check >= earliest:
        if check in days:
            streak += 1
        elif scheduled(check):
            break
        check -= ONE_DAY
    return streak


def longest_streak(completed_dates: Iterable[DayLike]) -> int:
    """Longest run of consecutive calendar days in a completion set."""
    days = sorted({parse_day(d) for d in completed_dates})
    best = 0
    run = 0
    previous = None
    for day in days:
        run = run + 1 if previous is not None and day - previous == ONE_DAY else 1
        best = max(best, run)
        previous = day
    return best
