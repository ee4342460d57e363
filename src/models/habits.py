from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Optional

from .api import HabitValidationError, ValidationError
from .common import DayLike, format_day, is_valid_day, is_valid_time, js_weekday, parse_day
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

ALL_WEEKDAYS = [0, 1, 2, 3, 4, 5, 6]


@dataclass
class Habit:
    """A tracked protocol and the days it was executed."""
    id: str
    title: str
    category: str
    created_at: str
    description: Optional[str] = None
    streak: int = 0
    completed_dates: List[str] = field(default_factory=list)
    icon: str = "⚡"
    color: str = "indigo"
    frequency: List[int] = field(default_factory=lambda: list(ALL_WEEKDAYS))
    notification_time: Optional[str] = None

    def __post_init__(self):
        """Validate fields and normalize the completion set."""
        errors: List[ValidationError] = []

        if not str(self.id).strip():
            errors.append(ValidationError("id", "Habit id cannot be empty"))

        if not isinstance(self.title, str) or not self.title.strip():
            errors.append(ValidationError("title", "Habit title cannot be empty"))

        if not isinstance(self.streak, int) or self.streak < 0:
            errors.append(ValidationError("streak", "Streak cannot be negative"))

        # Unique, well-formed days; first occurrence wins
        unique_dates: List[str] = []
        for index, raw in enumerate(self.completed_dates):
            if not is_valid_day(raw):
                errors.append(ValidationError("completedDates", f"Invalid date {raw!r}", index))
                continue
            day = format_day(raw)
            if day not in unique_dates:
                unique_dates.append(day)
        self.completed_dates = unique_dates

        try:
            days = {int(d) for d in self.frequency}
        except (TypeError, ValueError):
            days = set()
            errors.append(ValidationError("frequency", "Weekdays must be integers"))
        if any(d < 0 or d > 6 for d in days):
            errors.append(ValidationError("frequency", "Weekdays must be between 0 and 6"))
        self.frequency = sorted(days)

        if self.notification_time is not None and not is_valid_time(self.notification_time):
            errors.append(ValidationError("notificationTime", "Time must use HH:MM format"))

        if errors:
            raise HabitValidationError(errors)

    def is_completed_on(self, day: DayLike) -> bool:
        """Check if the habit was marked done on a given day."""
        return format_day(day) in self.completed_dates

    def is_scheduled_on(self, day: DayLike) -> bool:
        """Check if the day is one of the habit's scheduled weekdays."""
        if not self.frequency:
            return True
        return js_weekday(parse_day(day)) in self.frequency

    def completed_days(self) -> List[date]:
        """Completion days, most recent first."""
        return sorted((parse_day(d) for d in self.completed_dates), reverse=True)

    def to_dict(self) -> dict:
        """Convert to the persisted record format."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'category': self.category,
            'streak': self.streak,
            'completedDates': list(self.completed_dates),
            'createdAt': self.created_at,
            'icon': self.icon,
            'color': self.color,
            'frequency': list(self.frequency),
            'notificationTime': self.notification_time,
        }


def habit_from_dict(data: dict) -> Habit:
    """Create Habit from a persisted record, tolerating missing optional fields."""
    if not isinstance(data, dict):
        raise HabitValidationError.single("record", f"Expected an object, got {type(data).__name__}")

    raw_dates: Any = data.get('completedDates') or []
    if not isinstance(raw_dates, list):
        raw_dates = []
    completed_dates = []
    for raw in raw_dates:
        if is_valid_day(raw):
            completed_dates.append(raw)
        else:
            logger.warning(f"Dropping malformed completion date {raw!r} from habit {data.get('id')}")

    raw_frequency = data.get('frequency')
    frequency = raw_frequency if isinstance(raw_frequency, list) else list(ALL_WEEKDAYS)

    try:
        streak = max(int(data.get('streak', 0)), 0)
    except (TypeError, ValueError):
        streak = 0

    notification_time = data.get('notificationTime') or None
    if notification_time is not None and not is_valid_time(notification_time):
        logger.warning(f"Ignoring malformed reminder time {notification_time!r} on habit {data.get('id')}")
        notification_time = None

    return Habit(
        id=str(data.get('id', '')),
        title=str(data.get('title') or ''),
        description=data.get('description'),
        category=str(data.get('category', '')),
        streak=streak,
        completed_dates=completed_dates,
        created_at=str(data.get('createdAt', '')),
        icon=str(data.get('icon') or "⚡"),
        color=str(data.get('color') or "indigo"),
        frequency=frequency,
        notification_time=notification_time,
    )
