# File: src/core/habit_store.py
"""
In-memory habit collection kept in sync with persisted storage.

One HabitStore is created per application session and handed to whatever
needs it (console shell, reminder scheduler). Every successful mutation
rewrites the whole list to storage and then notifies subscribers.
"""

import copy
import dataclasses
import threading
import uuid
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence

import pytz

from src.core.config_manager import Config
from src.core.seed_data import default_habits
from src.core.streak import compute_streak
from src.models.api import HabitValidationError
from src.models.common import DayLike, format_day, parse_day
from src.models.config import AppConfig
from src.models.habits import ALL_WEEKDAYS, Habit
from src.services.storage_service import StorageError, deserialize_habits, serialize_habits
from src.utils.logger import LoggerMixin

HabitListener = Callable[[List[Habit]], None]

EDITABLE_FIELDS = {
    'title', 'description', 'category', 'icon', 'color', 'frequency', 'notification_time'
}


class HabitStore(LoggerMixin):
    """Owns the authoritative habit list for the current session."""

    def __init__(
        self,
        storage,
        config: Optional[AppConfig] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the store. Call load() before use.

        Args:
            storage: Persistence adapter with read/write/clear
            config: Session settings (defaults to the environment)
            clock: Returns the current local datetime (defaults to now in the configured timezone)
        """
        self.storage = storage
        self.config = config or AppConfig.from_env()
        self._tz = pytz.timezone(self.config.timezone)
        self._clock = clock or (lambda: datetime.now(self._tz))
        self._habits: List[Habit] = []
        self._listeners: List[HabitListener] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        """Current calendar day in the configured timezone."""
        return self.now().date()

    @property
    def habits(self) -> List[Habit]:
        """Snapshot of the current list; editing it does not touch the store."""
        with self._lock:
            return copy.deepcopy(self._habits)

    def get(self, habit_id: str) -> Optional[Habit]:
        with self._lock:
            index = self._index(habit_id)
            return copy.deepcopy(self._habits[index]) if index is not None else None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> List[Habit]:
        """
        Load habits from storage.

        Absent data yields the seed list, corrupt data yields an empty list.
        Streaks are recomputed; nothing is written back.

        Returns:
            Copy of the loaded habit list
        """
        with self._lock:
            try:
                # Undecodable bytes surface from read() as UnicodeDecodeError
                blob = self.storage.read(Config.HABITS_KEY)
                habits = deserialize_habits(blob) if blob is not None else None
            except ValueError as e:
                self.logger.error(f"Data corruption in stored habits, resetting to empty: {e}")
                habits = []

            if habits is None:
                if self.config.seed_on_first_run:
                    self.logger.info("No stored habits found, using default protocols")
                    habits = default_habits(self.now())
                else:
                    habits = []

            self._habits = self._dedupe_ids(habits)
            for habit in self._habits:
                habit.streak = self._streak_for(habit)

            self.logger.info(f"Loaded {len(self._habits)} habits")
            return self.habits

    def _dedupe_ids(self, habits: List[Habit]) -> List[Habit]:
        seen = set()
        unique = []
        for habit in habits:
            if habit.id in seen:
                self.logger.warning(f"Dropping habit with duplicate id '{habit.id}': {habit.title}")
                continue
            seen.add(habit.id)
            unique.append(habit)
        return unique

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(
        self,
        title: str,
        category: Optional[str] = None,
        description: Optional[str] = None,
        icon: Optional[str] = None,
        color: Optional[str] = None,
        frequency: Optional[Sequence[int]] = None,
        notification_time: Optional[str] = None
    ) -> Habit:
        """
        Create a habit and persist the list.

        Raises:
            HabitValidationError: If the title is blank or a field is invalid
        """
        if not isinstance(title, str) or not title.strip():
            self.logger.warning("Rejected habit with empty title")
            raise HabitValidationError.single("title", "Habit title cannot be empty")

        with self._lock:
            habit = Habit(
                id=self._new_id(),
                title=title.strip(),
                description=description,
                category=category or Config.DEFAULT_CATEGORY,
                created_at=self.now().isoformat(),
                icon=icon or Config.DEFAULT_ICON,
                color=color or Config.DEFAULT_COLOR,
                frequency=list(frequency) if frequency is not None else list(ALL_WEEKDAYS),
                notification_time=notification_time,
            )
            self._commit(self._habits + [habit])
            self.logger.info(f"Added habit '{habit.title}' ({habit.id})")
            return copy.deepcopy(habit)

    def toggle(self, habit_id: str, day: Optional[DayLike] = None) -> Optional[Habit]:
        """
        Flip completion of a habit for a day (today by default).

        Returns:
            The updated habit, or None if the id is unknown

        Raises:
            HabitValidationError: If the day is not a valid calendar date or lies after today
        """
        today = self.today()
        try:
            target = parse_day(day) if day is not None else today
        except ValueError as e:
            raise HabitValidationError.single("date", str(e)) from e
        key = format_day(target)
        if target > today:
            raise HabitValidationError.single("date", f"Cannot mark a future day: {key}")

        with self._lock:
            index = self._index(habit_id)
            if index is None:
                self.logger.debug(f"Toggle ignored, unknown habit id '{habit_id}'")
                return None

            habit = copy.deepcopy(self._habits[index])
            if key in habit.completed_dates:
                habit.completed_dates.remove(key)
            else:
                habit.completed_dates.append(key)
            habit.streak = self._streak_for(habit)

            self._commit(self._replaced(index, habit))
            self.logger.info(f"Toggled '{habit.title}' for {key}, streak is {habit.streak}")
            return copy.deepcopy(habit)

    def update(self, habit_id: str, **fields) -> Optional[Habit]:
        """
        Replace editable fields on a habit.

        Returns:
            The updated habit, or None if the id is unknown

        Raises:
            HabitValidationError: For unknown field names or invalid values
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise HabitValidationError.single("fields", f"Cannot edit: {', '.join(sorted(unknown))}")

        if 'title' in fields and isinstance(fields['title'], str):
            fields['title'] = fields['title'].strip()
        if 'frequency' in fields and fields['frequency'] is not None:
            fields['frequency'] = list(fields['frequency'])

        with self._lock:
            index = self._index(habit_id)
            if index is None:
                self.logger.debug(f"Update ignored, unknown habit id '{habit_id}'")
                return None

            # replace() re-runs validation in __post_init__
            habit = dataclasses.replace(copy.deepcopy(self._habits[index]), **fields)
            habit.streak = self._streak_for(habit)

            self._commit(self._replaced(index, habit))
            self.logger.info(f"Updated habit '{habit.title}': {', '.join(sorted(fields))}")
            return copy.deepcopy(habit)

    def delete(self, habit_id: str) -> bool:
        """
        Remove a habit. Callers confirm with the user first.

        Returns:
            True if a habit was removed
        """
        with self._lock:
            index = self._index(habit_id)
            if index is None:
                self.logger.debug(f"Delete ignored, unknown habit id '{habit_id}'")
                return False

            removed = self._habits[index]
            self._commit(self._habits[:index] + self._habits[index + 1:])
            self.logger.info(f"Deleted habit '{removed.title}' ({removed.id})")
            return True

    def refresh_streaks(self) -> bool:
        """
        Recompute streaks against the current day.

        Returns:
            True if any streak changed (and the list was persisted)
        """
        with self._lock:
            refreshed = copy.deepcopy(self._habits)
            changed = False
            for habit in refreshed:
                streak = self._streak_for(habit)
                if streak != habit.streak:
                    habit.streak = streak
                    changed = True
            if changed:
                self._commit(refreshed)
                self.logger.info("Streaks refreshed for a new day")
            return changed

    def reset(self) -> List[Habit]:
        """Wipe all persisted state and start over from the defaults."""
        with self._lock:
            self.logger.warning("Resetting all stored data")
            self.storage.clear()
            habits = self.load()
        self._notify()
        return habits

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: HabitListener) -> None:
        """Call listener with the new list after every change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: HabitListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        snapshot = self.habits
        for listener in list(self._listeners):
            try:
                listener(copy.deepcopy(snapshot))
            except Exception as e:
                self.logger.error(f"Habit listener {listener!r} failed: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _commit(self, habits: List[Habit]) -> None:
        """Write the full list, then make it current and notify."""
        try:
            self.storage.write(Config.HABITS_KEY, serialize_habits(habits))
        except StorageError:
            self.logger.error("Could not persist habits, change discarded")
            raise
        self._habits = habits
        self._notify()

    def _streak_for(self, habit: Habit) -> int:
        return compute_streak(
            habit.completed_dates,
            self.today(),
            frequency=habit.frequency,
            mode=self.config.streak_mode,
        )

    def _index(self, habit_id: str) -> Optional[int]:
        for index, habit in enumerate(self._habits):
            if habit.id == habit_id:
                return index
        return None

    def _replaced(self, index: int, habit: Habit) -> List[Habit]:
        habits = list(self._habits)
        habits[index] = habit
        return habits

    def _new_id(self) -> str:
        existing = {h.id for h in self._habits}
        while True:
            habit_id = uuid.uuid4().hex
            if habit_id not in existing:
                return habit_id
