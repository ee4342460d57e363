# File: src/services/notification_service.py
"""
Local habit reminders.

A background thread wakes up periodically, asks the store for its current
list and sends one notification per due habit. It only reads the store.
"""

import threading
from datetime import datetime
from typing import Callable, Optional, Set, Tuple

from src.processors.habit_processor import habits_due_for_reminder
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class LogNotifier:
    """Notification surface that writes reminders to the log."""

    def __init__(self, permitted: bool = True):
        """
        Args:
            permitted: Whether the user allowed notifications; if not, notify() does nothing
        """
        self.permitted = permitted

    def notify(self, title: str, body: str) -> None:
        if not self.permitted:
            logger.debug(f"Notifications not permitted, dropping '{title}'")
            return
        logger.info(f"🔔 {title} - {body}")


class ReminderScheduler:
    """Periodic reminder check over a HabitStore."""

    def __init__(
        self,
        store,
        notifier,
        interval_seconds: int = 60,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.store = store
        self.notifier = notifier
        self.interval_seconds = interval_seconds
        self._clock = clock or store.now
        self._fired: Set[Tuple[str, str, str]] = set()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def check_once(self) -> int:
        """
        Send reminders for habits due right now.

        Each (habit, day, time) fires at most once, so running the check
        several times within the same minute is harmless.

        Returns:
            Number of notifications sent
        """
        now = self._clock()
        day = now.strftime("%Y-%m-%d")
        # Earlier days can never match again
        self._fired = {key for key in self._fired if key[1] >= day}

        sent = 0
        for habit in habits_due_for_reminder(self.store.habits, now):
            key = (habit.id, day, habit.notification_time)
            if key in self._fired:
                continue
            self._fired.add(key)
            try:
                self.notifier.notify(
                    f"{habit.icon} {habit.title}",
                    f"Protocol pending today ({habit.category})"
                )
                sent += 1
            except Exception as e:
                logger.error(f"Notification failed for '{habit.title}': {e}", exc_info=True)
        return sent

    def _run(self) -> None:
        logger.info(f"Reminder loop started (every {self.interval_seconds}s)")
        while not self._stop_event.is_set():
            try:
                self.check_once()
            except Exception as e:
                logger.error(f"Reminder check failed: {e}", exc_info=True)
            self._stop_event.wait(self.interval_seconds)
        logger.info("Reminder loop stopped")

    def start(self) -> None:
        if self.is_running():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="reminders", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
