# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable test data and mocks for all tests.
"""

import pytest
from datetime import datetime, timedelta
from pathlib import Path
import sys

import pytz

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.core.config_manager import Config
from src.core.habit_store import HabitStore
from src.models.config import AppConfig
from src.models.enums import StreakMode
from src.models.habits import Habit
from src.services.storage_service import InMemoryStorage, serialize_habits


# Tuesday 18 November 2025, 09:00 UTC
FIXED_NOW = pytz.UTC.localize(datetime(2025, 11, 18, 9, 0, 0))


# ==================== Date/Time Fixtures ====================

@pytest.fixture
def now():
    """Fixed 'current' moment used by stores under test."""
    return FIXED_NOW


@pytest.fixture
def today(now):
    """The fixed calendar day (a Tuesday)."""
    return now.date()


@pytest.fixture
def days_ago(today):
    """Factory returning YYYY-MM-DD for today minus n days."""
    def _days_ago(n: int) -> str:
        return (today - timedelta(days=n)).strftime("%Y-%m-%d")
    return _days_ago


# ==================== Configuration Fixtures ====================

@pytest.fixture
def app_config(tmp_path):
    """Session settings pointing at a temporary data directory."""
    return AppConfig(
        data_dir=tmp_path / "data",
        timezone="UTC",
        streak_mode=StreakMode.CALENDAR,
        categories=list(Config.CATEGORIES),
        colors=list(Config.COLORS),
        icons=list(Config.ICONS),
        reminder_interval_seconds=60,
        seed_on_first_run=True,
    )


# ==================== Storage / Store Fixtures ====================

@pytest.fixture
def memory_storage():
    """Empty in-memory persistence adapter."""
    return InMemoryStorage()


@pytest.fixture
def store(memory_storage, app_config, now):
    """Store over empty storage with a fixed clock (not loaded)."""
    return HabitStore(memory_storage, app_config, clock=lambda: now)


@pytest.fixture
def create_test_habit(now):
    """Factory fixture for creating test habits."""
    def _create(
        habit_id: str = "h1",
        title: str = "Test Habit",
        completed_dates=None,
        frequency=None,
        notification_time=None,
        category: str = "DEEP WORK"
    ) -> Habit:
        """Create a test habit with given parameters."""
        return Habit(
            id=habit_id,
            title=title,
            category=category,
            created_at=now.isoformat(),
            completed_dates=list(completed_dates or []),
            frequency=list(frequency) if frequency is not None else [0, 1, 2, 3, 4, 5, 6],
            notification_time=notification_time,
        )

    return _create


@pytest.fixture
def stored_store(memory_storage, app_config, now, create_test_habit, days_ago):
    """Store loaded from storage holding two habits with history."""
    habits = [
        create_test_habit("h1", "Meditate", completed_dates=[days_ago(2), days_ago(1), days_ago(0)]),
        create_test_habit("h2", "Read", completed_dates=[days_ago(3), days_ago(1)]),
    ]
    memory_storage.write(Config.HABITS_KEY, serialize_habits(habits))
    memory_storage.writes.clear()

    store = HabitStore(memory_storage, app_config, clock=lambda: now)
    store.load()
    return store


# ==================== Pytest Markers ====================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# ==================== Auto-use Fixtures ====================

@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Keep tests away from real API keys."""
    monkeypatch.setattr(Config, "GROQ_API_KEY", None)
    yield
