# File: tests/unit/test_habit_store.py
"""
Unit tests for HabitStore.
"""

import json
import pytest
from unittest.mock import Mock

from src.core.config_manager import Config
from src.core.habit_store import HabitStore
from src.core.seed_data import DEFAULT_HABITS
from src.models.api import HabitValidationError
from src.models.enums import StreakMode
from src.services.storage_service import InMemoryStorage, JsonFileStorage, StorageError, serialize_habits


# ==================== Load Tests ====================

class TestLoad:
    """Tests for HabitStore.load()."""

    def test_first_run_returns_seed_list(self, store, memory_storage):
        habits = store.load()

        assert [h.title for h in habits] == [row[1] for row in DEFAULT_HABITS]
        assert all(h.streak == 0 and h.completed_dates == [] for h in habits)
        assert memory_storage.writes == []

    def test_first_run_without_seeding_is_empty(self, memory_storage, app_config, now):
        app_config.seed_on_first_run = False
        store = HabitStore(memory_storage, app_config, clock=lambda: now)

        assert store.load() == []

    @pytest.mark.parametrize("blob", [
        "{not json",
        '{"habits": []}',
        '[{"id": "1", "title": ""}]',
        '["just a string"]',
        "[" * 100000 + "]" * 100000,
    ])
    def test_corrupt_storage_returns_empty_list(self, blob, memory_storage, app_config, now, caplog):
        memory_storage.write(Config.HABITS_KEY, blob)
        store = HabitStore(memory_storage, app_config, clock=lambda: now)

        assert store.load() == []
        assert "Data corruption" in caplog.text

    def test_undecodable_file_returns_empty_list(self, tmp_path, app_config, now, caplog):
        (tmp_path / f"{Config.HABITS_KEY}.json").write_bytes(b'[{"id": "1", "title": "\xff\xfe"}]')
        store = HabitStore(JsonFileStorage(tmp_path), app_config, clock=lambda: now)

        assert store.load() == []
        assert "Data corruption" in caplog.text

    def test_streaks_recomputed_on_load(self, memory_storage, app_config, now, create_test_habit, days_ago):
        habit = create_test_habit(completed_dates=[days_ago(1), days_ago(0)])
        record = habit.to_dict()
        record['streak'] = 99
        memory_storage.write(Config.HABITS_KEY, json.dumps([record]))

        store = HabitStore(memory_storage, app_config, clock=lambda: now)

        assert store.load()[0].streak == 2

    def test_duplicate_ids_keep_first(self, memory_storage, app_config, now, create_test_habit):
        habits = [create_test_habit("same", "First"), create_test_habit("same", "Second")]
        memory_storage.write(Config.HABITS_KEY, serialize_habits(habits))

        store = HabitStore(memory_storage, app_config, clock=lambda: now)

        assert [h.title for h in store.load()] == ["First"]

    def test_round_trip_preserves_list(self, stored_store, memory_storage, app_config, now):
        first = stored_store.habits
        memory_storage.write(Config.HABITS_KEY, serialize_habits(first))

        second = HabitStore(memory_storage, app_config, clock=lambda: now).load()

        assert second == first
        assert [h.id for h in second] == ["h1", "h2"]

    def test_loaded_list_is_a_copy(self, stored_store):
        habits = stored_store.habits
        habits[0].title = "Changed"
        habits.clear()

        assert stored_store.get("h1").title == "Meditate"
        assert len(stored_store.habits) == 2


# ==================== Add Tests ====================

class TestAdd:
    """Tests for HabitStore.add()."""

    def test_add_creates_and_persists(self, store, memory_storage, now):
        store.load()

        habit = store.add("  Cold shower ", category="HEALTH", frequency=[1, 3, 5], notification_time="07:00")

        assert habit.title == "Cold shower"
        assert habit.streak == 0
        assert habit.completed_dates == []
        assert habit.created_at == now.isoformat()
        assert store.habits[-1].id == habit.id
        assert memory_storage.writes == [Config.HABITS_KEY]

        saved = json.loads(memory_storage.read(Config.HABITS_KEY))
        assert saved[-1]['title'] == "Cold shower"
        assert saved[-1]['frequency'] == [1, 3, 5]

    def test_add_uses_defaults(self, store):
        store.load()

        habit = store.add("Journal")

        assert habit.category == Config.DEFAULT_CATEGORY
        assert habit.icon == Config.DEFAULT_ICON
        assert habit.color == Config.DEFAULT_COLOR
        assert habit.frequency == [0, 1, 2, 3, 4, 5, 6]

    def test_ids_are_unique(self, store):
        store.load()

        ids = {store.add(f"Habit {i}").id for i in range(20)}

        assert len(ids) == 20

    @pytest.mark.parametrize("title", ["", "   ", "\t\n"])
    def test_scenario_d_empty_title_is_rejected(self, title, store, memory_storage):
        store.load()
        before = store.habits

        with pytest.raises(HabitValidationError):
            store.add(title)

        assert store.habits == before
        assert memory_storage.writes == []

    def test_invalid_field_is_rejected_without_write(self, store, memory_storage):
        store.load()

        with pytest.raises(HabitValidationError):
            store.add("Read", notification_time="25:00")

        assert memory_storage.writes == []


# ==================== Toggle Tests ====================

class TestToggle:
    """Tests for HabitStore.toggle()."""

    def test_toggle_today_adds_date_and_updates_streak(self, stored_store, days_ago):
        habit = stored_store.toggle("h2")

        assert days_ago(0) in habit.completed_dates
        assert habit.streak == 2

    def test_toggle_twice_restores_original(self, stored_store, memory_storage):
        original = stored_store.get("h1")

        stored_store.toggle("h1")
        restored = stored_store.toggle("h1")

        assert sorted(restored.completed_dates) == sorted(original.completed_dates)
        assert restored.streak == original.streak == 3
        assert memory_storage.writes == [Config.HABITS_KEY, Config.HABITS_KEY]

    def test_toggle_past_date(self, stored_store, days_ago):
        habit = stored_store.toggle("h2", days_ago(2))

        # h2 now has today-3, today-2, today-1
        assert habit.streak == 3

    def test_unmarking_today_keeps_yesterday_streak(self, stored_store):
        habit = stored_store.toggle("h1")

        assert habit.streak == 2

    def test_unknown_id_is_noop(self, stored_store, memory_storage):
        before = stored_store.habits

        assert stored_store.toggle("missing") is None
        assert stored_store.habits == before
        assert memory_storage.writes == []

    def test_malformed_date_is_rejected(self, stored_store, memory_storage):
        with pytest.raises(HabitValidationError, match="date"):
            stored_store.toggle("h1", "18/11/2025")

        assert memory_storage.writes == []

    def test_future_date_is_rejected(self, stored_store, memory_storage, days_ago):
        with pytest.raises(HabitValidationError, match="future"):
            stored_store.toggle("h1", days_ago(-1))

        assert stored_store.get("h1").streak == 3
        assert memory_storage.writes == []


    def test_toggle_is_persisted(self, stored_store, memory_storage, app_config, now, days_ago):
        stored_store.toggle("h2")

        reloaded = HabitStore(memory_storage, app_config, clock=lambda: now).load()

        assert days_ago(0) in reloaded[1].completed_dates
        assert reloaded[1].streak == 2


# ==================== Update / Delete Tests ====================

class TestUpdate:
    """Tests for HabitStore.update()."""

    def test_update_fields(self, stored_store):
        habit = stored_store.update("h1", title=" Meditate 20m ", category="MINDFULNESS", notification_time="06:30")

        assert habit.title == "Meditate 20m"
        assert habit.category == "MINDFULNESS"
        assert habit.notification_time == "06:30"
        assert habit.completed_dates == stored_store.get("h1").completed_dates

    def test_update_unknown_id_is_noop(self, stored_store, memory_storage):
        assert stored_store.update("missing", title="X") is None
        assert memory_storage.writes == []

    def test_update_rejects_protected_fields(self, stored_store):
        with pytest.raises(HabitValidationError, match="Cannot edit"):
            stored_store.update("h1", streak=50)

    def test_update_rejects_blank_title(self, stored_store, memory_storage):
        with pytest.raises(HabitValidationError):
            stored_store.update("h1", title="  ")

        assert stored_store.get("h1").title == "Meditate"
        assert memory_storage.writes == []


class TestDelete:
    """Tests for HabitStore.delete()."""

    def test_delete_removes_and_persists(self, stored_store, memory_storage):
        assert stored_store.delete("h1") is True

        assert [h.id for h in stored_store.habits] == ["h2"]
        saved = json.loads(memory_storage.read(Config.HABITS_KEY))
        assert [h['id'] for h in saved] == ["h2"]

    def test_scenario_e_delete_unknown_id(self, stored_store, memory_storage):
        before = stored_store.habits

        assert stored_store.delete("missing") is False
        assert stored_store.habits == before
        assert memory_storage.writes == []


# ==================== Persistence Failure / Listener Tests ====================

class TestPersistenceAndListeners:
    """Tests for write failures and change notification."""

    def test_failed_write_leaves_state_unchanged(self, app_config, now):
        storage = Mock(spec=InMemoryStorage)
        storage.read.return_value = None
        storage.write.side_effect = StorageError("disk full")
        store = HabitStore(storage, app_config, clock=lambda: now)
        store.load()

        with pytest.raises(StorageError):
            store.add("Read")

        assert len(store.habits) == len(DEFAULT_HABITS)

    def test_listeners_receive_new_list(self, stored_store):
        received = []
        stored_store.subscribe(received.append)

        stored_store.toggle("h2")
        stored_store.delete("h1")

        assert len(received) == 2
        assert [h.id for h in received[-1]] == ["h2"]

    def test_unsubscribe(self, stored_store):
        listener = Mock()
        stored_store.subscribe(listener)
        stored_store.unsubscribe(listener)

        stored_store.toggle("h1")

        listener.assert_not_called()

    def test_failing_listener_does_not_abort_mutation(self, stored_store):
        stored_store.subscribe(Mock(side_effect=RuntimeError("render failed")))

        habit = stored_store.toggle("h2")

        assert habit is not None
        assert stored_store.get("h2").streak == 2


# ==================== Day Rollover / Reset Tests ====================

class TestRefreshAndReset:
    """Tests for refresh_streaks() and reset()."""

    def test_refresh_after_day_passes(self, memory_storage, app_config, now, create_test_habit, days_ago):
        memory_storage.write(Config.HABITS_KEY, serialize_habits([
            create_test_habit(completed_dates=[days_ago(1)])
        ]))
        clock = {'now': now}
        store = HabitStore(memory_storage, app_config, clock=lambda: clock['now'])
        store.load()
        assert store.get("h1").streak == 1

        assert store.refresh_streaks() is False

        from datetime import timedelta
        clock['now'] = now + timedelta(days=1)

        assert store.refresh_streaks() is True
        assert store.get("h1").streak == 0

    def test_reset_clears_storage_and_reseeds(self, stored_store, memory_storage):
        memory_storage.write(Config.THEME_KEY, "light")

        habits = stored_store.reset()

        assert [h.title for h in habits] == [row[1] for row in DEFAULT_HABITS]
        assert memory_storage.read(Config.THEME_KEY) is None
        assert memory_storage.read(Config.HABITS_KEY) is None

    def test_scheduled_mode_from_config(self, memory_storage, app_config, create_test_habit):
        from datetime import datetime
        import pytz

        app_config.streak_mode = StreakMode.SCHEDULED
        # Tue, Mon, previous Fri for a weekday-only habit
        habit = create_test_habit(
            completed_dates=["2025-11-18", "2025-11-17", "2025-11-14"], frequency=[1, 2, 3, 4, 5]
        )
        memory_storage.write(Config.HABITS_KEY, serialize_habits([habit]))
        tuesday = pytz.UTC.localize(datetime(2025, 11, 18, 20, 0))

        store = HabitStore(memory_storage, app_config, clock=lambda: tuesday)

        assert store.load()[0].streak == 3


class TestTimezone:
    """'Today' follows the configured timezone."""

    def test_today_uses_configured_timezone(self, app_config):
        from datetime import datetime
        import pytz

        app_config.timezone = "America/Sao_Paulo"
        utc_moment = pytz.UTC.localize(datetime(2025, 11, 18, 1, 30))
        store = HabitStore(InMemoryStorage(), app_config)
        store._clock = lambda: utc_moment.astimezone(store._tz)

        # 01:30 UTC is still the evening of the 17th in Sao Paulo
        assert store.today().isoformat() == "2025-11-17"
