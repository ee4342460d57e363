"""
Second Brain console.
Track protocols from the terminal: list, add, mark done, view the dashboard
and ask for a strategic insight.

Examples:
    python scripts/track.py list
    python scripts/track.py add "Cold shower" --category HEALTH --days 1,2,3,4,5 --time 07:00
    python scripts/track.py done <habit-id>
    python scripts/track.py dashboard
"""

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.core.config_manager import Config
from src.core.habit_store import HabitStore
from src.core.preferences import ThemePreference
from src.llm.client import CONNECTION_ADVICE, request_advice_async
from src.models.api import HabitValidationError
from src.models.config import AppConfig
from src.models.enums import Theme
from src.models.habits import Habit
from src.processors.habit_processor import validate_habit_form
from src.processors.stats_processor import (
    best_streak, completed_today, completion_rate, last_seven_days, longest_run
)
from src.services.notification_service import LogNotifier, ReminderScheduler
from src.services.storage_service import JsonFileStorage
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
ADVICE_TIMEOUT = Config.ADVICE_TIMEOUT_SECONDS + 5


def confirm(question: str) -> bool:
    answer = input(f"{question} [y/N]: ").strip().lower()
    return answer in ['y', 'yes']


def parse_days(value: Optional[str]) -> Optional[List[int]]:
    """Parse "1,3,5" or "mon,wed,fri" into weekday indices (0 = Sunday)."""
    if value is None:
        return None
    days = []
    for part in value.split(','):
        part = part.strip().lower()
        if not part:
            continue
        if part.isdigit():
            days.append(int(part))
            continue
        names = [n.lower() for n in WEEKDAY_NAMES]
        if part[:3] not in names:
            raise argparse.ArgumentTypeError(f"Unknown weekday '{part}'")
        days.append(names.index(part[:3]))
    return days


def resolve_habit_id(store: HabitStore, ref: str) -> Optional[str]:
    """Accept a full id or an unambiguous id prefix."""
    habits = store.habits
    if any(h.id == ref for h in habits):
        return ref
    matches = [h.id for h in habits if h.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        print(f"⚠️ '{ref}' matches {len(matches)} protocols, use more characters.")
    return None


def format_habit(habit: Habit, store: HabitStore) -> str:
    today = store.today()
    mark = "✅" if habit.is_completed_on(today) else "⬜"
    schedule = ",".join(WEEKDAY_NAMES[d] for d in habit.frequency) if len(habit.frequency) < 7 else "daily"
    reminder = f" ⏰{habit.notification_time}" if habit.notification_time else ""
    return (
        f"{mark} {habit.icon} {habit.title}  [{habit.category}]  "
        f"🔥{habit.streak}  ({schedule}{reminder})  id={habit.id[:8]}"
    )


# -------------------- Commands --------------------

def cmd_list(store: HabitStore, args) -> int:
    habits = store.habits
    if not habits:
        print("No protocols defined. Add one with: add \"TITLE\"")
        return 0
    for habit in habits:
        print(format_habit(habit, store))
    return 0


def cmd_add(store: HabitStore, args) -> int:
    frequency = parse_days(args.days)
    errors = validate_habit_form(
        args.title, args.category, args.color, args.icon,
        frequency, args.time, store.config
    )
    if errors:
        for error in errors:
            print(f"❌ {error}")
        return 1

    habit = store.add(
        args.title,
        category=args.category,
        description=args.description,
        icon=args.icon,
        color=args.color,
        frequency=frequency,
        notification_time=args.time,
    )
    print(f"✅ Protocol '{habit.title}' created (id={habit.id[:8]})")
    return 0


def cmd_done(store: HabitStore, args) -> int:
    habit_id = resolve_habit_id(store, args.habit)
    if habit_id is None:
        print(f"❌ Protocol '{args.habit}' not found.")
        return 1
    habit = store.toggle(habit_id, args.date)
    state = "executed" if habit.is_completed_on(args.date or store.today()) else "pending"
    print(f"{habit.icon} {habit.title}: {state}, streak 🔥{habit.streak}")
    return 0


def cmd_edit(store: HabitStore, args) -> int:
    habit_id = resolve_habit_id(store, args.habit)
    if habit_id is None:
        print(f"❌ Protocol '{args.habit}' not found.")
        return 1

    fields = {
        'title': args.title,
        'description': args.description,
        'category': args.category,
        'icon': args.icon,
        'color': args.color,
        'frequency': parse_days(args.days),
        'notification_time': args.time,
    }
    fields = {k: v for k, v in fields.items() if v is not None}
    if args.no_time:
        fields['notification_time'] = None
    if not fields:
        print("Nothing to change.")
        return 0

    current = store.get(habit_id)
    errors = validate_habit_form(
        fields.get('title', current.title),
        fields.get('category'), fields.get('color'), fields.get('icon'),
        fields.get('frequency'), fields.get('notification_time'), store.config
    )
    if errors:
        for error in errors:
            print(f"❌ {error}")
        return 1

    habit = store.update(habit_id, **fields)
    print(f"✅ Protocol '{habit.title}' updated")
    return 0


def cmd_delete(store: HabitStore, args) -> int:
    habit_id = resolve_habit_id(store, args.habit)
    if habit_id is None:
        print(f"❌ Protocol '{args.habit}' not found.")
        return 1
    habit = store.get(habit_id)
    if not args.yes and not confirm(
        f"CONFIRM ARCHIVAL: '{habit.title}' will be removed from tracking."
    ):
        print("Cancelled.")
        return 0
    store.delete(habit_id)
    print(f"🗑️ Protocol '{habit.title}' removed")
    return 0


def cmd_dashboard(store: HabitStore, args) -> int:
    habits = store.habits
    today = store.today()

    print(f"Today: {completed_today(habits, today)}/{len(habits)} protocols")
    print(f"Rate:  {completion_rate(habits, today)}%")
    print(f"Best current streak: 🔥{best_streak(habits)}")
    print("\nLast 7 days")
    for stat in last_seven_days(habits, today):
        bar = "█" * stat.completed
        marker = " ◀ today" if stat.is_today else ""
        print(f"  {stat.label} {stat.day_str}  {bar} {stat.completed}{marker}")

    if habits:
        print("\nLongest runs")
        for habit in habits:
            print(f"  {habit.icon} {habit.title}: {longest_run(habit)} days")
    return 0


def cmd_advice(store: HabitStore, args) -> int:
    print("🧠 Analyzing protocols...")
    future = request_advice_async(store.habits, store.today())
    try:
        text = future.result(timeout=ADVICE_TIMEOUT)
    except Exception as e:
        logger.error(f"Advice request did not finish: {e}")
        text = CONNECTION_ADVICE
    print(f"\n{text}")
    return 0


def cmd_theme(store: HabitStore, args) -> int:
    preference = ThemePreference(store.storage)
    if args.value == "toggle":
        theme = preference.toggle()
    elif args.value:
        theme = preference.set(Theme(args.value))
    else:
        theme = preference.get()
    print(f"Theme: {theme.value}")
    return 0


def cmd_remind(store: HabitStore, args) -> int:
    scheduler = ReminderScheduler(
        store, LogNotifier(permitted=True), interval_seconds=store.config.reminder_interval_seconds
    )
    print("⏰ Watching for reminders. Press Ctrl+C to stop.")
    scheduler.start()
    try:
        while scheduler.is_running():
            time.sleep(scheduler.interval_seconds)
            store.refresh_streaks()
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.stop()
    return 0


def cmd_reset(store: HabitStore, args) -> int:
    if not args.yes and not confirm("Erase ALL stored protocols and settings?"):
        print("Cancelled.")
        return 0
    store.reset()
    print("Database reset.")
    return 0


# -------------------- Argument parsing --------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="track", description="Second Brain protocol tracker")
    parser.add_argument("--data-dir", type=Path, help="Folder for stored data")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("list", help="Show protocols").set_defaults(func=cmd_list)

    add = sub.add_parser("add", help="Create a protocol")
    add.add_argument("title")
    add.add_argument("--category")
    add.add_argument("--description")
    add.add_argument("--icon")
    add.add_argument("--color")
    add.add_argument("--days", help="Weekdays, e.g. 1,3,5 or mon,wed,fri (0 = Sunday)")
    add.add_argument("--time", help="Reminder time HH:MM")
    add.set_defaults(func=cmd_add)

    done = sub.add_parser("done", help="Toggle completion for today or --date")
    done.add_argument("habit")
    done.add_argument("--date", help="YYYY-MM-DD")
    done.set_defaults(func=cmd_done)

    edit = sub.add_parser("edit", help="Change a protocol")
    edit.add_argument("habit")
    edit.add_argument("--title")
    edit.add_argument("--category")
    edit.add_argument("--description")
    edit.add_argument("--icon")
    edit.add_argument("--color")
    edit.add_argument("--days")
    edit.add_argument("--time")
    edit.add_argument("--no-time", action="store_true", help="Remove the reminder")
    edit.set_defaults(func=cmd_edit)

    delete = sub.add_parser("delete", help="Remove a protocol")
    delete.add_argument("habit")
    delete.add_argument("--yes", action="store_true", help="Skip confirmation")
    delete.set_defaults(func=cmd_delete)

    sub.add_parser("dashboard", help="7-day overview").set_defaults(func=cmd_dashboard)
    sub.add_parser("advice", help="Ask for a strategic insight").set_defaults(func=cmd_advice)

    theme = sub.add_parser("theme", help="Show or change the display theme")
    theme.add_argument("value", nargs="?", choices=["light", "dark", "toggle"])
    theme.set_defaults(func=cmd_theme)

    sub.add_parser("remind", help="Run the reminder loop").set_defaults(func=cmd_remind)

    reset = sub.add_parser("reset", help="Erase all stored data")
    reset.add_argument("--yes", action="store_true", help="Skip confirmation")
    reset.set_defaults(func=cmd_reset)

    return parser


def recover(store: HabitStore) -> int:
    """Last-resort recovery: offer to wipe storage after an unexpected failure."""
    print("\n❌ System error: the console failed to run this command.")
    if sys.stdin.isatty() and confirm("Reset database and start over?"):
        store.reset()
        print("Database reset.")
    else:
        print("Run 'track.py reset' to clear stored data if the problem persists.")
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main execution function.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if not Config.validate():
        logger.error("Configuration validation failed")
        return 1

    config = AppConfig.from_env()
    if args.data_dir:
        config.data_dir = args.data_dir

    store = HabitStore(JsonFileStorage(config.data_dir), config)

    try:
        store.load()
        return args.func(store, args)
    except HabitValidationError as e:
        print(f"❌ {e}")
        return 1
    except argparse.ArgumentTypeError as e:
        print(f"❌ {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 1
    except Exception as e:
        logger.error(f"Unexpected fatal error: {e}", exc_info=True)
        return recover(store)


if __name__ == "__main__":
    sys.exit(main())
