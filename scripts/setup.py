# File: scripts/setup.py
"""
One-time setup for Second Brain.
Stores the Groq API key in .env and prepares the data directory.
"""

import sys
from pathlib import Path

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.core.config_manager import Config
from src.core.habit_store import HabitStore
from src.models.config import AppConfig
from src.services.storage_service import JsonFileStorage, serialize_habits
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


def setup_groq_api(env_file: Path = Config.ENV_FILE) -> bool:
    """Ask for a Groq API key unless one is already in the .env file."""
    lines = env_file.read_text(encoding='utf-8').splitlines() if env_file.exists() else []
    if any(line.startswith('GROQ_API_KEY=') for line in lines):
        print("✓ Existing Groq API key detected.")
        return True

    key = input("Enter your Groq API key (https://console.groq.com/keys), or leave empty to skip: ").strip()
    if not key:
        print("⚠️ No key entered. Advice will use the offline message.")
        return False
    if len(key) < 20:
        print("❌ Invalid API key.")
        return False

    lines.append(f"GROQ_API_KEY={key}")
    env_file.write_text("\n".join(lines) + "\n", encoding='utf-8')
    print("✅ Groq API key saved.")
    return True


def init_data_dir(config: AppConfig) -> int:
    """
    Make sure the data directory holds a habit list.

    Returns:
        Number of protocols stored
    """
    storage = JsonFileStorage(config.data_dir)
    already_stored = storage.read(Config.HABITS_KEY) is not None

    habits = HabitStore(storage, config).load()
    if already_stored:
        print(f"✓ Existing data found in {config.data_dir} ({len(habits)} protocols).")
    else:
        storage.write(Config.HABITS_KEY, serialize_habits(habits))
        print(f"✅ Data directory ready: {config.data_dir} ({len(habits)} default protocols)")
    logger.info(f"Data directory initialized at {config.data_dir}")
    return len(habits)


def main() -> int:
    print("🧠 Setting up Second Brain...")

    setup_groq_api()
    init_data_dir(AppConfig.from_env())

    print("\n🎉 Setup complete! Run 'python scripts/track.py list' to see your protocols.")
    return 0


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n❌ Setup cancelled.")
        sys.exit(1)
