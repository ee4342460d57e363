# File: src/services/storage_service.py
"""
Key-value blob persistence for Second Brain.

The store treats persistence as a browser-style local storage: a handful of
string keys, each holding one serialized blob that is read once at startup
and overwritten after every change.
"""

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from src.models.habits import Habit, habit_from_dict
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageError(Exception):
    """Raised when the persistence backend cannot be read or written."""


class InMemoryStorage:
    """Dictionary-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self.writes: List[str] = []

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, blob: str) -> None:
        self._data[key] = blob
        self.writes.append(key)

    def clear(self) -> None:
        self._data.clear()


class JsonFileStorage:
    """Stores each key as ``<key>.json`` inside a data directory."""

    def __init__(self, directory: Path):
        """
        Initialize file storage.

        Args:
            directory: Folder holding one file per key (created on first write)
        """
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        """
        Return the stored blob, or None if the key was never written.

        Raises:
            StorageError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        path = self._path(key)
        if not path.exists():
            logger.debug(f"No stored value for key '{key}'")
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Error reading {path}: {e}", exc_info=True)
            raise StorageError(f"Could not read key '{key}'") from e

    def write(self, key: str, blob: str) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file, then swap it in
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(blob)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(f"Error writing {path}: {e}", exc_info=True)
            raise StorageError(f"Could not write key '{key}'") from e
        logger.debug(f"Wrote {len(blob)} characters to {path}")

    def clear(self) -> None:
        if not self.directory.exists():
            return
        try:
            for path in self.directory.glob("*.json"):
                path.unlink()
        except OSError as e:
            logger.error(f"Error clearing {self.directory}: {e}", exc_info=True)
            raise StorageError("Could not clear storage") from e
        logger.info(f"Cleared stored data in {self.directory}")


def serialize_habits(habits: Iterable[Habit]) -> str:
    """Encode the habit list as a JSON array of records."""
    return json.dumps([h.to_dict() for h in habits], ensure_ascii=False, indent=2)


def deserialize_habits(blob: str) -> List[Habit]:
    """
    Decode a JSON habit list.

    Raises:
        ValueError: If the blob is not a JSON array of valid habit records
    """
    try:
        data = json.loads(blob)
    except RecursionError as e:
        raise ValueError("Habit data is nested too deeply") from e
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of habits, got {type(data).__name__}")
    return [habit_from_dict(item) for item in data]
