"""Durable key/value store holding JSON-encoded values.

Reads never raise: a missing key, unreadable storage or malformed JSON all
yield the caller's default. Writes report success as a boolean.
"""
import enum
import json
import os
import time
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import structlog
from pydantic_core import PydanticSerializationError, to_jsonable_python

logger = structlog.get_logger(__name__)


class StorageKey(str, enum.Enum):
    """Named collections kept in the local store. Values are distinct."""

    EXERCISES = "workout_tracker_exercises"
    WORKOUTS = "workout_tracker_workouts"
    WORKOUT_TEMPLATES = "workout_tracker_templates"
    WORKOUT_SESSIONS = "workout_tracker_sessions"
    ACTIVE_SESSION = "workout_tracker_active_session"


def generate_id() -> str:
    """Opaque local identifier: epoch milliseconds plus random hex."""
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def _key_name(key: StorageKey | str) -> str:
    return key.value if isinstance(key, StorageKey) else key


class LocalStore(ABC):
    """Key/value storage of JSON documents."""

    @abstractmethod
    def read_raw(self, key: str) -> str | None:
        """Return the stored text for key, or None when absent."""

    @abstractmethod
    def write_raw(self, key: str, data: str) -> None:
        """Store text under key, replacing any previous value."""

    @abstractmethod
    def delete_raw(self, key: str) -> None:
        """Delete key. Absent keys are ignored."""

    def get(self, key: StorageKey | str, default: Any = None) -> Any:
        name = _key_name(key)
        try:
            raw = self.read_raw(name)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("local_store_read_failed", key=name, error=str(e))
            return default
        if not raw:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("local_store_malformed_value", key=name)
            return default

    def set(self, key: StorageKey | str, value: Any) -> bool:
        name = _key_name(key)
        try:
            data = json.dumps(to_jsonable_python(value))
        except (TypeError, ValueError, PydanticSerializationError) as e:
            logger.error("local_store_encode_failed", key=name, error=str(e))
            return False
        try:
            self.write_raw(name, data)
        except OSError as e:
            logger.error("local_store_write_failed", key=name, error=str(e))
            return False
        return True

    def remove(self, key: StorageKey | str) -> bool:
        name = _key_name(key)
        try:
            self.delete_raw(name)
        except OSError as e:
            logger.error("local_store_remove_failed", key=name, error=str(e))
            return False
        return True


class FileLocalStore(LocalStore):
    """One JSON file per key inside a directory. Writes replace files atomically."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, key: StorageKey | str) -> Path:
        return self.directory / f"{_key_name(key)}.json"

    def read_raw(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write_raw(self, key: str, data: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        tmp_path = path.with_name(f"{path.name}.{uuid.uuid4().hex[:8]}.tmp")
        try:
            tmp_path.write_text(data, encoding="utf-8")
            os.replace(tmp_path, path)
        finally:
            tmp_path.unlink(missing_ok=True)

    def delete_raw(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


class MemoryLocalStore(LocalStore):
    """In-memory store, mainly for tests."""

    def __init__(self):
        self.data: dict[str, str] = {}

    def read_raw(self, key: str) -> str | None:
        return self.data.get(key)

    def write_raw(self, key: str, data: str) -> None:
        self.data[key] = data

    def delete_raw(self, key: str) -> None:
        self.data.pop(key, None)
