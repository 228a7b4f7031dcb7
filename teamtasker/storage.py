"""
Key-value persistence for the tracker's collections.

The store mirrors browser local storage: string values under string keys.
Team members and tasks are each kept as one JSON-serialized array under a
fixed key. Loading never fails; a missing or unreadable value is replaced
by the default seed data.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from .exceptions import StorageException
from .logging_config import get_logger
from .models import MemberList, Task, TaskList, TeamMember

logger = get_logger(__name__)


class STORAGE_KEYS:
    TEAM = "tt_team"
    TASKS = "tt_tasks"


DEFAULT_TEAM: Tuple[Dict, ...] = (
    {"id": 1, "name": "Alice Johnson", "email": "alice@example.com", "role": "Developer"},
    {"id": 2, "name": "Bob Smith", "email": "bob@example.com", "role": "Designer"},
    {"id": 3, "name": "Carla Gomez", "email": "carla@example.com", "role": "QA"},
)

DEFAULT_TASKS: Tuple[Dict, ...] = (
    {"id": 1, "description": "Fix login bug", "assignedTo": 1, "completed": False},
    {"id": 2, "description": "Design homepage", "assignedTo": 2, "completed": True},
    {"id": 3, "description": "Write tests for auth", "assignedTo": 3, "completed": False},
)


def default_team() -> List[TeamMember]:
    """Fresh copies of the seed members."""
    return [TeamMember(**member) for member in DEFAULT_TEAM]


def default_tasks() -> List[Task]:
    """Fresh copies of the seed tasks."""
    return [Task(**task) for task in DEFAULT_TASKS]


class KeyValueStore(ABC):
    """
    Abstract string key-value store.

    Implementations hold string values only; callers serialize.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            Stored string, or None if the key is absent
        """

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StorageException: If the value cannot be written
        """

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete a key; absent keys are ignored."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every key."""

    def describe(self) -> str:
        return type(self).__name__


class MemoryStore(KeyValueStore):
    """Dict-backed store used when no storage path is configured."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    def describe(self) -> str:
        return "memory"


class JsonFileStore(KeyValueStore):
    """
    Store backed by a single JSON object on disk.

    The file is re-read on every access and rewritten through a temporary
    file that is renamed into place. A file that is missing, unreadable or
    not a JSON object is treated as an empty store.

    Attributes:
        path: Location of the JSON file
    """

    def __init__(self, path: "str | Path") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Initialized JsonFileStore at {self.path}")

    def _read_all(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning(
                "Storage file unreadable, treating as empty",
                extra={"extra_fields": {"path": str(self.path), "error": str(e)}},
            )
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(
                "Storage file is not valid JSON, treating as empty",
                extra={"extra_fields": {"path": str(self.path), "error": str(e)}},
            )
            return {}

        if not isinstance(data, dict):
            logger.warning(
                "Storage file does not hold a JSON object, treating as empty",
                extra={"extra_fields": {"path": str(self.path)}},
            )
            return {}

        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, items: Dict[str, str], key: str) -> None:
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StorageException(key, str(e), {"file": str(self.path)}) from e

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items, key)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if items.pop(key, None) is not None:
            self._write_all(items, key)

    def clear(self) -> None:
        self._write_all({}, "*")

    def describe(self) -> str:
        return f"file:{self.path}"


def create_store(storage_path: str) -> KeyValueStore:
    """
    Build the store for a configured path.

    Args:
        storage_path: JSON file path, or empty string for in-memory storage

    Returns:
        Configured store instance
    """
    if not storage_path:
        return MemoryStore()
    return JsonFileStore(storage_path)


def save_data(
    store: KeyValueStore, members: List[TeamMember], tasks: List[Task]
) -> None:
    """
    Write both collections under their fixed keys.

    The two writes are independent; there is no atomicity across them.
    """
    store.set_item(
        STORAGE_KEYS.TEAM, MemberList.dump_json(members).decode("utf-8")
    )
    store.set_item(
        STORAGE_KEYS.TASKS, TaskList.dump_json(tasks, by_alias=True).decode("utf-8")
    )


def _load_key(store: KeyValueStore, key: str, adapter, fallback):
    raw = store.get_item(key)
    if not raw:
        logger.info(f"No stored value for '{key}', using default data")
        return fallback()

    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        logger.warning(
            f"Stored value for '{key}' is corrupt, using default data",
            extra={"extra_fields": {"key": key, "errors": e.error_count()}},
        )
        return fallback()


def load_data(store: KeyValueStore) -> Tuple[List[TeamMember], List[Task]]:
    """
    Load both collections, falling back to the seeds key by key.

    Args:
        store: Store to read from

    Returns:
        Tuple of (members, tasks)
    """
    members = _load_key(store, STORAGE_KEYS.TEAM, MemberList, default_team)
    tasks = _load_key(store, STORAGE_KEYS.TASKS, TaskList, default_tasks)
    return members, tasks
