"""Key-value storage backends for the Glance speed reader."""

import json
import logging
import os
from abc import ABC, abstractmethod

from . import config


class KeyValueStore(ABC):
    """
    Abstract base class for the storage used to persist settings and documents.

    Values are plain strings, mirroring browser local storage; callers are
    responsible for encoding anything richer.
    """

    @abstractmethod
    def get(self, key: str, default=None):
        """
        Look up a stored value.

        Args:
            key: Storage key
            default: Value returned when the key is absent

        Returns:
            The stored string, or default
        """
        pass

    @abstractmethod
    def set(self, key: str, value) -> None:
        """Store a value under key, converting it to a string."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass


class MemoryStore(KeyValueStore):
    """In-process store, used for tests and one-off sessions."""

    def __init__(self, initial: dict | None = None):
        self._data = {key: str(value) for key, value in (initial or {}).items()}

    def get(self, key, default=None):
        return self._data.get(key, default)

    def set(self, key, value):
        self._data[key] = str(value)

    def delete(self, key):
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    Store backed by a single JSON object on disk.

    The file is read once on creation and rewritten on every change. An
    unreadable or corrupt file is treated as empty.
    """

    def __init__(self, file_path: str = config.STORE_FILE):
        self.file_path = file_path
        self._data = self._load()

    def _load(self) -> dict:
        if not os.path.exists(self.file_path):
            return {}
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logging.warning(f"Ignoring unreadable store file {self.file_path}: {e}")
            return {}
        if not isinstance(data, dict):
            logging.warning(f"Ignoring store file {self.file_path}: expected a JSON object")
            return {}
        return {str(key): str(value) for key, value in data.items()}

    def _save(self):
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        try:
            with open(self.file_path, 'w', encoding='utf-8') as f:
                json.dump(self._data, f, indent=2)
        except IOError as e:
            logging.error(f"Failed to write store file {self.file_path}: {e}", exc_info=True)

    def get(self, key, default=None):
        return self._data.get(key, default)

    def set(self, key, value):
        self._data[key] = str(value)
        self._save()

    def delete(self, key):
        if key in self._data:
            del self._data[key]
            self._save()
