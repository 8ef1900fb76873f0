"""
Segment Clock - Storage Module
Small key-value stores for values that must survive a restart.
"""

import json
import os

import config
import logger


class MemoryStore:
    """Volatile store, used when no store path is configured"""

    def __init__(self, initial=None):
        self.values = dict(initial or {})

    def get(self, key, default=None):
        return self.values.get(key, default)

    def put(self, key, value):
        self.values[key] = value


class JsonFileStore:
    """
    Key-value store kept as one JSON object on disk.

    A missing or unreadable file reads as empty. Writes go to a temporary
    file first and replace the original, so a power cut never leaves a
    half written store behind.

    Args:
        path (str): File location
    """

    def __init__(self, path):
        self.path = path

    def _load(self):
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.log(f"Store {self.path} unreadable, treating as empty: {e}", config.LogLevel.WARNING)
            return {}

        if not isinstance(data, dict):
            logger.log(f"Store {self.path} is not an object, treating as empty", config.LogLevel.WARNING)
            return {}
        return data

    def get(self, key, default=None):
        """
        Read one value.

        Args:
            key (str): Key to read
            default: Returned when the key is missing

        Returns:
            Stored value or default
        """
        return self._load().get(key, default)

    def put(self, key, value):
        """
        Write one value, keeping the other keys.

        Raises:
            OSError: When the file cannot be written (read-only filesystem)
        """
        data = self._load()
        data[key] = value

        temp_path = f"{self.path}.tmp"
        with open(temp_path, "w") as f:
            json.dump(data, f)
        os.replace(temp_path, self.path)

        logger.log(f"Stored {key} in {self.path}", config.LogLevel.DEBUG)


def open_store(path=None):
    """
    Build the configured store.

    Args:
        path (str): File path; empty string means volatile (default: Env.STORE_PATH)

    Returns:
        JsonFileStore or MemoryStore
    """
    path = config.Env.STORE_PATH if path is None else path
    if not path:
        logger.log("No store path configured - timezone will not persist", config.LogLevel.WARNING)
        return MemoryStore()
    return JsonFileStore(path)
