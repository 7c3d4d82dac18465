from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Optional

logger = logging.getLogger("tadoku")

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class Storage:
    """Durable key/value store, one JSON file per key."""

    def __init__(self, storage_dir: str):
        self.storage_dir = storage_dir
        try:
            os.makedirs(self.storage_dir, exist_ok=True)
        except OSError as e:
            logger.warning("Failed to create storage dir %s: %s", storage_dir, e)

    def _get_path(self, key: str) -> str:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return os.path.join(self.storage_dir, f"{key}.json")

    def get(self, key: str) -> Optional[Any]:
        path = self._get_path(key)
        if not os.path.exists(path):
            return None

        try:
            with open(path, "r") as f:
                data = json.load(f)
            return data.get("value")
        except (IOError, json.JSONDecodeError, AttributeError) as e:
            logger.warning("Failed to read storage file %s: %s", path, e)
            return None

    def set(self, key: str, value: Any) -> bool:
        """Persist ``value``; returns False if it could not be written."""
        path = self._get_path(key)
        tmp_path = f"{path}.tmp"
        try:
            with open(tmp_path, "w") as f:
                json.dump({"value": value}, f)
            os.replace(tmp_path, path)
            logger.debug("Stored key: %s", key)
            return True
        except OSError as e:
            logger.warning("Failed to write storage file %s: %s", path, e)
            return False
        finally:
            if os.path.exists(tmp_path):
                try:
                    os.unlink(tmp_path)
                except OSError as e:
                    logger.warning("Failed to remove temp file %s: %s", tmp_path, e)

    def remove(self, key: str) -> bool:
        path = self._get_path(key)
        try:
            os.unlink(path)
            logger.debug("Removed key: %s", key)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to remove storage file %s: %s", path, e)
            return False
        return True
