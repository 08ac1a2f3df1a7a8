"""File-backed key/value store with the same contract as browser local storage."""
import json
import logging
import os
import tempfile
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class LocalStore:
    """String values keyed by string, persisted to one JSON file.

    Survives process restarts, which is what lets a draft outlive the
    navigation to the sign-in page.
    """

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except ValueError:
            logger.warning("local store %s is corrupt; starting empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        folder = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(folder, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=folder, prefix=".store-")
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh)
        os.replace(tmp, self.path)

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)
