# storefront/storage.py
"""
Key/value client storage.

The store and the history tracker only need a flat string-to-string
namespace, the same contract as a browser's ``localStorage``. Two
backends are provided: ``MemoryStorage`` for a single process and for
tests, and ``JsonFileStorage`` which keeps the whole namespace in one
JSON object on disk. Several processes sharing one file are not
coordinated; the last writer wins.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Optional

from typing_extensions import Protocol

logger = logging.getLogger(__name__)

CART_KEY = "dataexplorer_cart"
CURRENCY_KEY = "dataexplorer_currency"
HISTORY_KEY = "dataexplorer_history"


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage:
    """Namespace persisted as a single JSON object file.

    Every call re-reads the file, so two storages pointed at the same path
    observe each other's writes. Reads of a missing or malformed file
    yield an empty namespace; write failures are logged, never raised.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, str]:
        try:
            if self.path.exists():
                with self.path.open("r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return {str(k): v for k, v in data.items() if isinstance(v, str)}
                logger.warning("Storage file %s does not hold an object; ignoring it", self.path)
        except (OSError, ValueError) as exc:
            logger.error("Failed to read storage file %s: %s", self.path, exc)
        return {}

    def _save(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        except OSError as exc:
            logger.error("Failed to write storage file %s: %s", self.path, exc)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if data.pop(key, None) is not None:
                self._save(data)
