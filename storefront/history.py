# storefront/history.py
"""
Recently viewed products.

The history is a single storage slot holding a JSON array of product
ids, most recent first, without duplicates and at most ``limit`` long.
Writers and readers only share the storage key; panels that need to
refresh when the list changes subscribe to the tracker instead of
holding a reference to the writer.
"""

import json
import logging
from typing import Any, Callable, List, Tuple

from pydantic import BaseModel

from .storage import HISTORY_KEY, KeyValueStorage

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10


class HistoryChanged(BaseModel):
    ids: Tuple[Any, ...]


HistoryListener = Callable[[HistoryChanged], None]


class HistoryTracker:
    def __init__(self, storage: KeyValueStorage, key: str = HISTORY_KEY, limit: int = HISTORY_LIMIT) -> None:
        self._storage = storage
        self._key = key
        self._limit = limit
        self._ready = False
        self._listeners: List[HistoryListener] = []

    @property
    def ready(self) -> bool:
        return self._ready

    def hydrate(self) -> "HistoryTracker":
        """Open the write gate once the persisted baseline is readable."""
        self._ready = True
        return self

    def subscribe(self, listener: HistoryListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _load(self) -> List[Any]:
        raw = self._storage.get(self._key)
        if not raw:
            return []
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"history slot holds {type(data).__name__}, expected a list")
        return data

    def read_history(self) -> List[Any]:
        try:
            return self._load()
        except ValueError as exc:
            logger.error("History load error: %s", exc)
            return []

    def record_view(self, product_id: Any) -> None:
        if not product_id or not self._ready:
            return
        try:
            history = self._load()
        except ValueError as exc:
            logger.error("History save error: %s", exc)
            return

        history = [pid for pid in history if str(pid) != str(product_id)]
        history.insert(0, product_id)
        history = history[: self._limit]

        self._storage.set(self._key, json.dumps(history))
        self._notify(HistoryChanged(ids=tuple(history)))

    def _notify(self, event: HistoryChanged) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("History listener %r failed", listener)
