"""
Book Explorer storefront core.

``open_store()`` is the usual entry point: it hydrates a store from the
configured storage file and returns the ready handle that owns the cart,
the active currency and the recently viewed history.
"""

from pathlib import Path
from typing import Optional

from . import config
from .history import HistoryChanged, HistoryTracker  # noqa: F401
from .pricing import BASE_CURRENCY, CURRENCIES, convert_price, parse_price  # noqa: F401
from .storage import JsonFileStorage, MemoryStorage  # noqa: F401
from .store import ReadyStore, Store, cart_line_id  # noqa: F401


def open_store(path: Optional[Path] = None) -> ReadyStore:
    return Store(JsonFileStorage(path or config.STORAGE_PATH)).hydrate()
