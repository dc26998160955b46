# storefront/store.py
"""
Cart and currency state for one storage namespace.

``Store`` is the not-yet-hydrated handle and exposes nothing but
``hydrate()``. The ``ReadyStore`` it returns owns the cart, the active
currency and the history tracker, and writes both the cart snapshot and
the currency code back to storage after every mutation. Since mutations
only exist on the ready handle, default in-memory state can never
overwrite what was persisted by an earlier session.
"""

import logging
import re
from typing import List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from .history import HistoryTracker
from .models import CartLine, Currency, ProductSummary
from .pricing import BASE_CURRENCY, CURRENCIES, PriceInput, convert_price, find_currency, parse_price
from .storage import CART_KEY, CURRENCY_KEY, KeyValueStorage

logger = logging.getLogger(__name__)

_cart_adapter = TypeAdapter(List[CartLine])
_KEY_SEPARATORS = re.compile(r"[^a-z0-9]+")


def cart_line_id(title: str) -> str:
    """Natural key of a cart line: lowercase title, non ``[a-z0-9]`` runs -> ``-``.

    Two products with the same normalised title share one line.
    """
    return _KEY_SEPARATORS.sub("-", (title or "").lower())


class Store:
    def __init__(self, storage: KeyValueStorage, currencies: Optional[List[Currency]] = None) -> None:
        self._storage = storage
        self._currencies = list(currencies if currencies is not None else CURRENCIES)
        self._ready: Optional["ReadyStore"] = None

    def hydrate(self) -> "ReadyStore":
        if self._ready is not None:
            return self._ready

        cart: List[CartLine] = []
        saved_cart = self._storage.get(CART_KEY)
        if saved_cart:
            try:
                cart = _cart_adapter.validate_json(saved_cart)
            except (ValidationError, ValueError) as exc:
                logger.error("Cart load error: %s", exc)
                cart = []
            if len({line.id for line in cart}) != len(cart):
                logger.error("Cart load error: snapshot repeats a line id")
                cart = []

        currency = self._currencies[0] if self._currencies else BASE_CURRENCY
        saved_code = self._storage.get(CURRENCY_KEY)
        if saved_code:
            found = find_currency(saved_code, self._currencies)
            if found is not None:
                currency = found
            else:
                logger.info("Ignoring unknown persisted currency %r", saved_code)

        history = HistoryTracker(self._storage).hydrate()
        self._ready = ReadyStore(self._storage, self._currencies, cart, currency, history)
        return self._ready


class ReadyStore:
    def __init__(
        self,
        storage: KeyValueStorage,
        currencies: List[Currency],
        cart: List[CartLine],
        currency: Currency,
        history: HistoryTracker,
    ) -> None:
        self._storage = storage
        self._currencies = currencies
        self._cart = cart
        self._currency = currency
        self.history = history
        self.cart_open = False

    # --- Queries ---

    @property
    def cart(self) -> Tuple[CartLine, ...]:
        # copies; lines only change through the store's operations
        return tuple(line.model_copy() for line in self._cart)

    @property
    def currency(self) -> Currency:
        return self._currency

    @property
    def currencies(self) -> Tuple[Currency, ...]:
        return tuple(self._currencies)

    def _find(self, line_id: str) -> Optional[CartLine]:
        return next((line for line in self._cart if line.id == line_id), None)

    def item_count(self) -> int:
        return sum(line.quantity for line in self._cart)

    def subtotal(self) -> float:
        """Cart total in the base currency."""
        return sum(line.unit_price * line.quantity for line in self._cart)

    def line_total(self, line_id: str) -> float:
        line = self._find(line_id)
        return line.unit_price * line.quantity if line is not None else 0.0

    def convert_price(self, price_input: PriceInput) -> str:
        return convert_price(price_input, self._currency)

    # --- Mutations ---

    def _persist(self) -> None:
        self._storage.set(CART_KEY, _cart_adapter.dump_json(self._cart, by_alias=True).decode("utf-8"))
        self._storage.set(CURRENCY_KEY, self._currency.code)

    def add_to_cart(self, product: ProductSummary) -> None:
        line_id = cart_line_id(product.title)
        existing = self._find(line_id)
        if existing is not None:
            existing.quantity += 1
        else:
            price = parse_price(product.price)
            self._cart.append(
                CartLine(
                    id=line_id,
                    title=product.title,
                    unit_price=price if price is not None else 0.0,
                    image=product.image,
                    quantity=1,
                )
            )
        self.cart_open = True
        self._persist()

    def remove_from_cart(self, line_id: str) -> None:
        self._cart = [line for line in self._cart if line.id != line_id]
        self._persist()

    def update_quantity(self, line_id: str, delta: int) -> None:
        line = self._find(line_id)
        if line is None:
            return
        try:
            new_quantity = line.quantity + int(delta)
        except (TypeError, ValueError):
            logger.debug("Ignoring non-integer quantity delta %r for %s", delta, line_id)
            return
        if new_quantity > 0:
            line.quantity = new_quantity
            self._persist()
        else:
            self.remove_from_cart(line_id)

    def clear_cart(self) -> None:
        self._cart = []
        self._persist()

    def set_currency(self, code: str) -> None:
        found = find_currency(code, self._currencies)
        if found is None:
            logger.debug("Unknown currency code %r; keeping %s", code, self._currency.code)
            return
        self._currency = found
        self._persist()

    def set_cart_open(self, is_open: bool) -> None:
        self.cart_open = bool(is_open)
