# storefront/pricing.py
"""
Currency catalogue and price conversion.

All catalogue prices are in the base currency (GBP). Conversion is
always base -> active currency and produces a display string such as
``"$12.70"`` or ``"¥1,695"``.
"""

import logging
import math
import re
from typing import List, Optional, Union

from .models import Currency

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

CURRENCIES: List[Currency] = [
    Currency(code="GBP", symbol="£", name="British Pound", rate=1.0),
    Currency(code="INR", symbol="₹", name="Indian Rupee", rate=105.50),
    Currency(code="USD", symbol="$", name="US Dollar", rate=1.27),
    Currency(code="EUR", symbol="€", name="Euro", rate=1.17),
    Currency(code="JPY", symbol="¥", name="Japanese Yen", rate=188.45, fraction_digits=0),
    Currency(code="KWD", symbol="KD", name="Kuwaiti Dinar", rate=0.39),
    Currency(code="CNY", symbol="¥", name="Chinese Yuan", rate=9.15),
    Currency(code="AED", symbol="dh", name="UAE Dirham", rate=4.66),
    Currency(code="AUD", symbol="A$", name="Australian Dollar", rate=1.92),
    Currency(code="CAD", symbol="C$", name="Canadian Dollar", rate=1.71),
]
BASE_CURRENCY = CURRENCIES[0]

PriceInput = Union[str, int, float, None]

_NON_NUMERIC = re.compile(r"[^0-9.\-]+")
# Longest leading decimal literal, e.g. "12.5" in "12.5.3" or "-4" in "-4-2".
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def find_currency(code: Optional[str], currencies: Optional[List[Currency]] = None) -> Optional[Currency]:
    for currency in currencies if currencies is not None else CURRENCIES:
        if currency.code == code:
            return currency
    return None


def parse_price(value: PriceInput) -> Optional[float]:
    """Read a base-currency amount from a number or a decorated string.

    Strings are stripped of everything but digits, ``.`` and ``-`` before
    the leading number is read, so ``"£1,299.00"`` gives ``1299.0``.
    Returns ``None`` when no finite amount can be read.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            amount = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        m = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", value))
        if not m:
            return None
        amount = float(m.group())
    else:
        return None
    return amount if math.isfinite(amount) else None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_amount(amount: float, currency: Currency) -> str:
    if currency.fraction_digits == 0:
        return f"{currency.symbol}{_round_half_up(amount):,}"
    return f"{currency.symbol}{amount:,.{currency.fraction_digits}f}"


def convert_price(price_input: PriceInput, currency: Currency = BASE_CURRENCY) -> str:
    base = parse_price(price_input)
    if base is None:
        logger.debug("Unparsable price %r", price_input)
        return NOT_AVAILABLE
    converted = base * currency.rate_from_base
    if not math.isfinite(converted):
        logger.debug("Price %r overflows in %s", price_input, currency.code)
        return NOT_AVAILABLE
    return format_amount(converted, currency)
