"""Domain models for the position reconciliation pipeline.

These dataclasses capture the normalized shape of an open position as it
arrives from upstream, and the metrics recomputed for it locally.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from position_checker.config import SETTINGS


class Side(str, Enum):
    BUY = "buy"
    SELL = "sell"

    @classmethod
    def parse(cls, value: "str | Side") -> "Side":
        """Anything other than a case-insensitive ``buy`` is treated as a sell."""
        if isinstance(value, Side):
            return value
        return cls.BUY if str(value).strip().lower() == "buy" else cls.SELL


class SymbolClass(str, Enum):
    """Contract convention a symbol is priced under.

    ``OTHER`` covers crosses quoted in neither USD nor JPY (e.g. ``EUR/GBP``).
    Pip value and P&L for these are reported as 0 rather than converted.
    A USD quote wins over a JPY base, so ``JPY/USD`` is ``STANDARD_USD``.
    """

    CRYPTO = "crypto"
    JPY_QUOTE = "jpy_quote"
    STANDARD_USD = "standard_usd"
    OTHER = "other"


def classify_symbol(symbol: str) -> SymbolClass:
    s = symbol.upper()
    if any(code in s for code in SETTINGS.crypto_codes):
        return SymbolClass.CRYPTO
    if s.endswith("/USD"):
        return SymbolClass.STANDARD_USD
    if "JPY" in s:
        return SymbolClass.JPY_QUOTE
    return SymbolClass.OTHER


@dataclass(frozen=True)
class PositionSnapshot:
    """State of one open position at a point in time, as reported upstream."""

    symbol: str
    side: Side
    volume: float
    open_price: float
    current_price: float
    margin: float | None
    reported_unrealized_pl: float
    reported_pips: float | None = None
    reported_unrealized_pl_percent: float | None = None
    position_id: str | None = None
    account_id: str | None = None
    status: str | None = None

    def with_metrics(
        self,
        *,
        pips: float | None,
        unrealized_pl: float,
        unrealized_pl_percent: float | None,
        margin: float | None,
    ) -> "PositionSnapshot":
        return replace(
            self,
            reported_pips=pips,
            reported_unrealized_pl=unrealized_pl,
            reported_unrealized_pl_percent=unrealized_pl_percent,
            margin=margin,
        )


@dataclass(frozen=True)
class CalculatedMetrics:
    """Metrics recomputed from prices and volume.

    ``margin`` echoes the reported margin; it is never recomputed here.
    """

    pips: float
    unrealized_pl: float
    pip_value_usd: float
    unrealized_pl_percent: float | None
    margin: float | None = None
