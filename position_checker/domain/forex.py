"""Pip and P&L arithmetic for the supported contract conventions.

All functions work on plain floats and never round; callers round for
display. A zero ``current_price`` in the JPY formulas yields ``inf``/``nan``
instead of raising, so callers can decide how to present it.
"""
from __future__ import annotations

import math

from position_checker.config import SETTINGS

from .models import CalculatedMetrics, PositionSnapshot, Side, SymbolClass, classify_symbol


def _divide(numerator: float, denominator: float) -> float:
    if denominator != 0:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _price_diff(side: Side | str, open_price: float, current_price: float) -> float:
    if Side.parse(side) is Side.BUY:
        return current_price - open_price
    return open_price - current_price


def get_pip_size(symbol: str) -> float:
    """Pip size follows the symbol text, so ``JPY/USD`` still moves in 0.01 pips."""
    s = symbol.upper()
    if classify_symbol(symbol) is SymbolClass.CRYPTO:
        return 1.0
    if "JPY" in s:
        return 0.01
    return 0.0001


def compute_pips(symbol: str, side: Side | str, open_price: float, current_price: float) -> float:
    return _price_diff(side, open_price, current_price) / get_pip_size(symbol)


def compute_pip_value_usd(symbol: str, volume: float, current_price: float) -> float:
    """USD value of a one-pip move for ``volume`` lots (or crypto units)."""
    symbol_class = classify_symbol(symbol)
    pip_size = get_pip_size(symbol)
    if symbol_class is SymbolClass.CRYPTO:
        return pip_size * volume
    if symbol_class is SymbolClass.STANDARD_USD:
        return SETTINGS.usd_pip_value_per_lot * volume
    if symbol_class is SymbolClass.JPY_QUOTE:
        return _divide(pip_size * SETTINGS.lot_size * volume, current_price)
    return 0.0


def compute_unrealized_pl_usd(
    symbol: str,
    side: Side | str,
    open_price: float,
    current_price: float,
    volume: float,
) -> float:
    symbol_class = classify_symbol(symbol)
    price_diff = _price_diff(side, open_price, current_price)
    if symbol_class is SymbolClass.CRYPTO:
        return price_diff * volume
    if symbol_class is SymbolClass.STANDARD_USD:
        return price_diff * SETTINGS.lot_size * volume
    if symbol_class is SymbolClass.JPY_QUOTE:
        return _divide(price_diff * SETTINGS.lot_size * volume, current_price)
    return 0.0


def compute_pl_percent(pl_usd: float, margin: float | None) -> float | None:
    if margin is None or margin <= 0:
        return None
    return (pl_usd / margin) * 100


def compute_metrics(snapshot: PositionSnapshot) -> CalculatedMetrics:
    unrealized_pl = compute_unrealized_pl_usd(
        snapshot.symbol,
        snapshot.side,
        snapshot.open_price,
        snapshot.current_price,
        snapshot.volume,
    )
    return CalculatedMetrics(
        pips=compute_pips(snapshot.symbol, snapshot.side, snapshot.open_price, snapshot.current_price),
        unrealized_pl=unrealized_pl,
        pip_value_usd=compute_pip_value_usd(snapshot.symbol, snapshot.volume, snapshot.current_price),
        unrealized_pl_percent=compute_pl_percent(unrealized_pl, snapshot.margin),
        margin=snapshot.margin,
    )


def estimate_margin_requirement(
    symbol: str,
    volume: float,
    current_price: float,
    leverage: float | None = None,
) -> float:
    """Collateral needed to open ``volume`` at ``current_price`` with ``leverage``."""
    if leverage is None:
        leverage = SETTINGS.default_leverage
    if leverage <= 0:
        raise ValueError(f"Leverage must be positive, got {leverage}")
    if classify_symbol(symbol) is SymbolClass.CRYPTO:
        return (current_price * volume) / leverage
    return (current_price * volume * SETTINGS.lot_size) / leverage


def explain_calculation(
    symbol: str,
    side: Side | str,
    volume: float,
    open_price: float,
    current_price: float,
) -> str:
    side = Side.parse(side)
    pip_size = get_pip_size(symbol)
    price_diff = _price_diff(side, open_price, current_price)
    pips = compute_pips(symbol, side, open_price, current_price)
    unrealized_pl = compute_unrealized_pl_usd(symbol, side, open_price, current_price, volume)
    symbol_class = classify_symbol(symbol)

    lines = [
        f"=== CALCULATION BREAKDOWN FOR {symbol} ===",
        f"Direction: {side.value.upper()}",
        f"Volume: {volume}",
        f"Open Price: {open_price}",
        f"Current Price: {current_price}",
        f"Price Difference: {price_diff:.4f}",
        f"Pip Size: {pip_size}",
        f"Pips: {pips:.2f}",
        f"Unrealized P&L: ${unrealized_pl:.2f}",
        "",
    ]
    if symbol_class is SymbolClass.CRYPTO:
        lines += [
            "CRYPTO CALCULATION:",
            f"- 1 pip = ${pip_size} for {symbol}",
            "- P&L = Price Difference x Volume",
            f"- P&L = {price_diff:.4f} x {volume} = ${unrealized_pl:.2f}",
        ]
    elif symbol_class is SymbolClass.JPY_QUOTE:
        lines += [
            "JPY CALCULATION:",
            f"- 1 pip = {pip_size} for {symbol}",
            "- P&L = Price Difference x 100,000 x Volume / Current Price",
            f"- P&L = {price_diff:.4f} x 100,000 x {volume} / {current_price} = ${unrealized_pl:.2f}",
        ]
    elif symbol_class is SymbolClass.STANDARD_USD:
        lines += [
            "FOREX CALCULATION:",
            f"- 1 pip = {pip_size} for {symbol}",
            "- P&L = Price Difference x 100,000 x Volume",
            f"- P&L = {price_diff:.4f} x 100,000 x {volume} = ${unrealized_pl:.2f}",
        ]
    else:
        lines += [
            "UNSUPPORTED QUOTE CURRENCY:",
            f"- {symbol} is not quoted in USD or JPY; P&L is reported as $0.00",
        ]
    return "\n".join(lines)
