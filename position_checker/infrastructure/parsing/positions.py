"""Decoders turning upstream position payloads into ``PositionSnapshot`` values."""
from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd

from position_checker.domain.models import PositionSnapshot, Side
from position_checker.infrastructure.parsing.utils import (
    PayloadError,
    coerce_decimal,
    is_blank,
)

# Upstream camelCase names, with the snake_case spellings accepted in files.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "symbol": ("symbol",),
    "direction": ("direction", "side"),
    "volume": ("volume",),
    "openPrice": ("openPrice", "open_price"),
    "currentPrice": ("currentPrice", "current_price"),
    "unrealizedPL": ("unrealizedPL", "unrealized_pl"),
    "margin": ("margin",),
    "pips": ("pips",),
    "unrealizedPLPercent": ("unrealizedPLPercent", "unrealized_pl_percent"),
    "status": ("status",),
}


def _lookup(payload: Mapping[str, Any], field: str) -> Any:
    for key in FIELD_ALIASES[field]:
        if key in payload and not is_blank(payload[key]):
            return payload[key]
    return None


def _position_id(payload: Mapping[str, Any]) -> str | None:
    for key in ("id", "_id", "positionId", "position_id"):
        value = payload.get(key)
        if not is_blank(value):
            return str(value)
    return None


def _account_id(payload: Mapping[str, Any]) -> str | None:
    account = payload.get("account")
    if isinstance(account, Mapping) and account.get("id"):
        return str(account["id"])
    account = payload.get("accountId", payload.get("account_id"))
    if isinstance(account, Mapping):
        return str(account["_id"]) if account.get("_id") else None
    if not is_blank(account):
        return str(account)
    return None


def snapshot_from_payload(payload: Mapping[str, Any]) -> PositionSnapshot:
    symbol = _lookup(payload, "symbol")
    if symbol is None:
        raise PayloadError(f"Position payload has no symbol: {dict(payload)!r}")

    try:
        open_price = coerce_decimal(_lookup(payload, "openPrice"))
        current_price = coerce_decimal(_lookup(payload, "currentPrice"))
        volume = coerce_decimal(_lookup(payload, "volume"))
        margin = coerce_decimal(_lookup(payload, "margin"))
        unrealized_pl = coerce_decimal(_lookup(payload, "unrealizedPL"))
        pips = coerce_decimal(_lookup(payload, "pips"))
        percent = coerce_decimal(_lookup(payload, "unrealizedPLPercent"))
    except TypeError as exc:
        raise PayloadError(f"Cannot decode position {symbol}: {exc}") from exc

    if not (math.isfinite(open_price) and math.isfinite(current_price)):
        raise PayloadError(
            f"Position {symbol} has non-finite prices: open={open_price}, current={current_price}"
        )

    status = _lookup(payload, "status")
    return PositionSnapshot(
        symbol=str(symbol).strip(),
        side=Side.parse(_lookup(payload, "direction") or ""),
        volume=volume,
        open_price=open_price,
        current_price=current_price,
        margin=margin,
        reported_unrealized_pl=unrealized_pl,
        reported_pips=pips,
        reported_unrealized_pl_percent=percent,
        position_id=_position_id(payload),
        account_id=_account_id(payload),
        status=str(status) if status is not None else None,
    )


def snapshots_from_payloads(payloads: Iterable[Mapping[str, Any]]) -> list[PositionSnapshot]:
    return [snapshot_from_payload(payload) for payload in payloads]


def unwrap_positions_response(document: Any) -> Sequence[Mapping[str, Any]]:
    """Pull the position list out of an API envelope or a bare list."""
    if isinstance(document, list):
        return document
    if isinstance(document, Mapping):
        data = document.get("data")
        if isinstance(data, Mapping) and isinstance(data.get("positions"), list):
            return data["positions"]
        if isinstance(document.get("positions"), list):
            return document["positions"]
    raise PayloadError("Document does not contain a positions list")


def snapshots_from_dataframe(df: pd.DataFrame) -> list[PositionSnapshot]:
    work = df.copy()
    work.columns = [str(column).strip() for column in work.columns]
    work = work.dropna(how="all")
    records = work.astype(object).where(work.notna(), None).to_dict(orient="records")
    return snapshots_from_payloads(records)
