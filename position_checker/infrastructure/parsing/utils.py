"""Shared parsing utilities for position ingestion."""
from __future__ import annotations

import math
import numbers
from decimal import Decimal
from io import BytesIO
from pathlib import Path
from typing import Any, Mapping


class PayloadError(ValueError):
    """Raised when an upstream position record cannot be decoded."""


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def _parse_number_string(value: str) -> float:
    s = value.strip()
    if not s:
        return 0.0
    try:
        return float(s)
    except ValueError:
        return math.nan


def coerce_decimal(value: Any) -> float:
    """Normalize a wire numeric to a float.

    Accepts plain numbers, numeric strings, ``Decimal`` and single-key
    wrappers such as ``{"$numberDecimal": "12.34"}``. ``None`` becomes 0.0
    and unparseable strings become ``nan``.
    """
    if value is None:
        return 0.0
    if isinstance(value, (numbers.Real, Decimal)):
        return float(value)
    if isinstance(value, str):
        return _parse_number_string(value)
    if isinstance(value, Mapping):
        if len(value) == 1:
            (inner,) = value.values()
            if isinstance(inner, str):
                return _parse_number_string(inner)
        raise TypeError(f"Unsupported decimal wrapper: {value!r}")
    raise TypeError(f"Unsupported numeric type: {type(value)!r}")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()
