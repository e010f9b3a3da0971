"""Central configuration for the position checker package."""
from __future__ import annotations

import os
from dataclasses import dataclass

CRYPTO_CODES = ("BTC", "ETH", "BNB", "SOL")


@dataclass(slots=True, frozen=True)
class TolerancePolicy:
    """Absolute floors and relative bands used when comparing metrics."""

    pips_abs: float
    pips_rel: float
    pl_abs: float
    pl_rel: float
    percent_abs: float
    percent_rel: float


@dataclass(slots=True, frozen=True)
class SanityLimits:
    max_abs_pl: float
    max_margin: float
    max_abs_pips: float
    min_pl_percent: float


@dataclass(slots=True, frozen=True)
class Settings:
    crypto_codes: tuple[str, ...]
    lot_size: float
    usd_pip_value_per_lot: float
    default_leverage: float
    validator_tolerance: TolerancePolicy
    banner_tolerance: TolerancePolicy
    sanity_limits: SanityLimits
    log_level: str


SETTINGS = Settings(
    crypto_codes=CRYPTO_CODES,
    lot_size=100_000.0,
    usd_pip_value_per_lot=10.0,
    default_leverage=100.0,
    validator_tolerance=TolerancePolicy(
        pips_abs=1.0,
        pips_rel=0.02,
        pl_abs=0.05,
        pl_rel=0.02,
        percent_abs=0.5,
        percent_rel=0.05,
    ),
    # The position banner applies its own, looser bands.
    banner_tolerance=TolerancePolicy(
        pips_abs=1.0,
        pips_rel=0.02,
        pl_abs=0.05,
        pl_rel=0.03,
        percent_abs=0.2,
        percent_rel=0.05,
    ),
    sanity_limits=SanityLimits(
        max_abs_pl=1_000_000.0,
        max_margin=1_000_000.0,
        max_abs_pips=100_000.0,
        min_pl_percent=-90.0,
    ),
    log_level=os.environ.get("POSITION_CHECKER_LOG_LEVEL", "INFO").upper(),
)
