"""Substitutes recomputed metrics for upstream values that fail validation."""
from __future__ import annotations

import logging
from typing import Iterable

from .models import PositionSnapshot
from .services import PositionValidator

logger = logging.getLogger(__name__)

_DEFAULT_VALIDATOR = PositionValidator()


def fix_position_calculations(
    snapshot: PositionSnapshot,
    validator: PositionValidator | None = None,
) -> PositionSnapshot:
    """Return ``snapshot`` unchanged when valid, otherwise a corrected copy.

    Any validation error (a pips-only mismatch included) triggers the override.
    Margin is passed through as reported.
    """
    outcome = (validator or _DEFAULT_VALIDATOR).validate(snapshot)
    if outcome.is_valid:
        return snapshot

    calc = outcome.calculated
    logger.warning(
        "Fixing incorrect calculations for %s: %s",
        snapshot.symbol,
        "; ".join(outcome.errors),
    )
    return snapshot.with_metrics(
        pips=calc.pips,
        unrealized_pl=calc.unrealized_pl,
        unrealized_pl_percent=calc.unrealized_pl_percent,
        margin=snapshot.margin if snapshot.margin else calc.margin,
    )


def validate_and_fix_positions(
    snapshots: Iterable[PositionSnapshot],
    validator: PositionValidator | None = None,
) -> list[PositionSnapshot]:
    return [fix_position_calculations(snapshot, validator) for snapshot in snapshots]
