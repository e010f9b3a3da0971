"""Application-level DTOs for position reconciliation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from position_checker.domain.models import PositionSnapshot
from position_checker.domain.results import ReconciliationReport


@dataclass(slots=True, frozen=True)
class ReconciliationResponse:
    report: ReconciliationReport
    original_positions: Sequence[PositionSnapshot]
    corrected_positions: Sequence[PositionSnapshot]
