"""Reconciliation of reported position metrics against recomputed values."""
from position_checker.application.use_cases import ReconcilePositionsUseCase, ReconciliationContext
from position_checker.domain.correction import fix_position_calculations, validate_and_fix_positions
from position_checker.domain.models import PositionSnapshot, Side
from position_checker.domain.services import (
    PositionValidator,
    is_position_risky,
    validate_position,
)
from position_checker.infrastructure.repositories.file_repositories import (
    CsvPositionRepository,
    ExcelPositionRepository,
    JsonPositionRepository,
    repository_for,
)

__all__ = [
    "ReconcilePositionsUseCase",
    "ReconciliationContext",
    "PositionSnapshot",
    "Side",
    "PositionValidator",
    "validate_position",
    "is_position_risky",
    "fix_position_calculations",
    "validate_and_fix_positions",
    "CsvPositionRepository",
    "ExcelPositionRepository",
    "JsonPositionRepository",
    "repository_for",
]
