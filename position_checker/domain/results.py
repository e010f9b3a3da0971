"""Domain-level results for position reconciliation."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Sequence

from .models import CalculatedMetrics, PositionSnapshot


@dataclass(frozen=True)
class ValidationOutcome:
    is_valid: bool
    errors: tuple[str, ...]
    warnings: tuple[str, ...]
    calculated: CalculatedMetrics

    def __post_init__(self) -> None:
        if self.is_valid != (len(self.errors) == 0):
            raise ValueError("is_valid must be True exactly when there are no errors")


@dataclass(frozen=True)
class BannerAssessment:
    """What the per-position banner shows, using its own tolerance bands."""

    outcome: ValidationOutcome
    risky: bool
    pips_mismatch: bool
    pl_mismatch: bool
    percent_mismatch: bool

    @property
    def has_errors(self) -> bool:
        return self.pl_mismatch and self.percent_mismatch

    @property
    def has_warnings(self) -> bool:
        return bool(self.outcome.warnings) or self.risky

    @property
    def visible(self) -> bool:
        return self.has_errors or self.has_warnings

    @property
    def severity(self) -> str | None:
        if self.has_errors:
            return "error"
        if self.has_warnings:
            return "warning"
        return None


@dataclass(frozen=True)
class PositionReview:
    original: PositionSnapshot
    corrected: PositionSnapshot
    outcome: ValidationOutcome
    banner: BannerAssessment

    @property
    def was_corrected(self) -> bool:
        return self.corrected is not self.original

    @property
    def risky(self) -> bool:
        return self.banner.risky


@dataclass(frozen=True)
class ReconciliationSummary:
    total_positions: int
    invalid: int
    corrected: int
    with_warnings: int
    risky: int
    banners: int
    generated_at: datetime


@dataclass(frozen=True)
class ReconciliationReport:
    summary: ReconciliationSummary
    reviews: Sequence[PositionReview] = field(default_factory=tuple)

    def has_issues(self) -> bool:
        return any(
            [
                self.summary.invalid,
                self.summary.with_warnings,
                self.summary.risky,
            ]
        )

    def iter_flagged(self) -> Iterable[PositionReview]:
        for review in self.reviews:
            if not review.outcome.is_valid or review.outcome.warnings or review.risky:
                yield review

    def corrected_positions(self) -> list[PositionSnapshot]:
        return [review.corrected for review in self.reviews]
