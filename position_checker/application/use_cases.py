"""Application services orchestrating the position reconciliation workflow."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Sequence

from position_checker.application.dto import ReconciliationResponse
from position_checker.domain.correction import fix_position_calculations
from position_checker.domain.models import PositionSnapshot
from position_checker.domain.repositories import PositionRepository
from position_checker.domain.results import (
    PositionReview,
    ReconciliationReport,
    ReconciliationSummary,
)
from position_checker.domain.services import BannerPolicy, PositionValidator

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconciliationContext:
    repository: PositionRepository
    validator: PositionValidator = field(default_factory=PositionValidator)


class ReconcilePositionsUseCase:
    def __init__(self, context: ReconciliationContext) -> None:
        self._context = context
        self._banner_policy = BannerPolicy(context.validator)

    def execute(self) -> ReconciliationResponse:
        positions = self._context.repository.list_positions()
        report = self.review(positions)
        logger.info(
            "Reconciled %d positions: %d invalid, %d corrected, %d risky",
            report.summary.total_positions,
            report.summary.invalid,
            report.summary.corrected,
            report.summary.risky,
        )
        return ReconciliationResponse(
            report=report,
            original_positions=tuple(positions),
            corrected_positions=tuple(report.corrected_positions()),
        )

    def review(self, positions: Sequence[PositionSnapshot]) -> ReconciliationReport:
        validator = self._context.validator
        reviews: list[PositionReview] = []
        for snapshot in positions:
            banner = self._banner_policy.assess(snapshot)
            reviews.append(
                PositionReview(
                    original=snapshot,
                    corrected=fix_position_calculations(snapshot, validator),
                    outcome=banner.outcome,
                    banner=banner,
                )
            )

        summary = ReconciliationSummary(
            total_positions=len(reviews),
            invalid=len([r for r in reviews if not r.outcome.is_valid]),
            corrected=len([r for r in reviews if r.was_corrected]),
            with_warnings=len([r for r in reviews if r.outcome.warnings]),
            risky=len([r for r in reviews if r.risky]),
            banners=len([r for r in reviews if r.banner.visible]),
            generated_at=datetime.now(timezone.utc),
        )
        return ReconciliationReport(summary=summary, reviews=tuple(reviews))
