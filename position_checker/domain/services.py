"""Domain services checking reported position metrics against recomputed ones."""
from __future__ import annotations

from position_checker.config import SETTINGS, SanityLimits, TolerancePolicy

from .forex import compute_metrics
from .models import PositionSnapshot
from .results import BannerAssessment, ValidationOutcome


def _band(value: float, floor: float, relative: float) -> float:
    return max(floor, abs(value) * relative)


class PositionValidator:
    """Compares upstream pips, P&L and P&L% with locally computed values."""

    def __init__(
        self,
        tolerance: TolerancePolicy | None = None,
        limits: SanityLimits | None = None,
    ) -> None:
        self._tolerance = tolerance or SETTINGS.validator_tolerance
        self._limits = limits or SETTINGS.sanity_limits

    def validate(self, snapshot: PositionSnapshot) -> ValidationOutcome:
        calc = compute_metrics(snapshot)
        tol = self._tolerance
        errors: list[str] = []
        warnings: list[str] = []

        if snapshot.reported_pips is not None:
            diff = abs(calc.pips - snapshot.reported_pips)
            if diff > _band(calc.pips, tol.pips_abs, tol.pips_rel):
                errors.append(
                    f"Pips calculation error: API shows {snapshot.reported_pips}, "
                    f"should be {calc.pips:.2f} (diff: {diff:.2f})"
                )

        diff = abs(calc.unrealized_pl - snapshot.reported_unrealized_pl)
        if diff > _band(calc.unrealized_pl, tol.pl_abs, tol.pl_rel):
            errors.append(
                f"P&L calculation error: API shows ${snapshot.reported_unrealized_pl}, "
                f"should be ${calc.unrealized_pl:.2f} (diff: ${diff:.2f})"
            )

        reported_percent = snapshot.reported_unrealized_pl_percent
        if calc.unrealized_pl_percent is not None and reported_percent is not None:
            diff = abs(calc.unrealized_pl_percent - reported_percent)
            if diff > _band(calc.unrealized_pl_percent, tol.percent_abs, tol.percent_rel):
                errors.append(
                    f"P&L% calculation error: API shows {reported_percent}%, "
                    f"should be {calc.unrealized_pl_percent:.2f}% (diff: {diff:.2f}%)"
                )

        warnings.extend(self.sanity_warnings(snapshot))

        return ValidationOutcome(
            is_valid=not errors,
            errors=tuple(errors),
            warnings=tuple(warnings),
            calculated=calc,
        )

    def sanity_warnings(self, snapshot: PositionSnapshot) -> list[str]:
        limits = self._limits
        warnings: list[str] = []
        if abs(snapshot.reported_unrealized_pl) > limits.max_abs_pl:
            warnings.append(
                f"Unrealistic P&L: ${snapshot.reported_unrealized_pl:,} - Check position size and calculations"
            )
        if snapshot.margin is not None and snapshot.margin > limits.max_margin:
            warnings.append(f"Unrealistic margin: ${snapshot.margin:,} - Check leverage and position size")
        if snapshot.reported_pips is not None and abs(snapshot.reported_pips) > limits.max_abs_pips:
            warnings.append(
                f"Unrealistic pips: {snapshot.reported_pips:,} - Check pip calculation for {snapshot.symbol}"
            )
        return warnings

    def is_risky(self, snapshot: PositionSnapshot) -> bool:
        """Coarse risk gate on the reported values; nothing is recomputed."""
        limits = self._limits
        if abs(snapshot.reported_unrealized_pl) > limits.max_abs_pl:
            return True
        if abs(snapshot.reported_pips or 0) > limits.max_abs_pips:
            return True
        if (snapshot.margin or 0) > limits.max_margin:
            return True
        return (snapshot.reported_unrealized_pl_percent or 0) < limits.min_pl_percent


class BannerPolicy:
    """Decides whether a position banner is shown and at which severity.

    The banner applies its own bands (see ``SETTINGS.banner_tolerance``) and
    only reports a calculation error when P&L and P&L% disagree together.
    """

    def __init__(
        self,
        validator: PositionValidator | None = None,
        tolerance: TolerancePolicy | None = None,
    ) -> None:
        self._validator = validator or PositionValidator()
        self._tolerance = tolerance or SETTINGS.banner_tolerance

    def assess(self, snapshot: PositionSnapshot) -> BannerAssessment:
        outcome = self._validator.validate(snapshot)
        calc = outcome.calculated
        tol = self._tolerance

        calc_percent = calc.unrealized_pl_percent or 0.0
        reported_percent = snapshot.reported_unrealized_pl_percent or 0.0
        reported_pips = snapshot.reported_pips

        pips_mismatch = reported_pips is not None and abs(calc.pips - reported_pips) > _band(
            calc.pips, tol.pips_abs, tol.pips_rel
        )
        pl_mismatch = abs(calc.unrealized_pl - snapshot.reported_unrealized_pl) > _band(
            calc.unrealized_pl, tol.pl_abs, tol.pl_rel
        )
        percent_mismatch = abs(calc_percent - reported_percent) > _band(
            calc_percent, tol.percent_abs, tol.percent_rel
        )
        return BannerAssessment(
            outcome=outcome,
            risky=self._validator.is_risky(snapshot),
            pips_mismatch=pips_mismatch,
            pl_mismatch=pl_mismatch,
            percent_mismatch=percent_mismatch,
        )


_DEFAULT_VALIDATOR = PositionValidator()


def validate_position(snapshot: PositionSnapshot) -> ValidationOutcome:
    return _DEFAULT_VALIDATOR.validate(snapshot)


def is_position_risky(snapshot: PositionSnapshot) -> bool:
    return _DEFAULT_VALIDATOR.is_risky(snapshot)


def get_position_warnings(snapshot: PositionSnapshot) -> list[str]:
    return list(_DEFAULT_VALIDATOR.validate(snapshot).warnings)


def assess_banner(snapshot: PositionSnapshot) -> BannerAssessment:
    return BannerPolicy(_DEFAULT_VALIDATOR).assess(snapshot)
