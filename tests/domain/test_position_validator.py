import math

import pytest

from position_checker.domain.models import PositionSnapshot, Side
from position_checker.domain.results import ValidationOutcome
from position_checker.domain.services import (
    PositionValidator,
    assess_banner,
    get_position_warnings,
    is_position_risky,
    validate_position,
)


def make_position(**overrides) -> PositionSnapshot:
    fields = dict(
        symbol="EUR/USD",
        side=Side.BUY,
        volume=1.5,
        open_price=1.08456,
        current_price=1.08582,
        margin=100.0,
        reported_unrealized_pl=189.0,
        reported_pips=12.6,
        reported_unrealized_pl_percent=189.0,
    )
    fields.update(overrides)
    return PositionSnapshot(**fields)


def test_consistent_position_is_valid():
    outcome = validate_position(make_position())

    assert outcome.is_valid
    assert outcome.errors == ()
    assert outcome.warnings == ()
    assert outcome.calculated.unrealized_pl == pytest.approx(189.0)
    assert outcome.calculated.pip_value_usd == pytest.approx(15.0)
    assert outcome.calculated.margin == 100.0


def test_zeroed_server_values_are_errors():
    outcome = validate_position(make_position(reported_unrealized_pl=0.0, reported_unrealized_pl_percent=0.0))

    assert not outcome.is_valid
    assert len(outcome.errors) == 2
    assert outcome.errors[0].startswith("P&L calculation error: API shows $0.0, should be $189.00")
    assert outcome.errors[1].startswith("P&L% calculation error")


def test_pips_only_mismatch_invalidates():
    outcome = validate_position(make_position(reported_pips=40.0))

    assert not outcome.is_valid
    assert outcome.errors == ("Pips calculation error: API shows 40.0, should be 12.60 (diff: 27.40)",)


def test_absent_pips_and_percent_are_not_checked():
    outcome = validate_position(make_position(reported_pips=None, reported_unrealized_pl_percent=None))

    assert outcome.is_valid


def test_small_differences_stay_within_tolerance():
    # P&L band is max(0.05, 189 * 0.02) = 3.78, pips band is 1.
    outcome = validate_position(make_position(reported_unrealized_pl=186.0, reported_pips=13.4))

    assert outcome.is_valid


def test_percent_not_checked_without_margin():
    outcome = validate_position(make_position(margin=0.0, reported_unrealized_pl_percent=55.0))

    assert outcome.is_valid
    assert outcome.calculated.unrealized_pl_percent is None


def test_sanity_warnings():
    position = make_position(
        reported_unrealized_pl=-2_000_000.0,
        margin=2_000_000.0,
        reported_pips=250_000.0,
    )

    warnings = get_position_warnings(position)

    assert len(warnings) == 3
    assert warnings[0] == "Unrealistic P&L: $-2,000,000.0 - Check position size and calculations"
    assert warnings[1].startswith("Unrealistic margin: $2,000,000.0")
    assert warnings[2] == "Unrealistic pips: 250,000.0 - Check pip calculation for EUR/USD"


def test_warnings_do_not_affect_validity():
    validator = PositionValidator()
    position = make_position(margin=2_000_000.0, reported_unrealized_pl_percent=None)

    outcome = validator.validate(position)

    assert outcome.is_valid
    assert len(outcome.warnings) == 1


def test_validation_is_deterministic():
    position = make_position(reported_unrealized_pl=0.0)

    assert validate_position(position) == validate_position(position)


def test_zero_current_price_does_not_raise():
    position = make_position(symbol="USD/JPY", open_price=150.0, current_price=0.0)

    outcome = validate_position(position)

    assert outcome.calculated.unrealized_pl == -math.inf


def test_outcome_rejects_inconsistent_validity():
    calculated = validate_position(make_position()).calculated

    with pytest.raises(ValueError):
        ValidationOutcome(is_valid=True, errors=("boom",), warnings=(), calculated=calculated)


@pytest.mark.parametrize("percent, expected", [(-91.0, True), (-89.0, False)])
def test_risk_flag_percent_boundary(percent: float, expected: bool):
    position = make_position(reported_unrealized_pl=-89.0, reported_unrealized_pl_percent=percent)

    assert is_position_risky(position) is expected


def test_risk_flag_uses_reported_values():
    assert is_position_risky(make_position(reported_unrealized_pl=1_500_000.0))
    assert is_position_risky(make_position(reported_pips=-150_000.0))
    assert is_position_risky(make_position(margin=1_000_001.0))
    assert not is_position_risky(make_position(reported_pips=None, margin=None))


def test_banner_requires_both_pl_and_percent_mismatch():
    banner = assess_banner(make_position(reported_pips=40.0))

    assert banner.pips_mismatch
    assert not banner.has_errors
    assert not banner.visible
    assert not banner.outcome.is_valid


def test_banner_reports_conjunctive_error():
    banner = assess_banner(make_position(reported_unrealized_pl=0.0, reported_unrealized_pl_percent=0.0))

    assert banner.pl_mismatch
    assert banner.percent_mismatch
    assert banner.has_errors
    assert banner.severity == "error"


def test_banner_uses_its_own_pl_band():
    # 4.5 off: above the validator band (3.78) but inside the banner band (5.67).
    position = make_position(reported_unrealized_pl=184.5)

    banner = assess_banner(position)

    assert not banner.outcome.is_valid
    assert not banner.pl_mismatch


def test_banner_shows_warning_for_risky_position():
    banner = assess_banner(make_position(reported_unrealized_pl_percent=-95.0, reported_unrealized_pl=-95.0))

    assert banner.risky
    assert banner.severity in {"error", "warning"}
    assert banner.visible
