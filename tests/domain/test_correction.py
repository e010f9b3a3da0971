import logging

import pytest

from position_checker.domain.correction import fix_position_calculations, validate_and_fix_positions
from position_checker.domain.models import PositionSnapshot, Side


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
        position_id="pos-1",
    )
    fields.update(overrides)
    return PositionSnapshot(**fields)


def test_consistent_position_is_returned_unchanged():
    position = make_position()

    assert fix_position_calculations(position) is position


def test_zeroed_server_values_are_replaced():
    position = make_position(reported_unrealized_pl=0.0, reported_unrealized_pl_percent=0.0)

    fixed = fix_position_calculations(position)

    assert fixed.reported_unrealized_pl == pytest.approx(189.0)
    assert fixed.reported_unrealized_pl_percent == pytest.approx(189.0)
    assert fixed.reported_pips == pytest.approx(12.6)
    assert fixed.margin == 100.0
    assert fixed.position_id == "pos-1"
    assert position.reported_unrealized_pl == 0.0


def test_pips_only_mismatch_is_corrected():
    fixed = fix_position_calculations(make_position(reported_pips=400.0))

    assert fixed.reported_pips == pytest.approx(12.6)


def test_percent_cleared_when_margin_missing():
    position = make_position(margin=None, reported_unrealized_pl=0.0, reported_unrealized_pl_percent=12.0)

    fixed = fix_position_calculations(position)

    assert fixed.reported_unrealized_pl == pytest.approx(189.0)
    assert fixed.reported_unrealized_pl_percent is None
    assert fixed.margin is None


def test_override_is_logged(caplog: pytest.LogCaptureFixture):
    position = make_position(symbol="GBP/USD", reported_unrealized_pl=0.0)

    with caplog.at_level(logging.WARNING, logger="position_checker.domain.correction"):
        fix_position_calculations(position)

    assert "Fixing incorrect calculations for GBP/USD" in caplog.text
    assert "P&L calculation error" in caplog.text


def test_batch_preserves_order_and_length():
    good = make_position(position_id="a")
    bad = make_position(position_id="b", reported_unrealized_pl=0.0)
    other = make_position(
        position_id="c",
        symbol="EUR/GBP",
        reported_unrealized_pl=0.0,
        reported_pips=None,
        reported_unrealized_pl_percent=0.0,
    )

    fixed = validate_and_fix_positions([good, bad, other])

    assert [p.position_id for p in fixed] == ["a", "b", "c"]
    assert fixed[0] is good
    assert fixed[1].reported_unrealized_pl == pytest.approx(189.0)
    assert fixed[2] is other


def test_batch_accepts_empty_input():
    assert validate_and_fix_positions([]) == []
