"""Diff report generators for reconciled positions."""
from __future__ import annotations

import csv
import html
import io
import math
from typing import Sequence

from position_checker.domain.results import PositionReview, ReconciliationReport


def _fmt(value: float | None, digits: int = 2) -> str:
    if value is None:
        return ""
    if not math.isfinite(value):
        return str(value)
    return f"{value:.{digits}f}"


REPORT_COLUMNS = (
    "position_id",
    "symbol",
    "side",
    "volume",
    "reported_pips",
    "calculated_pips",
    "reported_pl",
    "calculated_pl",
    "reported_pl_percent",
    "calculated_pl_percent",
    "corrected",
    "risky",
    "banner",
    "errors",
    "warnings",
)


def reviews_to_rows(reviews: Sequence[PositionReview]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for review in reviews:
        snapshot = review.original
        calc = review.outcome.calculated
        rows.append(
            {
                "position_id": snapshot.position_id or "",
                "symbol": snapshot.symbol,
                "side": snapshot.side.value,
                "volume": str(snapshot.volume),
                "reported_pips": _fmt(snapshot.reported_pips),
                "calculated_pips": _fmt(calc.pips),
                "reported_pl": _fmt(snapshot.reported_unrealized_pl),
                "calculated_pl": _fmt(calc.unrealized_pl),
                "reported_pl_percent": _fmt(snapshot.reported_unrealized_pl_percent),
                "calculated_pl_percent": _fmt(calc.unrealized_pl_percent),
                "corrected": "yes" if review.was_corrected else "no",
                "risky": "yes" if review.risky else "no",
                "banner": review.banner.severity or "",
                "errors": " | ".join(review.outcome.errors),
                "warnings": " | ".join(review.outcome.warnings),
            }
        )
    return rows


def render_csv(reviews: Sequence[PositionReview]) -> bytes:
    """CSV of every review; an empty report still carries the header row."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=REPORT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(reviews_to_rows(reviews))
    return buffer.getvalue().encode("utf-8")


def render_html(report: ReconciliationReport) -> str:
    rows = reviews_to_rows(tuple(report.iter_flagged()))
    if not rows:
        return "<p>No position discrepancies detected.</p>"
    header = "".join(f"<th>{html.escape(col)}</th>" for col in REPORT_COLUMNS)
    body_parts = []
    for row in rows:
        body_parts.append("<tr>" + "".join(f"<td>{html.escape(value)}</td>" for value in row.values()) + "</tr>")
    body_html = "".join(body_parts)
    return f"<table><thead><tr>{header}</tr></thead><tbody>{body_html}</tbody></table>"
