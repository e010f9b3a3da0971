"""Command-line entrypoint for position reconciliation."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from position_checker.application.use_cases import ReconcilePositionsUseCase, ReconciliationContext
from position_checker.config import SETTINGS
from position_checker.infrastructure.parsing.utils import PayloadError
from position_checker.infrastructure.repositories.file_repositories import repository_for
from position_checker.presentation.diff_report import render_csv

logger = logging.getLogger(__name__)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check reported position P&L and pips against recomputed values")
    parser.add_argument("positions", type=str, help="Path to a positions file (.json, .csv, .xlsx)")
    parser.add_argument("--show-valid", action="store_true", help="Also list positions without findings")
    parser.add_argument("--csv-out", type=str, help="Write the per-position diff report to this CSV file")
    parser.add_argument("--log-level", type=str, default=SETTINGS.log_level, help="Logging level (default: %(default)s)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    path = Path(args.positions)
    try:
        repository = repository_for(path.name, path)
        use_case = ReconcilePositionsUseCase(ReconciliationContext(repository=repository))
        response = use_case.execute()
    except (OSError, PayloadError) as exc:
        logger.error("Cannot reconcile %s: %s", path, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    report = response.report
    summary = report.summary
    print("Reconciliation Summary")
    print("======================")
    print(f"Positions: {summary.total_positions}")
    print(f"Invalid: {summary.invalid}")
    print(f"Corrected: {summary.corrected}")
    print(f"With warnings: {summary.with_warnings}")
    print(f"Risky: {summary.risky}")

    reviews = report.reviews if args.show_valid else tuple(report.iter_flagged())
    if reviews:
        print("\nPositions:")
        for review in reviews:
            snapshot = review.original
            label = snapshot.position_id or snapshot.symbol
            status = "corrected" if review.was_corrected else "ok"
            print(f"- {label} {snapshot.symbol} {snapshot.side.value}: {status}")
            for error in review.outcome.errors:
                print(f"    error: {error}")
            for warning in review.outcome.warnings:
                print(f"    warning: {warning}")
            if review.risky:
                print("    risk: position shows high risk indicators")
    elif not report.has_issues():
        print("\nNo discrepancies detected.")

    if args.csv_out:
        Path(args.csv_out).write_bytes(render_csv(report.reviews))

    return 1 if summary.corrected else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
