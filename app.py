"""Streamlit front-end for the position reconciliation pipeline."""
from __future__ import annotations

import logging
from io import BytesIO
from typing import Sequence

import pandas as pd
import streamlit as st

from position_checker import ReconcilePositionsUseCase, ReconciliationContext, repository_for
from position_checker.application.dto import ReconciliationResponse
from position_checker.config import SETTINGS
from position_checker.domain.forex import (
    compute_pip_value_usd,
    estimate_margin_requirement,
    explain_calculation,
    get_pip_size,
)
from position_checker.domain.models import PositionSnapshot
from position_checker.domain.results import PositionReview, ReconciliationReport
from position_checker.infrastructure.parsing.utils import PayloadError
from position_checker.presentation.diff_report import render_csv, render_html, reviews_to_rows

logging.basicConfig(
    level=getattr(logging, SETTINGS.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

st.set_page_config(page_title="Position Checker", layout="wide")
st.title("Position Reconciliation")


def snapshots_to_dataframe(snapshots: Sequence[PositionSnapshot]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "position_id": s.position_id,
                "account_id": s.account_id,
                "symbol": s.symbol,
                "side": s.side.value,
                "volume": s.volume,
                "open_price": s.open_price,
                "current_price": s.current_price,
                "margin": s.margin,
                "pips": s.reported_pips,
                "unrealized_pl": s.reported_unrealized_pl,
                "unrealized_pl_percent": s.reported_unrealized_pl_percent,
                "status": s.status,
            }
            for s in snapshots
        ]
    )


def run_reconciliation(name: str, data: bytes) -> ReconciliationResponse:
    repository = repository_for(name, BytesIO(data))
    use_case = ReconcilePositionsUseCase(ReconciliationContext(repository=repository))
    return use_case.execute()


def render_banner(review: PositionReview) -> None:
    banner = review.banner
    if not banner.visible:
        return
    snapshot = review.original
    title = f"{snapshot.symbol} ({snapshot.position_id or snapshot.side.value})"
    if banner.has_errors:
        st.error(f"{title}: this position has incorrect calculations from the server.")
    else:
        st.warning(f"{title}: this position shows unusual values that may indicate system issues.")
    with st.expander("Details"):
        for error in review.outcome.errors:
            st.markdown(f"- {error}")
        for warning in review.outcome.warnings:
            st.markdown(f"- {warning}")
        if banner.risky:
            st.markdown("- Position shows high risk indicators")
        calc = review.outcome.calculated
        col1, col2 = st.columns(2)
        with col1:
            st.caption("Corrected values")
            st.write(
                {
                    "P&L": round(calc.unrealized_pl, 2),
                    "Pips": round(calc.pips, 2),
                    "P&L%": round(calc.unrealized_pl_percent or 0.0, 2),
                }
            )
        with col2:
            st.caption("Server values")
            st.write(
                {
                    "P&L": round(snapshot.reported_unrealized_pl, 2),
                    "Pips": round(snapshot.reported_pips or 0.0, 2),
                    "P&L%": round(snapshot.reported_unrealized_pl_percent or 0.0, 2),
                }
            )


if "result" not in st.session_state:
    st.session_state["result"] = None

positions_file = st.file_uploader("Upload positions file", type=["json", "csv", "xlsx"])
run_btn = st.button("Run Reconciliation", disabled=positions_file is None)
if run_btn and positions_file is not None:
    with st.spinner("Reconciling..."):
        try:
            response = run_reconciliation(positions_file.name, positions_file.read())
        except PayloadError as exc:
            st.error(f"Cannot read positions: {exc}")
            response = None
    if response is not None:
        st.session_state["result"] = {
            "response": response,
            "diff_csv": render_csv(response.report.reviews),
            "diff_html": render_html(response.report),
        }

result = st.session_state.get("result")
tabs = st.tabs(["Flagged", "Corrected", "Reported", "Calculator"])

if result:
    response: ReconciliationResponse = result["response"]
    report: ReconciliationReport = response.report
    summary = report.summary

    cols = st.columns(5)
    cols[0].metric("Positions", summary.total_positions)
    cols[1].metric("Invalid", summary.invalid)
    cols[2].metric("Corrected", summary.corrected)
    cols[3].metric("With warnings", summary.with_warnings)
    cols[4].metric("Risky", summary.risky)

    with tabs[0]:
        flagged = tuple(report.iter_flagged())
        if not flagged:
            st.success("No position discrepancies detected.")
        for review in flagged:
            render_banner(review)
        st.dataframe(pd.DataFrame(reviews_to_rows(flagged)))
        st.download_button(
            "Download diff CSV",
            data=result["diff_csv"],
            file_name="position_diff.csv",
            mime="text/csv",
        )
        st.download_button(
            "Download diff HTML",
            data=result["diff_html"].encode("utf-8"),
            file_name="position_diff.html",
            mime="text/html",
        )
    with tabs[1]:
        st.dataframe(snapshots_to_dataframe(response.corrected_positions))
    with tabs[2]:
        st.dataframe(snapshots_to_dataframe(response.original_positions))
else:
    with tabs[0]:
        st.info("No results available. Upload a positions file and run reconciliation first.")

with tabs[3]:
    col1, col2, col3 = st.columns(3)
    with col1:
        calc_symbol = st.text_input("Symbol", value="EUR/USD")
        calc_side = st.selectbox("Direction", ["buy", "sell"])
    with col2:
        calc_volume = st.number_input("Volume", min_value=0.0, value=1.0, step=0.01)
        calc_leverage = st.number_input("Leverage", min_value=1.0, value=SETTINGS.default_leverage)
    with col3:
        calc_open = st.number_input("Open price", value=1.08456, format="%.5f")
        calc_current = st.number_input("Current price", value=1.08582, format="%.5f")

    st.metric("Pip size", get_pip_size(calc_symbol))
    st.metric("Pip value (USD)", round(compute_pip_value_usd(calc_symbol, calc_volume, calc_current), 2))
    st.metric(
        "Margin required (USD)",
        round(estimate_margin_requirement(calc_symbol, calc_volume, calc_current, calc_leverage), 2),
    )
    st.code(explain_calculation(calc_symbol, calc_side, calc_volume, calc_open, calc_current))
