"""Reusable metric card components for the dashboard."""

import streamlit as st

from src.deploy.resolution import PendingField
from src.deploy.validation import ValidationResult


def kpi_row(metrics: list[tuple[str, str, str | None]]) -> None:
    """Display a row of KPI cards.

    Args:
        metrics: List of (label, value, delta) tuples.
    """
    cols = st.columns(len(metrics))
    for col, (label, value, delta) in zip(cols, metrics):
        with col:
            st.metric(label=label, value=value, delta=delta)


def validation_kpis(
    result: ValidationResult,
    pending: list[PendingField],
    n_assets: int,
) -> list[tuple[str, str, str | None]]:
    """KPI tuples summarising one environment's readiness."""
    return [
        ("Status", "Deployable" if result.ok else "Blocked", None),
        ("Errors", str(len(result.errors)), None),
        ("Warnings", str(len(result.warnings)), None),
        ("Open Placeholders", str(len(pending)), None),
        ("Initial Assets", str(n_assets), None),
    ]
