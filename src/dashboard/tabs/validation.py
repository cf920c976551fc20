"""Validation page — violations, open placeholders and environment drift."""

import pandas as pd
import streamlit as st

from src.dashboard.components.metrics_cards import kpi_row, validation_kpis
from src.deploy.errors import MalformedConfigError
from src.deploy.registry import get_config
from src.deploy.report import compare_environments
from src.deploy.resolution import unresolved_fields
from src.deploy.schema import Config
from src.deploy.validation import WARNING, validate


def render_validation(
    config: Config,
    show_warnings: bool = True,
    compare_with: str | None = None,
) -> None:
    """Render the validation page."""
    st.header("Pre-Deployment Checks")

    try:
        result = validate(config)
    except MalformedConfigError as exc:
        st.error(f"Malformed configuration at `{exc.field_path}`: {exc.reason}")
        return

    pending = unresolved_fields(config)
    kpi_row(validation_kpis(result, pending, len(config.initial_assets)))

    st.divider()
    st.subheader("Violations")
    df = result.to_frame()
    if not show_warnings:
        df = df[df["severity"] != WARNING]
    if df.empty:
        st.success("All invariants hold.")
    else:
        st.dataframe(df, use_container_width=True, hide_index=True)

    st.divider()
    st.subheader("Placeholders to Resolve")
    st.caption("Fields the deployment driver fills in, grouped by the stage that consumes them.")
    if pending:
        st.table(pd.DataFrame([{"stage": p.stage, "field_path": p.field_path} for p in pending]))
    else:
        st.success("No open placeholders.")

    if compare_with:
        st.divider()
        st.subheader(f"Differences: {config.name} vs {compare_with}")
        diff = compare_environments(config, get_config(compare_with))
        if diff.empty:
            st.info("The two environments are identical.")
        else:
            st.dataframe(diff.astype(str), use_container_width=True, hide_index=True)
