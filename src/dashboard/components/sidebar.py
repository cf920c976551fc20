"""Sidebar controls."""

from dataclasses import dataclass

import streamlit as st

from src.deploy.errors import UnknownEnvironmentError
from src.deploy.registry import available_environments, resolve_environment


@dataclass
class SidebarParams:
    """User-selected review options from the sidebar."""

    environment: str
    compare_with: str | None
    show_warnings: bool


def render_sidebar(default_environment: str | None = None) -> SidebarParams:
    """Render sidebar controls and return the selected options.

    Parameters
    ----------
    default_environment : str | None
        Preselected environment; falls back to ``DEPLOY_NETWORK``.
    """
    environments = list(available_environments())
    st.sidebar.header("Environment")
    try:
        default = resolve_environment(default_environment)
    except UnknownEnvironmentError as exc:
        default = environments[0]
        st.sidebar.warning(f"{exc}; showing {default} instead.")

    environment = st.sidebar.selectbox(
        "Network",
        environments,
        index=environments.index(default),
    )

    st.sidebar.header("Review Options")
    others = [e for e in environments if e != environment]
    compare = st.sidebar.selectbox("Compare With", ["(none)"] + others)
    show_warnings = st.sidebar.checkbox("Show Warnings", value=True)
    st.sidebar.caption(
        "Warnings flag parameters that are allowed but unusual, such as an "
        "initial borrow rate outside the strategy's bounds."
    )

    return SidebarParams(
        environment=environment,
        compare_with=None if compare == "(none)" else compare,
        show_warnings=show_warnings,
    )
