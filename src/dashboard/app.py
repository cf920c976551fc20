"""Red Bank deployment config review — main Streamlit entry point."""

import os
from pathlib import Path

import streamlit as st

# Load .env file if present (for DEPLOY_NETWORK)
_env_path = Path(__file__).resolve().parents[2] / ".env"
if _env_path.exists():
    for line in _env_path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            key, _, value = line.partition("=")
            os.environ.setdefault(key.strip(), value.strip())

from src.dashboard.components.sidebar import render_sidebar
from src.dashboard.tabs.assets import render_assets
from src.dashboard.tabs.contracts import render_contracts
from src.dashboard.tabs.validation import render_validation
from src.deploy.registry import get_config


def main() -> None:
    st.set_page_config(
        page_title="Red Bank Deployment Review",
        page_icon="🏦",
        layout="wide",
    )

    st.title("Red Bank Deployment Review")
    st.caption("Council, staking, fee collectors, red bank and initial markets")

    params = render_sidebar()
    config = get_config(params.environment)

    tab1, tab2, tab3 = st.tabs(["Checks", "Contracts", "Assets"])

    with tab1:
        render_validation(config, params.show_warnings, params.compare_with)

    with tab2:
        render_contracts(config)

    with tab3:
        render_assets(config)


if __name__ == "__main__":
    main()
