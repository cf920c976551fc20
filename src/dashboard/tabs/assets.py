"""Assets page — initial markets and their risk parameters."""

import streamlit as st

from src.dashboard.components.charts import risk_params_chart, strategy_bounds_chart
from src.deploy.report import assets_frame
from src.deploy.schema import Config


def render_assets(config: Config) -> None:
    """Render the initial assets page."""
    st.header("Initial Assets")

    df = assets_frame(config)
    if df.empty:
        st.info(f"No initial assets are listed for {config.name}.")
        return

    col1, col2 = st.columns(2)

    with col1:
        st.plotly_chart(risk_params_chart(df), use_container_width=True)

    with col2:
        st.plotly_chart(strategy_bounds_chart(df), use_container_width=True)

    st.divider()
    st.subheader("Safety Margins")
    st.caption(
        "Gap between the max loan-to-value and the liquidation threshold. "
        "A freshly opened loan at max LTV must sit below the threshold."
    )
    margins = df[["asset", "max_loan_to_value", "liquidation_threshold", "safety_margin"]]
    st.table(
        margins.assign(
            **{
                col: margins[col].map(lambda v: f"{v*100:.1f}%")
                for col in ("max_loan_to_value", "liquidation_threshold", "safety_margin")
            }
        )
    )

    st.divider()
    st.subheader("Full Parameters")
    st.dataframe(df, use_container_width=True, hide_index=True)
