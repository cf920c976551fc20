"""Contracts page — per-contract instantiate parameters."""

import streamlit as st

from src.dashboard.components.charts import fee_split_chart
from src.dashboard.components.metrics_cards import kpi_row
from src.deploy.constants import BLOCKS_PER_DAY, SECONDS_PER_DAY
from src.deploy.report import contracts_frame
from src.deploy.schema import Config


def render_contracts(config: Config) -> None:
    """Render the contracts page."""
    st.header("Contract Parameters")

    council = config.council
    st.subheader("Council")
    kpi_row(
        [
            (
                "Voting Period",
                f"{council.proposal_voting_period:,} blocks",
                f"~{council.proposal_voting_period / BLOCKS_PER_DAY:.2f} days",
            ),
            (
                "Effective Delay",
                f"{council.proposal_effective_delay:,} blocks",
                f"~{council.proposal_effective_delay / BLOCKS_PER_DAY:.2f} days",
            ),
            (
                "Expiration",
                f"{council.proposal_expiration_period:,} blocks",
                f"~{council.proposal_expiration_period / BLOCKS_PER_DAY:.2f} days",
            ),
            ("Quorum", f"{float(council.proposal_required_quorum)*100:.0f}%", None),
            ("Threshold", f"{float(council.proposal_required_threshold)*100:.0f}%", None),
        ]
    )

    st.divider()

    col1, col2 = st.columns(2)

    with col1:
        staking = config.staking
        st.subheader("Staking")
        st.metric(
            "Cooldown",
            f"{staking.cooldown_duration:,} s",
            f"{staking.cooldown_duration / SECONDS_PER_DAY:.3f} days",
        )
        st.metric(
            "Unstake Window",
            f"{staking.unstake_window:,} s",
            f"{staking.unstake_window / SECONDS_PER_DAY:.3f} days",
        )
        st.metric("Red Bank Close Factor", f"{float(config.red_bank.close_factor)*100:.0f}%")

    with col2:
        collector = config.rewards_collector
        fig = fee_split_chart(
            float(collector.safety_fund_fee_share),
            float(collector.treasury_fee_share),
        )
        st.plotly_chart(fig, use_container_width=True)

    st.divider()
    st.subheader("All Fields")
    st.dataframe(contracts_frame(config), use_container_width=True, hide_index=True)
