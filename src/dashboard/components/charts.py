"""Reusable Plotly chart components."""

import pandas as pd
import plotly.graph_objects as go


def risk_params_chart(
    df: pd.DataFrame,
    title: str = "Loan-to-Value vs Liquidation Threshold",
) -> go.Figure:
    """Grouped bars of max LTV and liquidation threshold per asset.

    Args:
        df: Output of ``assets_frame`` (columns: asset, max_loan_to_value,
            liquidation_threshold, liquidation_bonus).
        title: Chart title.
    """
    fig = go.Figure()

    fig.add_trace(
        go.Bar(
            x=df["asset"],
            y=df["max_loan_to_value"] * 100,
            name="Max LTV",
            marker_color="#3b82f6",
            hovertemplate="%{x}<br>Max LTV: %{y:.1f}%<extra></extra>",
        )
    )

    fig.add_trace(
        go.Bar(
            x=df["asset"],
            y=df["liquidation_threshold"] * 100,
            name="Liquidation Threshold",
            marker_color="#ef4444",
            hovertemplate="%{x}<br>Threshold: %{y:.1f}%<extra></extra>",
        )
    )

    fig.add_trace(
        go.Scatter(
            x=df["asset"],
            y=df["liquidation_bonus"] * 100,
            name="Liquidation Bonus",
            mode="markers",
            marker=dict(color="#f59e0b", size=12, symbol="diamond"),
            hovertemplate="%{x}<br>Bonus: %{y:.1f}%<extra></extra>",
        )
    )

    fig.update_layout(
        title=title,
        xaxis_title="Asset",
        yaxis_title="Percent",
        yaxis_range=[0, 100],
        barmode="group",
        template="plotly_dark",
        height=450,
    )

    return fig


def strategy_bounds_chart(df: pd.DataFrame) -> go.Figure:
    """Borrow rate bounds per asset with the initial rate marked.

    Args:
        df: Output of ``assets_frame`` (columns: asset, min_borrow_rate,
            max_borrow_rate, initial_borrow_rate, optimal_utilization_rate).
    """
    fig = go.Figure()

    fig.add_trace(
        go.Bar(
            x=df["asset"],
            y=(df["max_borrow_rate"] - df["min_borrow_rate"]) * 100,
            base=df["min_borrow_rate"] * 100,
            name="Borrow Rate Range",
            marker_color="rgba(59,130,246,0.4)",
            hovertemplate="%{x}<br>Range: %{base:.0f}% to %{y:.0f}%<extra></extra>",
        )
    )

    fig.add_trace(
        go.Scatter(
            x=df["asset"],
            y=df["initial_borrow_rate"] * 100,
            name="Initial Borrow Rate",
            mode="markers",
            marker=dict(color="#22c55e", size=12),
            customdata=df["optimal_utilization_rate"] * 100,
            hovertemplate=(
                "%{x}<br>Initial: %{y:.1f}%<br>"
                "Optimal utilization: %{customdata:.0f}%<extra></extra>"
            ),
        )
    )

    fig.update_layout(
        title="Interest Rate Strategy Bounds",
        xaxis_title="Asset",
        yaxis_title="Borrow Rate (%)",
        template="plotly_dark",
        height=450,
    )

    return fig


def fee_split_chart(safety_fund_share: float, treasury_share: float) -> go.Figure:
    """Donut chart of how collected protocol fees are routed."""
    stakers = max(0.0, 1.0 - safety_fund_share - treasury_share)

    fig = go.Figure(
        go.Pie(
            labels=["Safety Fund", "Treasury", "Stakers"],
            values=[safety_fund_share, treasury_share, stakers],
            hole=0.5,
            marker=dict(colors=["#3b82f6", "#f59e0b", "#22c55e"]),
            hovertemplate="%{label}: %{percent}<extra></extra>",
        )
    )

    fig.update_layout(
        title="Protocol Fee Split",
        template="plotly_dark",
        height=350,
        margin=dict(t=40, b=0, l=30, r=30),
    )

    return fig
