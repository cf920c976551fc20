"""Tabular views of deployment configs for operator review."""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Any

import pandas as pd

from src.deploy.address import Resolved, Unresolved
from src.deploy.schema import Config, TokenAsset


def _is_leaf(value: Any) -> bool:
    return isinstance(value, (Resolved, Unresolved)) or not is_dataclass(value)


def _walk(value: Any, path: str, out: dict[str, Any], asset_keys: str) -> None:
    if isinstance(value, tuple):
        for i, item in enumerate(value):
            key = item.label if asset_keys == "label" else i
            _walk(item, f"{path}[{key}]", out, asset_keys)
        return
    if _is_leaf(value):
        out[path] = value
        return
    for f in fields(value):
        if not f.compare:
            continue
        child = f"{path}.{f.name}" if path else f.name
        _walk(getattr(value, f.name), child, out, asset_keys)


def flatten_config(config: Config, asset_keys: str = "index") -> dict[str, Any]:
    """Flatten a config into ``{dotted field path: leaf value}``.

    Args:
        config: Configuration to flatten.
        asset_keys: ``"index"`` addresses assets by position
            (``initial_assets[0]``), ``"label"`` by denom or symbol
            (``initial_assets[uusd]``).

    Placeholders are kept as ``Resolved`` / ``Unresolved`` objects.
    """
    if asset_keys not in ("index", "label"):
        raise ValueError(f"asset_keys must be 'index' or 'label', got {asset_keys!r}")
    out: dict[str, Any] = {}
    _walk(config, "", out, asset_keys)
    return out


def display_value(value: Any) -> Any:
    """Unwrap placeholders for display."""
    if isinstance(value, Resolved):
        return value.value
    if isinstance(value, Unresolved):
        return "UNRESOLVED"
    return value


def assets_frame(config: Config) -> pd.DataFrame:
    """One row per initial asset with its risk and strategy parameters.

    Decimal strings are converted to floats for display and charting.
    """
    rows = []
    for entry in config.initial_assets:
        params = entry.init_params
        strategy = params.interest_rate_strategy
        asset = entry.asset
        rows.append(
            {
                "asset": entry.label,
                "kind": "cw20" if isinstance(asset, TokenAsset) else "native",
                "contract_addr": (
                    display_value(asset.contract_addr) if isinstance(asset, TokenAsset) else None
                ),
                "max_loan_to_value": float(params.max_loan_to_value),
                "liquidation_threshold": float(params.liquidation_threshold),
                "liquidation_bonus": float(params.liquidation_bonus),
                "reserve_factor": float(params.reserve_factor),
                "initial_borrow_rate": float(params.initial_borrow_rate),
                "min_borrow_rate": float(strategy.min_borrow_rate),
                "max_borrow_rate": float(strategy.max_borrow_rate),
                "optimal_utilization_rate": float(strategy.optimal_utilization_rate),
                "kp_1": float(strategy.kp_1),
                "kp_2": float(strategy.kp_2),
                "kp_augmentation_threshold": float(strategy.kp_augmentation_threshold),
                "active": params.active,
                "deposit_enabled": params.deposit_enabled,
                "borrow_enabled": params.borrow_enabled,
            }
        )
    frame = pd.DataFrame(rows)
    if not frame.empty:
        frame["safety_margin"] = frame["liquidation_threshold"] - frame["max_loan_to_value"]
    return frame


def contracts_frame(config: Config) -> pd.DataFrame:
    """Contract-level parameters (everything except the asset list)."""
    rows = [
        {"field_path": path, "value": display_value(value)}
        for path, value in flatten_config(config).items()
        if not path.startswith("initial_assets")
    ]
    return pd.DataFrame(rows, columns=["field_path", "value"])


def compare_environments(a: Config, b: Config) -> pd.DataFrame:
    """Field paths whose values differ between two configs.

    Assets are matched by denom/symbol so a missing listing shows up as one
    block of differences instead of shifting every later index.  Fields only
    present on one side appear with ``None`` on the other.
    """
    left = flatten_config(a, asset_keys="label")
    right = flatten_config(b, asset_keys="label")
    left_name = a.name or "a"
    right_name = b.name or "b"
    if left_name == right_name:
        left_name, right_name = f"{left_name} (a)", f"{right_name} (b)"

    rows = []
    paths = list(left) + [p for p in right if p not in left]
    for path in paths:
        lv = left.get(path)
        rv = right.get(path)
        if lv != rv:
            rows.append(
                {
                    "field_path": path,
                    left_name: None if lv is None else display_value(lv),
                    right_name: None if rv is None else display_value(rv),
                }
            )
    # object dtype keeps None and mixed int/str values as they are
    return pd.DataFrame(rows, columns=["field_path", left_name, right_name], dtype=object)
