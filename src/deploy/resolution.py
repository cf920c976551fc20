"""Placeholder bookkeeping for the deployment driver.

The configuration records only *which* fields are unresolved.  The order in
which a driver must fill them follows the contracts' dependencies:

1. ``address_provider``: instantiated first, needs nothing from the config.
2. ``core``: council, staking, safety fund, treasury, rewards collector.
3. ``red_bank``: needs the receipt-token code id and the core addresses.
4. ``markets``: one ``InitAsset`` per initial asset.
5. ``post_deployment``: farming strategies, minter proxy, token, oracles.

A field must be resolved before the stage that consumes it is instantiated.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.deploy.address import Unresolved
from src.deploy.report import flatten_config
from src.deploy.schema import Config

DEPLOYMENT_STAGES = ("address_provider", "core", "red_bank", "markets", "post_deployment")

_RECORD_STAGES = {
    "council": "core",
    "staking": "core",
    "safety_fund": "core",
    "treasury": "core",
    "rewards_collector": "core",
    "red_bank": "red_bank",
    "initial_assets": "markets",
}


@dataclass(frozen=True)
class PendingField:
    """An unresolved field and the stage whose instantiation consumes it."""

    field_path: str
    stage: str


def stage_for(field_path: str) -> str:
    record = field_path.split(".", 1)[0].split("[", 1)[0]
    return _RECORD_STAGES.get(record, "post_deployment")


def unresolved_fields(config: Config, stage: str | None = None) -> list[PendingField]:
    """List placeholders still open in ``config``, in deployment order.

    Parameters
    ----------
    config : Config
        Configuration to inspect.
    stage : str | None
        Restrict the result to fields consumed by this stage.
    """
    if stage is not None and stage not in DEPLOYMENT_STAGES:
        raise ValueError(f"Unknown deployment stage {stage!r}")

    pending = [
        PendingField(path, stage_for(path))
        for path, value in flatten_config(config).items()
        if isinstance(value, Unresolved)
    ]
    if stage is not None:
        pending = [p for p in pending if p.stage == stage]
    # stable sort keeps field order within a stage
    return sorted(pending, key=lambda p: DEPLOYMENT_STAGES.index(p.stage))


def ready_for(config: Config, stage: str) -> bool:
    """True when nothing consumed by ``stage`` or an earlier stage is unresolved."""
    cutoff = DEPLOYMENT_STAGES.index(stage)
    return all(
        DEPLOYMENT_STAGES.index(p.stage) > cutoff for p in unresolved_fields(config)
    )
