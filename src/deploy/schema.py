"""Instantiate-message records for each contract in a deployment.

Decimal values are kept as decimal strings and token amounts as integer
strings, exactly as they go on the wire.  ``to_msg`` renders the JSON body
the contract expects; it refuses to render while any placeholder is
unresolved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from src.deploy.address import UNRESOLVED, AddressRef, CodeIdRef, unwrap


@dataclass(frozen=True)
class GovernanceInitParams:
    """Council (governance) parameters.

    Attributes:
        proposal_voting_period: Blocks a proposal stays open for voting.
        proposal_effective_delay: Blocks between a passed vote and execution.
        proposal_expiration_period: Blocks after which a passed proposal can
            no longer be executed.
        proposal_required_deposit: MARS base units to submit a proposal.
        proposal_required_quorum: Share of voting power that must vote.
        proposal_required_threshold: Share of cast votes that must be "for".
    """

    proposal_voting_period: int
    proposal_effective_delay: int
    proposal_expiration_period: int
    proposal_required_deposit: str
    proposal_required_quorum: str
    proposal_required_threshold: str
    address_provider_address: AddressRef = UNRESOLVED

    def to_msg(self, path: str = "council") -> dict[str, Any]:
        return {
            "config": {
                "address_provider_address": unwrap(
                    self.address_provider_address, f"{path}.address_provider_address"
                ),
                "proposal_voting_period": self.proposal_voting_period,
                "proposal_effective_delay": self.proposal_effective_delay,
                "proposal_expiration_period": self.proposal_expiration_period,
                "proposal_required_deposit": self.proposal_required_deposit,
                "proposal_required_quorum": self.proposal_required_quorum,
                "proposal_required_threshold": self.proposal_required_threshold,
            }
        }


@dataclass(frozen=True)
class StakingInitParams:
    """Staking contract parameters (durations in seconds)."""

    astroport_max_spread: str
    cooldown_duration: int
    unstake_window: int
    astroport_factory_address: AddressRef = UNRESOLVED
    owner: AddressRef = UNRESOLVED
    address_provider_address: AddressRef = UNRESOLVED

    def to_msg(self, path: str = "staking") -> dict[str, Any]:
        return {
            "config": {
                "owner": unwrap(self.owner, f"{path}.owner"),
                "address_provider_address": unwrap(
                    self.address_provider_address, f"{path}.address_provider_address"
                ),
                "astroport_factory_address": unwrap(
                    self.astroport_factory_address, f"{path}.astroport_factory_address"
                ),
                "astroport_max_spread": self.astroport_max_spread,
                "cooldown_duration": self.cooldown_duration,
                "unstake_window": self.unstake_window,
            }
        }


@dataclass(frozen=True)
class FeeShareInitParams:
    """Safety fund / treasury parameters: both swap collected fees on Astroport."""

    astroport_max_spread: str
    astroport_factory_address: AddressRef = UNRESOLVED
    owner: AddressRef = UNRESOLVED

    def to_msg(self, path: str) -> dict[str, Any]:
        return {
            "owner": unwrap(self.owner, f"{path}.owner"),
            "astroport_factory_address": unwrap(
                self.astroport_factory_address, f"{path}.astroport_factory_address"
            ),
            "astroport_max_spread": self.astroport_max_spread,
        }


@dataclass(frozen=True)
class RewardsCollectorInitParams:
    """Protocol rewards collector parameters.

    ``safety_fund_fee_share`` and ``treasury_fee_share`` are the fractions of
    collected protocol fees routed to each fund; the remainder goes to stakers.
    """

    safety_fund_fee_share: str
    treasury_fee_share: str
    astroport_max_spread: str
    astroport_factory_address: AddressRef = UNRESOLVED
    owner: AddressRef = UNRESOLVED
    address_provider_address: AddressRef = UNRESOLVED

    def to_msg(self, path: str = "rewards_collector") -> dict[str, Any]:
        return {
            "config": {
                "owner": unwrap(self.owner, f"{path}.owner"),
                "address_provider_address": unwrap(
                    self.address_provider_address, f"{path}.address_provider_address"
                ),
                "safety_fund_fee_share": self.safety_fund_fee_share,
                "treasury_fee_share": self.treasury_fee_share,
                "astroport_factory_address": unwrap(
                    self.astroport_factory_address, f"{path}.astroport_factory_address"
                ),
                "astroport_max_spread": self.astroport_max_spread,
            }
        }


@dataclass(frozen=True)
class RedBankInitParams:
    """Red bank (money market) parameters."""

    close_factor: str  # fraction of a position liquidatable in one call
    ma_token_code_id: CodeIdRef = UNRESOLVED
    owner: AddressRef = UNRESOLVED
    address_provider_address: AddressRef = UNRESOLVED

    def to_msg(self, path: str = "red_bank") -> dict[str, Any]:
        return {
            "config": {
                "owner": unwrap(self.owner, f"{path}.owner"),
                "address_provider_address": unwrap(
                    self.address_provider_address, f"{path}.address_provider_address"
                ),
                "ma_token_code_id": unwrap(self.ma_token_code_id, f"{path}.ma_token_code_id"),
                "close_factor": self.close_factor,
            }
        }


@dataclass(frozen=True)
class DynamicInterestRateStrategy:
    """Proportional-control borrow rate strategy.

    The contract nudges the borrow rate towards ``optimal_utilization_rate``
    with gain ``kp_1``, switching to ``kp_2`` once utilization overshoots the
    optimum by more than ``kp_augmentation_threshold``.  The rate is clamped
    to ``[min_borrow_rate, max_borrow_rate]``.
    """

    min_borrow_rate: str
    max_borrow_rate: str
    kp_1: str
    optimal_utilization_rate: str
    kp_augmentation_threshold: str
    kp_2: str

    def to_msg(self) -> dict[str, Any]:
        return {
            "dynamic": {
                "min_borrow_rate": self.min_borrow_rate,
                "max_borrow_rate": self.max_borrow_rate,
                "kp_1": self.kp_1,
                "optimal_utilization_rate": self.optimal_utilization_rate,
                "kp_augmentation_threshold": self.kp_augmentation_threshold,
                "kp_2": self.kp_2,
            }
        }


# Only the dynamic variant exists today.
InterestRateStrategy = DynamicInterestRateStrategy


@dataclass(frozen=True)
class AssetRiskParams:
    """Per-market risk parameters set when the red bank initializes an asset."""

    initial_borrow_rate: str
    max_loan_to_value: str
    reserve_factor: str
    liquidation_threshold: str
    liquidation_bonus: str
    interest_rate_strategy: InterestRateStrategy
    active: bool = True
    deposit_enabled: bool = True
    borrow_enabled: bool = True

    def to_msg(self) -> dict[str, Any]:
        return {
            "initial_borrow_rate": self.initial_borrow_rate,
            "max_loan_to_value": self.max_loan_to_value,
            "reserve_factor": self.reserve_factor,
            "liquidation_threshold": self.liquidation_threshold,
            "liquidation_bonus": self.liquidation_bonus,
            "interest_rate_strategy": self.interest_rate_strategy.to_msg(),
            "active": self.active,
            "deposit_enabled": self.deposit_enabled,
            "borrow_enabled": self.borrow_enabled,
        }


@dataclass(frozen=True)
class NativeAsset:
    denom: str

    @property
    def label(self) -> str:
        return self.denom

    def to_msg(self, path: str) -> dict[str, Any]:
        return {"denom": self.denom}


@dataclass(frozen=True)
class TokenAsset:
    """A CW20 asset; the token may not be deployed yet (e.g. MARS itself)."""

    symbol: str
    contract_addr: AddressRef = UNRESOLVED

    @property
    def label(self) -> str:
        return self.symbol

    def to_msg(self, path: str) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "contract_addr": unwrap(self.contract_addr, f"{path}.contract_addr"),
        }


Asset = Union[NativeAsset, TokenAsset]


@dataclass(frozen=True)
class AssetInitEntry:
    asset: Asset
    init_params: AssetRiskParams

    @property
    def label(self) -> str:
        return self.asset.label

    def to_msg(self, path: str) -> dict[str, Any]:
        return {**self.asset.to_msg(f"{path}.asset"), "init_params": self.init_params.to_msg()}


@dataclass(frozen=True)
class Config:
    """Everything needed to instantiate one deployment of the protocol."""

    council: GovernanceInitParams
    staking: StakingInitParams
    safety_fund: FeeShareInitParams
    treasury: FeeShareInitParams
    rewards_collector: RewardsCollectorInitParams
    red_bank: RedBankInitParams
    initial_assets: tuple[AssetInitEntry, ...] = ()

    # Filled in after the core contracts are live
    mir_farming_strat_contract_address: AddressRef = UNRESOLVED
    anc_farming_strat_contract_address: AddressRef = UNRESOLVED
    mars_farming_strat_contract_address: AddressRef = UNRESOLVED
    minter_proxy_contract_address: AddressRef = UNRESOLVED
    mars_token_contract_address: AddressRef = UNRESOLVED
    oracle_factory_address: AddressRef = UNRESOLVED

    # Not part of any instantiate message
    name: str = field(default="", compare=False)

    def asset(self, label: str) -> AssetInitEntry:
        """Look up an initial asset by denom or symbol."""
        for entry in self.initial_assets:
            if entry.label == label:
                return entry
        raise KeyError(label)

    def contract_records(self) -> dict[str, Any]:
        """Contract init records keyed by record name, in instantiation order."""
        return {
            "council": self.council,
            "staking": self.staking,
            "safety_fund": self.safety_fund,
            "treasury": self.treasury,
            "rewards_collector": self.rewards_collector,
            "red_bank": self.red_bank,
        }

    def asset_entries(self) -> list[tuple[str, AssetInitEntry]]:
        """``(field path, entry)`` pairs for the initial assets."""
        return [(f"initial_assets[{i}]", entry) for i, entry in enumerate(self.initial_assets)]

    def contract_msgs(self) -> dict[str, dict[str, Any]]:
        """Render every contract instantiate message, keyed by record name."""
        return {name: record.to_msg(name) for name, record in self.contract_records().items()}

    def asset_msgs(self) -> list[dict[str, Any]]:
        return [entry.to_msg(path) for path, entry in self.asset_entries()]

