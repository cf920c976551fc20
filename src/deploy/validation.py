"""Exhaustive invariant checks over a materialized ``Config``.

Validation never stops at the first problem: every record and every asset
entry is walked and all violations are returned together, so an operator can
fix everything before the first instantiate transaction goes out.  Only
structurally malformed values (an unparsable decimal, a wrong type) raise.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import pandas as pd

from src.deploy.address import Resolved, Unresolved, is_valid_address
from src.deploy.errors import ConfigValidationError, MalformedConfigError
from src.deploy.schema import (
    AssetInitEntry,
    Config,
    DynamicInterestRateStrategy,
    FeeShareInitParams,
    GovernanceInitParams,
    NativeAsset,
    RedBankInitParams,
    RewardsCollectorInitParams,
    StakingInitParams,
    TokenAsset,
)

logger = logging.getLogger(__name__)

ERROR = "error"
WARNING = "warning"

ZERO = Decimal(0)
ONE = Decimal(1)

# cosmwasm Decimal has 18 fractional digits; Uint128 caps token amounts
DECIMAL_PLACES = 18
UINT128_MAX = 2**128 - 1

# Wire forms: ASCII digits, no exponent, no "+".  A leading "-" parses and
# is left to the range checks.
_DECIMAL_RE = re.compile(r"-?[0-9]+(\.[0-9]+)?")
_UINT_RE = re.compile(r"[0-9]+")

_POST_DEPLOYMENT_FIELDS = (
    "mir_farming_strat_contract_address",
    "anc_farming_strat_contract_address",
    "mars_farming_strat_contract_address",
    "minter_proxy_contract_address",
    "mars_token_contract_address",
    "oracle_factory_address",
)


@dataclass(frozen=True)
class Violation:
    """A single failed invariant, located by its dotted field path."""

    field_path: str
    message: str
    severity: str = ERROR


@dataclass(frozen=True)
class ValidationResult:
    """Ordered violations found in one configuration."""

    violations: tuple[Violation, ...] = ()
    environment: str | None = None

    @property
    def errors(self) -> tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.severity == ERROR)

    @property
    def warnings(self) -> tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.severity == WARNING)

    @property
    def ok(self) -> bool:
        """True when nothing blocks deployment (warnings are allowed)."""
        return not self.errors

    def field_paths(self) -> list[str]:
        return [v.field_path for v in self.violations]

    def raise_for_violations(self) -> None:
        """Raise ``ConfigValidationError`` carrying every blocking violation."""
        if not self.ok:
            raise ConfigValidationError(self.environment, self.errors)

    def to_frame(self) -> pd.DataFrame:
        """Violations as a DataFrame with columns: severity, field_path, message."""
        return pd.DataFrame(
            [
                {"severity": v.severity, "field_path": v.field_path, "message": v.message}
                for v in self.violations
            ],
            columns=["severity", "field_path", "message"],
        )


def _interval(low: Decimal | None, high: Decimal | None, low_open: bool, high_open: bool) -> str:
    left = "(" if low_open or low is None else "["
    right = ")" if high_open or high is None else "]"
    lo = "-inf" if low is None else str(low)
    hi = "inf" if high is None else str(high)
    return f"{left}{lo}, {hi}{right}"


class _Checker:
    """Accumulates violations while walking a config."""

    def __init__(self) -> None:
        self.violations: list[Violation] = []

    def fail(self, path: str, message: str, severity: str = ERROR) -> None:
        self.violations.append(Violation(path, message, severity))

    # --- parsing (raises on structurally malformed input) ---

    def decimal(self, path: str, value: Any) -> Decimal:
        if not isinstance(value, str):
            raise MalformedConfigError(path, f"expected a decimal string, got {type(value).__name__}")
        if not _DECIMAL_RE.fullmatch(value):
            raise MalformedConfigError(path, f"{value!r} is not a plain decimal string")
        parsed = Decimal(value)
        exponent = parsed.as_tuple().exponent
        if isinstance(exponent, int) and -exponent > DECIMAL_PLACES:
            raise MalformedConfigError(path, f"more than {DECIMAL_PLACES} fractional digits")
        return parsed

    def integer(self, path: str, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise MalformedConfigError(path, f"expected an integer, got {type(value).__name__}")
        return value

    def flag(self, path: str, value: Any) -> bool:
        if not isinstance(value, bool):
            raise MalformedConfigError(path, f"expected a boolean, got {type(value).__name__}")
        return value

    # --- invariant checks ---

    def in_range(
        self,
        path: str,
        value: Decimal,
        low: Decimal | None = None,
        high: Decimal | None = None,
        low_open: bool = False,
        high_open: bool = False,
    ) -> bool:
        too_low = low is not None and (value <= low if low_open else value < low)
        too_high = high is not None and (value >= high if high_open else value > high)
        if too_low or too_high:
            self.fail(path, f"must be in {_interval(low, high, low_open, high_open)}, got {value}")
            return False
        return True

    def fraction(self, path: str, value: Any) -> Decimal:
        parsed = self.decimal(path, value)
        self.in_range(path, parsed, ZERO, ONE)
        return parsed

    def non_negative(self, path: str, value: Any) -> Decimal:
        parsed = self.decimal(path, value)
        self.in_range(path, parsed, low=ZERO)
        return parsed

    def count(self, path: str, value: Any) -> int:
        parsed = self.integer(path, value)
        if parsed < 0:
            self.fail(path, f"must be non-negative, got {parsed}")
        return parsed

    def address(self, path: str, ref: Any) -> None:
        if isinstance(ref, Unresolved):
            return
        if not isinstance(ref, Resolved) or not isinstance(ref.value, str):
            raise MalformedConfigError(path, f"expected a resolved address or UNRESOLVED, got {ref!r}")
        if not is_valid_address(ref.value):
            self.fail(path, f"{ref.value!r} is not a valid terra address")

    def code_id(self, path: str, ref: Any) -> None:
        if isinstance(ref, Unresolved):
            return
        if not isinstance(ref, Resolved):
            raise MalformedConfigError(path, f"expected a resolved code id or UNRESOLVED, got {ref!r}")
        if self.integer(path, ref.value) <= 0:
            self.fail(path, f"must be a positive code id, got {ref.value}")


def _check_council(c: _Checker, p: GovernanceInitParams, path: str) -> None:
    c.address(f"{path}.address_provider_address", p.address_provider_address)
    c.count(f"{path}.proposal_voting_period", p.proposal_voting_period)
    delay = c.count(f"{path}.proposal_effective_delay", p.proposal_effective_delay)
    expiration = c.count(f"{path}.proposal_expiration_period", p.proposal_expiration_period)
    if delay >= expiration:
        c.fail(
            f"{path}.proposal_effective_delay",
            f"must be less than proposal_expiration_period ({expiration}), got {delay}",
        )

    deposit_path = f"{path}.proposal_required_deposit"
    deposit = p.proposal_required_deposit
    if not isinstance(deposit, str) or not _UINT_RE.fullmatch(deposit):
        raise MalformedConfigError(deposit_path, f"expected an integer string, got {deposit!r}")
    if int(deposit) > UINT128_MAX:
        c.fail(deposit_path, "exceeds Uint128")

    c.fraction(f"{path}.proposal_required_quorum", p.proposal_required_quorum)
    c.fraction(f"{path}.proposal_required_threshold", p.proposal_required_threshold)


def _check_staking(c: _Checker, p: StakingInitParams, path: str) -> None:
    c.address(f"{path}.owner", p.owner)
    c.address(f"{path}.address_provider_address", p.address_provider_address)
    c.address(f"{path}.astroport_factory_address", p.astroport_factory_address)
    c.fraction(f"{path}.astroport_max_spread", p.astroport_max_spread)
    cooldown = c.count(f"{path}.cooldown_duration", p.cooldown_duration)
    window = c.count(f"{path}.unstake_window", p.unstake_window)
    if cooldown > window:
        c.fail(
            f"{path}.cooldown_duration",
            f"cooldown ({cooldown}s) is longer than the unstake window ({window}s)",
            WARNING,
        )


def _check_fee_share(c: _Checker, p: FeeShareInitParams, path: str) -> None:
    c.address(f"{path}.owner", p.owner)
    c.address(f"{path}.astroport_factory_address", p.astroport_factory_address)
    c.fraction(f"{path}.astroport_max_spread", p.astroport_max_spread)


def _check_rewards_collector(c: _Checker, p: RewardsCollectorInitParams, path: str) -> None:
    c.address(f"{path}.owner", p.owner)
    c.address(f"{path}.address_provider_address", p.address_provider_address)
    c.address(f"{path}.astroport_factory_address", p.astroport_factory_address)
    c.fraction(f"{path}.astroport_max_spread", p.astroport_max_spread)
    safety = c.fraction(f"{path}.safety_fund_fee_share", p.safety_fund_fee_share)
    treasury = c.fraction(f"{path}.treasury_fee_share", p.treasury_fee_share)
    if safety + treasury > ONE:
        c.fail(
            f"{path}.treasury_fee_share",
            f"safety_fund_fee_share + treasury_fee_share must be <= 1, got {safety + treasury}",
        )


def _check_red_bank(c: _Checker, p: RedBankInitParams, path: str) -> None:
    c.address(f"{path}.owner", p.owner)
    c.address(f"{path}.address_provider_address", p.address_provider_address)
    c.code_id(f"{path}.ma_token_code_id", p.ma_token_code_id)
    close_factor = c.decimal(f"{path}.close_factor", p.close_factor)
    c.in_range(f"{path}.close_factor", close_factor, ZERO, ONE, low_open=True)


def _check_strategy(c: _Checker, s: Any, path: str) -> tuple[Decimal, Decimal]:
    if not isinstance(s, DynamicInterestRateStrategy):
        raise MalformedConfigError(path, f"unsupported interest rate strategy {type(s).__name__}")
    min_rate = c.non_negative(f"{path}.min_borrow_rate", s.min_borrow_rate)
    max_rate = c.non_negative(f"{path}.max_borrow_rate", s.max_borrow_rate)
    if min_rate > max_rate:
        c.fail(
            f"{path}.min_borrow_rate",
            f"must be <= max_borrow_rate ({max_rate}), got {min_rate}",
        )
    optimal = c.decimal(f"{path}.optimal_utilization_rate", s.optimal_utilization_rate)
    c.in_range(
        f"{path}.optimal_utilization_rate", optimal, ZERO, ONE, low_open=True, high_open=True
    )
    c.non_negative(f"{path}.kp_1", s.kp_1)
    c.non_negative(f"{path}.kp_2", s.kp_2)
    c.non_negative(f"{path}.kp_augmentation_threshold", s.kp_augmentation_threshold)
    return min_rate, max_rate


def _check_asset(c: _Checker, entry: AssetInitEntry, path: str) -> None:
    asset = entry.asset
    if isinstance(asset, NativeAsset):
        if not asset.denom:
            c.fail(f"{path}.asset.denom", "must not be empty")
    elif isinstance(asset, TokenAsset):
        if not asset.symbol:
            c.fail(f"{path}.asset.symbol", "must not be empty")
        c.address(f"{path}.asset.contract_addr", asset.contract_addr)
    else:
        raise MalformedConfigError(f"{path}.asset", f"unknown asset kind {type(asset).__name__}")

    params = entry.init_params
    base = f"{path}.init_params"
    borrow_rate = c.non_negative(f"{base}.initial_borrow_rate", params.initial_borrow_rate)

    ltv = c.decimal(f"{base}.max_loan_to_value", params.max_loan_to_value)
    c.in_range(f"{base}.max_loan_to_value", ltv, ZERO, ONE, low_open=True, high_open=True)
    threshold = c.decimal(f"{base}.liquidation_threshold", params.liquidation_threshold)
    c.in_range(
        f"{base}.liquidation_threshold", threshold, ZERO, ONE, low_open=True, high_open=True
    )
    if ltv >= threshold:
        c.fail(
            f"{base}.liquidation_threshold",
            f"must be greater than max_loan_to_value ({ltv}), got {threshold}",
        )

    reserve_factor = c.decimal(f"{base}.reserve_factor", params.reserve_factor)
    c.in_range(f"{base}.reserve_factor", reserve_factor, ZERO, ONE, high_open=True)
    c.non_negative(f"{base}.liquidation_bonus", params.liquidation_bonus)

    for flag in ("active", "deposit_enabled", "borrow_enabled"):
        c.flag(f"{base}.{flag}", getattr(params, flag))

    min_rate, max_rate = _check_strategy(
        c, params.interest_rate_strategy, f"{base}.interest_rate_strategy"
    )
    if not min_rate <= borrow_rate <= max_rate:
        c.fail(
            f"{base}.initial_borrow_rate",
            f"{borrow_rate} is outside the strategy's [{min_rate}, {max_rate}] range",
            WARNING,
        )


def _check_unique_assets(c: _Checker, entries: tuple[AssetInitEntry, ...]) -> None:
    seen_labels: dict[str, int] = {}
    seen_contracts: dict[str, int] = {}
    for i, entry in enumerate(entries):
        label = entry.label
        if label in seen_labels:
            c.fail(
                f"initial_assets[{i}]",
                f"{label} is already listed at initial_assets[{seen_labels[label]}]",
            )
        else:
            seen_labels[label] = i

        asset = entry.asset
        if isinstance(asset, TokenAsset) and isinstance(asset.contract_addr, Resolved):
            addr = asset.contract_addr.value
            if addr in seen_contracts:
                c.fail(
                    f"initial_assets[{i}].asset.contract_addr",
                    f"{addr} is already listed at initial_assets[{seen_contracts[addr]}]",
                )
            else:
                seen_contracts[addr] = i


def validate(config: Config) -> ValidationResult:
    """Check every invariant of ``config`` and report all violations at once.

    Raises:
        MalformedConfigError: a value cannot be interpreted at all.
    """
    c = _Checker()
    _check_council(c, config.council, "council")
    _check_staking(c, config.staking, "staking")
    _check_fee_share(c, config.safety_fund, "safety_fund")
    _check_fee_share(c, config.treasury, "treasury")
    _check_rewards_collector(c, config.rewards_collector, "rewards_collector")
    _check_red_bank(c, config.red_bank, "red_bank")

    for i, entry in enumerate(config.initial_assets):
        _check_asset(c, entry, f"initial_assets[{i}]")
    _check_unique_assets(c, config.initial_assets)

    for name in _POST_DEPLOYMENT_FIELDS:
        c.address(name, getattr(config, name))

    result = ValidationResult(tuple(c.violations), environment=config.name or None)
    if result.errors:
        logger.warning(
            "%s: %d validation error(s), %d warning(s)",
            config.name or "config",
            len(result.errors),
            len(result.warnings),
        )
    elif result.warnings:
        logger.info("%s: valid with %d warning(s)", config.name or "config", len(result.warnings))
    return result
