"""Per-network deployment configurations.

Every environment is materialized once, at import, from a shared base
template plus that environment's overrides.  The resulting table is a
read-only mapping; ``get_config`` is a pure lookup into it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from types import MappingProxyType
from typing import Mapping

from src.deploy.address import UNRESOLVED, resolved
from src.deploy.constants import (
    ANC,
    ANC_TOKEN,
    ASTROPORT_FACTORY,
    BOMBAY,
    BOMBAY_MARS_TOKEN,
    BOMBAY_MINTER_PROXY,
    DEFAULT_ENVIRONMENT,
    ENVIRONMENT_VAR,
    LOCAL,
    MARS,
    MIR,
    MIR_TOKEN,
    TESTNET,
    ULUNA,
    UUSD,
)
from src.deploy.errors import UnknownEnvironmentError
from src.deploy.schema import (
    AssetInitEntry,
    AssetRiskParams,
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

# --- Interest rate strategies ---

_STABLE_STRATEGY = DynamicInterestRateStrategy(
    min_borrow_rate="0.0",
    max_borrow_rate="1.0",
    kp_1="0.04",
    optimal_utilization_rate="0.9",
    kp_augmentation_threshold="0.15",
    kp_2="0.07",
)

_LUNA_STRATEGY = DynamicInterestRateStrategy(
    min_borrow_rate="0.0",
    max_borrow_rate="2.0",
    kp_1="0.02",
    optimal_utilization_rate="0.7",
    kp_augmentation_threshold="0.15",
    kp_2="0.05",
)

_CW20_STRATEGY = DynamicInterestRateStrategy(
    min_borrow_rate="0.0",
    max_borrow_rate="2.0",
    kp_1="0.02",
    optimal_utilization_rate="0.5",
    kp_augmentation_threshold="0.15",
    kp_2="0.05",
)

# --- Asset risk parameters ---

_UUSD_PARAMS = AssetRiskParams(
    initial_borrow_rate="0.2",
    max_loan_to_value="0.75",
    reserve_factor="0.2",
    liquidation_threshold="0.85",
    liquidation_bonus="0.1",
    interest_rate_strategy=_STABLE_STRATEGY,
)

_ULUNA_PARAMS = AssetRiskParams(
    initial_borrow_rate="0.1",
    max_loan_to_value="0.55",
    reserve_factor="0.2",
    liquidation_threshold="0.65",
    liquidation_bonus="0.1",
    interest_rate_strategy=_LUNA_STRATEGY,
)

_MIR_PARAMS = AssetRiskParams(
    initial_borrow_rate="0.07",
    max_loan_to_value="0.45",
    reserve_factor="0.2",
    liquidation_threshold="0.55",
    liquidation_bonus="0.15",
    interest_rate_strategy=_CW20_STRATEGY,
)

_ANC_PARAMS = replace(_MIR_PARAMS, max_loan_to_value="0.35", liquidation_threshold="0.45")

_MARS_PARAMS = _MIR_PARAMS

UUSD_ENTRY = AssetInitEntry(NativeAsset(UUSD), _UUSD_PARAMS)
ULUNA_ENTRY = AssetInitEntry(NativeAsset(ULUNA), _ULUNA_PARAMS)
MIR_ENTRY = AssetInitEntry(TokenAsset(MIR, resolved(MIR_TOKEN)), _MIR_PARAMS)
ANC_ENTRY = AssetInitEntry(TokenAsset(ANC, resolved(ANC_TOKEN)), _ANC_PARAMS)
# MARS is deployed by the same run unless the network already has it
MARS_ENTRY = AssetInitEntry(TokenAsset(MARS), _MARS_PARAMS)

# --- Base template (public testnets) ---

_FACTORY = resolved(ASTROPORT_FACTORY)

_BASE = Config(
    council=GovernanceInitParams(
        proposal_voting_period=20,  # ~2.5 minutes for internal testing (57600 = ~5 days)
        proposal_effective_delay=0,  # execute immediately for internal testing (11520 = ~24h)
        proposal_expiration_period=115_200,  # ~10 days
        proposal_required_deposit="100000000",
        proposal_required_quorum="0.1",
        proposal_required_threshold="0.5",
    ),
    staking=StakingInitParams(
        astroport_factory_address=_FACTORY,
        astroport_max_spread="0.05",
        cooldown_duration=90,  # seconds for internal testing (864000 = 10 days)
        unstake_window=300,  # seconds for internal testing (172800 = 2 days)
    ),
    safety_fund=FeeShareInitParams(
        astroport_factory_address=_FACTORY,
        astroport_max_spread="0.05",
    ),
    treasury=FeeShareInitParams(
        astroport_factory_address=_FACTORY,
        astroport_max_spread="0.05",
    ),
    rewards_collector=RewardsCollectorInitParams(
        safety_fund_fee_share="0.1",
        treasury_fee_share="0.2",
        astroport_factory_address=_FACTORY,
        astroport_max_spread="0.05",
    ),
    red_bank=RedBankInitParams(close_factor="0.5"),
    oracle_factory_address=_FACTORY,
)

# --- Per-environment overrides ---


def _testnet() -> Config:
    return replace(
        _BASE,
        name=TESTNET,
        initial_assets=(UUSD_ENTRY, ULUNA_ENTRY, MIR_ENTRY, ANC_ENTRY, MARS_ENTRY),
    )


def _bombay() -> Config:
    mars_token = resolved(BOMBAY_MARS_TOKEN)
    # ANC is not listed on bombay
    return replace(
        _BASE,
        name=BOMBAY,
        initial_assets=(
            UUSD_ENTRY,
            ULUNA_ENTRY,
            MIR_ENTRY,
            replace(MARS_ENTRY, asset=TokenAsset(MARS, mars_token)),
        ),
        minter_proxy_contract_address=resolved(BOMBAY_MINTER_PROXY),
        mars_token_contract_address=mars_token,
    )


def _local() -> Config:
    # LocalTerra has no Astroport deployment until the driver uploads one
    return replace(
        _BASE,
        name=LOCAL,
        council=replace(
            _BASE.council,
            proposal_voting_period=1000,
            proposal_effective_delay=150,
            proposal_expiration_period=3000,
        ),
        staking=replace(
            _BASE.staking,
            astroport_factory_address=UNRESOLVED,
            cooldown_duration=10,
        ),
        safety_fund=replace(_BASE.safety_fund, astroport_factory_address=UNRESOLVED),
        rewards_collector=replace(
            _BASE.rewards_collector, astroport_factory_address=UNRESOLVED
        ),
        initial_assets=(),
        oracle_factory_address=UNRESOLVED,
    )


def _build_registry() -> Mapping[str, Config]:
    table = {
        TESTNET: _testnet(),
        BOMBAY: _bombay(),
        LOCAL: _local(),
    }
    logger.debug("Registered deployment environments: %s", ", ".join(table))
    return MappingProxyType(table)


REGISTRY: Mapping[str, Config] = _build_registry()


def available_environments() -> tuple[str, ...]:
    return tuple(REGISTRY)


def get_config(environment: str) -> Config:
    """Return the configuration registered for ``environment``.

    Raises:
        UnknownEnvironmentError: ``environment`` is not registered.
    """
    try:
        return REGISTRY[environment]
    except KeyError:
        raise UnknownEnvironmentError(environment, available_environments()) from None


def resolve_environment(name: str | None = None) -> str:
    """Pick the environment to deploy to.

    Parameters
    ----------
    name : str | None
        Explicit environment id.  Falls back to the ``DEPLOY_NETWORK``
        environment variable, then to ``testnet``.

    Returns
    -------
    str
        A registered environment id.
    """
    selected = name or os.environ.get(ENVIRONMENT_VAR)
    if not selected:
        logger.warning(
            "No environment given and %s is unset; using %s",
            ENVIRONMENT_VAR,
            DEFAULT_ENVIRONMENT,
        )
        return DEFAULT_ENVIRONMENT
    if selected not in REGISTRY:
        raise UnknownEnvironmentError(selected, available_environments())
    return selected
