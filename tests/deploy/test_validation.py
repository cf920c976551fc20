"""Tests for the config validator."""

from dataclasses import replace

import pytest

from src.deploy.address import Resolved, resolved
from src.deploy.constants import BOMBAY, LOCAL, MIR_TOKEN, TESTNET, UUSD
from src.deploy.errors import ConfigValidationError, MalformedConfigError
from src.deploy.registry import get_config
from src.deploy.schema import AssetInitEntry, Config, NativeAsset, TokenAsset
from src.deploy.validation import ERROR, WARNING, ValidationResult, Violation, validate

UUSD_PATH = "initial_assets[0].init_params"


def _with_uusd_params(config: Config, **changes: object) -> Config:
    entry = config.initial_assets[0]
    assert entry.label == UUSD
    new_entry = replace(entry, init_params=replace(entry.init_params, **changes))
    return replace(config, initial_assets=(new_entry,) + config.initial_assets[1:])


def _with_uusd_strategy(config: Config, **changes: object) -> Config:
    strategy = config.initial_assets[0].init_params.interest_rate_strategy
    return _with_uusd_params(config, interest_rate_strategy=replace(strategy, **changes))


@pytest.fixture
def testnet() -> Config:
    return get_config(TESTNET)


class TestRegisteredConfigs:
    @pytest.mark.parametrize("env", [TESTNET, BOMBAY, LOCAL])
    def test_all_environments_valid(self, env: str) -> None:
        result = validate(get_config(env))
        assert result.ok
        assert result.violations == ()

    def test_environment_recorded(self, testnet: Config) -> None:
        assert validate(testnet).environment == TESTNET


class TestAssetRiskParams:
    def test_threshold_below_ltv(self, testnet: Config) -> None:
        result = validate(_with_uusd_params(testnet, liquidation_threshold="0.70"))
        assert not result.ok
        assert f"{UUSD_PATH}.liquidation_threshold" in result.field_paths()

    def test_threshold_equal_to_ltv(self, testnet: Config) -> None:
        result = validate(_with_uusd_params(testnet, liquidation_threshold="0.75"))
        assert result.field_paths() == [f"{UUSD_PATH}.liquidation_threshold"]

    def test_threshold_at_one(self, testnet: Config) -> None:
        result = validate(_with_uusd_params(testnet, liquidation_threshold="1.0"))
        assert result.field_paths() == [f"{UUSD_PATH}.liquidation_threshold"]
        assert "(0, 1)" in result.errors[0].message

    def test_ltv_zero(self, testnet: Config) -> None:
        result = validate(_with_uusd_params(testnet, max_loan_to_value="0"))
        assert result.field_paths() == [f"{UUSD_PATH}.max_loan_to_value"]

    def test_ltv_at_one_also_checked_against_threshold(self, testnet: Config) -> None:
        result = validate(_with_uusd_params(testnet, max_loan_to_value="1.0"))
        assert result.field_paths() == [
            f"{UUSD_PATH}.max_loan_to_value",
            f"{UUSD_PATH}.liquidation_threshold",
        ]

    def test_ltv_above_one(self, testnet: Config) -> None:
        result = validate(_with_uusd_params(testnet, max_loan_to_value="1.2"))
        assert f"{UUSD_PATH}.max_loan_to_value" in result.field_paths()
        assert not result.ok

    def test_reserve_factor_one(self, testnet: Config) -> None:
        result = validate(_with_uusd_params(testnet, reserve_factor="1"))
        assert result.field_paths() == [f"{UUSD_PATH}.reserve_factor"]

    def test_reserve_factor_zero_allowed(self, testnet: Config) -> None:
        assert validate(_with_uusd_params(testnet, reserve_factor="0")).ok

    def test_negative_bonus(self, testnet: Config) -> None:
        result = validate(_with_uusd_params(testnet, liquidation_bonus="-0.1"))
        assert result.field_paths() == [f"{UUSD_PATH}.liquidation_bonus"]

    def test_all_violations_reported_together(self, testnet: Config) -> None:
        broken = _with_uusd_params(
            testnet,
            reserve_factor="1.5",
            liquidation_bonus="-1",
            liquidation_threshold="0.5",
        )
        paths = validate(broken).field_paths()
        assert paths == [
            f"{UUSD_PATH}.liquidation_threshold",
            f"{UUSD_PATH}.reserve_factor",
            f"{UUSD_PATH}.liquidation_bonus",
        ]


class TestInterestRateStrategy:
    def test_min_above_max(self, testnet: Config) -> None:
        result = validate(_with_uusd_strategy(testnet, min_borrow_rate="1.5"))
        assert f"{UUSD_PATH}.interest_rate_strategy.min_borrow_rate" in result.field_paths()
        assert not result.ok

    def test_optimal_utilization_bounds(self, testnet: Config) -> None:
        for value in ("0", "1", "1.2"):
            result = validate(_with_uusd_strategy(testnet, optimal_utilization_rate=value))
            assert result.field_paths() == [
                f"{UUSD_PATH}.interest_rate_strategy.optimal_utilization_rate"
            ]

    def test_negative_gain(self, testnet: Config) -> None:
        result = validate(_with_uusd_strategy(testnet, kp_2="-0.01"))
        assert result.field_paths() == [f"{UUSD_PATH}.interest_rate_strategy.kp_2"]

    def test_negative_kp_1(self, testnet: Config) -> None:
        result = validate(_with_uusd_strategy(testnet, kp_1="-0.04"))
        assert result.field_paths() == [f"{UUSD_PATH}.interest_rate_strategy.kp_1"]

    def test_negative_augmentation_threshold(self, testnet: Config) -> None:
        result = validate(_with_uusd_strategy(testnet, kp_augmentation_threshold="-0.15"))
        assert result.field_paths() == [
            f"{UUSD_PATH}.interest_rate_strategy.kp_augmentation_threshold"
        ]

    def test_initial_rate_outside_bounds_is_warning(self, testnet: Config) -> None:
        result = validate(_with_uusd_params(testnet, initial_borrow_rate="1.5"))
        assert result.ok
        assert [v.field_path for v in result.warnings] == [f"{UUSD_PATH}.initial_borrow_rate"]


class TestContractRecords:
    def test_effective_delay_not_before_expiration(self, testnet: Config) -> None:
        council = replace(testnet.council, proposal_effective_delay=115_200)
        result = validate(replace(testnet, council=council))
        assert result.field_paths() == ["council.proposal_effective_delay"]

    def test_quorum_above_one(self, testnet: Config) -> None:
        council = replace(testnet.council, proposal_required_quorum="1.01")
        assert validate(replace(testnet, council=council)).field_paths() == [
            "council.proposal_required_quorum"
        ]

    def test_negative_block_count(self, testnet: Config) -> None:
        council = replace(testnet.council, proposal_voting_period=-1)
        assert validate(replace(testnet, council=council)).field_paths() == [
            "council.proposal_voting_period"
        ]

    def test_fee_shares_exceed_one(self, testnet: Config) -> None:
        rc = replace(testnet.rewards_collector, safety_fund_fee_share="0.6", treasury_fee_share="0.5")
        result = validate(replace(testnet, rewards_collector=rc))
        assert result.field_paths() == ["rewards_collector.treasury_fee_share"]

    def test_fee_shares_exactly_one(self, testnet: Config) -> None:
        rc = replace(testnet.rewards_collector, safety_fund_fee_share="0.4", treasury_fee_share="0.6")
        assert validate(replace(testnet, rewards_collector=rc)).ok

    def test_negative_fee_share_with_small_sum(self, testnet: Config) -> None:
        rc = replace(testnet.rewards_collector, safety_fund_fee_share="-0.1", treasury_fee_share="0.5")
        result = validate(replace(testnet, rewards_collector=rc))
        assert result.field_paths() == ["rewards_collector.safety_fund_fee_share"]

    def test_close_factor_zero(self, testnet: Config) -> None:
        red_bank = replace(testnet.red_bank, close_factor="0")
        assert validate(replace(testnet, red_bank=red_bank)).field_paths() == [
            "red_bank.close_factor"
        ]

    def test_close_factor_one_allowed(self, testnet: Config) -> None:
        red_bank = replace(testnet.red_bank, close_factor="1")
        assert validate(replace(testnet, red_bank=red_bank)).ok

    def test_max_spread_above_one(self, testnet: Config) -> None:
        treasury = replace(testnet.treasury, astroport_max_spread="2")
        assert validate(replace(testnet, treasury=treasury)).field_paths() == [
            "treasury.astroport_max_spread"
        ]

    def test_cooldown_longer_than_window_is_warning(self, testnet: Config) -> None:
        staking = replace(testnet.staking, cooldown_duration=600)
        result = validate(replace(testnet, staking=staking))
        assert result.ok
        assert result.warnings == (
            Violation(
                "staking.cooldown_duration",
                "cooldown (600s) is longer than the unstake window (300s)",
                WARNING,
            ),
        )

    def test_code_id_must_be_positive(self, testnet: Config) -> None:
        red_bank = replace(testnet.red_bank, ma_token_code_id=resolved(0))
        assert validate(replace(testnet, red_bank=red_bank)).field_paths() == [
            "red_bank.ma_token_code_id"
        ]

    def test_resolved_code_id(self, testnet: Config) -> None:
        red_bank = replace(testnet.red_bank, ma_token_code_id=resolved(42))
        assert validate(replace(testnet, red_bank=red_bank)).ok


class TestAddresses:
    def test_bad_address(self, testnet: Config) -> None:
        staking = replace(testnet.staking, owner=resolved("0xdeadbeef"))
        result = validate(replace(testnet, staking=staking))
        assert result.field_paths() == ["staking.owner"]

    def test_bad_post_deployment_address(self, testnet: Config) -> None:
        cfg = replace(testnet, oracle_factory_address=resolved("terra1short"))
        assert validate(cfg).field_paths() == ["oracle_factory_address"]

    def test_valid_owner(self, testnet: Config) -> None:
        staking = replace(testnet.staking, owner=resolved(MIR_TOKEN))
        assert validate(replace(testnet, staking=staking)).ok


class TestDuplicates:
    def test_duplicate_denom(self, testnet: Config) -> None:
        cfg = replace(testnet, initial_assets=testnet.initial_assets + (testnet.initial_assets[0],))
        last = len(cfg.initial_assets) - 1
        result = validate(cfg)
        assert result.field_paths() == [f"initial_assets[{last}]"]

    def test_duplicate_contract(self, testnet: Config) -> None:
        mir = testnet.asset("MIR")
        clone = AssetInitEntry(TokenAsset("MIR2", Resolved(MIR_TOKEN)), mir.init_params)
        cfg = replace(testnet, initial_assets=testnet.initial_assets + (clone,))
        last = len(cfg.initial_assets) - 1
        assert validate(cfg).field_paths() == [f"initial_assets[{last}].asset.contract_addr"]

    def test_empty_denom(self, testnet: Config) -> None:
        entry = replace(testnet.initial_assets[0], asset=NativeAsset(""))
        cfg = replace(testnet, initial_assets=(entry,))
        assert validate(cfg).field_paths() == ["initial_assets[0].asset.denom"]


class TestMalformed:
    def test_unparsable_decimal(self, testnet: Config) -> None:
        with pytest.raises(MalformedConfigError) as excinfo:
            validate(_with_uusd_params(testnet, reserve_factor="twenty"))
        assert excinfo.value.field_path == f"{UUSD_PATH}.reserve_factor"

    def test_float_instead_of_string(self, testnet: Config) -> None:
        with pytest.raises(MalformedConfigError):
            validate(_with_uusd_params(testnet, max_loan_to_value=0.75))

    def test_nan(self, testnet: Config) -> None:
        with pytest.raises(MalformedConfigError):
            validate(_with_uusd_strategy(testnet, kp_1="NaN"))

    def test_too_many_fractional_digits(self, testnet: Config) -> None:
        with pytest.raises(MalformedConfigError):
            validate(_with_uusd_strategy(testnet, kp_1="0." + "1" * 19))

    @pytest.mark.parametrize("value", ["7.5E-1", "+0.75", "1e-1", ".75", "0.75 ", "Infinity"])
    def test_non_plain_decimal(self, testnet: Config, value: str) -> None:
        with pytest.raises(MalformedConfigError) as excinfo:
            validate(_with_uusd_params(testnet, max_loan_to_value=value))
        assert excinfo.value.field_path == f"{UUSD_PATH}.max_loan_to_value"

    @pytest.mark.parametrize("deposit", ["١٠٠", "²", "-5", "+5"])
    def test_deposit_not_ascii_digits(self, testnet: Config, deposit: str) -> None:
        council = replace(testnet.council, proposal_required_deposit=deposit)
        with pytest.raises(MalformedConfigError) as excinfo:
            validate(replace(testnet, council=council))
        assert excinfo.value.field_path == "council.proposal_required_deposit"

    def test_deposit_not_integer(self, testnet: Config) -> None:
        council = replace(testnet.council, proposal_required_deposit="1.5")
        with pytest.raises(MalformedConfigError):
            validate(replace(testnet, council=council))

    def test_bool_block_count(self, testnet: Config) -> None:
        council = replace(testnet.council, proposal_voting_period=True)
        with pytest.raises(MalformedConfigError):
            validate(replace(testnet, council=council))

    def test_raw_string_address(self, testnet: Config) -> None:
        staking = replace(testnet.staking, owner=MIR_TOKEN)
        with pytest.raises(MalformedConfigError):
            validate(replace(testnet, staking=staking))

    def test_is_value_error(self, testnet: Config) -> None:
        with pytest.raises(ValueError):
            validate(_with_uusd_params(testnet, reserve_factor=""))


class TestValidationResult:
    def test_raise_for_violations(self, testnet: Config) -> None:
        result = validate(_with_uusd_params(testnet, liquidation_threshold="0.70"))
        with pytest.raises(ConfigValidationError) as excinfo:
            result.raise_for_violations()
        assert excinfo.value.environment == TESTNET
        assert excinfo.value.violations == result.errors
        assert f"{UUSD_PATH}.liquidation_threshold" in str(excinfo.value)

    def test_warnings_do_not_raise(self) -> None:
        result = ValidationResult((Violation("staking.cooldown_duration", "long", WARNING),))
        result.raise_for_violations()
        assert result.ok

    def test_to_frame(self, testnet: Config) -> None:
        result = validate(_with_uusd_params(testnet, liquidation_threshold="0.70"))
        df = result.to_frame()
        assert list(df.columns) == ["severity", "field_path", "message"]
        assert df["severity"].tolist() == [ERROR]

    def test_empty_frame(self, testnet: Config) -> None:
        df = validate(testnet).to_frame()
        assert df.empty
        assert list(df.columns) == ["severity", "field_path", "message"]

    def test_logs_errors(self, testnet: Config, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING"):
            validate(_with_uusd_params(testnet, liquidation_threshold="0.70"))
        assert "1 validation error(s)" in caplog.text
