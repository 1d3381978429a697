from __future__ import annotations

from decimal import Decimal

import pytest

from lp_risk_lab.core import (
    Decision,
    PairCategory,
    PoolSnapshot,
    PositionSnapshot,
    PositionStatus,
    RiskContext,
    RiskSettings,
)
from lp_risk_lab.core.result import SETTINGS_MISSING, RiskError
from lp_risk_lab.decision_log import DecisionRecord
from lp_risk_lab.risk_engine import assess_position_risk, decision_for, evaluate_position


def _settings(**overrides: object) -> RiskSettings:
    base = {
        "total_bankroll": 10_000,
        "max_percent_per_pool": 10,
        "max_percent_per_network": 30,
        "max_percent_volatile": 20,
    }
    base.update(overrides)
    return RiskSettings.from_mapping(base)


def _pool(
    network: str = "arbitrum",
    category: PairCategory = PairCategory.STABLE_STABLE,
    tvl: str = "1000000",
) -> PoolSnapshot:
    return PoolSnapshot(
        id=f"{network}_pool",
        network=network,
        pair_category=category,
        tvl_usd=Decimal(tvl),
        volume_24h_usd=Decimal("250000"),
        fee_tier=500,
        current_price=Decimal("1"),
    )


def _position(
    capital: str,
    network: str = "arbitrum",
    category: PairCategory = PairCategory.STABLE_STABLE,
    status: PositionStatus = PositionStatus.ACTIVE,
) -> PositionSnapshot:
    return PositionSnapshot(f"{network}_{capital}", network, category, Decimal(capital), status)


class _CapturingRecorder:
    def __init__(self) -> None:
        self.records: list[DecisionRecord] = []

    def record(self, record: DecisionRecord) -> None:
        self.records.append(record)


class _BrokenRecorder:
    def record(self, record: DecisionRecord) -> None:
        raise OSError("disk full")


def test_per_pool_cap_clamps_capital() -> None:
    ctx = RiskContext.build(_settings())
    out = assess_position_risk(_pool(), Decimal("2000"), ctx)

    assert out.allowed
    assert out.adjusted_capital == Decimal("1000")
    assert out.errors == ()
    assert out.warnings[0].startswith("Capital exceeds the per-pool limit (10%)")
    assert decision_for(out, Decimal("2000")) is Decision.ADJUSTED


def test_exhausted_network_headroom_is_a_hard_error() -> None:
    ctx = RiskContext.build(_settings(), [_position("3000")])
    out = assess_position_risk(_pool(), Decimal("500"), ctx)

    assert not out.allowed
    assert out.adjusted_capital is None
    assert len(out.errors) == 1
    assert "arbitrum" in out.errors[0]
    assert out.reason == out.errors[0]


def test_network_cap_clamps_to_remaining_headroom() -> None:
    ctx = RiskContext.build(_settings(), [_position("2500")])
    out = assess_position_risk(_pool(), Decimal("1000"), ctx)

    assert out.allowed
    assert out.adjusted_capital == Decimal("500")
    assert "500.00" in out.warnings[-1]


def test_other_networks_do_not_count_towards_network_cap() -> None:
    ctx = RiskContext.build(_settings(), [_position("3000", network="ethereum")])
    out = assess_position_risk(_pool(), Decimal("800"), ctx)

    assert out.allowed
    assert out.adjusted_capital == Decimal("800")
    assert out.warnings == ()


def test_low_tvl_only_warns() -> None:
    ctx = RiskContext.build(_settings())
    out = assess_position_risk(_pool(tvl="50000"), Decimal("200"), ctx)

    assert out.allowed
    assert out.adjusted_capital == Decimal("200")
    assert any("slippage" in w for w in out.warnings)
    assert out.reason == "Position approved with 200.00 USD"


def test_volatile_cap_applies_to_volatile_pools() -> None:
    positions = [_position("1800", network="ethereum", category=PairCategory.ALTCOIN_STABLE)]
    ctx = RiskContext.build(_settings(), positions)

    volatile = assess_position_risk(_pool(category=PairCategory.OTHER), Decimal("500"), ctx)
    stable = assess_position_risk(_pool(), Decimal("500"), ctx)

    assert volatile.adjusted_capital == Decimal("200")
    assert volatile.warnings[-1].startswith("Volatile pair exposure limited")
    assert stable.adjusted_capital == Decimal("500")


def test_volatile_cap_exhausted() -> None:
    positions = [_position("2000", network="base", category=PairCategory.ALTCOIN_STABLE)]
    ctx = RiskContext.build(_settings(), positions)
    out = assess_position_risk(_pool(category=PairCategory.ALTCOIN_STABLE), Decimal("500"), ctx)

    assert not out.allowed
    assert out.errors[0].startswith("Volatile pair exposure limit reached")


def test_minimum_capital_and_gas_checks() -> None:
    ctx = RiskContext.build(_settings())

    tiny = assess_position_risk(_pool(), Decimal("40"), ctx)
    assert not tiny.allowed
    assert tiny.errors == ("Capital too low. Recommended minimum: $50.",)

    mainnet = assess_position_risk(_pool(network="ethereum"), Decimal("400"), ctx)
    assert mainnet.allowed
    assert any("gas" in w for w in mainnet.warnings)

    l2 = assess_position_risk(_pool(network="arbitrum"), Decimal("400"), ctx)
    assert not any("gas" in w for w in l2.warnings)


def test_only_active_positions_count() -> None:
    positions = [
        _position("3000", status=PositionStatus.CLOSED),
        _position("3000", status=PositionStatus.ATTENTION),
    ]
    ctx = RiskContext.build(_settings(), positions)
    out = assess_position_risk(_pool(), Decimal("500"), ctx)
    assert out.allowed
    assert out.adjusted_capital == Decimal("500")


@pytest.mark.parametrize("capital", ["50", "499.99", "1000", "1000.01", "2999", "25000"])
def test_adjusted_capital_never_exceeds_request(capital: str) -> None:
    ctx = RiskContext.build(_settings(), [_position("1200"), _position("900", network="base")])
    out = assess_position_risk(_pool(), Decimal(capital), ctx)
    assert out.allowed
    assert out.adjusted_capital is not None
    assert 0 < out.adjusted_capital <= Decimal(capital)


def test_missing_settings_is_rejected() -> None:
    ctx = RiskContext.build(None, [_position("100")])
    out = assess_position_risk(_pool(), Decimal("500"), ctx)

    assert not out.allowed
    assert out.errors == (SETTINGS_MISSING,)
    assert out.warnings == ()

    result = evaluate_position(_pool(), Decimal("500"), ctx)
    assert not result.is_ok()
    with pytest.raises(RiskError):
        result.unwrap()


def test_evaluate_position_wraps_assessment() -> None:
    result = evaluate_position(_pool(), Decimal("500"), RiskContext.build(_settings()))
    assert result.is_ok()
    assert result.unwrap().adjusted_capital == Decimal("500")


def test_decision_is_recorded() -> None:
    recorder = _CapturingRecorder()
    ctx = RiskContext.build(_settings())

    assess_position_risk(_pool(), Decimal("2000"), ctx, recorder=recorder)
    assess_position_risk(_pool(), Decimal("500"), ctx, recorder=recorder)
    assess_position_risk(_pool(), Decimal("10"), ctx, recorder=recorder)

    decisions = [(r.decision, r.original_capital, r.final_capital) for r in recorder.records]
    assert decisions == [
        (Decision.ADJUSTED, Decimal("2000"), Decimal("1000")),
        (Decision.APPROVED, Decimal("500"), Decimal("500")),
        (Decision.REJECTED, Decimal("10"), None),
    ]


def test_recorder_failure_does_not_change_assessment() -> None:
    ctx = RiskContext.build(_settings())
    baseline = assess_position_risk(_pool(), Decimal("2000"), ctx)
    out = assess_position_risk(_pool(), Decimal("2000"), ctx, recorder=_BrokenRecorder())
    assert out == baseline
