"""Core constants shared across LiquidityRiskLab modules."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

from .models import PairCategory, RiskProfile

SECONDS_PER_DAY = 86_400
BACKTEST_PERIODS = (7, 30)

# Below this many samples inside the window the backtest switches to the
# volatility-based estimate.
MIN_HISTORY_POINTS = 10

MIN_TVL_USD = Decimal("100000")
MIN_CAPITAL_USD = Decimal("50")

# Flat gas heuristics in USD; a real estimator can replace these later.
GAS_COST_ETHEREUM_USD = Decimal("50")
GAS_COST_DEFAULT_USD = Decimal("2")
GAS_TO_CAPITAL_MULTIPLE = 10


# Assumed daily price volatility in percent per pair category.
DAILY_VOLATILITY_PERCENT: Mapping[PairCategory, Decimal] = MappingProxyType(
    {
        PairCategory.STABLE_STABLE: Decimal("0.5"),
        PairCategory.BLUECHIP_STABLE: Decimal("3"),
        PairCategory.ALTCOIN_STABLE: Decimal("8"),
        PairCategory.OTHER: Decimal("8"),
    }
)


@dataclass(frozen=True)
class RiskProfileConfig:
    profile: RiskProfile
    min_score: int
    defensive_width: Decimal
    optimized_width: Decimal
    aggressive_width: Decimal


RISK_PROFILE_CONFIGS: Mapping[RiskProfile, RiskProfileConfig] = MappingProxyType(
    {
        RiskProfile.DEFENSIVE: RiskProfileConfig(
            RiskProfile.DEFENSIVE, 70, Decimal("30"), Decimal("20"), Decimal("10")
        ),
        RiskProfile.NORMAL: RiskProfileConfig(
            RiskProfile.NORMAL, 60, Decimal("25"), Decimal("15"), Decimal("8")
        ),
        RiskProfile.AGGRESSIVE: RiskProfileConfig(
            RiskProfile.AGGRESSIVE, 50, Decimal("20"), Decimal("10"), Decimal("5")
        ),
    }
)


def estimated_gas_usd(network: str) -> Decimal:
    return GAS_COST_ETHEREUM_USD if network.lower() == "ethereum" else GAS_COST_DEFAULT_USD


__all__ = [
    "BACKTEST_PERIODS",
    "DAILY_VOLATILITY_PERCENT",
    "GAS_COST_DEFAULT_USD",
    "GAS_COST_ETHEREUM_USD",
    "GAS_TO_CAPITAL_MULTIPLE",
    "MIN_CAPITAL_USD",
    "MIN_HISTORY_POINTS",
    "MIN_TVL_USD",
    "RISK_PROFILE_CONFIGS",
    "RiskProfileConfig",
    "SECONDS_PER_DAY",
    "estimated_gas_usd",
]
