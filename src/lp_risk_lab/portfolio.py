"""Portfolio-wide exposure breakdown and concentration assessment."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
import logging

import pandas as pd

from .core.models import ConcentrationLevel, RiskContext
from .core.repositories import PositionRepository
from .core.result import Ok, Result, settings_missing
from .lp_math import percent_of

logger = logging.getLogger(__name__)

NETWORK_HIGH_PERCENT = Decimal(40)
NETWORK_MEDIUM_PERCENT = Decimal(30)
TOTAL_EXPOSURE_PERCENT = Decimal(80)


@dataclass(frozen=True)
class PortfolioRisk:
    total_exposure: Decimal
    exposure_by_network: dict[str, Decimal]
    exposure_by_pair_category: dict[str, Decimal]
    volatile_exposure: Decimal
    concentration_risk: ConcentrationLevel
    recommendations: tuple[str, ...] = field(default_factory=tuple)

    def to_frame(self) -> pd.DataFrame:
        """Long-format exposure table with one row per (dimension, bucket)."""

        rows = [
            {"dimension": "network", "bucket": k, "exposure_usd": v}
            for k, v in self.exposure_by_network.items()
        ]
        rows.extend(
            {"dimension": "pair_category", "bucket": k, "exposure_usd": v}
            for k, v in self.exposure_by_pair_category.items()
        )
        return pd.DataFrame(rows, columns=["dimension", "bucket", "exposure_usd"])


def _escalate(current: ConcentrationLevel, target: ConcentrationLevel) -> ConcentrationLevel:
    return target if target.rank > current.rank else current


def assess_portfolio_risk(context: RiskContext) -> Result[PortfolioRisk]:
    """Summarise active positions and grade concentration risk.

    Recommendations are appended in the order the checks run: per-network
    concentration, total exposure, pair diversification, volatile exposure.
    """

    settings = context.settings
    if settings is None:
        return settings_missing()

    repo = PositionRepository(context.active_positions)
    total = repo.total_capital()
    by_network = repo.exposure_by("network")
    by_category = repo.exposure_by("pair_category")
    volatile = sum((p.capital_usd for p in repo if p.is_volatile), Decimal(0))
    bankroll = settings.total_bankroll

    level = ConcentrationLevel.LOW
    recommendations: list[str] = []

    for network, exposure in by_network.items():
        pct = percent_of(exposure, bankroll)
        if pct > NETWORK_HIGH_PERCENT:
            level = _escalate(level, ConcentrationLevel.HIGH)
            recommendations.append(
                f"High concentration on {network} ({pct:.1f}%). Consider diversifying."
            )
        elif pct > NETWORK_MEDIUM_PERCENT:
            level = _escalate(level, ConcentrationLevel.MEDIUM)
            recommendations.append(f"Moderate concentration on {network} ({pct:.1f}%).")

    total_pct = percent_of(total, bankroll)
    if total_pct > TOTAL_EXPOSURE_PERCENT:
        level = _escalate(level, ConcentrationLevel.MEDIUM)
        recommendations.append(
            f"High total exposure ({total_pct:.1f}% of bankroll). Keep a capital reserve."
        )

    if len(by_category) == 1 and total > 0:
        recommendations.append("All positions share the same pair category. Consider diversifying.")

    volatile_pct = percent_of(volatile, bankroll)
    if volatile_pct > settings.max_percent_volatile:
        level = _escalate(level, ConcentrationLevel.HIGH)
        recommendations.append(
            f"Volatile exposure ({volatile_pct:.1f}%) exceeds limit "
            f"({settings.max_percent_volatile:.1f}%)."
        )

    logger.debug("Portfolio exposure %s across %d positions: %s", total, len(repo), level.value)
    return Ok(
        PortfolioRisk(
            total_exposure=total,
            exposure_by_network=by_network,
            exposure_by_pair_category=by_category,
            volatile_exposure=volatile,
            concentration_risk=level,
            recommendations=tuple(recommendations),
        )
    )


__all__ = ["PortfolioRisk", "assess_portfolio_risk"]
