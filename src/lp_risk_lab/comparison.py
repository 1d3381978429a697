"""Rank backtests of alternative ranges by drawdown-adjusted return."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

import pandas as pd

from .backtest import BacktestResult
from .core.models import RangeType

EXCELLENT = "excellent"
MODERATE_POSITIVE = "moderate positive"
NOT_RECOMMENDED = "not recommended"


@dataclass(frozen=True)
class RangeComparison:
    range_type: RangeType
    net_return: Decimal
    risk_adjusted_return: Decimal
    recommendation: str


@dataclass(frozen=True)
class BacktestComparison:
    best: BacktestResult
    comparison: tuple[RangeComparison, ...]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "range_type": row.range_type.value,
                    "net_return": row.net_return,
                    "risk_adjusted_return": row.risk_adjusted_return,
                    "recommendation": row.recommendation,
                }
                for row in self.comparison
            ]
        )


def risk_adjusted_return(result: BacktestResult) -> Decimal:
    """Net PnL percent per unit of drawdown; the raw return when drawdown is zero."""

    drawdown = result.metrics.max_drawdown
    if drawdown > 0:
        return result.metrics.net_pnl_percent / drawdown
    return result.metrics.net_pnl_percent


def _label(net_pnl_percent: Decimal) -> str:
    if net_pnl_percent > 5:
        return EXCELLENT
    if net_pnl_percent > 0:
        return MODERATE_POSITIVE
    return NOT_RECOMMENDED


def compare_backtests(results: Sequence[BacktestResult]) -> BacktestComparison:
    """Pick the best result; ties keep the earliest entry."""

    if not results:
        raise ValueError("compare_backtests requires at least one result")

    rows: list[RangeComparison] = []
    best = results[0]
    best_score = risk_adjusted_return(best)
    for result in results:
        score = risk_adjusted_return(result)
        rows.append(
            RangeComparison(
                range_type=result.range_type,
                net_return=result.metrics.net_pnl_percent,
                risk_adjusted_return=score,
                recommendation=_label(result.metrics.net_pnl_percent),
            )
        )
        if score > best_score:
            best, best_score = result, score
    return BacktestComparison(best=best, comparison=tuple(rows))


__all__ = [
    "BacktestComparison",
    "EXCELLENT",
    "MODERATE_POSITIVE",
    "NOT_RECOMMENDED",
    "RangeComparison",
    "compare_backtests",
    "risk_adjusted_return",
]
