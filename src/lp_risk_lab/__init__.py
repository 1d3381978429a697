"""
LiquidityRiskLab: capital-risk checks and range backtests for concentrated-liquidity pools.

Design goals:
- Immutable data model (pools, positions, settings) + light repository
- Exact Decimal arithmetic for every amount, price and percentage
- One risk context per decision: settings and positions are read once by the caller
- Flat-file adapters and CSV/matplotlib reporting; no network access and no persistence
"""

from __future__ import annotations

import logging

from . import advisor, backtest, comparison, decision_log, portfolio, risk_engine
from .advisor import NoOperationAdvice, ScoredCandidate, should_recommend_no_operation
from .backtest import BacktestRequest, BacktestResult, run_backtest, simulate_backtest
from .comparison import BacktestComparison, compare_backtests
from .core import (
    ConcentrationLevel,
    Decision,
    Err,
    Ok,
    PairCategory,
    PoolSnapshot,
    PositionRepository,
    PositionSnapshot,
    PositionStatus,
    PricePoint,
    RangeType,
    RiskContext,
    RiskError,
    RiskProfile,
    RiskSettings,
)
from .decision_log import JsonlDecisionRecorder, LoggingDecisionRecorder, record_decision
from .portfolio import PortfolioRisk, assess_portfolio_risk
from .ranges import classify_range, suggest_ranges
from .risk_engine import RiskAssessment, assess_position_risk, evaluate_position
from .sources import PositionCSVSource, PriceHistoryCSVSource

logger = logging.getLogger(__name__)

__all__ = [
    "BacktestComparison",
    "BacktestRequest",
    "BacktestResult",
    "ConcentrationLevel",
    "Decision",
    "Err",
    "JsonlDecisionRecorder",
    "LoggingDecisionRecorder",
    "NoOperationAdvice",
    "Ok",
    "PairCategory",
    "PoolSnapshot",
    "PortfolioRisk",
    "PositionCSVSource",
    "PositionRepository",
    "PositionSnapshot",
    "PositionStatus",
    "PriceHistoryCSVSource",
    "PricePoint",
    "RangeType",
    "RiskAssessment",
    "RiskContext",
    "RiskError",
    "RiskProfile",
    "RiskSettings",
    "ScoredCandidate",
    "advisor",
    "assess_portfolio_risk",
    "assess_position_risk",
    "backtest",
    "classify_range",
    "compare_backtests",
    "comparison",
    "decision_log",
    "evaluate_position",
    "portfolio",
    "record_decision",
    "risk_engine",
    "run_backtest",
    "should_recommend_no_operation",
    "simulate_backtest",
    "suggest_ranges",
]
