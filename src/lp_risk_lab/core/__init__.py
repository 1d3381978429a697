"""Core data structures for :mod:`lp_risk_lab`.

This subpackage groups the fundamental models, constants and repositories used
across the project so they can be shared without importing the analytics
modules exposed in :mod:`lp_risk_lab.__init__`.
"""

from __future__ import annotations

from .constants import RISK_PROFILE_CONFIGS, RiskProfileConfig
from .models import (
    ConcentrationLevel,
    Decision,
    PairCategory,
    PoolSnapshot,
    PositionSnapshot,
    PositionStatus,
    PricePoint,
    RangeType,
    RiskContext,
    RiskProfile,
    RiskSettings,
)
from .repositories import PositionRepository
from .result import Err, Ok, Result, RiskError

__all__ = [
    "ConcentrationLevel",
    "Decision",
    "Err",
    "Ok",
    "PairCategory",
    "PoolSnapshot",
    "PositionRepository",
    "PositionSnapshot",
    "PositionStatus",
    "PricePoint",
    "RISK_PROFILE_CONFIGS",
    "RangeType",
    "Result",
    "RiskContext",
    "RiskError",
    "RiskProfile",
    "RiskProfileConfig",
    "RiskSettings",
]
