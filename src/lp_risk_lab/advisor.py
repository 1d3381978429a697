"""Decide whether to sit out a cycle instead of opening new positions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from .core.constants import RISK_PROFILE_CONFIGS
from .core.models import PoolSnapshot, RiskContext
from .core.result import Ok, Result, settings_missing


@dataclass(frozen=True)
class ScoredCandidate:
    """Upstream recommendation: overall score (0-100) and the best range's 7-day net return in percent."""

    pool: PoolSnapshot
    overall_score: int
    net_return_7d: Decimal


@dataclass(frozen=True)
class NoOperationAdvice:
    recommend: bool
    reason: str = ""


def should_recommend_no_operation(
    candidates: Sequence[ScoredCandidate], context: RiskContext
) -> Result[NoOperationAdvice]:
    settings = context.settings
    if settings is None:
        return settings_missing()

    min_score = RISK_PROFILE_CONFIGS[settings.risk_profile].min_score
    eligible = [c for c in candidates if c.overall_score >= min_score]

    if not eligible:
        return Ok(
            NoOperationAdvice(
                True,
                f"No pool meets the minimum score ({min_score}) for the "
                f"{settings.risk_profile.value} profile. Better not to provide liquidity now.",
            )
        )

    if all(c.net_return_7d <= 0 for c in eligible):
        return Ok(
            NoOperationAdvice(
                True,
                "All eligible pools have a negative projected net return. "
                "Better to wait for improved market conditions.",
            )
        )

    return Ok(NoOperationAdvice(False))


__all__ = ["NoOperationAdvice", "ScoredCandidate", "should_recommend_no_operation"]
