"""Admission checks for new liquidity positions.

:func:`assess_position_risk` narrows the proposed capital through a fixed
sequence of limits. Each step can only lower the working capital and may add
a warning (soft, capital clamped) or an error (hard, position refused).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
import logging

from .core.constants import (
    GAS_TO_CAPITAL_MULTIPLE,
    MIN_CAPITAL_USD,
    MIN_TVL_USD,
    estimated_gas_usd,
)
from .core.models import Decision, PoolSnapshot, PositionSnapshot, RiskContext
from .core.result import SETTINGS_MISSING, Err, Ok, Result, RiskError
from .decision_log import DecisionRecorder, record_decision

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskAssessment:
    allowed: bool
    warnings: tuple[str, ...] = field(default_factory=tuple)
    errors: tuple[str, ...] = field(default_factory=tuple)
    adjusted_capital: Decimal | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        if self.allowed and (
            self.errors or self.adjusted_capital is None or self.adjusted_capital <= 0
        ):
            raise ValueError("allowed assessments need positive capital and no errors")


def decision_for(assessment: RiskAssessment, original_capital: Decimal) -> Decision:
    if not assessment.allowed:
        return Decision.REJECTED
    if assessment.adjusted_capital is not None and assessment.adjusted_capital < original_capital:
        return Decision.ADJUSTED
    return Decision.APPROVED


def _sum_capital(positions: Iterable[PositionSnapshot]) -> Decimal:
    return sum((p.capital_usd for p in positions), Decimal(0))


def _fmt(value: Decimal) -> str:
    return f"{value:.2f}"


def _apply_exposure_cap(
    existing: Decimal,
    capital: Decimal,
    cap: Decimal,
    *,
    limit_error: str,
    clamp_warning: str,
    warnings: list[str],
    errors: list[str],
) -> Decimal:
    """Clamp ``capital`` to the headroom left under ``cap``; error when none is left."""

    if existing + capital <= cap:
        return capital
    available = cap - existing
    if available <= 0:
        errors.append(limit_error)
        return capital
    warnings.append(clamp_warning.format(available=_fmt(available)))
    return min(capital, available)


def assess_position_risk(
    pool: PoolSnapshot,
    capital_usd: Decimal,
    context: RiskContext,
    *,
    recorder: DecisionRecorder | None = None,
) -> RiskAssessment:
    """Decide whether ``capital_usd`` may be deployed into ``pool``.

    Checks run in order: per-pool cap, per-network cap, volatile-category cap,
    minimum TVL, minimum capital and gas viability. When ``recorder`` is given
    the outcome is logged to it on a best-effort basis.
    """

    settings = context.settings
    if settings is None:
        assessment = RiskAssessment(allowed=False, errors=(SETTINGS_MISSING,), reason=SETTINGS_MISSING)
        record_decision(recorder, pool.id, Decision.REJECTED, capital_usd, None, SETTINGS_MISSING)
        return assessment

    active = context.active_positions
    warnings: list[str] = []
    errors: list[str] = []
    capital = capital_usd

    max_per_pool = settings.cap(settings.max_percent_per_pool)
    if capital > max_per_pool:
        warnings.append(
            f"Capital exceeds the per-pool limit ({settings.max_percent_per_pool}%). "
            f"Adjusted to {_fmt(max_per_pool)} USD."
        )
        capital = max_per_pool

    network_exposure = _sum_capital(p for p in active if p.network == pool.network)
    capital = _apply_exposure_cap(
        network_exposure,
        capital,
        settings.cap(settings.max_percent_per_network),
        limit_error=(
            f"Exposure limit reached on network {pool.network} "
            f"({settings.max_percent_per_network}%)."
        ),
        clamp_warning=(
            f"Exposure on network {pool.network} limited. "
            "Capital adjusted to {available} USD."
        ),
        warnings=warnings,
        errors=errors,
    )

    if pool.pair_category.is_volatile:
        volatile_exposure = _sum_capital(p for p in active if p.is_volatile)
        capital = _apply_exposure_cap(
            volatile_exposure,
            capital,
            settings.cap(settings.max_percent_volatile),
            limit_error=(
                f"Volatile pair exposure limit reached ({settings.max_percent_volatile}%)."
            ),
            clamp_warning="Volatile pair exposure limited. Capital adjusted to {available} USD.",
            warnings=warnings,
            errors=errors,
        )

    if pool.tvl_usd < MIN_TVL_USD:
        warnings.append("Pool TVL is low (<$100k). Elevated slippage risk.")

    if capital < MIN_CAPITAL_USD:
        errors.append(f"Capital too low. Recommended minimum: ${MIN_CAPITAL_USD}.")

    gas = estimated_gas_usd(pool.network)
    if capital < gas * GAS_TO_CAPITAL_MULTIPLE:
        warnings.append(f"Capital is low relative to gas cost (~${gas}). Consider increasing it.")

    allowed = not errors and capital > 0
    assessment = RiskAssessment(
        allowed=allowed,
        warnings=tuple(warnings),
        errors=tuple(errors),
        adjusted_capital=capital if allowed else None,
        reason=f"Position approved with {_fmt(capital)} USD" if allowed else " ".join(errors),
    )

    decision = decision_for(assessment, capital_usd)
    logger.info("Position risk for %s: %s (%s)", pool.id, decision.value, assessment.reason)
    record_decision(
        recorder,
        pool.id,
        decision,
        capital_usd,
        assessment.adjusted_capital,
        assessment.reason or "",
    )
    return assessment


def evaluate_position(
    pool: PoolSnapshot,
    capital_usd: Decimal,
    context: RiskContext,
    *,
    recorder: DecisionRecorder | None = None,
) -> Result[RiskAssessment]:
    """:func:`assess_position_risk` under the same ``Ok``/``Err`` convention as the aggregator."""

    if context.settings is None:
        return Err(RiskError(SETTINGS_MISSING))
    return Ok(assess_position_risk(pool, capital_usd, context, recorder=recorder))


__all__ = ["RiskAssessment", "assess_position_risk", "decision_for", "evaluate_position"]
