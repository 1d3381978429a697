"""Decimal arithmetic helpers for concentrated-liquidity positions.

``estimate_daily_fees`` and ``estimate_impermanent_loss`` are the default
implementations of the fee and impermanent-loss models consumed by the
backtest; callers can inject their own functions with the same signatures.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Context, Decimal, localcontext
from typing import Protocol

from .core.models import PricePoint

DECIMAL_CONTEXT = Context(prec=30, rounding=ROUND_HALF_UP)

# Fee share never exceeds 10% of pool fees regardless of range concentration.
MAX_FEE_SHARE = Decimal("0.1")

ZERO = Decimal(0)
HUNDRED = Decimal(100)


class FeeEstimator(Protocol):
    def __call__(
        self,
        volume_24h_usd: Decimal,
        tvl_usd: Decimal,
        fee_tier: int,
        capital_usd: Decimal,
        range_width_percent: Decimal,
    ) -> Decimal: ...


class ILEstimator(Protocol):
    def __call__(
        self,
        entry_price: Decimal,
        comparison_price: Decimal,
        price_lower: Decimal,
        price_upper: Decimal,
    ) -> Decimal: ...


def to_decimal(value: object) -> Decimal:
    """Convert ``value`` to :class:`Decimal`, routing floats through ``str``."""

    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(str(value))


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """``part / whole * 100`` with a zero guard on ``whole``."""

    if whole == 0:
        return ZERO
    return part / whole * HUNDRED


def range_width_percent(
    price_lower: Decimal, price_upper: Decimal, reference_price: Decimal
) -> Decimal:
    return percent_of(price_upper - price_lower, reference_price)


def range_bounds(current_price: Decimal, width_percent: Decimal) -> tuple[Decimal, Decimal]:
    """Symmetric bounds around ``current_price`` covering ``width_percent`` in total."""

    half = to_decimal(width_percent) / 200
    return current_price * (1 - half), current_price * (1 + half)


def estimate_impermanent_loss(
    entry_price: Decimal,
    comparison_price: Decimal,
    price_lower: Decimal,
    price_upper: Decimal,
) -> Decimal:
    """Impermanent loss fraction for a price move from ``entry_price``.

    The comparison price is clamped to the range, since liquidity stops
    rebalancing once the price leaves it. The result is a non-negative
    fraction (``0.02`` for a 2% loss).
    """

    with localcontext(DECIMAL_CONTEXT):
        if entry_price <= 0:
            return ZERO
        effective = min(max(comparison_price, price_lower), price_upper)
        ratio = effective / entry_price
        if ratio <= 0:
            return ZERO
        il = 2 * ratio.sqrt() / (1 + ratio) - 1
        return abs(il)


def estimate_daily_fees(
    volume_24h_usd: Decimal,
    tvl_usd: Decimal,
    fee_tier: int,
    capital_usd: Decimal,
    range_width_percent: Decimal,
) -> Decimal:
    """Expected fee income in USD for one in-range day.

    Narrower ranges earn a larger share of pool fees, scaled by
    ``100 / range_width_percent`` and capped at :data:`MAX_FEE_SHARE`.
    """

    with localcontext(DECIMAL_CONTEXT):
        if tvl_usd <= 0 or range_width_percent <= 0:
            return ZERO
        fee_rate = Decimal(fee_tier) / 1_000_000
        pool_fees = volume_24h_usd * fee_rate
        base_share = capital_usd / tvl_usd
        share = min(base_share * (HUNDRED / range_width_percent), MAX_FEE_SHARE)
        return pool_fees * share


def time_in_range(
    points: Sequence[PricePoint], price_lower: Decimal, price_upper: Decimal
) -> Decimal:
    """Time-weighted percentage of the series spent inside ``[lower, upper]``.

    Each interval between consecutive samples counts as in range when the
    midpoint of its two prices lies inside the bounds.
    """

    if len(points) < 2:
        return ZERO
    inside = 0
    total = 0
    for prev, curr in zip(points, points[1:]):
        delta = curr.timestamp - prev.timestamp
        total += delta
        midpoint = (prev.price + curr.price) / 2
        if price_lower <= midpoint <= price_upper:
            inside += delta
    if total <= 0:
        return ZERO
    return Decimal(inside) / Decimal(total) * HUNDRED


__all__ = [
    "DECIMAL_CONTEXT",
    "FeeEstimator",
    "ILEstimator",
    "estimate_daily_fees",
    "estimate_impermanent_loss",
    "percent_of",
    "range_bounds",
    "range_width_percent",
    "time_in_range",
    "to_decimal",
]
