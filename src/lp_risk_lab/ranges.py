"""Range classification and profile-driven range suggestions."""

from __future__ import annotations

from decimal import Decimal

from .core.constants import RISK_PROFILE_CONFIGS
from .core.models import PoolSnapshot, RangeType, RiskProfile
from .lp_math import range_bounds, range_width_percent

DEFENSIVE_MIN_WIDTH = Decimal(20)
OPTIMIZED_MIN_WIDTH = Decimal(10)


def classify_range(
    price_lower: Decimal, price_upper: Decimal, current_price: Decimal
) -> RangeType:
    """Map a range's width relative to ``current_price`` to a :class:`RangeType`.

    Widths above 20% are defensive, above 10% optimized, anything narrower
    aggressive.
    """

    if current_price <= 0:
        raise ValueError("current_price must be positive")
    if price_lower >= price_upper:
        raise ValueError("price_lower must be below price_upper")

    width = range_width_percent(price_lower, price_upper, current_price)
    if width > DEFENSIVE_MIN_WIDTH:
        return RangeType.DEFENSIVE
    if width > OPTIMIZED_MIN_WIDTH:
        return RangeType.OPTIMIZED
    return RangeType.AGGRESSIVE


def suggest_ranges(
    pool: PoolSnapshot, profile: RiskProfile
) -> list[tuple[RangeType, Decimal, Decimal]]:
    """Candidate ``(label, lower, upper)`` ranges centred on the pool's price."""

    cfg = RISK_PROFILE_CONFIGS[profile]
    widths = [
        (RangeType.DEFENSIVE, cfg.defensive_width),
        (RangeType.OPTIMIZED, cfg.optimized_width),
        (RangeType.AGGRESSIVE, cfg.aggressive_width),
    ]
    out: list[tuple[RangeType, Decimal, Decimal]] = []
    for label, width in widths:
        lower, upper = range_bounds(pool.current_price, width)
        out.append((label, lower, upper))
    return out


__all__ = ["classify_range", "suggest_ranges"]
