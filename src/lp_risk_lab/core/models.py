"""Immutable data models used throughout LiquidityRiskLab."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any


class PairCategory(str, Enum):
    STABLE_STABLE = "stable_stable"
    BLUECHIP_STABLE = "bluechip_stable"
    ALTCOIN_STABLE = "altcoin_stable"
    OTHER = "other"

    @property
    def is_volatile(self) -> bool:
        return self in (PairCategory.ALTCOIN_STABLE, PairCategory.OTHER)


class PositionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    ATTENTION = "ATTENTION"
    CRITICAL = "CRITICAL"
    CLOSED = "CLOSED"


class RiskProfile(str, Enum):
    DEFENSIVE = "DEFENSIVE"
    NORMAL = "NORMAL"
    AGGRESSIVE = "AGGRESSIVE"


class RangeType(str, Enum):
    DEFENSIVE = "DEFENSIVE"
    OPTIMIZED = "OPTIMIZED"
    AGGRESSIVE = "AGGRESSIVE"


class ConcentrationLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 0, "medium": 1, "high": 2}[self.value]


class Decision(str, Enum):
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    ADJUSTED = "ADJUSTED"


def _dec(value: object) -> Decimal:
    """Convert numbers to :class:`Decimal` via ``str`` so floats keep their printed value."""

    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class PricePoint:
    """Single price observation; ``timestamp`` is unix seconds."""

    timestamp: int
    price: Decimal
    volume: Decimal | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "price": self.price,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class PoolSnapshot:
    """Point-in-time view of a concentrated-liquidity pool."""

    id: str
    network: str
    pair_category: PairCategory
    tvl_usd: Decimal
    volume_24h_usd: Decimal
    fee_tier: int  # hundredths of a basis point, e.g. 3000 for 0.30%
    current_price: Decimal
    price_history: tuple[PricePoint, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["pair_category"] = self.pair_category.value
        data["price_points"] = len(self.price_history)
        del data["price_history"]
        return data


@dataclass(frozen=True)
class PositionSnapshot:
    """Capital committed to a pool; ``network`` and ``pair_category`` are the joined pool fields."""

    pool_id: str
    network: str
    pair_category: PairCategory
    capital_usd: Decimal
    status: PositionStatus = PositionStatus.ACTIVE

    @property
    def is_volatile(self) -> bool:
        return self.pair_category.is_volatile

    def to_dict(self) -> dict[str, Any]:
        return {
            "pool_id": self.pool_id,
            "network": self.network,
            "pair_category": self.pair_category.value,
            "capital_usd": self.capital_usd,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class RiskSettings:
    """User risk limits. Percentages are expressed in percent (``5`` means 5%)."""

    total_bankroll: Decimal = Decimal("10000")
    risk_profile: RiskProfile = RiskProfile.NORMAL
    max_percent_per_pool: Decimal = Decimal("5")
    max_percent_per_network: Decimal = Decimal("25")
    max_percent_volatile: Decimal = Decimal("20")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "RiskSettings":
        """Build settings from a config section, keeping defaults for missing keys."""

        defaults = cls()
        profile = raw.get("risk_profile", defaults.risk_profile)
        return cls(
            total_bankroll=_dec(raw.get("total_bankroll", defaults.total_bankroll)),
            risk_profile=RiskProfile(str(getattr(profile, "value", profile)).upper()),
            max_percent_per_pool=_dec(
                raw.get("max_percent_per_pool", defaults.max_percent_per_pool)
            ),
            max_percent_per_network=_dec(
                raw.get("max_percent_per_network", defaults.max_percent_per_network)
            ),
            max_percent_volatile=_dec(
                raw.get("max_percent_volatile", defaults.max_percent_volatile)
            ),
        )

    def cap(self, percent: Decimal) -> Decimal:
        """Absolute USD amount corresponding to ``percent`` of the bankroll."""

        return self.total_bankroll * percent / 100

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["risk_profile"] = self.risk_profile.value
        return data


@dataclass(frozen=True)
class RiskContext:
    """Settings and open positions read once by the caller and shared by every check."""

    settings: RiskSettings | None
    positions: tuple[PositionSnapshot, ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls,
        settings: RiskSettings | None,
        positions: Sequence[PositionSnapshot] = (),
    ) -> "RiskContext":
        return cls(settings=settings, positions=tuple(positions))

    @property
    def active_positions(self) -> tuple[PositionSnapshot, ...]:
        return tuple(p for p in self.positions if p.status is PositionStatus.ACTIVE)


__all__ = [
    "ConcentrationLevel",
    "Decision",
    "PairCategory",
    "PoolSnapshot",
    "PositionSnapshot",
    "PositionStatus",
    "PricePoint",
    "RangeType",
    "RiskContext",
    "RiskProfile",
    "RiskSettings",
]
