"""In-memory repositories for LiquidityRiskLab data models."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from decimal import Decimal

import pandas as pd

from .models import PairCategory, PositionSnapshot, PositionStatus


class PositionRepository:
    """Lightweight in-memory collection of positions with pandas export."""

    def __init__(self, positions: Iterable[PositionSnapshot] | None = None) -> None:
        self._positions: list[PositionSnapshot] = list(positions) if positions else []

    def filter(
        self,
        *,
        networks: list[str] | None = None,
        categories: list[PairCategory] | None = None,
        statuses: list[PositionStatus] | None = None,
    ) -> "PositionRepository":
        res: list[PositionSnapshot] = []
        for position in self._positions:
            if networks and position.network not in networks:
                continue
            if categories and position.pair_category not in categories:
                continue
            if statuses and position.status not in statuses:
                continue
            res.append(position)
        return PositionRepository(res)

    def active(self) -> "PositionRepository":
        return self.filter(statuses=[PositionStatus.ACTIVE])

    def total_capital(self) -> Decimal:
        return sum((p.capital_usd for p in self._positions), Decimal(0))

    def exposure_by(self, attribute: str) -> dict[str, Decimal]:
        """Sum capital per value of ``attribute`` (``"network"`` or ``"pair_category"``)."""

        exposure: dict[str, Decimal] = {}
        for position in self._positions:
            key = getattr(position, attribute)
            key = getattr(key, "value", key)
            exposure[key] = exposure.get(key, Decimal(0)) + position.capital_usd
        return exposure

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([position.to_dict() for position in self._positions])

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[PositionSnapshot]:
        return iter(self._positions)


__all__ = ["PositionRepository"]
