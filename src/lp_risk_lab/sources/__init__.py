"""Data source adapters used by :mod:`lp_risk_lab`."""

from __future__ import annotations

from typing import Protocol

from ..core import PositionSnapshot, PricePoint
from .csv import PositionCSVSource, PriceHistoryCSVSource


class PriceSource(Protocol):
    """Adapter protocol returning a price series for one pool."""

    def fetch(self) -> list[PricePoint]: ...


class PositionSource(Protocol):
    """Adapter protocol returning the currently tracked positions."""

    def fetch(self) -> list[PositionSnapshot]: ...


__all__ = [
    "PositionCSVSource",
    "PositionSource",
    "PriceHistoryCSVSource",
    "PriceSource",
]
