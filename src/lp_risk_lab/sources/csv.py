"""CSV-backed data source implementations."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
import logging

import pandas as pd

from ..core import PairCategory, PositionSnapshot, PositionStatus, PricePoint

logger = logging.getLogger(__name__)


def _read(path: str, required: set[str]) -> pd.DataFrame:
    # keep numbers as text so Decimal sees the exact digits in the file
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = required.difference(df.columns)
    if missing:
        raise ValueError(f"CSV missing columns: {missing}")
    return df


def _unix_seconds(raw: str) -> int:
    """Unix seconds from either an integer string or an ISO-8601 timestamp."""

    text = raw.strip()
    if not text:
        raise ValueError("empty timestamp")
    if text.lstrip("-").isdigit():
        return int(text)
    ts = pd.Timestamp(text)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return int(ts.timestamp())


class PriceHistoryCSVSource:
    """Load a pool's price series from ``timestamp,price[,volume]`` rows.

    Timestamps may be unix seconds or ISO-8601 strings. Rows are returned in
    ascending timestamp order.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def fetch(self) -> list[PricePoint]:
        df = _read(self.path, {"timestamp", "price"})
        has_volume = "volume" in df.columns
        points: list[PricePoint] = []
        for _, r in df.iterrows():
            try:
                volume = Decimal(r["volume"]) if has_volume and r["volume"] else None
                points.append(PricePoint(_unix_seconds(r["timestamp"]), Decimal(r["price"]), volume))
            except (InvalidOperation, ValueError):
                logger.warning("Skipping malformed price row in %s: %s", self.path, dict(r))
        points.sort(key=lambda p: p.timestamp)
        return points


class PositionCSVSource:
    """Load open positions from ``pool_id,network,pair_category,capital_usd[,status]`` rows."""

    def __init__(self, path: str) -> None:
        self.path = path

    def fetch(self) -> list[PositionSnapshot]:
        df = _read(self.path, {"pool_id", "network", "pair_category", "capital_usd"})
        positions: list[PositionSnapshot] = []
        for _, r in df.iterrows():
            try:
                positions.append(
                    PositionSnapshot(
                        pool_id=str(r["pool_id"]),
                        network=str(r["network"]),
                        pair_category=PairCategory(str(r["pair_category"]).lower()),
                        capital_usd=Decimal(r["capital_usd"]),
                        status=PositionStatus(str(r.get("status") or "ACTIVE").upper()),
                    )
                )
            except (InvalidOperation, ValueError):
                logger.warning("Skipping malformed position row in %s: %s", self.path, dict(r))
        return positions


__all__ = ["PositionCSVSource", "PriceHistoryCSVSource"]
