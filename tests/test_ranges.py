from __future__ import annotations

from decimal import Decimal

import pytest

from lp_risk_lab.core import PairCategory, PoolSnapshot, RangeType, RiskProfile
from lp_risk_lab.ranges import classify_range, suggest_ranges


@pytest.mark.parametrize(
    ("lower", "upper", "expected"),
    [
        ("85", "110", RangeType.DEFENSIVE),
        ("90", "105", RangeType.OPTIMIZED),
        ("95", "115", RangeType.OPTIMIZED),  # exactly 20% is not defensive
        ("95", "105", RangeType.AGGRESSIVE),  # exactly 10% is not optimized
        ("99", "100", RangeType.AGGRESSIVE),
    ],
)
def test_classify_range_thresholds(lower: str, upper: str, expected: RangeType) -> None:
    assert classify_range(Decimal(lower), Decimal(upper), Decimal("100")) is expected


def test_classify_range_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError):
        classify_range(Decimal("110"), Decimal("90"), Decimal("100"))
    with pytest.raises(ValueError):
        classify_range(Decimal("90"), Decimal("110"), Decimal("0"))


def test_suggest_ranges_follow_profile_widths() -> None:
    pool = PoolSnapshot(
        id="p",
        network="arbitrum",
        pair_category=PairCategory.BLUECHIP_STABLE,
        tvl_usd=Decimal("1000000"),
        volume_24h_usd=Decimal("100000"),
        fee_tier=500,
        current_price=Decimal("100"),
    )
    ranges = suggest_ranges(pool, RiskProfile.AGGRESSIVE)

    assert [label for label, _, _ in ranges] == [
        RangeType.DEFENSIVE,
        RangeType.OPTIMIZED,
        RangeType.AGGRESSIVE,
    ]
    assert ranges[0][1:] == (Decimal("90"), Decimal("110"))
    assert ranges[2][1:] == (Decimal("97.5"), Decimal("102.5"))
