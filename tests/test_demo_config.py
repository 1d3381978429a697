from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

import lp_risk_demo
from lp_risk_demo import load_config, window_time_in_range
from lp_risk_lab import PairCategory, PoolSnapshot, PricePoint, run_backtest
from lp_risk_lab.backtest import BacktestRequest

SRC = Path(__file__).resolve().parents[1] / "src"


def test_loads_config_file() -> None:
    cfg = load_config(Path(__file__).resolve().parents[1] / "configs" / "demo.toml")
    assert cfg["settings"]["risk_profile"] == "NORMAL"
    assert cfg["backtest"]["periods"] == [7, 30]
    assert cfg["backtest"]["now"] == 1_760_000_000
    assert cfg["proposal"]["capital_usd"] == "800"
    assert cfg["output"]["show"] is False
    # untouched defaults survive a partial section override
    assert cfg["output"]["decision_log"] is None


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "absent.toml")
    assert cfg["settings"]["total_bankroll"] == 10_000
    assert cfg["positions_csv"].endswith("sample_positions.csv")


def test_demo_writes_reports(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg_path = tmp_path / "demo.toml"
    cfg_path.write_text(
        "\n".join(
            [
                f'positions_csv = "{(SRC / "sample_positions.csv").as_posix()}"',
                f'history_csv = "{(SRC / "sample_prices.csv").as_posix()}"',
                "[backtest]",
                "now = 1760000000",
                "[output]",
                "charts = []",
                f'decision_log = "{(tmp_path / "decisions.jsonl").as_posix()}"',
            ]
        )
    )
    outdir = tmp_path / "out"
    monkeypatch.setenv("LP_RISK_CONFIG", str(cfg_path))
    monkeypatch.setenv("LP_RISK_OUTDIR", str(outdir))
    monkeypatch.setenv("LP_RISK_BANKROLL", "20000")
    monkeypatch.setattr(sys, "argv", ["prog"])

    lp_risk_demo.main()

    assert (outdir / "backtest_summary.csv").is_file()
    assert (outdir / "range_comparison.csv").is_file()
    assert (outdir / "portfolio_exposure.csv").is_file()
    assert (tmp_path / "decisions.jsonl").read_text().count("\n") == 1
    assert "time_in_range_weighted" in capsys.readouterr().out


def test_window_time_in_range_uses_samples_inside_the_backtest_window() -> None:
    now = 1_700_000_000
    history = (
        PricePoint(now - 8 * 86_400, Decimal("100")),
        PricePoint(now - 3 * 3_600, Decimal("100")),
        PricePoint(now - 2 * 3_600, Decimal("100")),
        PricePoint(now - 3_600, Decimal("200")),
    )
    pool = PoolSnapshot(
        id="p",
        network="arbitrum",
        pair_category=PairCategory.BLUECHIP_STABLE,
        tvl_usd=Decimal("1000000"),
        volume_24h_usd=Decimal("100000"),
        fee_tier=500,
        current_price=Decimal("100"),
        price_history=history,
    )
    result = run_backtest(
        BacktestRequest(pool, Decimal("90"), Decimal("110"), Decimal("1000"), 7), now=now
    )

    assert window_time_in_range(pool, result) == Decimal("50")
