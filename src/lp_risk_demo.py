from __future__ import annotations

import logging
import os
import sys
import tomllib
from decimal import Decimal
from pathlib import Path
from typing import Any, cast

import pandas as pd

from lp_risk_lab import (
    JsonlDecisionRecorder,
    PairCategory,
    PoolSnapshot,
    PositionCSVSource,
    PriceHistoryCSVSource,
    RiskContext,
    RiskSettings,
    assess_portfolio_risk,
    assess_position_risk,
    compare_backtests,
    run_backtest,
    suggest_ranges,
)
from lp_risk_lab.backtest import BacktestRequest, BacktestResult
from lp_risk_lab.lp_math import time_in_range
from lp_risk_lab.reporting import backtest_report, portfolio_report
from lp_risk_lab.visualization import Visualizer


logger = logging.getLogger(__name__)


def load_config(path: str | Path | None) -> dict[str, Any]:
    """Load configuration from a TOML file and merge with defaults.

    Parameters
    ----------
    path:
        Optional path to a configuration file. When ``None`` or missing, the
        built-in defaults are used.

    Returns
    -------
    dict[str, Any]
        Configuration dictionary with any file overrides applied.
    """

    default = {
        "settings": {
            "total_bankroll": 10_000,
            "risk_profile": "NORMAL",
            "max_percent_per_pool": 5,
            "max_percent_per_network": 25,
            "max_percent_volatile": 20,
        },
        "pool": {
            "id": "arbitrum_uniswap_weth_usdc",
            "network": "arbitrum",
            "pair_category": "bluechip_stable",
            "tvl_usd": "25000000",
            "volume_24h_usd": "12000000",
            "fee_tier": 500,
            "current_price": "3000",
        },
        "proposal": {"capital_usd": "1000"},
        "backtest": {"capital_usd": "1000", "periods": [7, 30], "now": None},
        "positions_csv": str(Path(__file__).with_name("sample_positions.csv")),
        "history_csv": str(Path(__file__).with_name("sample_prices.csv")),
        "output": {
            "outdir": None,
            "show": True,
            "charts": ["pnl", "exposure"],
            "decision_log": None,
        },
    }

    cfg_path = Path(path) if path else None
    if cfg_path and cfg_path.is_file():
        with open(cfg_path, "rb") as f:
            file_cfg = tomllib.load(f)
        for k, v in file_cfg.items():
            if isinstance(v, dict) and k in default and isinstance(default[k], dict):
                cast(dict, default[k]).update(v)
            else:
                default[k] = v
    elif cfg_path:
        logger.warning("Config file not found at %s. Using defaults.", cfg_path)

    return default


def _apply_env_overrides(cfg: dict[str, Any]) -> None:
    if bankroll_env := os.getenv("LP_RISK_BANKROLL"):
        try:
            cfg["settings"]["total_bankroll"] = str(Decimal(bankroll_env))
        except ArithmeticError:
            pass
    if profile_env := os.getenv("LP_RISK_PROFILE"):
        cfg["settings"]["risk_profile"] = profile_env.upper()
    if outdir_env := os.getenv("LP_RISK_OUTDIR"):
        cfg.setdefault("output", {})["outdir"] = outdir_env
    if history_env := os.getenv("LP_RISK_HISTORY_CSV"):
        cfg["history_csv"] = history_env
    if positions_env := os.getenv("LP_RISK_POSITIONS_CSV"):
        cfg["positions_csv"] = positions_env


def build_pool(pool_cfg: dict[str, Any], history_path: str | None) -> PoolSnapshot:
    history = PriceHistoryCSVSource(history_path).fetch() if history_path else []
    return PoolSnapshot(
        id=str(pool_cfg["id"]),
        network=str(pool_cfg["network"]),
        pair_category=PairCategory(str(pool_cfg["pair_category"])),
        tvl_usd=Decimal(str(pool_cfg["tvl_usd"])),
        volume_24h_usd=Decimal(str(pool_cfg["volume_24h_usd"])),
        fee_tier=int(pool_cfg["fee_tier"]),
        current_price=Decimal(str(pool_cfg["current_price"])),
        price_history=tuple(history),
    )


def window_time_in_range(pool: PoolSnapshot, result: BacktestResult) -> Decimal:
    """Time-weighted time-in-range over the raw samples of a backtest window."""
    start, end = int(result.start_date.timestamp()), int(result.end_date.timestamp())
    points = [p for p in pool.price_history if start <= p.timestamp < end]
    return time_in_range(points, result.price_lower, result.price_upper)


def main() -> None:
    """Run the demo using configuration from file or environment variables."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    cfg_file = os.getenv("LP_RISK_CONFIG") or (sys.argv[1] if len(sys.argv) > 1 else None)
    cfg = load_config(cfg_file)
    _apply_env_overrides(cfg)

    settings = RiskSettings.from_mapping(cfg.get("settings", {}))
    positions_path = cfg.get("positions_csv")
    positions = PositionCSVSource(str(positions_path)).fetch() if positions_path else []
    context = RiskContext.build(settings, positions)
    pool = build_pool(cfg["pool"], cfg.get("history_csv"))

    out = cfg.get("output", {})
    outdir = Path(out["outdir"]) if out.get("outdir") else None
    show = bool(out.get("show", True)) if not outdir else False
    charts = out.get("charts", [])
    recorder = JsonlDecisionRecorder(out["decision_log"]) if out.get("decision_log") else None

    proposed = Decimal(str(cfg.get("proposal", {}).get("capital_usd", "0")))
    assessment = assess_position_risk(pool, proposed, context, recorder=recorder)
    print(f"Position allowed: {assessment.allowed} ({assessment.reason})")
    for warning in assessment.warnings:
        print(f"  warning: {warning}")

    portfolio = assess_portfolio_risk(context).unwrap()
    print(f"Portfolio concentration risk: {portfolio.concentration_risk.value}")
    for rec in portfolio.recommendations:
        print(f"  {rec}")

    bt_cfg = cfg.get("backtest", {})
    capital = Decimal(str(bt_cfg.get("capital_usd", "1000")))
    now = bt_cfg.get("now")
    results: list[BacktestResult] = []
    for period in bt_cfg.get("periods", [7]):
        for _, lower, upper in suggest_ranges(pool, settings.risk_profile):
            request = BacktestRequest(pool, lower, upper, capital, int(period))
            results.append(run_backtest(request, now=now))

    summary = pd.DataFrame([r.to_dict() for r in results])
    if not summary.empty:
        summary["time_in_range_weighted"] = [window_time_in_range(pool, r) for r in results]
        columns = [
            "range_type",
            "period",
            "time_in_range",
            "time_in_range_weighted",
            "net_pnl_percent",
        ]
        print(summary[columns].to_string())
        best = compare_backtests(results).best
        print(f"Best range: {best.range_type.value} over {best.period}")

    if outdir:
        backtest_report(results, outdir)
        portfolio_report(portfolio, outdir)

    if "pnl" in charts:
        Visualizer.line_cumulative_pnl(
            results,
            save_path=str(outdir / "cumulative_pnl.png") if outdir else None,
            show=show,
        )
    if "exposure" in charts:
        Visualizer.bar_exposure(
            portfolio,
            save_path=str(outdir / "exposure_by_network.png") if outdir else None,
            show=show,
        )


if __name__ == "__main__":
    main()
