"""CSV exports for backtests, range comparisons and portfolio exposure."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from .backtest import BacktestResult
from .comparison import compare_backtests
from .portfolio import PortfolioRisk


def _ensure_outdir(outdir: str | Path) -> Path:
    p = Path(outdir)
    p.mkdir(parents=True, exist_ok=True)
    return p


def _daily_key(result: BacktestResult) -> str:
    # range types repeat across suggested ranges, the bounds do not
    return (
        f"{result.range_type.value}:{result.price_lower}-{result.price_upper}:{result.period}"
    )


def _daily_filename(result: BacktestResult) -> str:
    safe_pool = result.pool_id.replace("/", "_").replace(":", "_")
    bounds = f"{result.price_lower}-{result.price_upper}"
    return (
        f"backtest_daily_{safe_pool}_{result.range_type.value.lower()}_{bounds}_{result.period}.csv"
    )


def backtest_report(results: Sequence[BacktestResult], outdir: str | Path) -> dict[str, Path]:
    """Write a summary row per backtest, each daily series and, for several ranges, a comparison.

    Simulated results have no daily series, so no daily file is written for them.
    """

    out = _ensure_outdir(outdir)
    written: dict[str, Path] = {}
    if not results:
        return written

    summary = pd.DataFrame([result.to_dict() for result in results])
    summary_path = out / "backtest_summary.csv"
    summary.to_csv(summary_path, index=False)
    written["summary"] = summary_path

    for result in results:
        if not result.daily_data:
            continue
        path = out / _daily_filename(result)
        result.daily_frame().to_csv(path)
        written[f"daily:{_daily_key(result)}"] = path

    if len(results) > 1:
        comparison = compare_backtests(results)
        frame = comparison.to_frame()
        frame["is_best"] = [r is comparison.best for r in results]
        comparison_path = out / "range_comparison.csv"
        frame.to_csv(comparison_path, index=False)
        written["comparison"] = comparison_path
    return written


def portfolio_report(risk: PortfolioRisk, outdir: str | Path) -> dict[str, Path]:
    out = _ensure_outdir(outdir)

    exposure_path = out / "portfolio_exposure.csv"
    risk.to_frame().to_csv(exposure_path, index=False)

    summary = pd.DataFrame(
        [
            {
                "total_exposure": risk.total_exposure,
                "volatile_exposure": risk.volatile_exposure,
                "concentration_risk": risk.concentration_risk.value,
            }
        ]
    )
    summary_path = out / "portfolio_summary.csv"
    summary.to_csv(summary_path, index=False)

    recs_path = out / "portfolio_recommendations.csv"
    pd.DataFrame({"recommendation": list(risk.recommendations)}).to_csv(recs_path, index=False)

    return {"exposure": exposure_path, "summary": summary_path, "recommendations": recs_path}


__all__ = ["backtest_report", "portfolio_report"]
