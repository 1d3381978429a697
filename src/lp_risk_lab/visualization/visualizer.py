"""Matplotlib-based chart helpers for LiquidityRiskLab."""

from __future__ import annotations

from collections.abc import Sequence

from ..backtest import BacktestResult
from ..portfolio import PortfolioRisk


class Visualizer:
    """Collection of static helpers that turn risk and backtest outputs into charts."""

    @staticmethod
    def _plt():
        try:
            import matplotlib.pyplot as plt
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(
                "matplotlib is required for visualization. Install it with pip."
            ) from exc
        return plt

    @staticmethod
    def line_cumulative_pnl(
        results: Sequence[BacktestResult],
        title: str = "Cumulative net PnL by range",
        *,
        save_path: str | None = None,
        show: bool = True,
    ) -> None:
        """One line per backtest with a daily series; simulated results are skipped."""

        series = [r for r in results if r.daily_data]
        if not series:
            return
        plt = Visualizer._plt()
        plt.figure(figsize=(10, 6))
        for result in series:
            df = result.daily_frame()
            plt.plot(
                df.index,
                df["cumulative_pnl"].astype(float),
                label=f"{result.range_type.value} ({result.period})",
            )
        plt.axhline(0.0, linewidth=0.8)
        plt.title(title)
        plt.ylabel("Net PnL (USD)")
        plt.legend()
        plt.tight_layout()
        if save_path:
            plt.savefig(save_path, bbox_inches="tight")
        if show:
            plt.show()

    @staticmethod
    def bar_exposure(
        risk: PortfolioRisk,
        title: str = "Exposure by network",
        dimension: str = "network",
        *,
        save_path: str | None = None,
        show: bool = True,
    ) -> None:
        df = risk.to_frame()
        df = df[df["dimension"] == dimension]
        if df.empty:
            return
        plt = Visualizer._plt()
        plt.figure(figsize=(10, 6))
        plt.bar(df["bucket"], df["exposure_usd"].astype(float))
        plt.title(title)
        plt.ylabel("Exposure (USD)")
        plt.xticks(rotation=45, ha="right")
        plt.tight_layout()
        if save_path:
            plt.savefig(save_path, bbox_inches="tight")
        if show:
            plt.show()


__all__ = ["Visualizer"]
