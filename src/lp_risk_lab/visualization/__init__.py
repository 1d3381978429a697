"""Visualization helpers for :mod:`lp_risk_lab`."""

from .visualizer import Visualizer

__all__ = ["Visualizer"]
