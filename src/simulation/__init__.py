"""Tick driver and synthetic load for the dispatch engine."""

from .generator import HallCallGenerator
from .simulation import MetricsSnapshot, MetricsTracker, Simulation

__all__ = [
    "HallCallGenerator",
    "MetricsSnapshot",
    "MetricsTracker",
    "Simulation",
]
