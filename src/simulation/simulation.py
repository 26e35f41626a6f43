from __future__ import annotations

import logging
import statistics
from dataclasses import dataclass
from typing import List, Optional

from dispatch import Dispatcher
from scheduler import CallSnapshot

from .generator import HallCallGenerator

logger = logging.getLogger(__name__)


@dataclass
class MetricsSnapshot:
    tick: int
    served: int
    outstanding: int
    average_wait: float
    wait_p95: float


class MetricsTracker:
    """Wait times, in ticks, from a call being registered to being served."""

    def __init__(self) -> None:
        self.wait_times: List[int] = []

    def record_served(self, calls: List[CallSnapshot], tick: int) -> None:
        for call in calls:
            self.wait_times.append(tick - call.requested_at)

    def wait_p95(self) -> float:
        """95th percentile wait, interpolated between the two nearest samples."""

        if len(self.wait_times) < 2:
            return float(sum(self.wait_times))
        return statistics.quantiles(self.wait_times, n=20, method="inclusive")[-1]

    def snapshot(self, tick: int, outstanding: int = 0) -> MetricsSnapshot:
        waits = self.wait_times
        return MetricsSnapshot(
            tick=tick,
            served=len(waits),
            outstanding=outstanding,
            average_wait=statistics.fmean(waits) if waits else 0.0,
            wait_p95=self.wait_p95(),
        )


class Simulation:
    """Tick driver: new calls, then assignment, then one step of motion."""

    def __init__(self, dispatcher: Dispatcher, generator: Optional[HallCallGenerator] = None) -> None:
        self.dispatcher = dispatcher
        self.generator = generator
        self.metrics = MetricsTracker()

    @property
    def current_time(self) -> int:
        return self.dispatcher.current_tick

    def step(self) -> List[CallSnapshot]:
        if self.generator is not None:
            self.generator.submit(self.dispatcher)
        self.dispatcher.assign()
        served = self.dispatcher.step()
        self.metrics.record_served(served, self.dispatcher.current_tick)
        return served

    def run(self, duration: int) -> None:
        for _ in range(duration):
            self.step()

    def run_until_idle(self, max_ticks: int = 1000) -> int:
        """Step until no calls are left and every car is idle.

        Returns the number of ticks taken. Gives up after ``max_ticks``, since a
        call no car can take would otherwise keep the loop alive forever.
        """

        for ticks in range(max_ticks):
            if self.is_idle():
                return ticks
            self.step()
        logger.warning("Simulation still busy after %d ticks", max_ticks)
        return max_ticks

    def is_idle(self) -> bool:
        if self.generator is not None and not self.generator.exhausted:
            return False
        if self.dispatcher.list_calls():
            return False
        return all(car.is_idle for car in self.dispatcher.list_cars())

    def metrics_snapshot(self) -> MetricsSnapshot:
        return self.metrics.snapshot(self.current_time, outstanding=len(self.dispatcher.list_calls()))
