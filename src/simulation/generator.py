from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from dispatch import Dispatcher
from scheduler import Direction

logger = logging.getLogger(__name__)


class HallCallGenerator:
    """Produces random hall calls, a Poisson-distributed number per tick."""

    def __init__(
        self,
        floor_count: int,
        arrival_rate: float = 0.5,
        max_calls: Optional[int] = None,
        random_seed: Optional[int] = None,
    ) -> None:
        self.floor_count = floor_count
        self.arrival_rate = arrival_rate
        self.max_calls = max_calls
        self.random = random.Random(random_seed)
        self.generated = 0

    @property
    def exhausted(self) -> bool:
        return self.max_calls is not None and self.generated >= self.max_calls

    def generate(self) -> List[Tuple[int, Direction]]:
        calls: List[Tuple[int, Direction]] = []
        if self.exhausted:
            return calls
        for _ in range(self._arrivals_this_tick()):
            calls.append(self._random_call())
            self.generated += 1
            if self.exhausted:
                logger.info("Reached limit of %d generated calls", self.max_calls)
                break
        return calls

    def submit(self, dispatcher: Dispatcher) -> int:
        """Generate this tick's calls and hand them to the dispatcher."""

        accepted = 0
        for floor, direction in self.generate():
            if dispatcher.receive_request(floor, direction):
                accepted += 1
        return accepted

    def _random_call(self) -> Tuple[int, Direction]:
        floor = self.random.randint(1, self.floor_count)
        if floor == 1:
            return floor, Direction.UP
        if floor == self.floor_count:
            return floor, Direction.DOWN
        return floor, self.random.choice((Direction.UP, Direction.DOWN))

    def _arrivals_this_tick(self) -> int:
        # Poisson count: exponential gaps between calls, summed until the
        # tick is used up.
        if self.arrival_rate <= 0:
            return 0
        count = 0
        elapsed = self.random.expovariate(self.arrival_rate)
        while elapsed < 1.0:
            count += 1
            elapsed += self.random.expovariate(self.arrival_rate)
        return count
