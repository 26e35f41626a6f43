from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from scheduler import CarSnapshot, Direction, direction_toward


@dataclass
class Car:
    """One elevator car: where it is, where it is heading, and its stops."""

    car_id: int
    current_floor: int = 1
    direction: Direction = Direction.IDLE
    stops: List[int] = field(default_factory=list)

    @property
    def is_idle(self) -> bool:
        return not self.stops

    @property
    def next_stop(self) -> Optional[int]:
        return self.stops[0] if self.stops else None

    def advance(self) -> Optional[int]:
        """Run one tick of motion.

        Either moves the car a single floor toward its next stop, or, when it
        is already there, drops that stop and returns the floor. Both never
        happen in the same tick.
        """

        if not self.stops:
            self.direction = Direction.IDLE
            return None

        target = self.stops[0]
        if self.current_floor == target:
            self.stops.pop(0)
            if self.stops:
                self.direction = direction_toward(self.current_floor, self.stops[0])
            else:
                self.direction = Direction.IDLE
            return target

        self.direction = direction_toward(self.current_floor, target)
        self.current_floor += 1 if self.direction is Direction.UP else -1
        return None

    def snapshot(self) -> CarSnapshot:
        return CarSnapshot(
            car_id=self.car_id,
            current_floor=self.current_floor,
            direction=self.direction,
            stops=tuple(self.stops),
        )
