from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from .interface import CallStatus, Direction
from .routing import direction_toward, insert_stop_in_direction_order, is_passing_floor

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from dispatch.call import Call
    from dispatch.car import Car

logger = logging.getLogger(__name__)


class BatchingScheduler:
    """Hands each group of same-direction hall calls to a single car.

    Three passes run per invocation, each over the calls still pending:

    1. up calls are folded into the nearest car already moving up past the
       lowest of them;
    2. remaining up calls go to the nearest car idle at or below the lowest of
       them, or moving up from below it;
    3. down calls go to the nearest car idle at or above the highest of them,
       or moving down from above it.

    The chosen car takes the whole batch and travels in the batch direction,
    so it only ever arrives at a call floor moving the way the call wants.
    A batch with no car on its near side stays pending. Down-moving cars get
    no on-the-way pass of their own; pass 3 covers them only while they are
    above every pending down call.
    """

    def assign_calls(self, cars: Sequence["Car"], calls: Sequence["Call"]) -> Dict[int, List[int]]:
        assignments: Dict[int, List[int]] = {}
        self._assign_on_the_way_up(cars, calls, assignments)
        self._assign_positional(cars, calls, Direction.UP, assignments)
        self._assign_positional(cars, calls, Direction.DOWN, assignments)
        return assignments

    def _assign_on_the_way_up(
        self, cars: Sequence["Car"], calls: Sequence["Call"], assignments: Dict[int, List[int]]
    ) -> None:
        batch = self._pending_batch(calls, Direction.UP)
        if not batch:
            return
        lowest = batch[0].floor
        moving_up = [
            car for car in cars if car.direction is Direction.UP and is_passing_floor(car, lowest)
        ]
        chosen = self._closest(moving_up, lowest)
        if chosen is None:
            return
        self._assign_batch(chosen, batch, assignments)

    def _assign_positional(
        self,
        cars: Sequence["Car"],
        calls: Sequence["Call"],
        direction: Direction,
        assignments: Dict[int, List[int]],
    ) -> None:
        batch = self._pending_batch(calls, direction)
        if not batch:
            return
        anchor = batch[0].floor
        eligible = [car for car in cars if self._is_positioned(car, anchor, direction)]
        chosen = self._closest(eligible, anchor)
        if chosen is None:
            logger.debug("No car can take %d pending %s call(s) yet", len(batch), direction.value)
            return
        chosen.direction = direction
        self._assign_batch(chosen, batch, assignments)

    def _pending_batch(self, calls: Sequence["Call"], direction: Direction) -> List["Call"]:
        batch = [
            call
            for call in calls
            if call.status is CallStatus.PENDING and call.direction is direction
        ]
        # Anchor (nearest floor in the direction of travel) first.
        batch.sort(key=lambda call: call.floor, reverse=direction is Direction.DOWN)
        return batch

    def _is_positioned(self, car: "Car", anchor: int, direction: Direction) -> bool:
        # An idle car may already stand on the anchor floor; a moving one must
        # still be short of it.
        if car.direction is Direction.IDLE:
            return direction_toward(car.current_floor, anchor) in (Direction.IDLE, direction)
        if car.direction is not direction:
            return False
        if direction is Direction.UP:
            return car.current_floor < anchor
        return car.current_floor > anchor

    def _closest(self, cars: List["Car"], floor: int) -> Optional["Car"]:
        if not cars:
            return None
        return min(cars, key=lambda car: (abs(car.current_floor - floor), car.car_id))

    def _assign_batch(
        self, car: "Car", batch: List["Call"], assignments: Dict[int, List[int]]
    ) -> None:
        targets = assignments.setdefault(car.car_id, [])
        for call in batch:
            insert_stop_in_direction_order(car, call.floor)
            call.assign(car.car_id)
            targets.append(call.floor)
