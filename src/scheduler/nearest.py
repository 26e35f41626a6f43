from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from .interface import CallStatus, Direction
from .routing import direction_toward, insert_stop_in_direction_order

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from dispatch.call import Call
    from dispatch.car import Car


class NearestCarScheduler:
    """Assigns the oldest pending calls one at a time to the closest car.

    A car is a candidate when it is idle on the call's floor or on the side it
    can reach while travelling in the call's direction, or when it is already
    moving in that direction and has not yet passed the call's floor. A call
    without a candidate is skipped and retried on the next round.
    """

    def assign_calls(self, cars: Sequence["Car"], calls: Sequence["Call"]) -> Dict[int, List[int]]:
        assignments: Dict[int, List[int]] = {}
        open_calls = sorted(
            (call for call in calls if call.status is CallStatus.PENDING),
            key=lambda call: call.call_id,
        )
        for call in open_calls:
            candidate = self._choose_car(cars, call)
            if candidate is None:
                continue
            candidate.direction = call.direction
            insert_stop_in_direction_order(candidate, call.floor)
            call.assign(candidate.car_id)
            assignments.setdefault(candidate.car_id, []).append(call.floor)
        return assignments

    def _choose_car(self, cars: Sequence["Car"], call: "Call") -> Optional["Car"]:
        available = [car for car in cars if self._can_take(car, call)]
        if not available:
            return None
        available.sort(key=lambda car: (abs(car.current_floor - call.floor), car.car_id))
        return available[0]

    def _can_take(self, car: "Car", call: "Call") -> bool:
        if car.direction is Direction.IDLE:
            return direction_toward(car.current_floor, call.floor) in (Direction.IDLE, call.direction)
        if car.direction is not call.direction:
            return False
        if call.direction is Direction.UP:
            return car.current_floor <= call.floor
        return car.current_floor >= call.floor
