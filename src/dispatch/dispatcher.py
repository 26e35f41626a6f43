from __future__ import annotations

import logging
import threading
from typing import List, Optional

from scheduler import CallSnapshot, CallStatus, CarSnapshot, Direction, Scheduler, get_scheduler

from .call import Call
from .car import Car
from .config import DispatcherConfig

logger = logging.getLogger(__name__)


class Dispatcher:
    """Owns the fleet and the active hall calls.

    Intake, assignment and motion are driven from outside (request handlers
    and a periodic tick driver); every public method takes the same lock, and
    reads hand back frozen snapshots rather than the live objects.
    """

    def __init__(
        self,
        floor_count: int = 10,
        car_count: int = 4,
        scheduler_name: str = "batching",
        scheduler_options: Optional[dict] = None,
    ) -> None:
        self.config = DispatcherConfig(
            floor_count=floor_count,
            car_count=car_count,
            scheduler_name=scheduler_name,
            scheduler_options=scheduler_options or {},
        )
        self.scheduler_name = scheduler_name
        self.scheduler: Scheduler = get_scheduler(scheduler_name, **self.config.scheduler_options)
        self._cars: List[Car] = [Car(car_id) for car_id in range(1, car_count + 1)]
        self._calls: List[Call] = []
        self._lock = threading.Lock()
        self._next_call_id = 1
        self._tick = 0

    @classmethod
    def from_config(cls, config: DispatcherConfig) -> "Dispatcher":
        return cls(
            floor_count=config.floor_count,
            car_count=config.car_count,
            scheduler_name=config.scheduler_name,
            scheduler_options=config.scheduler_options,
        )

    @property
    def floor_count(self) -> int:
        return self.config.floor_count

    @property
    def car_count(self) -> int:
        return self.config.car_count

    @property
    def current_tick(self) -> int:
        return self._tick

    def receive_request(self, floor: int, direction: Direction) -> bool:
        """Register a hall call; return False if it was dropped.

        Calls off either end of the building, calls leaving the building and
        repeats of an already pending call are ignored.
        """

        try:
            direction = Direction(direction)
        except ValueError:
            logger.debug("Rejected call on floor %s with direction %r", floor, direction)
            return False

        with self._lock:
            if not self._is_valid_request(floor, direction):
                logger.debug("Rejected %s call on floor %d", direction.value, floor)
                return False
            if any(
                call.is_pending and call.floor == floor and call.direction is direction
                for call in self._calls
            ):
                logger.debug("%s call on floor %d is already pending", direction.value, floor)
                return False
            call = Call(
                call_id=self._next_call_id,
                floor=floor,
                direction=direction,
                requested_at=self._tick,
            )
            self._next_call_id += 1
            self._calls.append(call)
            logger.info('"%s" request on floor %d received.', direction.value, floor)
            return True

    def assign(self) -> None:
        with self._lock:
            if not any(call.is_pending for call in self._calls):
                return
            assignments = self.scheduler.assign_calls(self._cars, self._calls)
            for car_id, floors in assignments.items():
                car = self._cars[car_id - 1]
                logger.info(
                    "Car %d assigned floor(s) %s (currently at floor %d, stops %s)",
                    car_id,
                    floors,
                    car.current_floor,
                    car.stops,
                )

    def step(self) -> List[CallSnapshot]:
        """Advance every car by one tick and return the calls it retired."""

        retired: List[CallSnapshot] = []
        with self._lock:
            self._tick += 1
            for car in self._cars:
                previous_floor = car.current_floor
                heading = car.direction
                arrived = car.advance()
                if arrived is not None:
                    served = self._retire_calls(car.car_id, arrived, heading)
                    retired.extend(served)
                    logger.info(
                        "Car %d stopped at floor %d, served %d call(s)", car.car_id, arrived, len(served)
                    )
                elif car.current_floor != previous_floor:
                    logger.debug(
                        "Car %d moving %s from floor %d to %d. Next stop: floor %d",
                        car.car_id,
                        car.direction.value,
                        previous_floor,
                        car.current_floor,
                        car.next_stop,
                    )
        return retired

    def list_cars(self) -> List[CarSnapshot]:
        with self._lock:
            return [car.snapshot() for car in self._cars]

    def list_calls(
        self, status: Optional[CallStatus] = None, direction: Optional[Direction] = None
    ) -> List[CallSnapshot]:
        status = CallStatus(status) if status is not None else None
        direction = Direction(direction) if direction is not None else None
        with self._lock:
            return [
                call.snapshot()
                for call in self._calls
                if (status is None or call.status is status)
                and (direction is None or call.direction is direction)
            ]

    def pending_calls(self) -> List[CallSnapshot]:
        return self.list_calls(status=CallStatus.PENDING)

    def assigned_calls(self) -> List[CallSnapshot]:
        return self.list_calls(status=CallStatus.ASSIGNED)

    def pending_up_calls(self) -> List[CallSnapshot]:
        return self.list_calls(status=CallStatus.PENDING, direction=Direction.UP)

    def pending_down_calls(self) -> List[CallSnapshot]:
        return self.list_calls(status=CallStatus.PENDING, direction=Direction.DOWN)

    def set_scheduler(self, name: str, **options) -> None:
        scheduler = get_scheduler(name, **options)
        with self._lock:
            self.scheduler = scheduler
            self.scheduler_name = name
            self.config.scheduler_name = name
            self.config.scheduler_options = options

    def set_car_state(self, car_id: int, floor: int, direction: Direction) -> None:
        """Place a car at a floor with a given direction (diagnostics and tests).

        Only a car without stops can be placed: its stops were ordered for
        the floor and direction it had, and moving it would break that order.
        A car placed moving with no stops goes idle on its next step.
        """

        if not 1 <= car_id <= len(self._cars):
            raise ValueError(f"Unknown car {car_id}")
        if not 1 <= floor <= self.floor_count:
            raise ValueError(f"Floor {floor} is outside 1..{self.floor_count}")
        with self._lock:
            car = self._cars[car_id - 1]
            if car.stops:
                raise ValueError(f"Car {car_id} still has stops {car.stops}")
            car.current_floor = floor
            car.direction = Direction(direction)

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "tick": self._tick,
                "floors": self.floor_count,
                "scheduler": self.scheduler_name,
                "cars": [car.snapshot().to_dict() for car in self._cars],
                "calls": [call.snapshot().to_dict() for call in self._calls],
            }

    def _is_valid_request(self, floor: int, direction: Direction) -> bool:
        if direction is Direction.IDLE:
            return False
        if not 1 <= floor <= self.floor_count:
            return False
        if floor == self.floor_count and direction is Direction.UP:
            return False
        if floor == 1 and direction is Direction.DOWN:
            return False
        return True

    def _retire_calls(self, car_id: int, floor: int, heading: Direction) -> List[CallSnapshot]:
        # Only calls wanting to go the way the car arrived are served; a call
        # for the other direction on the same floor keeps waiting.
        served = [
            call
            for call in self._calls
            if call.status is CallStatus.ASSIGNED
            and call.assigned_car_id == car_id
            and call.floor == floor
            and call.direction is heading
        ]
        if served:
            served_ids = {call.call_id for call in served}
            self._calls = [call for call in self._calls if call.call_id not in served_ids]
        return [call.snapshot() for call in served]
