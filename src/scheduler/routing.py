from __future__ import annotations

from typing import TYPE_CHECKING

from .interface import Direction

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from dispatch.car import Car


def direction_toward(origin: int, target: int) -> Direction:
    if target > origin:
        return Direction.UP
    if target < origin:
        return Direction.DOWN
    return Direction.IDLE


def insert_stop_in_direction_order(car: "Car", floor: int) -> None:
    """Add a floor to the car's stops, keeping them ordered for its direction.

    Duplicates are ignored. An idle car keeps insertion order; its direction
    is fixed by the caller once it is given work.
    """

    if floor in car.stops:
        return
    car.stops.append(floor)
    if car.direction is Direction.UP:
        car.stops.sort()
    elif car.direction is Direction.DOWN:
        car.stops.sort(reverse=True)


def is_passing_floor(car: "Car", floor: int) -> bool:
    """Return True if the car will pass ``floor`` without reversing.

    Only floors strictly ahead of the car and no further than its last stop
    count; the floor the car is on never does.
    """

    if car.direction is Direction.UP:
        highest = max(car.current_floor, max(car.stops)) if car.stops else car.current_floor
        return car.current_floor < floor <= highest
    if car.direction is Direction.DOWN:
        lowest = min(car.current_floor, min(car.stops)) if car.stops else car.current_floor
        return lowest <= floor < car.current_floor
    return False
