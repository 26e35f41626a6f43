from __future__ import annotations

import pytest

from dispatch import Car
from scheduler import Direction, direction_toward, insert_stop_in_direction_order, is_passing_floor


class TestInsertStop:

    def test_idle_car_keeps_insertion_order(self):
        car = Car(1, direction=Direction.IDLE, stops=[2, 1])
        insert_stop_in_direction_order(car, 3)
        assert car.stops == [2, 1, 3]

    def test_up_car_sorts_ascending(self):
        car = Car(1, direction=Direction.UP, stops=[3, 7])
        insert_stop_in_direction_order(car, 5)
        assert car.stops == [3, 5, 7]

    def test_down_car_sorts_descending(self):
        car = Car(2, direction=Direction.DOWN, stops=[7, 3])
        insert_stop_in_direction_order(car, 5)
        assert car.stops == [7, 5, 3]

    def test_duplicate_floor_is_ignored(self):
        car = Car(3, direction=Direction.IDLE, stops=[2, 1])
        insert_stop_in_direction_order(car, 2)
        assert car.stops == [2, 1]

    def test_duplicate_floor_does_not_resort(self):
        car = Car(3, direction=Direction.UP, stops=[4, 8])
        insert_stop_in_direction_order(car, 8)
        assert car.stops == [4, 8]


class TestPassingFloor:

    def test_idle_car_never_passes(self):
        car = Car(1, current_floor=3)
        assert not is_passing_floor(car, 5)

    @pytest.mark.parametrize("floor,expected", [(5, True), (8, True), (9, False), (3, False), (2, False)])
    def test_up_car(self, floor, expected):
        car = Car(1, current_floor=3, direction=Direction.UP, stops=[6, 8])
        assert is_passing_floor(car, floor) is expected

    @pytest.mark.parametrize("floor,expected", [(5, True), (4, True), (3, False), (8, False), (9, False)])
    def test_down_car(self, floor, expected):
        car = Car(1, current_floor=8, direction=Direction.DOWN, stops=[4])
        assert is_passing_floor(car, floor) is expected

    def test_moving_car_without_stops_passes_nothing(self):
        car = Car(1, current_floor=3, direction=Direction.UP)
        assert not is_passing_floor(car, 4)
        assert not is_passing_floor(car, 3)


def test_direction_toward():
    assert direction_toward(3, 7) is Direction.UP
    assert direction_toward(7, 3) is Direction.DOWN
    assert direction_toward(4, 4) is Direction.IDLE
