from __future__ import annotations

import logging

import pytest

from dispatch import Dispatcher, DispatcherConfig
from scheduler import Direction
from simulation import HallCallGenerator, MetricsTracker, Simulation


class TestConfig:

    def test_defaults(self):
        config = DispatcherConfig()
        assert (config.floor_count, config.car_count, config.scheduler_name) == (10, 4, "batching")

    @pytest.mark.parametrize("floor_count,car_count", [(1, 1), (10, 0)])
    def test_validation(self, floor_count, car_count):
        with pytest.raises(ValueError):
            DispatcherConfig(floor_count=floor_count, car_count=car_count)

    def test_from_dict(self):
        config = DispatcherConfig.from_dict(
            {
                "building": {"floor_count": 20, "car_count": 6},
                "scheduler": {"name": "nearest"},
            }
        )
        dispatcher = Dispatcher.from_config(config)
        assert dispatcher.floor_count == 20
        assert dispatcher.car_count == 6
        assert dispatcher.scheduler_name == "nearest"


class TestHallCallGenerator:

    def test_same_seed_same_calls(self):
        first = HallCallGenerator(floor_count=10, arrival_rate=2.0, random_seed=3)
        second = HallCallGenerator(floor_count=10, arrival_rate=2.0, random_seed=3)
        assert [first.generate() for _ in range(20)] == [second.generate() for _ in range(20)]

    def test_terminal_floors_get_valid_directions(self):
        generator = HallCallGenerator(floor_count=2, arrival_rate=3.0, random_seed=11)
        calls = [call for _ in range(50) for call in generator.generate()]
        assert calls
        assert set(calls) <= {(1, Direction.UP), (2, Direction.DOWN)}

    def test_stops_at_max_calls(self):
        generator = HallCallGenerator(floor_count=10, arrival_rate=5.0, max_calls=7, random_seed=1)
        total = sum(len(generator.generate()) for _ in range(50))
        assert total == 7
        assert generator.exhausted

    def test_limit_is_logged_once(self, caplog):
        generator = HallCallGenerator(floor_count=10, arrival_rate=5.0, max_calls=3, random_seed=4)
        with caplog.at_level(logging.INFO, logger="simulation.generator"):
            for _ in range(20):
                generator.generate()
        limit_records = [r for r in caplog.records if "Reached limit" in r.getMessage()]
        assert len(limit_records) == 1
        assert generator.generated == 3

    def test_zero_rate_generates_nothing(self):
        generator = HallCallGenerator(floor_count=10, arrival_rate=0.0)
        assert generator.generate() == []

    def test_submit_feeds_dispatcher(self):
        dispatcher = Dispatcher(floor_count=10, car_count=2)
        generator = HallCallGenerator(floor_count=10, arrival_rate=4.0, max_calls=5, random_seed=5)
        accepted = sum(generator.submit(dispatcher) for _ in range(10))
        assert accepted == len(dispatcher.list_calls())
        assert 0 < accepted <= 5


class TestSimulation:

    def test_step_assigns_then_moves(self):
        dispatcher = Dispatcher(floor_count=10, car_count=1)
        simulation = Simulation(dispatcher)
        dispatcher.receive_request(5, Direction.UP)

        for _ in range(4):
            assert simulation.step() == []
        served = simulation.step()

        assert [call.floor for call in served] == [5]
        assert simulation.current_time == 5
        metrics = simulation.metrics_snapshot()
        assert metrics.served == 1
        assert metrics.average_wait == 5.0
        assert metrics.outstanding == 0

    def test_run_until_idle_counts_ticks(self):
        dispatcher = Dispatcher(floor_count=10, car_count=4)
        simulation = Simulation(dispatcher)
        dispatcher.receive_request(2, Direction.UP)
        dispatcher.receive_request(3, Direction.UP)

        assert simulation.run_until_idle() == 4
        assert simulation.is_idle()

    def test_generated_load_is_served(self):
        dispatcher = Dispatcher(floor_count=8, car_count=3)
        generator = HallCallGenerator(floor_count=8, arrival_rate=0.8, max_calls=30, random_seed=2)
        simulation = Simulation(dispatcher, generator=generator)

        simulation.run(300)

        metrics = simulation.metrics_snapshot()
        assert generator.exhausted
        assert metrics.served > 0
        assert metrics.served + metrics.outstanding <= generator.generated

    def test_run_advances_fixed_ticks(self):
        simulation = Simulation(Dispatcher(floor_count=5, car_count=1))
        simulation.run(12)
        assert simulation.current_time == 12


def test_metrics_percentile():
    tracker = MetricsTracker()
    assert tracker.snapshot(0).wait_p95 == 0.0
    tracker.wait_times = [1, 2, 3, 4, 5]
    snapshot = tracker.snapshot(10)
    assert snapshot.average_wait == 3.0
    assert snapshot.wait_p95 == pytest.approx(4.8)
