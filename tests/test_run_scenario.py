from __future__ import annotations

import json

import run_scenario


SCENARIO = {
    "name": "two_up_calls",
    "building": {"floor_count": 10, "car_count": 4},
    "scheduler": {"name": "batching"},
    "duration": 10,
    "requests": [
        {"tick": 0, "floor": 2, "direction": "up"},
        {"tick": 0, "floor": 3, "direction": "up"},
        {"tick": 6, "floor": 9, "direction": "down"},
    ],
}


def test_scripted_requests_are_served():
    simulation = run_scenario.build_simulation(SCENARIO)
    snapshots = run_scenario.run_simulation(simulation, SCENARIO)

    assert len(snapshots) == 10
    assert snapshots[0]["tick"] == 1
    assert snapshots[3]["cars"][0]["current_floor"] == 3
    assert simulation.metrics_snapshot().served == 2
    assert [call.floor for call in simulation.dispatcher.list_calls()] == [9]


def test_generator_is_built_from_arrival_rate():
    config = dict(SCENARIO, arrival_rate=0.5, max_calls=5, random_seed=1)
    simulation = run_scenario.build_simulation(config)
    assert simulation.generator is not None
    assert simulation.generator.max_calls == 5
    assert run_scenario.build_simulation(SCENARIO).generator is None


def test_save_results(tmp_path):
    output = tmp_path / "out" / "results.json"
    run_scenario.save_results(output, {"scenario": "x"})
    assert json.loads(output.read_text()) == {"scenario": "x"}
