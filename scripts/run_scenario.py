"""CLI for running offline LiftBank scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from collections import defaultdict
from dataclasses import asdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from dispatch import Dispatcher, DispatcherConfig
from scheduler import Direction
from simulation import HallCallGenerator, Simulation


def build_simulation(config: Dict) -> Simulation:
    dispatcher = Dispatcher.from_config(DispatcherConfig.from_dict(config))

    generator = None
    arrival_rate = config.get("arrival_rate", 0.0)
    if arrival_rate > 0:
        generator = HallCallGenerator(
            floor_count=dispatcher.floor_count,
            arrival_rate=arrival_rate,
            max_calls=config.get("max_calls"),
            random_seed=config.get("random_seed"),
        )
    return Simulation(dispatcher, generator=generator)


def _scripted_requests(requests: Iterable[Dict]) -> Dict[int, List[Dict]]:
    by_tick: Dict[int, List[Dict]] = defaultdict(list)
    for request in requests:
        by_tick[request.get("tick", 0)].append(request)
    return by_tick


def run_simulation(simulation: Simulation, config: Dict) -> List[Dict]:
    duration = config.get("duration", 100)
    scripted = _scripted_requests(config.get("requests", []))
    snapshots: List[Dict] = []

    for _ in range(duration):
        for request in scripted.get(simulation.current_time, []):
            simulation.dispatcher.receive_request(request["floor"], Direction(request["direction"]))
        simulation.step()
        snapshots.append(
            {
                "tick": simulation.current_time,
                "cars": [car.to_dict() for car in simulation.dispatcher.list_cars()],
            }
        )
    return snapshots


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write per-tick car positions as JSON",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every assignment and arrival")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = json.loads(args.config.read_text())
    simulation = build_simulation(config)
    snapshots = run_simulation(simulation, config)

    final_metrics = asdict(simulation.metrics_snapshot())
    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "duration": config.get("duration", 100),
        "scheduler": simulation.dispatcher.scheduler_name,
        "final_metrics": final_metrics,
        "cars_over_time": snapshots,
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Scheduler: {results['scheduler']}")
    print(f"Duration: {results['duration']} ticks")
    print("Final metrics:")
    for key, value in final_metrics.items():
        print(f"  {key}: {value}")
    if args.output:
        print(f"Saved car positions to {args.output}")


if __name__ == "__main__":
    main()
