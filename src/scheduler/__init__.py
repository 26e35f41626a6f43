from __future__ import annotations

from typing import Dict, Type

from .batching import BatchingScheduler
from .interface import CallSnapshot, CallStatus, CarSnapshot, Direction, Scheduler
from .nearest import NearestCarScheduler
from .routing import direction_toward, insert_stop_in_direction_order, is_passing_floor

__all__ = [
    "BatchingScheduler",
    "CallSnapshot",
    "CallStatus",
    "CarSnapshot",
    "Direction",
    "NearestCarScheduler",
    "Scheduler",
    "direction_toward",
    "get_scheduler",
    "insert_stop_in_direction_order",
    "is_passing_floor",
]


SCHEDULER_REGISTRY: Dict[str, Type[Scheduler]] = {
    "batching": BatchingScheduler,
    "nearest": NearestCarScheduler,
}


def get_scheduler(name: str, **kwargs) -> Scheduler:
    cls = SCHEDULER_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown scheduler '{name}'. Available: {', '.join(SCHEDULER_REGISTRY)}")
    return cls(**kwargs)
