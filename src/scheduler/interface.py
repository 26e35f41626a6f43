from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol, Sequence, Tuple

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from dispatch.call import Call
    from dispatch.car import Car


class Direction(str, Enum):
    """Travel direction of a car, or the requested direction of a hall call."""

    UP = "up"
    DOWN = "down"
    IDLE = "idle"


class CallStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"


@dataclass(frozen=True)
class CarSnapshot:
    """Read-only view of a car handed out to collaborators."""

    car_id: int
    current_floor: int
    direction: Direction
    stops: Tuple[int, ...]

    @property
    def is_idle(self) -> bool:
        return not self.stops

    def to_dict(self) -> dict:
        return {
            "id": self.car_id,
            "current_floor": self.current_floor,
            "direction": self.direction.value,
            "stops": list(self.stops),
            "is_idle": self.is_idle,
        }


@dataclass(frozen=True)
class CallSnapshot:
    """Read-only view of a hall call."""

    call_id: int
    floor: int
    direction: Direction
    status: CallStatus
    assigned_car_id: Optional[int]
    requested_at: int

    def to_dict(self) -> dict:
        return {
            "id": self.call_id,
            "floor": self.floor,
            "direction": self.direction.value,
            "status": self.status.value,
            "assigned_car_id": self.assigned_car_id,
            "requested_at": self.requested_at,
        }


class Scheduler(Protocol):
    """Strategy interface for matching pending hall calls to cars."""

    def assign_calls(self, cars: Sequence["Car"], calls: Sequence["Call"]) -> Dict[int, List[int]]:
        """
        Assign pending calls to cars and return car_id -> floors assigned.

        Implementations run inside the dispatcher's lock and mutate the
        live cars and calls they are given. Calls that cannot be placed are
        left pending for the next invocation.
        """
        ...
