from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from scheduler import CallSnapshot, CallStatus, Direction


@dataclass
class Call:
    """A directional hall call waiting for, or assigned to, a car."""

    call_id: int
    floor: int
    direction: Direction
    requested_at: int = 0
    status: CallStatus = CallStatus.PENDING
    assigned_car_id: Optional[int] = None

    @property
    def is_pending(self) -> bool:
        return self.status is CallStatus.PENDING

    def assign(self, car_id: int) -> None:
        self.status = CallStatus.ASSIGNED
        self.assigned_car_id = car_id

    def snapshot(self) -> CallSnapshot:
        return CallSnapshot(
            call_id=self.call_id,
            floor=self.floor,
            direction=self.direction,
            status=self.status,
            assigned_car_id=self.assigned_car_id,
            requested_at=self.requested_at,
        )
