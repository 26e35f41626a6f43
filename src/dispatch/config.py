from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class DispatcherConfig:
    """Building shape and assignment policy for a dispatcher."""

    floor_count: int = 10
    car_count: int = 4
    scheduler_name: str = "batching"
    scheduler_options: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.floor_count < 2:
            raise ValueError(f"floor_count must be at least 2, got {self.floor_count}")
        if self.car_count < 1:
            raise ValueError(f"car_count must be at least 1, got {self.car_count}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DispatcherConfig":
        building_cfg = data.get("building", {})
        scheduler_cfg = data.get("scheduler", {})
        return cls(
            floor_count=building_cfg.get("floor_count", 10),
            car_count=building_cfg.get("car_count", 4),
            scheduler_name=scheduler_cfg.get("name", "batching"),
            scheduler_options=scheduler_cfg.get("options", {}),
        )
