"""Hall-call dispatch engine for a bank of elevator cars."""

from .call import Call
from .car import Car
from .config import DispatcherConfig
from .dispatcher import Dispatcher

__all__ = [
    "Call",
    "Car",
    "Dispatcher",
    "DispatcherConfig",
]
