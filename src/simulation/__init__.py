"""Elevator bank simulation primitives."""

from .config import SystemConfig
from .elevator import Elevator, ElevatorStatus
from .errors import InvalidFloorError, RequestError, SameOriginDestinationError
from .request import RideRequest
from .state import StateStore, SystemSnapshot, build_snapshot, step_all_elevators
from .system import ElevatorSystem, RequestResult, SystemStats

__all__ = [
    "Elevator",
    "ElevatorStatus",
    "ElevatorSystem",
    "InvalidFloorError",
    "RequestError",
    "RequestResult",
    "RideRequest",
    "SameOriginDestinationError",
    "StateStore",
    "SystemConfig",
    "SystemSnapshot",
    "SystemStats",
    "build_snapshot",
    "step_all_elevators",
]
