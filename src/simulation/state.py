from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from scheduler import ElevatorSnapshot

from .elevator import Elevator


@dataclass(frozen=True)
class SystemSnapshot:
    """All elevators plus the valid floor range at one point in time."""

    elevators: Tuple[Elevator, ...]
    floor_count: int

    def get_elevator(self, elevator_id: int) -> Optional[Elevator]:
        for elevator in self.elevators:
            if elevator.elevator_id == elevator_id:
                return elevator
        return None

    def with_elevator(self, index: int, elevator: Elevator) -> "SystemSnapshot":
        elevators = list(self.elevators)
        elevators[index] = elevator
        return replace(self, elevators=tuple(elevators))

    def scheduler_view(self) -> List[ElevatorSnapshot]:
        return [
            ElevatorSnapshot(
                elevator_id=elevator.elevator_id,
                current_floor=elevator.current_floor,
                direction=elevator.direction,
                targets=elevator.target_floors,
                load=elevator.passenger_count,
            )
            for elevator in self.elevators
        ]

    def active_requests(self) -> int:
        return sum(len(elevator.requests) for elevator in self.elevators)

    def to_dict(self) -> dict:
        return {
            "floor_count": self.floor_count,
            "active_requests": self.active_requests(),
            "elevators": [elevator.to_dict() for elevator in self.elevators],
        }


def build_snapshot(elevator_count: int, floor_count: int, default_capacity: int) -> SystemSnapshot:
    for name, value in (
        ("elevator_count", elevator_count),
        ("floor_count", floor_count),
        ("default_capacity", default_capacity),
    ):
        if value <= 0:
            raise ValueError(f"{name} must be greater than 0 (got {value})")
    elevators = tuple(Elevator(elevator_id=i, capacity=default_capacity) for i in range(elevator_count))
    return SystemSnapshot(elevators=elevators, floor_count=floor_count)


def step_all_elevators(snapshot: SystemSnapshot) -> SystemSnapshot:
    """Advance every elevator by one tick; cars never affect each other."""
    return replace(snapshot, elevators=tuple(elevator.step() for elevator in snapshot.elevators))


class StateStore:
    """Holds the current snapshot and swaps it out whole on every change."""

    def __init__(self, snapshot: Optional[SystemSnapshot] = None) -> None:
        self._state = snapshot if snapshot is not None else SystemSnapshot(elevators=(), floor_count=10)

    def get_state(self) -> SystemSnapshot:
        return self._state

    def replace_state(self, snapshot: SystemSnapshot) -> None:
        self._state = snapshot

    def initialize(self, elevator_count: int, floor_count: int, default_capacity: int) -> SystemSnapshot:
        self._state = build_snapshot(elevator_count, floor_count, default_capacity)
        return self._state
