from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, Tuple


@dataclass(frozen=True)
class ElevatorSnapshot:
    """Lightweight view of an elevator for scheduling decisions."""

    elevator_id: int
    current_floor: int
    direction: int  # +1 moving up, -1 moving down, 0 idle
    targets: Tuple[int, ...]
    load: int

    def is_idle(self) -> bool:
        return self.direction == 0


class Scheduler(Protocol):
    """Strategy interface for choosing the elevator that serves a hall call."""

    def select_best_elevator(
        self,
        elevators: Sequence[ElevatorSnapshot],
        requested_floor: int,
        direction: int,
    ) -> int:
        """
        Return the index into ``elevators`` of the car that should take the call.

        Implementations must be pure: the same inputs always give the same
        index and nothing is mutated.
        """
        ...
