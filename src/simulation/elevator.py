from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple

from .request import RideRequest

logger = logging.getLogger(__name__)


class ElevatorStatus(str, Enum):
    IDLE = "IDLE"
    MOVING_UP = "MOVING_UP"
    MOVING_DOWN = "MOVING_DOWN"


@dataclass(frozen=True)
class Elevator:
    """An elevator car advanced one floor per tick.

    Instances are never mutated. ``assign_request``, ``handle_arrival`` and
    ``step`` all return a new ``Elevator`` so a published snapshot stays
    valid while the next one is being computed.
    """

    elevator_id: int
    capacity: int
    current_floor: int = 0
    status: ElevatorStatus = ElevatorStatus.IDLE
    target_floors: Tuple[int, ...] = ()
    requests: Tuple[RideRequest, ...] = ()
    passenger_count: int = 0

    @property
    def direction(self) -> int:
        if self.status is ElevatorStatus.MOVING_UP:
            return 1
        if self.status is ElevatorStatus.MOVING_DOWN:
            return -1
        return 0

    def is_idle(self) -> bool:
        return self.status is ElevatorStatus.IDLE

    def assign_request(self, request: RideRequest) -> Elevator:
        """Queue a dispatched request and head for its pickup floor."""
        targets = self.target_floors
        if request.from_floor not in targets:
            targets = targets + (request.from_floor,)
        status = self.status
        if self.is_idle():
            status = self._status_towards(request.from_floor)
        return replace(
            self,
            requests=self.requests + (request,),
            target_floors=targets,
            status=status,
        )

    def next_target_floor(self) -> int:
        """Pick the floor to travel to next.

        Keeps going in the current direction while there are targets ahead,
        otherwise falls back to the closest target. Ties between equally
        close targets go to the one queued first.
        """
        if not self.target_floors:
            return self.current_floor

        if self.status is ElevatorStatus.MOVING_UP:
            above = [floor for floor in self.target_floors if floor > self.current_floor]
            if above:
                return min(above)
        elif self.status is ElevatorStatus.MOVING_DOWN:
            below = [floor for floor in self.target_floors if floor < self.current_floor]
            if below:
                return max(below)

        ranked = sorted(self.target_floors, key=lambda floor: abs(floor - self.current_floor))
        return ranked[0]

    def handle_arrival(self) -> Elevator:
        """Board riders waiting here, let riders off, then clear this stop."""
        floor = self.current_floor
        elevator = self._board(floor)
        elevator = elevator._alight(floor)
        return replace(
            elevator,
            target_floors=tuple(target for target in elevator.target_floors if target != floor),
        )

    def step(self) -> Elevator:
        if self.is_idle():
            return self._step_idle()

        moved = replace(self, current_floor=self.current_floor + self.direction)
        if moved.current_floor in moved.target_floors:
            logger.debug("Elevator %s arrived at floor %s", moved.elevator_id, moved.current_floor)
            moved = moved.handle_arrival()

        if not moved.target_floors:
            return replace(moved, status=ElevatorStatus.IDLE, passenger_count=0)
        return replace(moved, status=moved._status_towards(moved.next_target_floor()))

    def to_dict(self) -> dict:
        return {
            "id": self.elevator_id,
            "current_floor": self.current_floor,
            "status": self.status.value,
            "target_floors": list(self.target_floors),
            "requests": [request.to_dict() for request in self.requests],
            "capacity": self.capacity,
            "passenger_count": self.passenger_count,
        }

    def _step_idle(self) -> Elevator:
        elevator = self
        if elevator.passenger_count:
            elevator = replace(elevator, passenger_count=0)

        if elevator.requests:
            pickup = elevator.requests[0].from_floor
            if pickup not in elevator.target_floors:
                elevator = replace(elevator, target_floors=elevator.target_floors + (pickup,))

        if not elevator.target_floors:
            return elevator

        next_floor = elevator.next_target_floor()
        if next_floor == elevator.current_floor:
            return elevator.handle_arrival()
        return replace(elevator, status=elevator._status_towards(next_floor))

    def _board(self, floor: int) -> Elevator:
        waiting = [request for request in self.requests if request.from_floor == floor]
        if not waiting:
            return self

        free_space = self.capacity - self.passenger_count
        boarded = waiting[: max(0, free_space)]
        targets = list(self.target_floors)
        for request in boarded:
            if request.to_floor not in targets:
                targets.append(request.to_floor)

        left_behind = len(waiting) - len(boarded)
        if left_behind:
            logger.warning(
                "Elevator %s is full at floor %s; dropping %s waiting request(s)",
                self.elevator_id,
                floor,
                left_behind,
            )
        logger.debug("Elevator %s picked up %s at floor %s", self.elevator_id, len(boarded), floor)

        return replace(
            self,
            passenger_count=self.passenger_count + len(boarded),
            target_floors=tuple(targets),
            requests=tuple(request for request in self.requests if request.from_floor != floor),
        )

    def _alight(self, floor: int) -> Elevator:
        leaving = [request for request in self.requests if request.to_floor == floor]
        if not leaving:
            return self

        logger.debug("Elevator %s dropped off %s at floor %s", self.elevator_id, len(leaving), floor)
        return replace(
            self,
            passenger_count=max(0, self.passenger_count - len(leaving)),
            requests=tuple(request for request in self.requests if request.to_floor != floor),
        )

    def _status_towards(self, floor: int) -> ElevatorStatus:
        if floor > self.current_floor:
            return ElevatorStatus.MOVING_UP
        if floor < self.current_floor:
            return ElevatorStatus.MOVING_DOWN
        return self.status
