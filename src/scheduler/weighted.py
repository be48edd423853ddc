from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Optional, Sequence

from .interface import ElevatorSnapshot


@dataclass(frozen=True)
class ScoreWeights:
    distance: int = -2
    passenger_count: int = -1
    target_floors: int = -1
    same_direction_ahead: int = 3
    same_direction_behind: int = -3
    opposite_direction: int = -5
    idle: int = 2


class WeightedScoreScheduler:
    """Scores every car on distance, load and travel direction.

    The highest score wins. Cars are visited in index order and only a
    strictly better score replaces the current best, so ties go to the
    lowest index.
    """

    def __init__(self, weights: Optional[ScoreWeights] = None, **overrides: int) -> None:
        unknown = set(overrides) - {item.name for item in fields(ScoreWeights)}
        if unknown:
            raise ValueError(f"Unknown score weights: {', '.join(sorted(unknown))}")
        self.weights = replace(weights or ScoreWeights(), **overrides)

    def select_best_elevator(
        self,
        elevators: Sequence[ElevatorSnapshot],
        requested_floor: int,
        direction: int,
    ) -> int:
        if not elevators:
            raise ValueError("No elevators available to dispatch")
        best_index = 0
        best_score: Optional[int] = None
        for index, elevator in enumerate(elevators):
            score = self.score(elevator, requested_floor, direction)
            if best_score is None or score > best_score:
                best_score = score
                best_index = index
        return best_index

    def score(self, elevator: ElevatorSnapshot, requested_floor: int, direction: int) -> int:
        return (
            self._distance_score(elevator, requested_floor)
            + self._load_score(elevator)
            + self._direction_score(elevator, requested_floor, direction)
        )

    def _distance_score(self, elevator: ElevatorSnapshot, requested_floor: int) -> int:
        return abs(elevator.current_floor - requested_floor) * self.weights.distance

    def _load_score(self, elevator: ElevatorSnapshot) -> int:
        return (
            elevator.load * self.weights.passenger_count
            + len(elevator.targets) * self.weights.target_floors
        )

    def _direction_score(self, elevator: ElevatorSnapshot, requested_floor: int, direction: int) -> int:
        if elevator.is_idle():
            return self.weights.idle
        if elevator.direction != direction:
            return self.weights.opposite_direction
        ahead = (direction > 0 and requested_floor > elevator.current_floor) or (
            direction < 0 and requested_floor < elevator.current_floor
        )
        return self.weights.same_direction_ahead if ahead else self.weights.same_direction_behind
