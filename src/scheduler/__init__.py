from __future__ import annotations

from typing import Dict, Type

from .interface import ElevatorSnapshot, Scheduler
from .weighted import ScoreWeights, WeightedScoreScheduler

__all__ = [
    "ElevatorSnapshot",
    "Scheduler",
    "ScoreWeights",
    "WeightedScoreScheduler",
    "get_scheduler",
]


SCHEDULER_REGISTRY: Dict[str, Type[Scheduler]] = {
    "weighted": WeightedScoreScheduler,
}


def get_scheduler(name: str, **kwargs) -> Scheduler:
    cls = SCHEDULER_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown scheduler '{name}'. Available: {', '.join(SCHEDULER_REGISTRY)}")
    return cls(**kwargs)
