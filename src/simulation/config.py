from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional


@dataclass
class SystemConfig:
    """Size of the elevator bank and the cadence of the background driver."""

    elevator_count: int = 3
    floor_count: int = 10
    default_capacity: int = 8
    tick_interval: float = 2.0
    request_interval: float = 5.0

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{item.name} must be a number (got {value!r})")
            if value <= 0:
                raise ValueError(f"{item.name} must be greater than 0 (got {value})")

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "SystemConfig":
        known = {item.name for item in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown system options: {', '.join(sorted(unknown))}")
        return cls(**data)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SystemConfig":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            elevator_count=int(env.get("ELEVATOR_COUNT", defaults.elevator_count)),
            floor_count=int(env.get("FLOOR_COUNT", defaults.floor_count)),
            default_capacity=int(env.get("ELEVATOR_CAPACITY", defaults.default_capacity)),
            tick_interval=float(env.get("TICK_INTERVAL", defaults.tick_interval)),
            request_interval=float(env.get("REQUEST_INTERVAL", defaults.request_interval)),
        )
