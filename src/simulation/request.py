from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from .errors import SameOriginDestinationError


@dataclass(frozen=True)
class RideRequest:
    """A rider waiting to travel between two floors."""

    from_floor: int
    to_floor: int
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        if self.from_floor == self.to_floor:
            raise SameOriginDestinationError(self.from_floor)

    @property
    def direction(self) -> int:
        """Return +1 for up, -1 for down."""
        return 1 if self.to_floor > self.from_floor else -1

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "from_floor": self.from_floor,
            "to_floor": self.to_floor,
            "direction": "up" if self.direction > 0 else "down",
        }
