from __future__ import annotations


class RequestError(ValueError):
    """Base class for ride requests rejected before dispatch."""

    error_kind = "invalid_request"


class InvalidFloorError(RequestError):
    error_kind = "invalid_floor"

    def __init__(self, label: str, floor: int, floor_count: int) -> None:
        super().__init__(f"{label} floor must be between 0 and {floor_count - 1} (got {floor})")
        self.floor = floor
        self.floor_count = floor_count


class SameOriginDestinationError(RequestError):
    error_kind = "same_origin_destination"

    def __init__(self, floor: int) -> None:
        super().__init__(f"Request floor and destination floor cannot be the same (floor {floor})")
        self.floor = floor
