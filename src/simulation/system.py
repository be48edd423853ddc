from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from scheduler import Scheduler, get_scheduler

from .config import SystemConfig
from .elevator import Elevator
from .errors import InvalidFloorError, RequestError
from .request import RideRequest
from .state import StateStore, SystemSnapshot, step_all_elevators

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestResult:
    success: bool
    elevator_id: Optional[int] = None
    request: Optional[RideRequest] = None
    message: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        payload: dict = {"success": self.success}
        if self.success:
            payload["elevator_id"] = self.elevator_id
            payload["request"] = self.request.to_dict() if self.request else None
        else:
            payload["message"] = self.message
            payload["error"] = self.error
        return payload


@dataclass
class SystemStats:
    ticks: int = 0
    requests_submitted: int = 0
    requests_rejected: int = 0


class ElevatorSystem:
    """Entry point for dispatching ride requests and advancing the clock.

    Mutating calls (``initialize_system``, ``submit_request`` and
    ``advance_tick``) read the current snapshot, build a new one and swap it
    in. They are not safe to run concurrently; callers must serialize them.
    """

    def __init__(
        self,
        config: Optional[SystemConfig] = None,
        scheduler_name: str = "weighted",
        scheduler_options: Optional[dict] = None,
        random_seed: Optional[int] = None,
    ) -> None:
        self.config = config or SystemConfig()
        self.scheduler: Scheduler = get_scheduler(scheduler_name, **(scheduler_options or {}))
        self.random = random.Random(random_seed)
        self.store = StateStore()
        self.stats = SystemStats()
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self.initialize_system(
            self.config.elevator_count,
            self.config.floor_count,
            self.config.default_capacity,
        )

    @property
    def current_time(self) -> int:
        return self.stats.ticks

    def initialize_system(self, elevator_count: int, floor_count: int, default_capacity: int) -> SystemSnapshot:
        snapshot = self.store.initialize(elevator_count, floor_count, default_capacity)
        self.stats = SystemStats()
        logger.info(
            "Initialized %s elevator(s) over %s floors with capacity %s",
            elevator_count,
            floor_count,
            default_capacity,
        )
        return snapshot

    def get_snapshot(self) -> SystemSnapshot:
        return self.store.get_state()

    def get_elevator(self, elevator_id: int) -> Optional[Elevator]:
        return self.store.get_state().get_elevator(elevator_id)

    def select_best_elevator(self, requested_floor: int, direction: int) -> int:
        snapshot = self.store.get_state()
        return self.scheduler.select_best_elevator(snapshot.scheduler_view(), requested_floor, direction)

    def submit_request(self, from_floor: int, to_floor: int) -> RequestResult:
        try:
            snapshot = self.store.get_state()
            self._validate_floor("Request", from_floor, snapshot.floor_count)
            self._validate_floor("Destination", to_floor, snapshot.floor_count)
            request = RideRequest(from_floor=from_floor, to_floor=to_floor)

            index = self.scheduler.select_best_elevator(
                snapshot.scheduler_view(), request.from_floor, request.direction
            )
            chosen = snapshot.elevators[index].assign_request(request)
            self.store.replace_state(snapshot.with_elevator(index, chosen))
        except RequestError as exc:
            self.stats.requests_rejected += 1
            logger.info("Rejected request %s -> %s: %s", from_floor, to_floor, exc)
            self._emit("rejected", {"from_floor": from_floor, "to_floor": to_floor, "reason": str(exc)})
            return RequestResult(success=False, message=str(exc), error=exc.error_kind)
        except Exception as exc:
            self.stats.requests_rejected += 1
            logger.exception("Failed to dispatch request %s -> %s", from_floor, to_floor)
            return RequestResult(success=False, message=str(exc) or "Unknown error", error="internal")

        self.stats.requests_submitted += 1
        logger.info(
            "Assigned request %s -> %s to elevator %s",
            request.from_floor,
            request.to_floor,
            chosen.elevator_id,
        )
        self._emit("request", {"elevator_id": chosen.elevator_id, "request": request, "time": self.current_time})
        return RequestResult(success=True, elevator_id=chosen.elevator_id, request=request)

    def spawn_random_request(self) -> RequestResult:
        floor_count = self.store.get_state().floor_count
        if floor_count < 2:
            return RequestResult(
                success=False,
                message="At least two floors are needed for a random request",
                error=InvalidFloorError.error_kind,
            )
        from_floor = self.random.randrange(floor_count)
        to_floor = self.random.choice([f for f in range(floor_count) if f != from_floor])
        logger.info("New random request: from floor %s to floor %s", from_floor, to_floor)
        return self.submit_request(from_floor, to_floor)

    def advance_tick(self) -> SystemSnapshot:
        snapshot = step_all_elevators(self.store.get_state())
        self.store.replace_state(snapshot)
        self.stats.ticks += 1
        for elevator in snapshot.elevators:
            if elevator.requests:
                logger.debug(
                    "Elevator %s: floor %s, %s, %s pending request(s)",
                    elevator.elevator_id,
                    elevator.current_floor,
                    elevator.status.value,
                    len(elevator.requests),
                )
        self._emit("tick", {"time": self.current_time, "snapshot": snapshot})
        return snapshot

    def run(self, duration: int) -> SystemSnapshot:
        for _ in range(duration):
            self.advance_tick()
        return self.get_snapshot()

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            try:
                callback(payload)
            except Exception:
                logger.exception("Event hook for %r failed", event)

    @staticmethod
    def _validate_floor(label: str, floor: int, floor_count: int) -> None:
        if not 0 <= floor < floor_count:
            raise InvalidFloorError(label, floor, floor_count)
