from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
from typing import Awaitable, Callable, List, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from simulation import ElevatorSystem, SystemConfig

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(levelname)s] %(asctime)s - %(name)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(level=(level or os.environ.get("LOG_LEVEL", "INFO")).upper(), format=LOG_FORMAT)


class RideRequestBody(BaseModel):
    from_floor: int
    to_floor: int


class SystemSetup(BaseModel):
    elevator_count: int = Field(3, gt=0)
    floor_count: int = Field(10, gt=0)
    default_capacity: int = Field(8, gt=0)


class SimulationManager:
    def __init__(self, config: Optional[SystemConfig] = None, random_seed: Optional[int] = None) -> None:
        self.config = config or SystemConfig()
        self.system = ElevatorSystem(self.config, random_seed=random_seed)
        self.clients: Set[WebSocket] = set()
        self._tasks: List[asyncio.Task] = []
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    async def start(self) -> None:
        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(self._every(self.config.tick_interval, self._tick)),
            asyncio.create_task(self._every(self.config.request_interval, self._random_request)),
        ]
        logger.info(
            "Simulation started: tick every %ss, random request every %ss",
            self.config.tick_interval,
            self.config.request_interval,
        )

    async def stop(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if tasks:
            logger.info("Simulation stopped")

    async def _every(self, interval: float, action: Callable[[], Awaitable[None]]) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await action()
            except Exception:
                logger.exception("Periodic simulation task failed")

    async def _tick(self) -> None:
        async with self._lock:
            self.system.advance_tick()
            payload = self.current_state()
        await self.broadcast(payload)

    async def _random_request(self) -> None:
        async with self._lock:
            self.system.spawn_random_request()

    async def advance(self) -> dict:
        await self._tick()
        return self.current_state()

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        stats = self.system.stats
        return {
            "time": self.system.current_time,
            "running": self.running,
            "system": self.system.get_snapshot().to_dict(),
            "stats": {
                "ticks": stats.ticks,
                "requests_submitted": stats.requests_submitted,
                "requests_rejected": stats.requests_rejected,
            },
        }

    async def submit_request(self, from_floor: int, to_floor: int) -> dict:
        async with self._lock:
            return self.system.submit_request(from_floor, to_floor).to_dict()

    async def initialize(self, elevator_count: int, floor_count: int, default_capacity: int) -> dict:
        async with self._lock:
            self.system.initialize_system(elevator_count, floor_count, default_capacity)
            return self.current_state()


def create_app(manager: SimulationManager, autostart: bool = True) -> FastAPI:
    app = FastAPI(title="Elevator Dispatch Simulation API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def on_startup() -> None:
        configure_logging()
        if autostart:
            await manager.start()

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await manager.stop()

    @app.get("/state")
    async def get_state() -> dict:
        return manager.current_state()

    @app.get("/api/elevators")
    async def list_elevators() -> dict:
        snapshot = manager.system.get_snapshot()
        return {"success": True, "data": [elevator.to_dict() for elevator in snapshot.elevators]}

    @app.get("/api/elevators/{elevator_id}")
    async def get_elevator(elevator_id: int) -> dict:
        elevator = manager.system.get_elevator(elevator_id)
        if elevator is None:
            raise HTTPException(status_code=404, detail="Elevator not found")
        return {"success": True, "data": elevator.to_dict()}

    @app.post("/api/elevators/request")
    async def request_elevator(body: RideRequestBody) -> dict:
        result = await manager.submit_request(body.from_floor, body.to_floor)
        if not result["success"]:
            raise HTTPException(status_code=400, detail=result["message"])
        return {"success": True, "data": result}

    @app.post("/api/simulation/start")
    async def start_simulation() -> dict:
        if manager.running:
            raise HTTPException(status_code=400, detail="Simulation is already running")
        await manager.start()
        return {"success": True, "message": "Simulation started successfully"}

    @app.post("/api/simulation/stop")
    async def stop_simulation() -> dict:
        if not manager.running:
            raise HTTPException(status_code=400, detail="Simulation is not running")
        await manager.stop()
        return {"success": True, "message": "Simulation stopped successfully"}

    @app.post("/api/simulation/tick")
    async def advance_tick() -> dict:
        return await manager.advance()

    @app.post("/api/system/initialize")
    async def initialize_system(setup: SystemSetup) -> dict:
        try:
            return await manager.initialize(setup.elevator_count, setup.floor_count, setup.default_capacity)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    @app.websocket("/ws/stream")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await manager.register(websocket)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            await manager.unregister(websocket)

    return app


manager = SimulationManager(SystemConfig.from_env())
app = create_app(manager)


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run("server.app:app", host="0.0.0.0", port=int(os.environ.get("PORT", 8000)), reload=False)
