import asyncio
import json
import unittest

from fastapi.testclient import TestClient

from server.app import SimulationManager, create_app
from simulation import SystemConfig


class ServerApiTest(unittest.TestCase):
    def setUp(self):
        config = SystemConfig(
            elevator_count=2,
            floor_count=10,
            default_capacity=8,
            tick_interval=60.0,
            request_interval=60.0,
        )
        self.manager = SimulationManager(config, random_seed=3)
        self.client = TestClient(create_app(self.manager, autostart=False))
        self.client.__enter__()

    def tearDown(self):
        self.client.__exit__(None, None, None)

    def test_list_elevators(self):
        response = self.client.get("/api/elevators")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual([e["id"] for e in body["data"]], [0, 1])
        self.assertEqual(body["data"][0]["status"], "IDLE")

    def test_get_elevator(self):
        self.assertEqual(self.client.get("/api/elevators/1").json()["data"]["id"], 1)
        self.assertEqual(self.client.get("/api/elevators/7").status_code, 404)

    def test_request_elevator(self):
        response = self.client.post("/api/elevators/request", json={"from_floor": 2, "to_floor": 6})
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["elevator_id"], 0)
        self.assertEqual(data["request"]["from_floor"], 2)
        self.assertEqual(data["request"]["direction"], "up")

        elevator = self.client.get("/api/elevators/0").json()["data"]
        self.assertEqual(elevator["status"], "MOVING_UP")
        self.assertEqual(elevator["target_floors"], [2])

    def test_invalid_requests(self):
        response = self.client.post("/api/elevators/request", json={"from_floor": 3, "to_floor": 3})
        self.assertEqual(response.status_code, 400)
        self.assertIn("cannot be the same", response.json()["detail"])

        response = self.client.post("/api/elevators/request", json={"from_floor": 3, "to_floor": 12})
        self.assertEqual(response.status_code, 400)

        response = self.client.post("/api/elevators/request", json={"from_floor": "lobby", "to_floor": 2})
        self.assertEqual(response.status_code, 422)

    def test_manual_tick(self):
        self.client.post("/api/elevators/request", json={"from_floor": 2, "to_floor": 6})
        state = self.client.post("/api/simulation/tick").json()
        self.assertEqual(state["time"], 1)
        self.assertEqual(state["system"]["elevators"][0]["current_floor"], 1)
        self.assertEqual(state["stats"]["requests_submitted"], 1)

    def test_start_and_stop(self):
        self.assertEqual(self.client.post("/api/simulation/stop").status_code, 400)
        self.assertEqual(self.client.post("/api/simulation/start").status_code, 200)
        self.assertTrue(self.client.get("/state").json()["running"])
        self.assertEqual(self.client.post("/api/simulation/start").status_code, 400)
        self.assertEqual(self.client.post("/api/simulation/stop").status_code, 200)
        self.assertFalse(self.client.get("/state").json()["running"])

    def test_initialize(self):
        response = self.client.post(
            "/api/system/initialize",
            json={"elevator_count": 4, "floor_count": 20, "default_capacity": 5},
        )
        self.assertEqual(response.status_code, 200)
        system = response.json()["system"]
        self.assertEqual(len(system["elevators"]), 4)
        self.assertEqual(system["floor_count"], 20)

        response = self.client.post("/api/system/initialize", json={"elevator_count": 0})
        self.assertEqual(response.status_code, 422)

    def test_stream_sends_current_state(self):
        with self.client.websocket_connect("/ws/stream") as websocket:
            state = websocket.receive_json()
        self.assertEqual(state["time"], 0)
        self.assertEqual(len(state["system"]["elevators"]), 2)

    def test_stream_receives_state_after_each_tick(self):
        with self.client.websocket_connect("/ws/stream") as websocket:
            greeting = websocket.receive_json()
            self.client.post("/api/simulation/tick")
            update = websocket.receive_json()
        self.assertEqual(greeting["time"], 0)
        self.assertEqual(update["time"], 1)


class RecordingClient:
    def __init__(self):
        self.messages = []

    async def send_text(self, message):
        self.messages.append(json.loads(message))


class PeriodicDriverTest(unittest.IsolatedAsyncioTestCase):
    async def test_background_tasks_tick_and_spawn_requests(self):
        config = SystemConfig(
            elevator_count=2,
            floor_count=10,
            default_capacity=8,
            tick_interval=0.01,
            request_interval=0.01,
        )
        manager = SimulationManager(config, random_seed=5)
        listener = RecordingClient()
        manager.clients.add(listener)

        await manager.start()
        self.assertTrue(manager.running)
        await asyncio.sleep(0.2)
        await manager.stop()

        self.assertFalse(manager.running)
        state = manager.current_state()
        self.assertGreater(state["time"], 0)
        self.assertGreater(state["stats"]["requests_submitted"], 0)
        self.assertTrue(listener.messages)
        self.assertEqual([m["time"] for m in listener.messages], list(range(1, len(listener.messages) + 1)))
        self.assertLessEqual(listener.messages[-1]["time"], state["time"])

    async def test_failed_task_keeps_driver_alive(self):
        config = SystemConfig(tick_interval=0.01, request_interval=60.0)
        manager = SimulationManager(config)
        calls = []

        async def flaky():
            calls.append(1)
            raise RuntimeError("boom")

        task = asyncio.create_task(manager._every(0.01, flaky))
        with self.assertLogs("server.app", level="ERROR"):
            await asyncio.sleep(0.1)
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task
        self.assertGreater(len(calls), 1)


if __name__ == "__main__":
    unittest.main()
