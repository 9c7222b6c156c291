"""Tests for the FastAPI host."""

import pytest
from fastapi.testclient import TestClient

from timer_gateway.main import app


@pytest.fixture
def client():
    """Test client with the app lifespan (and tick loop) running."""
    with TestClient(app) as test_client:
        yield test_client


def create(client, name="t", timer_type="incrementing", duration=1000):
    return client.post(
        "/api/timers", json={"name": name, "type": timer_type, "duration": duration}
    )


class TestTimerEndpoints:
    """Test the REST timer endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["timers"]["running"] is True

    def test_create_and_get(self, client):
        response = create(client, duration="1m")
        assert response.status_code == 201
        assert response.json()["timer"]["duration"] == 60_000
        assert response.json()["timer"]["duration_human"] == "1m"

        response = client.get("/api/timers/t")
        assert response.status_code == 200
        assert response.json()["timer"]["running"] is False

    def test_list(self, client):
        create(client, name="b")
        create(client, name="a", timer_type="decrementing")

        body = client.get("/api/timers").json()

        assert body["total"] == 2
        assert [t["name"] for t in body["timers"]] == ["a", "b"]
        assert body["types"] == ["decrementing", "incrementing"]

    def test_error_status_codes(self, client):
        create(client)

        assert create(client).status_code == 409
        assert create(client, name="x", timer_type="sideways").status_code == 400
        assert create(client, name="y", duration="whenever").status_code == 400
        assert client.get("/api/timers/ghost").status_code == 404
        assert client.post("/api/timers/ghost/pause").status_code == 404
        assert client.delete("/api/timers/ghost").status_code == 404

    @pytest.mark.parametrize("duration", [True, 1.5, None, [1000]])
    def test_rejects_non_int_non_str_duration(self, client, duration):
        response = create(client, duration=duration)

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid duration type")
        assert client.get("/api/timers/t").status_code == 404

    def test_error_detail(self, client):
        response = client.delete("/api/timers/ghost")
        assert response.json() == {"detail": "Timer 'ghost' not found."}

    def test_pause_resume_toggle(self, client):
        create(client)

        noop = client.post("/api/timers/t/pause").json()
        assert noop == {"changed": False, "timer": None}

        resumed = client.post("/api/timers/t/resume").json()
        assert resumed["changed"] is True
        assert resumed["timer"]["running"] is True

        toggled = client.post("/api/timers/t/toggle").json()
        assert toggled["timer"]["running"] is False

    def test_reset(self, client):
        create(client, timer_type="decrementing", duration=5000)

        paused = client.post("/api/timers/t/reset").json()
        assert paused["timer"]["running"] is False
        assert paused["timer"]["value"] == 5000

        running = client.post("/api/timers/t/reset", json={"pause": False}).json()
        assert running["timer"]["running"] is True

    def test_delete(self, client):
        create(client)

        response = client.delete("/api/timers/t")

        assert response.json() == {"name": "t", "deleted": True}
        assert client.get("/api/timers/t").status_code == 404


class TestCommandEndpoint:
    """Test generic command dispatch over HTTP."""

    def test_create_command(self, client):
        response = client.post(
            "/api/commands/createTimer",
            json={"name": "t", "type": "incrementing", "duration": 250},
        )
        assert response.status_code == 200
        assert response.json()["result"]["duration"] == 250

    def test_unknown_command(self, client):
        response = client.post("/api/commands/launchTimer", json={"name": "t"})
        assert response.status_code == 400

    def test_missing_field(self, client):
        response = client.post("/api/commands/createTimer", json={"name": "t"})
        assert response.status_code == 400
        assert "Missing field" in response.json()["detail"]

    def test_not_found_command(self, client):
        response = client.post("/api/commands/toggleTimer", json={"name": "ghost"})
        assert response.status_code == 404


class TestWebSocket:
    """Test the WebSocket gateway."""

    def test_hello_lists_timers(self, client):
        create(client)

        with client.websocket_connect("/ws?client_id=test") as ws:
            hello = ws.receive_json()

        assert hello["type"] == "hello"
        assert hello["client_id"] == "test"
        assert [t["name"] for t in hello["timers"]] == ["t"]

    def test_command_and_event(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json({
                "type": "req",
                "id": "1",
                "method": "createTimer",
                "params": {"name": "w", "type": "decrementing", "duration": "2s"},
            })

            messages = [ws.receive_json(), ws.receive_json()]

        by_type = {m["type"]: m for m in messages}
        assert by_type["res"]["ok"] is True
        assert by_type["res"]["payload"]["value"] == 2000
        assert by_type["event"]["event"] == "timerCreated"
        assert by_type["event"]["payload"]["name"] == "w"

    def test_command_error(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json({"type": "req", "id": "2", "method": "pauseTimer", "params": {"name": "ghost"}})
            response = ws.receive_json()

        assert response["ok"] is False
        assert "ghost" in response["error"]

    @pytest.mark.parametrize("message", [
        {"type": "req", "id": "3", "method": "pauseTimer", "params": ["x"]},
        {"type": "req", "id": "3", "method": ["pauseTimer"], "params": {}},
        ["req", "pauseTimer"],
    ])
    def test_malformed_request_keeps_connection(self, client, message):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json(message)
            error = ws.receive_json()

            ws.send_json({"type": "req", "id": "4", "method": "status"})
            status = ws.receive_json()

        assert error["type"] == "res"
        assert error["ok"] is False
        assert status["ok"] is True
        assert status["payload"]["running"] is True
