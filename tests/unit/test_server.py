"""Tests for the HTTP server."""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from a2a_sandbox.app import AppState
from a2a_sandbox.server import create_app

TODAY = date.today().isoformat()


@pytest.fixture
def state(settings) -> AppState:
    return AppState(settings=settings)


@pytest.fixture
def client(state):
    with TestClient(create_app(state)) as test_client:
        yield test_client


def rpc(method: str, params: dict | None = None, request_id: int | str = 1) -> dict:
    return {"jsonrpc": "2.0", "id": request_id, "method": method, "params": params or {}}


def text_message(text: str) -> dict:
    return {"role": "user", "parts": [{"type": "text", "text": text}]}


def action_message(action: str, **params) -> dict:
    return {"role": "user", "parts": [{"type": "data", "data": {"action": action, "params": params}}]}


class TestDiscovery:
    """Test health and agent card discovery."""

    def test_health(self, client):
        """Test the health endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["agents"] == 5

    def test_all_cards(self, client):
        """Test every card is listed without ?agent."""
        body = client.get("/.well-known/agent.json").json()
        assert [card["name"] for card in body["agents"]] == [
            "Alice's Assistant",
            "Bob's Assistant",
            "Carol's Assistant",
            "Pro-kun",
            "Con-kun",
        ]
        assert "version" in body

    def test_single_card(self, client):
        """Test ?agent selects one card."""
        card = client.get("/.well-known/agent.json", params={"agent": "carol"}).json()
        assert card["url"] == "http://testserver/api/agents/carol"
        assert card["capabilities"] == {
            "streaming": False,
            "pushNotifications": False,
            "stateTransitionHistory": True,
        }

    def test_unknown_card(self, client):
        """Test an unknown agent is 404 with an error body."""
        response = client.get("/.well-known/agent.json", params={"agent": "ghost"})
        assert response.status_code == 404
        assert response.json()["code"] == "A2A-4001"
        assert response.json()["message"] == "Agent not found: ghost"


class TestAgentsApi:
    """Test the agent REST views."""

    def test_list_agents(self, client):
        """Test roster rows carry card skills and capabilities."""
        body = client.get("/api/agents").json()
        assert body["total"] == 5
        alice = body["agents"][0]
        assert alice["id"] == "alice"
        assert alice["endpoint"] == "/api/agents/alice"
        assert "createdAt" not in alice
        assert [s["id"] for s in alice["skills"]] == [
            "check-availability",
            "get-busy-slots",
            "schedule-meeting",
        ]
        assert set(alice["skills"][0]) == {"id", "name", "description"}

    def test_get_agent(self, client):
        """Test a single agent with its card."""
        body = client.get("/api/agents/pro-kun").json()
        assert body["name"] == "Pro-kun"
        assert body["agentCard"]["skills"][0]["id"] == "debate-argue"

    def test_get_unknown_agent(self, client):
        """Test unknown agents are 404."""
        assert client.get("/api/agents/ghost").status_code == 404


class TestJsonRpcEndpoint:
    """Test POST /api/agents/{id}."""

    def test_send_check_availability(self, client):
        """Test a structured availability request end to end."""
        response = client.post(
            "/api/agents/alice",
            json=rpc(
                "tasks/send",
                {
                    "message": action_message(
                        "check-availability", date=TODAY, startTime="10:00", endTime="10:30"
                    )
                },
                request_id="req-1",
            ),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "req-1"
        task = body["result"]
        assert task["status"]["state"] == "completed"
        assert task["metadata"]["agentId"] == "alice"
        reply = task["status"]["message"]["parts"]
        assert reply[0]["text"] == f"{TODAY} from 10:00 to 10:30 is busy."
        assert "Dentist" not in str(reply)

    def test_get_and_cancel(self, client):
        """Test tasks/get and a rejected cancel of a completed task."""
        sent = client.post(
            "/api/agents/bob", json=rpc("tasks/send", {"message": text_message("Hello")})
        ).json()
        task_id = sent["result"]["id"]

        got = client.post(
            "/api/agents/bob", json=rpc("tasks/get", {"id": task_id, "historyLength": 1})
        ).json()
        assert len(got["result"]["history"]) == 1

        canceled = client.post("/api/agents/bob", json=rpc("tasks/cancel", {"id": task_id})).json()
        assert canceled["error"]["code"] == -32001
        assert canceled["error"]["message"] == "Task cannot be canceled: already completed"

    def test_unknown_method(self, client):
        """Test unknown methods answer with an error envelope and status 200."""
        response = client.post("/api/agents/alice", json=rpc("foo/bar"))
        assert response.status_code == 200
        assert response.json()["error"]["code"] == -32601

    def test_unknown_agent(self, client):
        """Test an unknown agent is a 404 JSON-RPC envelope."""
        response = client.post("/api/agents/ghost", json=rpc("tasks/get", {"id": "x"}))
        assert response.status_code == 404
        assert response.json() == {
            "jsonrpc": "2.0",
            "id": None,
            "error": {"code": -32000, "message": "Agent not found: ghost"},
        }

    def test_parse_error(self, client):
        """Test a body that is not JSON."""
        response = client.post(
            "/api/agents/alice",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == -32700
        assert response.json()["id"] is None

    def test_invalid_envelope(self, client):
        """Test a JSON body that is not a request object."""
        response = client.post("/api/agents/alice", json=[1, 2, 3])
        assert response.json()["error"]["code"] == -32600


class TestScheduleApi:
    """Test the schedule views."""

    def test_owner_view(self, client):
        """Test the owner view includes private titles and descriptions."""
        body = client.get("/api/agents/alice/schedule").json()
        assert body["date"] == TODAY
        assert body["privacyFiltered"] is False
        assert [s["title"] for s in body["schedule"]] == [
            "Team Standup",
            "Dentist Appointment",
            "Product Review",
        ]
        assert body["schedule"][1]["description"] == "Regular checkup"

    def test_public_view(self, client):
        """Test the public view hides private titles and all descriptions."""
        body = client.get(
            "/api/agents/alice/schedule", params={"date": TODAY, "public": "true"}
        ).json()
        assert body["privacyFiltered"] is True
        assert body["schedule"][1] == {"startTime": "10:00", "endTime": "11:00", "status": "busy"}
        assert all("description" not in s for s in body["schedule"])

    def test_create_schedule(self, client):
        """Test adding an entry shows up in the owner view."""
        response = client.post(
            "/api/agents/carol/schedule",
            json={"title": "Offsite", "startTime": "10:00", "endTime": "12:00", "eventDate": TODAY},
        )
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["schedule"]["isPrivate"] is False

        titles = [s["title"] for s in client.get("/api/agents/carol/schedule").json()["schedule"]]
        assert "Offsite" in titles

    def test_create_schedule_bad_range(self, client):
        """Test start must precede end."""
        response = client.post(
            "/api/agents/carol/schedule",
            json={"title": "Backwards", "startTime": "12:00", "endTime": "10:00"},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "A2A-4003"

    def test_create_schedule_bad_format(self, client):
        """Test malformed times fail request validation."""
        response = client.post(
            "/api/agents/carol/schedule",
            json={"title": "Loose", "startTime": "9:00", "endTime": "10:00"},
        )
        assert response.status_code == 422

    def test_schedule_unknown_agent(self, client):
        """Test schedules of unknown agents are 404."""
        assert client.get("/api/agents/ghost/schedule").status_code == 404

    def test_common_availability(self, client):
        """Test shared free ranges for several agents."""
        response = client.get("/api/schedule/common", params={"agents": "alice,bob"})

        assert response.status_code == 200
        body = response.json()
        assert body["agents"] == ["alice", "bob"]
        assert body["date"] == TODAY
        assert [(s["startTime"], s["endTime"]) for s in body["freeSlots"]] == [
            ("09:30", "10:00"),
            ("11:00", "11:30"),
            ("13:00", "15:00"),
            ("16:00", "18:00"),
        ]
        assert "Dentist" not in response.text

    def test_common_availability_errors(self, client):
        """Test unknown agents are 404 and an empty list is 400."""
        unknown = client.get("/api/schedule/common", params={"agents": "alice,ghost"})
        assert unknown.status_code == 404
        assert unknown.json()["message"] == "Agent not found: ghost"

        empty = client.get("/api/schedule/common", params={"agents": " , "})
        assert empty.status_code == 400


class TestTasksApi:
    """Test the task REST views."""

    def test_create_list_get_delete(self, client):
        """Test the full REST lifecycle of a task."""
        created = client.post(
            "/api/tasks", json={"agentId": "bob", "message": "Hi there", "contextId": "ctx_rest"}
        )
        assert created.status_code == 200
        task = created.json()["task"]
        assert task["contextId"] == "ctx_rest"
        assert task["status"]["state"] == "completed"

        listed = client.get("/api/tasks", params={"contextId": "ctx_rest"}).json()
        assert listed["total"] == 1
        assert client.get("/api/tasks", params={"state": "working"}).json()["total"] == 0

        got = client.get(f"/api/tasks/{task['id']}", params={"historyLength": 1}).json()
        assert len(got["task"]["history"]) == 1

        deleted = client.delete(f"/api/tasks/{task['id']}")
        assert deleted.json() == {"success": True, "message": "Task deleted successfully"}
        assert client.get(f"/api/tasks/{task['id']}").status_code == 404
        assert client.delete(f"/api/tasks/{task['id']}").status_code == 404

    def test_create_with_structured_message(self, client):
        """Test a full message object is accepted."""
        response = client.post(
            "/api/tasks",
            json={"agentId": "pro-kun", "message": action_message("debate-argue", topic="Tea")},
        )
        data_part = response.json()["task"]["status"]["message"]["parts"][1]
        assert data_part["data"]["stance"] == "pro"

    def test_create_for_unknown_agent(self, client):
        """Test unknown agents are 404."""
        response = client.post("/api/tasks", json={"agentId": "ghost", "message": "hi"})
        assert response.status_code == 404

    def test_patch_state(self, client):
        """Test state changes follow the state machine."""
        task = client.post(
            "/api/tasks", json={"agentId": "alice", "message": "Book a slot at 14:00"}
        ).json()["task"]
        assert task["status"]["state"] == "input-required"
        url = f"/api/tasks/{task['id']}"

        bad_edge = client.patch(url, json={"state": "completed"})
        assert bad_edge.status_code == 400
        assert bad_edge.json()["message"] == "Invalid state transition: input-required -> completed"

        assert client.patch(url, json={"state": "canceled"}).status_code == 200

        terminal = client.patch(url, json={"state": "working"})
        assert terminal.status_code == 400
        assert terminal.json()["message"] == "Task is already in terminal state: canceled"

    def test_patch_missing_task(self, client, state):
        """Test patching an unknown task is 404 and leaves no lock behind."""
        response = client.patch("/api/tasks/task_missing", json={"state": "working"})
        assert response.status_code == 404
        assert response.json()["code"] == "A2A-3001"
        assert "task_missing" not in state.task_store._task_locks


class TestDbInit:
    """Test the seeding endpoints."""

    def test_status(self, client):
        """Test counts after startup seeding."""
        assert client.get("/api/db/init").json() == {
            "initialized": True,
            "agents": 5,
            "schedules": 9,
        }

    def test_init_already_seeded(self, client):
        """Test a plain init is a no-op once seeded."""
        body = client.post("/api/db/init").json()
        assert body["message"] == "Database already initialized"
        assert body["agents"] == 5

    def test_reset(self, client):
        """Test reset drops tasks and reseeds."""
        client.post("/api/tasks", json={"agentId": "bob", "message": "Hi"})
        client.post(
            "/api/agents/bob/schedule",
            json={"title": "Extra", "startTime": "17:00", "endTime": "18:00"},
        )

        body = client.post("/api/db/init", json={"reset": True}).json()
        assert body == {
            "success": True,
            "message": "Database reset and seeded successfully",
            "agents": 5,
            "schedules": 9,
        }
        assert client.get("/api/tasks").json()["total"] == 0
