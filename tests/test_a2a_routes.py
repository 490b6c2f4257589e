import pytest
from starlette.testclient import TestClient

from mailverifier.agents.agent import AgentResponse
from mailverifier.runtime import Runtime
from mailverifier.server import build_app

from conftest import StubAgent


def a2a_request(text="verify john@gmail.com", request_id="req-1", **params):
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "message/send",
        "params": {
            "message": {"role": "user", "parts": [{"kind": "text", "text": text}]},
            **params,
        },
    }


@pytest.fixture
def agent():
    return StubAgent(
        name="mailverifier Agent",
        response=AgentResponse(
            text="",
            final_text="john@gmail.com is deliverable.",
            tool_results=[{"toolName": "mailboxlayer_verify", "result": {"smtp_check": True}}],
        ),
    )


@pytest.fixture
def client(settings, registry, agent):
    registry.register("mailverifierAgent", agent)
    return TestClient(build_app(Runtime(settings=settings, agents=registry)))


def test_send_message(client, agent):
    response = client.post("/a2a/agent/mailverifierAgent", json=a2a_request())

    assert response.status_code == 200
    body = response.json()
    assert body["jsonrpc"] == "2.0"
    assert body["id"] == "req-1"
    task = body["result"]
    assert task["status"]["state"] == "completed"
    assert task["artifacts"][0]["parts"][0] == {"kind": "text", "text": "john@gmail.com is deliverable."}
    assert task["artifacts"][0]["parts"][1]["data"] == {
        "toolName": "mailboxlayer_verify",
        "result": {"smtp_check": True},
    }
    assert agent.received == [[{"role": "user", "content": "verify john@gmail.com"}]]


def test_task_and_context_ids_are_echoed(client):
    response = client.post(
        "/a2a/agent/mailverifierAgent",
        json=a2a_request(taskId="task-9", contextId="ctx-9"),
    )

    task = response.json()["result"]
    assert task["id"] == "task-9"
    assert task["contextId"] == "ctx-9"


def test_repeated_requests_have_same_shape(client):
    first = client.post("/a2a/agent/mailverifierAgent", json=a2a_request(request_id=1)).json()
    second = client.post("/a2a/agent/mailverifierAgent", json=a2a_request(request_id=2)).json()

    assert first["result"]["id"] != second["result"]["id"]
    assert first.keys() == second.keys()
    assert first["result"].keys() == second["result"].keys()
    assert first["result"]["artifacts"][0]["parts"] == second["result"]["artifacts"][0]["parts"]


def test_zero_id_is_accepted(client):
    response = client.post("/a2a/agent/mailverifierAgent", json=a2a_request(request_id=0))

    assert response.status_code == 200
    assert response.json()["id"] == 0


@pytest.mark.parametrize(
    "body",
    [
        {"jsonrpc": "1.0", "id": "1", "params": {}},
        {"jsonrpc": "2.0", "params": {}},
        {"jsonrpc": "2.0", "id": "", "params": {}},
        ["not", "an", "object"],
    ],
)
def test_invalid_envelope(client, agent, body):
    response = client.post("/a2a/agent/mailverifierAgent", json=body)

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == -32600
    assert "jsonrpc must be" in error["message"]
    assert agent.received == []


def test_unknown_agent(client):
    response = client.post("/a2a/agent/nope", json=a2a_request(request_id="r-7"))

    assert response.status_code == 404
    body = response.json()
    assert body["id"] == "r-7"
    assert body["error"]["code"] == -32602
    assert body["error"]["message"] == "Agent 'nope' not found"


def test_agent_failure_is_internal_error(settings, registry):
    registry.register("weatherAgent", StubAgent(error=RuntimeError("model exploded")))
    client = TestClient(build_app(Runtime(settings=settings, agents=registry)))

    response = client.post("/a2a/agent/weatherAgent", json=a2a_request())

    assert response.status_code == 500
    body = response.json()
    assert body["id"] is None
    assert body["error"]["code"] == -32603
    assert body["error"]["message"] == "Internal error"
    assert body["error"]["data"] == {"details": "model exploded"}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert "mailverifierAgent" in body["agents"]


def test_assistant_role_is_read_as_agent(client, agent):
    body = a2a_request()
    body["params"] = {
        "messages": [
            {"role": "assistant", "parts": [{"kind": "text", "text": "Which address?"}]},
            {"role": "user", "parts": [{"kind": "text", "text": "john@gmail.com"}]},
        ]
    }

    response = client.post("/a2a/agent/mailverifierAgent", json=body)

    assert response.status_code == 200
    assert agent.received == [[
        {"role": "agent", "content": "Which address?"},
        {"role": "user", "content": "john@gmail.com"},
    ]]
    assert [m["role"] for m in response.json()["result"]["history"]] == ["agent", "user", "agent"]


def test_malformed_message_is_invalid_request(client, agent):
    body = a2a_request(request_id="r-3")
    body["params"]["message"]["role"] = "tool"

    response = client.post("/a2a/agent/mailverifierAgent", json=body)

    assert response.status_code == 400
    body = response.json()
    assert body["id"] == "r-3"
    assert body["error"]["code"] == -32600
    assert "role" in body["error"]["message"]
    assert agent.received == []


def test_non_json_body_is_internal_error(client, agent):
    response = client.post(
        "/a2a/agent/mailverifierAgent",
        content=b"not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 500
    body = response.json()
    assert body["id"] is None
    assert body["error"]["code"] == -32603
    assert "details" in body["error"]["data"]
    assert agent.received == []
