import json

import httpx
import pytest

from mailverifier.agents.agent import Agent, AgentResponse
from mailverifier.config import Settings
from mailverifier.registry import AgentRegistry


class StubAgent(Agent):
    """Agent with canned output; never builds a model graph."""

    def __init__(self, name="stub", response=None, chunks=None, error=None):
        super().__init__(name=name, instructions="stub agent")
        self.response = response or AgentResponse(text="ok")
        self.chunks = chunks if chunks is not None else ["ok"]
        self.error = error
        self.received = []

    async def generate(self, messages, thread_id=None):
        self.received.append(messages)
        if self.error is not None:
            raise self.error
        return self.response

    async def stream(self, messages, thread_id=None):
        self.received.append(messages)
        for chunk in self.chunks:
            yield chunk


def json_transport(payload, status_code=200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


@pytest.fixture
def settings():
    return Settings(
        mailboxlayer_api_key="test-key",
        memory_url=":memory:",
        http_timeout=5.0,
    )


@pytest.fixture
def registry():
    return AgentRegistry()


def dumps(data) -> str:
    return json.dumps(data, separators=(",", ":"))
