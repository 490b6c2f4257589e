"""Explicit agent registry, handed to the A2A route and workflow steps."""
from collections.abc import Iterator

from mailverifier.agents.agent import Agent


class AgentRegistry:
    """Agents by identifier (e.g. "mailverifierAgent")."""

    def __init__(self, agents: dict[str, Agent] | None = None):
        self._agents: dict[str, Agent] = dict(agents or {})

    def register(self, agent_id: str, agent: Agent) -> None:
        if agent_id in self._agents:
            raise ValueError(f"Agent '{agent_id}' is already registered")
        self._agents[agent_id] = agent

    def get(self, agent_id: str) -> Agent | None:
        return self._agents.get(agent_id)

    def ids(self) -> list[str]:
        return list(self._agents)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def __iter__(self) -> Iterator[tuple[str, Agent]]:
        return iter(self._agents.items())

    def __len__(self) -> int:
        return len(self._agents)
