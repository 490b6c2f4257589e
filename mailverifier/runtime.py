"""
Mail Verifier Runtime
=====================
Everything the server and CLI need, built once:

    agents:    weatherAgent, mailverifierAgent
    workflows: weather-workflow, mail-verifier-workflow
    scorers:   tool-call, completeness and LLM-judged scorers for both agents
"""
import logging
from typing import Any, Callable

import httpx
from pydantic import BaseModel

from mailverifier.agents.mailverifier_agent import AGENT_ID as MAILVERIFIER_AGENT_ID
from mailverifier.agents.mailverifier_agent import create_mailverifier_agent
from mailverifier.agents.weather_agent import AGENT_ID as WEATHER_AGENT_ID
from mailverifier.agents.weather_agent import create_weather_agent
from mailverifier.config import Settings, load_settings
from mailverifier.registry import AgentRegistry
from mailverifier.scorers.base import Scorer
from mailverifier.workflows.base import StepContext, Workflow, WorkflowError
from mailverifier.workflows.mailverifier import create_mail_verifier_workflow
from mailverifier.workflows.weather import create_weather_workflow


logger = logging.getLogger(__name__)


class Runtime:
    """Holds the registered agents, workflows and scorers."""

    def __init__(
        self,
        settings: Settings,
        agents: AgentRegistry,
        workflows: dict[str, Workflow] | None = None,
        scorers: dict[str, Scorer] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        self.agents = agents
        self.workflows = dict(workflows or {})
        self.scorers = dict(scorers or {})
        self.transport = transport

    def get_agent(self, agent_id: str):
        return self.agents.get(agent_id)

    def get_workflow(self, workflow_id: str) -> Workflow | None:
        return self.workflows.get(workflow_id)

    async def run_workflow(
        self,
        workflow_id: str,
        data: BaseModel | dict[str, Any],
        on_chunk: Callable[[str], None] | None = None,
    ) -> BaseModel:
        workflow = self.get_workflow(workflow_id)
        if workflow is None:
            raise WorkflowError(f"Workflow '{workflow_id}' not found")
        context = StepContext(
            agents=self.agents,
            settings=self.settings,
            transport=self.transport,
            on_chunk=on_chunk,
        )
        return await workflow.run(data, context)

    async def close(self):
        for agent_id, agent in self.agents:
            try:
                await agent.close()
            except Exception as e:
                logger.warning(f"⚠️ Error closing agent {agent_id}: {e}")


def build_runtime(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Runtime:
    """Register both agents, both workflows and every scorer."""
    settings = settings or load_settings()

    agents = AgentRegistry()
    agents.register(WEATHER_AGENT_ID, create_weather_agent(settings, transport))
    agents.register(MAILVERIFIER_AGENT_ID, create_mailverifier_agent(settings, transport))

    workflows = {}
    for workflow in (create_weather_workflow(), create_mail_verifier_workflow()):
        workflows[workflow.id] = workflow

    scorers = {}
    for _, agent in agents:
        for key, binding in agent.scorers.items():
            scorers[f"{agent.name}:{key}"] = binding.scorer

    return Runtime(
        settings=settings,
        agents=agents,
        workflows=workflows,
        scorers=scorers,
        transport=transport,
    )
