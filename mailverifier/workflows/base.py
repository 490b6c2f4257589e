"""
Linear Workflows
================
A workflow is a fixed chain of steps. Each step declares pydantic input and
output models; the output of one step is validated as the input of the
next, so a step never starts before the previous one has fully finished.

Workflow failures raise WorkflowError; there is no fallback at this level.
"""
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from mailverifier.agents.agent import Agent
from mailverifier.config import Settings
from mailverifier.registry import AgentRegistry


logger = logging.getLogger(__name__)


class WorkflowError(RuntimeError):
    """A workflow step could not produce its output."""


@dataclass
class StepContext:
    """What a step may use besides its input."""
    agents: AgentRegistry
    settings: Settings
    transport: httpx.AsyncBaseTransport | None = None
    on_chunk: Callable[[str], None] | None = None

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.settings.http_timeout, transport=self.transport)

    def get_agent(self, agent_id: str) -> Agent:
        agent = self.agents.get(agent_id)
        if agent is None:
            raise WorkflowError(f"Agent '{agent_id}' not found")
        return agent

    async def stream_text(self, agent: Agent, prompt: str) -> str:
        """Stream an agent's answer to one user prompt and return the full text."""
        text = ""
        async for chunk in agent.stream([{"role": "user", "content": prompt}]):
            if self.on_chunk:
                self.on_chunk(chunk)
            text += chunk
        return text


StepFn = Callable[[Any, StepContext], Awaitable[BaseModel | dict[str, Any]]]


@dataclass
class Step:
    id: str
    description: str
    input_model: type[BaseModel]
    output_model: type[BaseModel]
    execute: StepFn


def _validate(model: type[BaseModel], data: BaseModel | dict[str, Any], where: str) -> BaseModel:
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise WorkflowError(f"{where}: {e}") from e


@dataclass
class Workflow:
    id: str
    input_model: type[BaseModel]
    output_model: type[BaseModel]
    description: str = ""
    steps: list[Step] = field(default_factory=list)
    committed: bool = False

    def then(self, step: Step) -> "Workflow":
        if self.committed:
            raise WorkflowError(f"Workflow '{self.id}' is already committed")
        self.steps.append(step)
        return self

    def commit(self) -> "Workflow":
        if not self.steps:
            raise WorkflowError(f"Workflow '{self.id}' has no steps")
        self.committed = True
        return self

    async def run(self, data: BaseModel | dict[str, Any], context: StepContext) -> BaseModel:
        """Run all steps in order and return the validated workflow output."""
        if not self.committed:
            raise WorkflowError(f"Workflow '{self.id}' is not committed")

        current = _validate(self.input_model, data, f"{self.id} input")
        for step in self.steps:
            step_input = _validate(step.input_model, current, f"{step.id} input")
            logger.info(f"🔧 {self.id}: running {step.id}")
            output = await step.execute(step_input, context)
            current = _validate(step.output_model, output, f"{step.id} output")

        logger.info(f"✅ {self.id} finished")
        return _validate(self.output_model, current, f"{self.id} output")
