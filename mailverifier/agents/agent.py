"""
Agent Runtime Binding
=====================
Binds a model, instructions, tools, scorers and memory into one agent on
top of LangChain's create_agent (LangGraph loop).

The tool-calling loop, prompt execution and checkpointing belong to the
runtime; this module only wires them up and reshapes the results.

Features:
- Lazy graph construction (no import-time model clients)
- generate(): full run, returns text + tool calls + tool results
- stream(): text chunks as the model produces them
- Post-hoc scoring in background tasks, sampled per scorer
"""
import asyncio
import json
import logging
import uuid
from collections import deque
from collections.abc import AsyncIterator
from typing import Any

from langchain.agents import create_agent
from langchain.agents.middleware import ModelCallLimitMiddleware
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import (
    AIMessage,
    AIMessageChunk,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)
from langchain_core.tools import BaseTool
from pydantic import BaseModel, Field

from mailverifier.agents.memory import Memory
from mailverifier.models import resolve_chat_model
from mailverifier.scorers.base import ScorerBinding, ScoreResult, ScoringRun


logger = logging.getLogger(__name__)


# =============================================================================
# Results
# =============================================================================

class AgentResponse(BaseModel):
    """Outcome of one agent run."""
    text: str = ""
    final_text: str | None = None
    output_text: str | None = None
    messages: list[dict[str, Any]] = Field(default_factory=list)
    tool_calls: list[dict[str, Any]] = Field(default_factory=list)
    tool_results: list[dict[str, Any]] = Field(default_factory=list)


# =============================================================================
# Message conversion
# =============================================================================

_ROLE_TO_MESSAGE = {
    "user": HumanMessage,
    "assistant": AIMessage,
    "agent": AIMessage,
    "system": SystemMessage,
}


def to_langchain_messages(messages: list[dict[str, Any]]) -> list[BaseMessage]:
    """Convert {"role", "content"} dicts into LangChain messages."""
    converted = []
    for msg in messages:
        role = msg.get("role")
        message_cls = _ROLE_TO_MESSAGE.get(role)
        if message_cls is None:
            raise ValueError(f"Unsupported message role: {role!r}")
        converted.append(message_cls(content=msg.get("content") or ""))
    return converted


def parse_tool_content(content: Any) -> Any:
    if not isinstance(content, str):
        return content
    try:
        return json.loads(content)
    except ValueError:
        return content


def extract_response(messages: list[BaseMessage]) -> AgentResponse:
    """Reshape a finished run (the messages after the last user turn) into an AgentResponse."""
    start = 0
    for idx, msg in enumerate(messages):
        if isinstance(msg, HumanMessage):
            start = idx + 1
    run_messages = messages[start:]

    history: list[dict[str, Any]] = []
    tool_calls: list[dict[str, Any]] = []
    tool_results: list[dict[str, Any]] = []
    calls_by_id: dict[str, dict[str, Any]] = {}

    for msg in run_messages:
        if isinstance(msg, AIMessage):
            history.append({"role": "assistant", "content": msg.text})
            for tc in msg.tool_calls:
                record = {
                    "toolCallId": tc.get("id"),
                    "toolName": tc.get("name", "unknown"),
                    "args": tc.get("args", {}),
                }
                tool_calls.append(record)
                calls_by_id[record["toolCallId"]] = record
        elif isinstance(msg, ToolMessage):
            history.append({"role": "tool", "content": msg.content})
            call = calls_by_id.get(msg.tool_call_id, {})
            tool_results.append({
                "toolCallId": msg.tool_call_id,
                "toolName": msg.name or call.get("toolName", "unknown"),
                "args": call.get("args", {}),
                "result": parse_tool_content(msg.content),
            })

    last_ai = next((m for m in reversed(run_messages) if isinstance(m, AIMessage)), None)
    text = last_ai.text if last_ai is not None else ""

    # The model answered again after its tools ran
    final_text = None
    if tool_results and last_ai is not None and not last_ai.tool_calls and text.strip():
        final_text = text

    return AgentResponse(
        text=text,
        final_text=final_text,
        messages=history,
        tool_calls=tool_calls,
        tool_results=tool_results,
    )


# =============================================================================
# Agent
# =============================================================================

class Agent:
    """
    Declarative agent: model + instructions + tools (+ scorers, memory).

    Key: LAZY INIT; the model client and graph are built on first use.
    """

    def __init__(
        self,
        name: str,
        instructions: str,
        model: str | BaseChatModel = "openai/gpt-4o-mini",
        tools: dict[str, BaseTool] | None = None,
        scorers: dict[str, ScorerBinding] | None = None,
        memory: Memory | None = None,
        temperature: float = 0.0,
        max_steps: int = 5,
        score_history_limit: int = 100,
    ):
        self.name = name
        self.instructions = instructions.strip()
        self.model = model
        self.tools = dict(tools or {})
        self.scorers = dict(scorers or {})
        self.memory = memory
        self.temperature = temperature
        self.max_steps = max_steps

        self.graph = None
        self._init_lock = asyncio.Lock()
        self._scoring_tasks: set[asyncio.Task] = set()

        self.total_runs = 0
        self.successful_runs = 0
        self.total_scores = 0
        self.score_history: deque[ScoreResult] = deque(maxlen=score_history_limit)

    @property
    def model_id(self) -> str:
        if isinstance(self.model, str):
            return self.model
        return getattr(self.model, "model_name", None) or type(self.model).__name__

    async def ensure_initialized(self):
        if self.graph is not None:
            return

        async with self._init_lock:
            if self.graph is not None:
                return
            self.graph = create_agent(
                model=resolve_chat_model(self.model, self.temperature),
                tools=list(self.tools.values()),
                system_prompt=self.instructions,
                middleware=[ModelCallLimitMiddleware(run_limit=self.max_steps, exit_behavior="end")],
                checkpointer=self.memory.checkpointer if self.memory else None,
                name=self.name,
            )
            logger.info(f"✅ {self.name} ready ({self.model_id}, {len(self.tools)} tools)")

    def _config(self, thread_id: str | None) -> dict[str, Any]:
        return {"configurable": {"thread_id": thread_id or str(uuid.uuid4())}}

    async def generate(
        self,
        messages: list[dict[str, Any]],
        thread_id: str | None = None,
    ) -> AgentResponse:
        """
        Run the agent to completion (tool calls included).

        Args:
            messages: {"role", "content"} dicts
            thread_id: Memory thread; a fresh one is used when omitted
        """
        await self.ensure_initialized()
        self.total_runs += 1

        result = await self.graph.ainvoke(
            {"messages": to_langchain_messages(messages)},
            self._config(thread_id),
        )
        response = extract_response(result.get("messages", []) if isinstance(result, dict) else [])
        self.successful_runs += 1

        if self.scorers:
            self._schedule_scoring(ScoringRun(
                input_messages=messages,
                output_messages=[{"role": "assistant", "content": response.final_text or response.text}],
                tool_calls=response.tool_calls,
            ))
        return response

    async def stream(
        self,
        messages: list[dict[str, Any]],
        thread_id: str | None = None,
    ) -> AsyncIterator[str]:
        """Yield the model's text as it is generated."""
        await self.ensure_initialized()
        self.total_runs += 1

        async for chunk, _metadata in self.graph.astream(
            {"messages": to_langchain_messages(messages)},
            self._config(thread_id),
            stream_mode="messages",
        ):
            if isinstance(chunk, AIMessageChunk) and chunk.text:
                yield chunk.text

        self.successful_runs += 1

    # =========================================================================
    # Scoring
    # =========================================================================

    def _schedule_scoring(self, run: ScoringRun):
        task = asyncio.create_task(self.score(run))
        self._scoring_tasks.add(task)
        task.add_done_callback(self._scoring_tasks.discard)

    async def score(self, run: ScoringRun) -> list[ScoreResult]:
        """Run every sampled scorer on a finished run; failures are logged and skipped."""
        results = []
        for key, binding in self.scorers.items():
            if not binding.should_sample():
                continue
            try:
                result = await binding.scorer.run(run)
            except Exception as e:
                logger.warning(f"⚠️ Scorer {key} failed for {self.name}: {e}")
                continue
            logger.info(f"📊 {self.name} {result.scorer}: {result.score:.2f}")
            results.append(result)
        self.total_scores += len(results)
        self.score_history.extend(results)
        return results

    async def wait_for_scoring(self):
        if self._scoring_tasks:
            await asyncio.gather(*self._scoring_tasks)

    async def close(self):
        await self.wait_for_scoring()
        if self.memory:
            await self.memory.close()

    def get_metrics(self) -> dict[str, Any]:
        return {
            "initialized": self.graph is not None,
            "model": self.model_id,
            "tools": list(self.tools),
            "scorers": list(self.scorers),
            "total_runs": self.total_runs,
            "successful_runs": self.successful_runs,
            "scores_recorded": self.total_scores,
        }
