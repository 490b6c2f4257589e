"""
A2A <-> agent message translation.

Inbound:  A2A messages (role + ordered parts) -> {"role", "content"} dicts
Outbound: agent text + tool results -> A2A Task (status, artifacts, history)

Every id the caller leaves out (message, task, context, artifact) is filled
with a fresh uuid4.
"""
import json
import uuid
from datetime import datetime, timezone
from typing import Any

from a2a.types import (
    Artifact,
    DataPart,
    FilePart,
    Message,
    Part,
    Task,
    TaskState,
    TaskStatus,
    TextPart,
)
from a2a.utils import new_agent_text_message
from pydantic import ValidationError

from mailverifier.agents.agent import AgentResponse


# A2A only knows "user" and "agent"
_ROLE_ALIASES = {"assistant": "agent", "system": "user"}


class InvalidMessageError(ValueError):
    """An inbound message that cannot be read as an A2A message."""


def new_id() -> str:
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# Inbound
# =============================================================================

def parse_messages(params: Any) -> list[Message]:
    """
    Collect the request's messages: `message` if given, else the `messages`
    list, else nothing. Missing messageId / taskId are filled in; the task id
    falls back to params.taskId. "assistant" and "system" roles are read as
    "agent" and "user".
    """
    if not isinstance(params, dict):
        params = {}

    if params.get("message") is not None:
        raw_messages = [params["message"]]
    elif isinstance(params.get("messages"), list):
        raw_messages = params["messages"]
    else:
        raw_messages = []

    task_id = params.get("taskId")
    messages = []
    for raw in raw_messages:
        if not isinstance(raw, dict):
            raise InvalidMessageError(f"Message must be an object, got {type(raw).__name__}")
        raw = dict(raw)
        raw["messageId"] = raw.get("messageId") or new_id()
        raw["taskId"] = raw.get("taskId") or task_id or new_id()
        raw["parts"] = raw.get("parts") or []
        if isinstance(raw.get("role"), str):
            raw["role"] = _ROLE_ALIASES.get(raw["role"], raw["role"])
        try:
            messages.append(Message.model_validate(raw))
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(p) for p in error["loc"]) or "message"
            raise InvalidMessageError(f"Invalid message {field}: {error['msg']}") from e
    return messages


def part_text(part: Part) -> str:
    """Text form of one part: text verbatim, data as compact JSON, files contribute nothing."""
    match part.root:
        case TextPart(text=text):
            return text
        case DataPart(data=data):
            return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
        case FilePart():
            return ""
        case other:
            raise TypeError(f"Unsupported part: {type(other).__name__}")


def to_internal_messages(messages: list[Message]) -> list[dict[str, Any]]:
    return [
        {
            "role": msg.role.value,
            "content": "\n".join(part_text(part) for part in msg.parts),
        }
        for msg in messages
    ]


# =============================================================================
# Outbound
# =============================================================================

def select_agent_text(response: AgentResponse) -> str:
    """
    Pick the agent's answer, first non-empty of:
        final_text -> output_text -> text -> last message content -> ""
    """
    for candidate in (response.final_text, response.output_text, response.text):
        if candidate:
            return candidate

    if response.messages:
        content = response.messages[-1].get("content")
        if content is None:
            return ""
        return content if isinstance(content, str) else json.dumps(content, ensure_ascii=False)
    return ""


def tool_result_part(result: Any) -> Part:
    data = result if isinstance(result, dict) else {"result": result}
    return Part(root=DataPart(data=data))


def build_artifacts(agent_id: str, text: str, tool_results: list[Any]) -> list[Artifact]:
    """One artifact: the agent's text followed by one data part per tool result."""
    return [
        Artifact(
            artifact_id=new_id(),
            name=f"{agent_id}Response",
            parts=[
                Part(root=TextPart(text=text)),
                *(tool_result_part(r) for r in tool_results),
            ],
        )
    ]


def build_history(messages: list[Message], text: str, task_id: str | None) -> list[Message]:
    """Inbound messages followed by the agent's final message."""
    history = [
        Message(
            role=msg.role,
            parts=msg.parts,
            message_id=msg.message_id or new_id(),
            task_id=msg.task_id or task_id or new_id(),
        )
        for msg in messages
    ]
    history.append(new_agent_text_message(text, task_id=task_id or new_id()))
    return history


def build_task(
    agent_id: str,
    messages: list[Message],
    response: AgentResponse,
    task_id: str | None = None,
    context_id: str | None = None,
) -> Task:
    text = select_agent_text(response)
    task_id = task_id or new_id()
    return Task(
        id=task_id,
        context_id=context_id or new_id(),
        status=TaskStatus(
            state=TaskState.completed,
            timestamp=utc_timestamp(),
            message=new_agent_text_message(text),
        ),
        artifacts=build_artifacts(agent_id, text, response.tool_results),
        history=build_history(messages, text, task_id),
    )
