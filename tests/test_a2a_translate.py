import pytest
from a2a.types import Role

from mailverifier.a2a.translate import (
    InvalidMessageError,
    build_artifacts,
    build_task,
    parse_messages,
    select_agent_text,
    to_internal_messages,
)
from mailverifier.agents.agent import AgentResponse


def text_message(text, role="user"):
    return {"role": role, "parts": [{"kind": "text", "text": text}]}


def test_single_message_takes_precedence():
    params = {
        "message": text_message("first"),
        "messages": [text_message("ignored")],
        "taskId": "task-1",
    }

    messages = parse_messages(params)

    assert len(messages) == 1
    assert messages[0].task_id == "task-1"
    assert messages[0].message_id
    assert to_internal_messages(messages) == [{"role": "user", "content": "first"}]


def test_message_list_and_missing_messages():
    messages = parse_messages({"messages": [text_message("a"), text_message("b", role="agent")]})
    assert [m.role for m in messages] == [Role.user, Role.agent]
    assert messages[0].task_id != messages[1].task_id

    assert parse_messages({}) == []
    assert parse_messages(None) == []


def test_non_object_message_is_rejected():
    with pytest.raises(InvalidMessageError):
        parse_messages({"messages": ["hello"]})


def test_assistant_and_system_roles_are_mapped():
    messages = parse_messages({"messages": [
        text_message("be brief", role="system"),
        text_message("earlier answer", role="assistant"),
        text_message("verify a@b.com"),
    ]})

    assert [m.role for m in messages] == [Role.user, Role.agent, Role.user]


def test_unknown_role_is_rejected():
    with pytest.raises(InvalidMessageError, match="role"):
        parse_messages({"message": text_message("x", role="tool")})


def test_empty_message_object_is_not_skipped():
    with pytest.raises(InvalidMessageError):
        parse_messages({"message": {}, "messages": [text_message("fallback")]})


def test_parts_are_joined_with_newlines():
    raw = {
        "role": "user",
        "parts": [
            {"kind": "text", "text": "check this"},
            {"kind": "data", "data": {"email": "a@b.com", "n": 1}},
            {"kind": "file", "file": {"uri": "https://example.com/x.txt"}},
        ],
    }

    internal = to_internal_messages(parse_messages({"message": raw}))

    assert internal == [{"role": "user", "content": 'check this\n{"email":"a@b.com","n":1}\n'}]


def test_select_agent_text_order():
    assert select_agent_text(AgentResponse(final_text="final", output_text="out", text="text")) == "final"
    assert select_agent_text(AgentResponse(output_text="out", text="text")) == "out"
    assert select_agent_text(AgentResponse(text="text")) == "text"
    assert select_agent_text(AgentResponse(messages=[{"role": "assistant", "content": "last"}])) == "last"
    assert select_agent_text(AgentResponse(messages=[{"role": "tool", "content": {"a": 1}}])) == '{"a": 1}'
    assert select_agent_text(AgentResponse()) == ""


def test_artifacts_hold_text_then_tool_results():
    artifacts = build_artifacts("mailverifierAgent", "done", [{"email": "a@b.com"}, "raw"])

    assert len(artifacts) == 1
    artifact = artifacts[0]
    assert artifact.name == "mailverifierAgentResponse"
    assert artifact.parts[0].root.text == "done"
    assert artifact.parts[1].root.data == {"email": "a@b.com"}
    assert artifact.parts[2].root.data == {"result": "raw"}


def test_build_task():
    messages = parse_messages({"message": text_message("verify a@b.com")})
    response = AgentResponse(
        text="a@b.com looks valid",
        tool_results=[{"toolName": "mailboxlayer_verify", "result": {"format_valid": True}}],
    )

    task = build_task("mailverifierAgent", messages, response, task_id="t-1", context_id="c-1")
    dumped = task.model_dump(mode="json", by_alias=True, exclude_none=True)

    assert dumped["id"] == "t-1"
    assert dumped["contextId"] == "c-1"
    assert dumped["kind"] == "task"
    assert dumped["status"]["state"] == "completed"
    assert dumped["status"]["timestamp"].endswith("Z")
    assert dumped["status"]["message"]["parts"][0]["text"] == "a@b.com looks valid"
    assert dumped["artifacts"][0]["parts"][0] == {"kind": "text", "text": "a@b.com looks valid"}
    assert dumped["artifacts"][0]["parts"][1]["kind"] == "data"

    history = dumped["history"]
    assert len(history) == 2
    assert history[0]["role"] == "user"
    assert history[1]["role"] == "agent"
    assert history[1]["taskId"] == "t-1"
    assert history[1]["parts"][0]["text"] == "a@b.com looks valid"
