"""
A2A adapter: exposes registered agents over the A2A JSON-RPC protocol.

    POST /a2a/agent/{agent_id}
"""

from mailverifier.a2a.routes import A2ARoute
from mailverifier.a2a.translate import (
    build_task,
    parse_messages,
    select_agent_text,
    to_internal_messages,
)

__all__ = [
    "A2ARoute",
    "build_task",
    "parse_messages",
    "select_agent_text",
    "to_internal_messages",
]
