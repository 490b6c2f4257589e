"""
A2A JSON-RPC Route
==================
POST /a2a/agent/{agent_id}

Translates an A2A JSON-RPC request into one agent.generate() call and the
result back into an A2A task.

    validate envelope  -> 400, -32600 (Invalid Request)
    resolve agent      -> 404, -32602 (agent not found)
    normalize messages -> 400, -32600 on a malformed message
    invoke agent       -> 500, -32603 (Internal error) on any failure
    respond            -> 200, {"jsonrpc", "id", "result": Task}
"""
import logging
from typing import Any

from a2a.types import InternalError, InvalidParamsError, InvalidRequestError
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from mailverifier.a2a.translate import (
    InvalidMessageError,
    build_task,
    parse_messages,
    to_internal_messages,
)
from mailverifier.registry import AgentRegistry


logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"


def _dump(model) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def error_response(
    request_id: Any,
    error: InvalidRequestError | InvalidParamsError | InternalError,
    status_code: int,
) -> JSONResponse:
    return JSONResponse(
        {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": _dump(error)},
        status_code=status_code,
    )


class A2ARoute:
    """A2A adapter bound to an explicit agent registry."""

    path = "/a2a/agent/{agent_id}"

    def __init__(self, agents: AgentRegistry):
        self.agents = agents

    def routes(self) -> list[Route]:
        return [Route(self.path, self.handle, methods=["POST"])]

    async def handle(self, request: Request) -> JSONResponse:
        agent_id = request.path_params["agent_id"]
        try:
            body = await request.json()

            request_id = body.get("id") if isinstance(body, dict) else None
            if (
                not isinstance(body, dict)
                or body.get("jsonrpc") != JSONRPC_VERSION
                or request_id is None
                or request_id == ""
            ):
                return error_response(
                    request_id,
                    InvalidRequestError(
                        message='Invalid Request: jsonrpc must be "2.0" and id is required'
                    ),
                    400,
                )

            agent = self.agents.get(agent_id)
            if agent is None:
                return error_response(
                    request_id,
                    InvalidParamsError(message=f"Agent '{agent_id}' not found"),
                    404,
                )

            params = body.get("params")
            if not isinstance(params, dict):
                params = {}
            try:
                messages = parse_messages(params)
            except InvalidMessageError as e:
                return error_response(request_id, InvalidRequestError(message=f"Invalid Request: {e}"), 400)

            response = await agent.generate(to_internal_messages(messages))

            task = build_task(
                agent_id,
                messages,
                response,
                task_id=params.get("taskId"),
                context_id=params.get("contextId"),
            )
            return JSONResponse({"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": _dump(task)})

        except Exception as e:
            logger.exception(f"❌ A2A error for agent {agent_id}: {e}")
            return error_response(
                None,
                InternalError(message="Internal error", data={"details": str(e)}),
                500,
            )
