"""
Mail Verifier Server
====================
Starlette app exposing the registered agents over A2A.

Endpoints:
    POST /a2a/agent/{agent_id}   A2A JSON-RPC
    GET  /health                 Health check
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime

import uvicorn
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from mailverifier import __version__
from mailverifier.a2a.routes import A2ARoute
from mailverifier.runtime import Runtime


logger = logging.getLogger(__name__)


def build_app(runtime: Runtime) -> Starlette:

    async def health_endpoint(request: Request) -> JSONResponse:
        return JSONResponse({
            "status": "healthy",
            "version": __version__,
            "timestamp": datetime.now().isoformat(),
            "agents": {agent_id: agent.get_metrics() for agent_id, agent in runtime.agents},
            "workflows": list(runtime.workflows),
        })

    @asynccontextmanager
    async def lifespan(app: Starlette):
        yield
        logger.info("🛑 Shutting down agents...")
        await runtime.close()

    routes = [
        Route("/health", health_endpoint, methods=["GET"]),
        *A2ARoute(runtime.agents).routes(),
    ]
    app = Starlette(routes=routes, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


def serve(runtime: Runtime, host: str, port: int) -> None:
    app = build_app(runtime)

    print("\n" + "=" * 60)
    print("📧 Mail Verifier Agents (A2A)")
    print("=" * 60)
    print(f"   Host: {host}")
    print(f"   Port: {port}")
    print(f"   Model: {runtime.settings.model}")
    print(f"   Agents: {', '.join(runtime.agents.ids())}")
    print(f"   Workflows: {', '.join(runtime.workflows)}")
    print("")
    print("   Endpoints:")
    print("     POST /a2a/agent/{agentId}  - A2A JSON-RPC")
    print("     GET  /health               - Health Check")
    print("=" * 60 + "\n")

    uvicorn.run(app, host=host, port=port, log_level=runtime.settings.log_level.lower())
