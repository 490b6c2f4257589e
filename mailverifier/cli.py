#!/usr/bin/env python3
"""
Mail Verifier CLI

Usage:
    python -m mailverifier serve --host 0.0.0.0 --port 4111
    python -m mailverifier verify user@example.com     # mail-verifier-workflow
    python -m mailverifier check user@example.com      # raw MailboxLayer record
    python -m mailverifier weather Berlin              # weather-workflow
"""
import argparse
import asyncio
import json
import sys

from mailverifier.config import configure_logging, load_settings
from mailverifier.runtime import build_runtime
from mailverifier.tools.mailboxlayer import verify_email
from mailverifier.workflows.base import WorkflowError
from mailverifier.workflows.mailverifier import WORKFLOW_ID as MAIL_WORKFLOW_ID
from mailverifier.workflows.weather import WORKFLOW_ID as WEATHER_WORKFLOW_ID


def _echo(chunk: str) -> None:
    print(chunk, end="", flush=True)


async def run_workflow(workflow_id: str, data: dict) -> int:
    runtime = build_runtime()
    try:
        await runtime.run_workflow(workflow_id, data, on_chunk=_echo)
        print()
        return 0
    except WorkflowError as e:
        print(f"\n❌ {workflow_id} failed: {e}", file=sys.stderr)
        return 1
    finally:
        await runtime.close()


async def check_email(email: str) -> int:
    settings = load_settings()
    result = await verify_email(
        email,
        api_key=settings.mailboxlayer_api_key,
        url=settings.mailboxlayer_url,
        timeout=settings.http_timeout,
    )
    print(json.dumps(result.model_dump(), indent=2))
    return 1 if result.error else 0


def main(argv: list[str] | None = None) -> int:
    settings = load_settings()

    parser = argparse.ArgumentParser(
        prog="mailverifier",
        description="Mail verifier and weather agents with an A2A endpoint",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Start the A2A server")
    serve_parser.add_argument("--host", type=str, default=settings.host, help="Host to bind the server")
    serve_parser.add_argument("--port", type=int, default=settings.port, help="Port to bind the server")

    verify_parser = subparsers.add_parser("verify", help="Run the mail verifier workflow")
    verify_parser.add_argument("email", help="Email address to verify")

    check_parser = subparsers.add_parser("check", help="Call the MailboxLayer tool directly")
    check_parser.add_argument("email", help="Email address to verify")

    weather_parser = subparsers.add_parser("weather", help="Run the weather workflow")
    weather_parser.add_argument("city", help="City to plan activities for")

    args = parser.parse_args(argv)
    configure_logging(settings.log_level)

    if args.command == "serve":
        from mailverifier.server import serve
        serve(build_runtime(settings), host=args.host, port=args.port)
        return 0
    if args.command == "verify":
        return asyncio.run(run_workflow(MAIL_WORKFLOW_ID, {"email": args.email}))
    if args.command == "check":
        return asyncio.run(check_email(args.email))
    return asyncio.run(run_workflow(WEATHER_WORKFLOW_ID, {"city": args.city}))


if __name__ == "__main__":
    sys.exit(main())
