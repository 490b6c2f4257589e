"""
Mail Verifier Agents
====================

LLM agents for email verification (MailboxLayer) and weather, exposed over
the A2A protocol.

Features:
- mailverifierAgent / weatherAgent (LangChain agents with tools and memory)
- mail-verifier-workflow / weather-workflow (fetch -> LLM summary)
- Post-hoc scorers (tool choice, completeness, LLM-judged accuracy)
- A2A JSON-RPC route: POST /a2a/agent/{agentId}

Usage:
    python -m mailverifier serve --port 4111
    python -m mailverifier verify user@example.com
"""

__version__ = "1.0.0"
