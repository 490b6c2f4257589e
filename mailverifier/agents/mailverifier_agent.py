"""Email verification agent."""
import httpx

from mailverifier.agents.agent import Agent
from mailverifier.agents.memory import Memory
from mailverifier.config import Settings
from mailverifier.scorers.base import ScorerBinding
from mailverifier.scorers.mailverifier import (
    mail_completeness_scorer,
    mail_explanation_accuracy_scorer,
    mail_tool_call_appropriateness_scorer,
)
from mailverifier.tools.mailboxlayer import TOOL_NAME, build_mailboxlayer_tool


AGENT_ID = "mailverifierAgent"

INSTRUCTIONS = """
You are an intelligent Email Verification Agent.
Your job is to check if an email address is valid, disposable, free, and safe to use for communication.
Use the mailboxlayer_verify tool to perform your checks.
Return clear and concise verification results.
"""


def create_mailverifier_agent(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Agent:
    rate = settings.scorer_sampling_rate
    return Agent(
        name="mailverifier Agent",
        instructions=INSTRUCTIONS,
        model=settings.model,
        tools={TOOL_NAME: build_mailboxlayer_tool(settings, transport)},
        scorers={
            "toolCallAppropriateness": ScorerBinding(mail_tool_call_appropriateness_scorer(), rate),
            "completeness": ScorerBinding(mail_completeness_scorer(), rate),
            "explanationAccuracy": ScorerBinding(mail_explanation_accuracy_scorer(settings.judge_model), rate),
        },
        memory=Memory(settings.memory_url),
        temperature=settings.temperature,
        max_steps=settings.max_steps,
        score_history_limit=settings.score_history_limit,
    )
