"""
Mail Verifier Agents

- Agent: runtime binding (model, instructions, tools, scorers, memory)
- mailverifierAgent: email verification via MailboxLayer
- weatherAgent: current weather and activity planning via Open-Meteo
"""

from mailverifier.agents.agent import Agent, AgentResponse
from mailverifier.agents.mailverifier_agent import create_mailverifier_agent
from mailverifier.agents.memory import Memory
from mailverifier.agents.weather_agent import create_weather_agent

__all__ = [
    "Agent",
    "AgentResponse",
    "Memory",
    "create_mailverifier_agent",
    "create_weather_agent",
]
