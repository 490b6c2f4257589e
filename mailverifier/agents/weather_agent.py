"""Weather assistant agent."""
import httpx

from mailverifier.agents.agent import Agent
from mailverifier.agents.memory import Memory
from mailverifier.config import Settings
from mailverifier.scorers.base import ScorerBinding
from mailverifier.scorers.weather import (
    completeness_scorer,
    tool_call_appropriateness_scorer,
    translation_scorer,
)
from mailverifier.tools.weather import TOOL_NAME, build_weather_tool


AGENT_ID = "weatherAgent"

INSTRUCTIONS = """
You are a helpful weather assistant that provides accurate weather information and can help planning activities based on the weather.

Your primary function is to help users get weather details for specific locations. When responding:
- Always ask for a location if none is provided
- If the location name isn't in English, please translate it
- If giving a location with multiple parts (e.g. "New York, NY"), use the most relevant part (e.g. "New York")
- Include relevant details like humidity, wind conditions, and precipitation
- Keep responses concise but informative
- If the user asks for activities and provides the weather forecast, suggest activities based on the weather forecast.
- If the user asks for activities, respond in the format they request.

Use the weather tool to fetch current weather data.
"""


def create_weather_agent(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Agent:
    rate = settings.scorer_sampling_rate
    return Agent(
        name="Weather Agent",
        instructions=INSTRUCTIONS,
        model=settings.model,
        tools={TOOL_NAME: build_weather_tool(settings, transport)},
        scorers={
            "toolCallAppropriateness": ScorerBinding(tool_call_appropriateness_scorer(), rate),
            "completeness": ScorerBinding(completeness_scorer(), rate),
            "translation": ScorerBinding(translation_scorer(settings.judge_model), rate),
        },
        memory=Memory(settings.memory_url),
        temperature=settings.temperature,
        max_steps=settings.max_steps,
        score_history_limit=settings.score_history_limit,
    )
