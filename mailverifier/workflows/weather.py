"""
Weather Workflow
================
fetch-weather -> plan-activities
"""
import json
import logging
from datetime import date

import httpx
from pydantic import BaseModel, Field

from mailverifier.agents.weather_agent import AGENT_ID
from mailverifier.tools.weather import geocode, weather_condition
from mailverifier.workflows.base import Step, StepContext, Workflow, WorkflowError


logger = logging.getLogger(__name__)

WORKFLOW_ID = "weather-workflow"


class CityInput(BaseModel):
    city: str = Field(..., min_length=1, description="The city to get the weather for")


class Forecast(BaseModel):
    date: str
    max_temp: float
    min_temp: float
    precipitation_chance: float
    condition: str
    location: str


class ActivityPlan(BaseModel):
    activities: str


async def fetch_weather(data: CityInput, context: StepContext) -> Forecast:
    settings = context.settings
    try:
        async with context.http_client() as client:
            place = await geocode(data.city, client=client, url=settings.geocoding_url)
            if place is None:
                raise WorkflowError(f"Location '{data.city}' not found")

            response = await client.get(
                settings.forecast_url,
                params={
                    "latitude": place["latitude"],
                    "longitude": place["longitude"],
                    "current": "precipitation,weathercode",
                    "timezone": "auto",
                    "hourly": "precipitation_probability,temperature_2m",
                },
            )
            response.raise_for_status()
            payload = response.json()
    except httpx.HTTPError as e:
        raise WorkflowError(f"Open-Meteo request failed: {e}") from e
    except (ValueError, KeyError) as e:
        raise WorkflowError(f"Invalid response from Open-Meteo: {e}") from e

    hourly = payload.get("hourly") or {}
    temperatures = [t for t in hourly.get("temperature_2m") or [] if t is not None]
    chances = [p for p in hourly.get("precipitation_probability") or [] if p is not None]
    if not temperatures:
        raise WorkflowError(f"No forecast data for '{data.city}'")

    current = payload.get("current") or {}
    return Forecast(
        date=date.today().isoformat(),
        max_temp=max(temperatures),
        min_temp=min(temperatures),
        precipitation_chance=max(chances, default=0),
        condition=weather_condition(current.get("weathercode")),
        location=place.get("name") or data.city,
    )


def build_activities_prompt(forecast: Forecast) -> str:
    return f"""Based on the following weather forecast for {forecast.location}, suggest appropriate activities:
{json.dumps(forecast.model_dump(), indent=2)}

For each day in the forecast, structure your response exactly as follows:

📅 [Day, Month Date, Year]
═══════════════════════════

🌡️ WEATHER SUMMARY
• Conditions: [brief description]
• Temperature: [X°C to A°C]
• Precipitation: [X% chance]

🌅 MORNING ACTIVITIES
Outdoor:
• [Activity Name] - [Brief description including specific location/route]
  Best timing: [specific time range]
  Note: [relevant weather consideration]

🌞 AFTERNOON ACTIVITIES
Outdoor:
• [Activity Name] - [Brief description including specific location/route]
  Best timing: [specific time range]
  Note: [relevant weather consideration]

🏠 INDOOR ALTERNATIVES
• [Activity Name] - [Brief description including specific venue]
  Ideal for: [weather condition that would trigger this alternative]

⚠️ SPECIAL CONSIDERATIONS
• [Any relevant weather warnings, UV index, wind conditions, etc.]

Guidelines:
- Suggest 2-3 time-specific outdoor activities per day
- Include 1-2 indoor backup options
- For precipitation >50%, lead with indoor activities
- All activities must be specific to the location
- Include specific venues, trails, or locations
- Consider activity intensity based on temperature
- Keep descriptions concise but informative
"""


async def plan_activities(forecast: Forecast, context: StepContext) -> ActivityPlan:
    agent = context.get_agent(AGENT_ID)
    activities = await context.stream_text(agent, build_activities_prompt(forecast))
    return ActivityPlan(activities=activities)


fetch_weather_step = Step(
    id="fetch-weather",
    description="Fetches weather forecast for a given city",
    input_model=CityInput,
    output_model=Forecast,
    execute=fetch_weather,
)

plan_activities_step = Step(
    id="plan-activities",
    description="Suggests activities based on weather conditions",
    input_model=Forecast,
    output_model=ActivityPlan,
    execute=plan_activities,
)


def create_weather_workflow() -> Workflow:
    return (
        Workflow(id=WORKFLOW_ID, input_model=CityInput, output_model=ActivityPlan)
        .then(fetch_weather_step)
        .then(plan_activities_step)
        .commit()
    )
