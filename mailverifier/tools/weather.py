"""
Weather Tool
============
Current conditions for a location from the Open-Meteo API (free, no key).

Same failure policy as the verification tool: unknown locations and HTTP
problems are reported in `error`, never raised.
"""
import logging
from typing import Any

import anyio
import httpx
from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from mailverifier.config import Settings, load_settings


logger = logging.getLogger(__name__)

TOOL_NAME = "weather"
TOOL_DESCRIPTION = "Get current weather for a location"

CURRENT_FIELDS = (
    "temperature_2m,apparent_temperature,relative_humidity_2m,"
    "wind_speed_10m,wind_gusts_10m,weather_code"
)


# =============================================================================
# WMO Weather Code Mapping
# =============================================================================

_WMO_CODE_TO_CONDITION: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def weather_condition(code: int | None) -> str:
    return _WMO_CODE_TO_CONDITION.get(code, "Unknown") if code is not None else "Unknown"


# =============================================================================
# Models
# =============================================================================

class WeatherInput(BaseModel):
    location: str = Field(..., min_length=1, description="City name")


class WeatherResult(BaseModel):
    temperature: float | None = None
    feels_like: float | None = None
    humidity: float | None = None
    wind_speed: float | None = None
    wind_gust: float | None = None
    conditions: str = "Unknown"
    location: str
    error: str | None = None


# =============================================================================
# Open-Meteo calls
# =============================================================================

async def geocode(
    location: str,
    *,
    client: httpx.AsyncClient,
    url: str = "https://geocoding-api.open-meteo.com/v1/search",
) -> dict[str, Any] | None:
    """Return the best geocoding match ({name, latitude, longitude, ...}) or None."""
    response = await client.get(url, params={"name": location, "count": 1})
    response.raise_for_status()
    results = response.json().get("results") or []
    return results[0] if results else None


async def get_weather(
    location: str,
    *,
    client: httpx.AsyncClient,
    settings: Settings,
) -> WeatherResult:
    try:
        place = await geocode(location, client=client, url=settings.geocoding_url)
        if place is None:
            return WeatherResult(location=location, error=f"Location '{location}' not found")

        response = await client.get(
            settings.forecast_url,
            params={
                "latitude": place["latitude"],
                "longitude": place["longitude"],
                "current": CURRENT_FIELDS,
            },
        )
        response.raise_for_status()
        current = response.json().get("current") or {}
    except (httpx.HTTPError, ValueError, KeyError) as e:
        logger.warning(f"⚠️ Weather lookup failed for {location}: {e}")
        return WeatherResult(location=location, error=f"Exception while contacting Open-Meteo: {e}")

    return WeatherResult(
        temperature=current.get("temperature_2m"),
        feels_like=current.get("apparent_temperature"),
        humidity=current.get("relative_humidity_2m"),
        wind_speed=current.get("wind_speed_10m"),
        wind_gust=current.get("wind_gusts_10m"),
        conditions=weather_condition(current.get("weather_code")),
        location=place.get("name") or location,
    )


def build_weather_tool(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> StructuredTool:

    async def _arun_tool(location: str) -> dict[str, Any]:
        current = settings or load_settings()
        async with httpx.AsyncClient(timeout=current.http_timeout, transport=transport) as client:
            result = await get_weather(location, client=client, settings=current)
        return result.model_dump()

    def _run_tool(location: str) -> dict[str, Any]:
        try:
            return anyio.from_thread.run(_arun_tool, location)
        except RuntimeError:
            return anyio.run(_arun_tool, location)

    return StructuredTool(
        name=TOOL_NAME,
        description=TOOL_DESCRIPTION,
        args_schema=WeatherInput,
        func=_run_tool,
        coroutine=_arun_tool,
    )
