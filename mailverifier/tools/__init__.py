# Mail Verifier Tools
#
# - mailboxlayer: MailboxLayer email verification (soft errors)
# - weather: Open-Meteo current conditions

from mailverifier.tools.mailboxlayer import (
    VerificationInput,
    VerificationResult,
    build_mailboxlayer_tool,
    verify_email,
)
from mailverifier.tools.weather import (
    WeatherInput,
    WeatherResult,
    build_weather_tool,
    get_weather,
)

__all__ = [
    "VerificationInput",
    "VerificationResult",
    "build_mailboxlayer_tool",
    "verify_email",
    "WeatherInput",
    "WeatherResult",
    "build_weather_tool",
    "get_weather",
]
