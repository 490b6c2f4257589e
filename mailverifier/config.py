"""
Mail Verifier Configuration
===========================
Settings loaded from environment variables (and an optional .env file).

Environment:
    MAILBOXLAYER_API_KEY   MailboxLayer access key (required for verification)
    MODEL                  Agent model, "provider/name" (default: openai/gpt-4o-mini)
    JUDGE_MODEL            Scorer judge model (default: openai/gpt-4o)
    MEMORY_URL             ":memory:" or "file:<path>" (default: file:mastra.db)
    SCORE_HISTORY_LIMIT    Scores kept per agent for metrics (default: 100)
    HOST / PORT            Server bind address (default: 127.0.0.1:4111)
    LOG_LEVEL              Logging level (default: INFO)
"""
import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class Settings(BaseModel):
    """Runtime settings shared by tools, agents, workflows and the server."""
    mailboxlayer_api_key: str | None = None
    mailboxlayer_url: str = "https://apilayer.net/api/check"
    geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"

    model: str = "openai/gpt-4o-mini"
    judge_model: str = "openai/gpt-4o"
    temperature: float = 0.0
    max_steps: int = 5

    memory_url: str = "file:mastra.db"
    http_timeout: float = 30.0
    scorer_sampling_rate: float = 1.0
    score_history_limit: int = 100

    host: str = "127.0.0.1"
    port: int = 4111
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings(
        mailboxlayer_api_key=os.getenv("MAILBOXLAYER_API_KEY") or None,
        mailboxlayer_url=os.getenv("MAILBOXLAYER_URL", "https://apilayer.net/api/check"),
        model=os.getenv("MODEL", "openai/gpt-4o-mini"),
        judge_model=os.getenv("JUDGE_MODEL", "openai/gpt-4o"),
        temperature=float(os.getenv("TEMPERATURE", "0.0")),
        max_steps=int(os.getenv("MAX_STEPS", "5")),
        memory_url=os.getenv("MEMORY_URL", "file:mastra.db"),
        http_timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
        scorer_sampling_rate=float(os.getenv("SCORER_SAMPLING_RATE", "1.0")),
        score_history_limit=int(os.getenv("SCORE_HISTORY_LIMIT", "100")),
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "4111")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
