"""Chat model resolution for agents and scorer judges."""
from langchain.chat_models import init_chat_model
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_openai import ChatOpenAI


# "provider/name" prefixes that LangChain knows under another provider key
_PROVIDER_ALIASES = {
    "google": "google_genai",
    "gemini": "google_genai",
    "claude": "anthropic",
}


def split_model_id(model_id: str) -> tuple[str, str]:
    """Split "openai/gpt-4o-mini" into ("openai", "gpt-4o-mini"); bare names default to openai."""
    provider, sep, name = model_id.partition("/")
    if not sep:
        return "openai", model_id
    return _PROVIDER_ALIASES.get(provider, provider), name


def resolve_chat_model(model: str | BaseChatModel, temperature: float = 0.0) -> BaseChatModel:
    if isinstance(model, BaseChatModel):
        return model

    provider, name = split_model_id(model)
    if provider == "openai":
        return ChatOpenAI(model=name, temperature=temperature)
    return init_chat_model(name, model_provider=provider, temperature=temperature)
