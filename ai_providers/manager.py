"""
AI Provider Manager
doctrans - LLM backend adapters

Builds the configured provider from settings.
"""

from typing import Optional, Dict, Type

from config.constants import (
    TRANSLATION_MAX_RETRIES,
    TRANSLATION_MAX_TOKENS,
    TRANSLATION_TEMPERATURE,
    TRANSLATION_TIMEOUT_SECONDS,
)

from .base import BaseAIProvider, AIProviderType, AIConfig
from .claude_provider import ClaudeProvider
from .openai_provider import OpenAIProvider


# Registry of all available providers
PROVIDER_REGISTRY: Dict[AIProviderType, Type[BaseAIProvider]] = {
    AIProviderType.OPENAI: OpenAIProvider,
    AIProviderType.ANTHROPIC: ClaudeProvider,
}

# Accepted spellings on the command line and in settings
PROVIDER_ALIASES: Dict[str, AIProviderType] = {
    "openai": AIProviderType.OPENAI,
    "anthropic": AIProviderType.ANTHROPIC,
    "claude": AIProviderType.ANTHROPIC,
}


def normalize_url(url: Optional[str]) -> Optional[str]:
    """Strip whitespace and one trailing slash; blank becomes None."""
    if url is None or not url.strip():
        return None
    url = url.strip()
    return url[:-1] if url.endswith("/") else url


def resolve_provider_type(name: str) -> AIProviderType:
    try:
        return PROVIDER_ALIASES[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported LLM provider: {name}. Supported providers: openai, anthropic"
        ) from None


def create_provider(
    provider: str,
    model: str,
    api_key: str = "",
    base_url: Optional[str] = None,
    temperature: float = TRANSLATION_TEMPERATURE,
    max_tokens: int = TRANSLATION_MAX_TOKENS,
    timeout: float = TRANSLATION_TIMEOUT_SECONDS,
    max_retries: int = TRANSLATION_MAX_RETRIES,
) -> BaseAIProvider:
    """
    Create a provider instance.

    Args:
        provider: "openai" or "anthropic" ("claude" is accepted as an alias)
        model: Model name passed to the API
        api_key: API key; OpenAI-compatible servers get "none" when empty
        base_url: Optional custom endpoint

    Raises:
        ValueError: unknown provider, or missing Anthropic key
    """
    provider_type = resolve_provider_type(provider)
    if provider_type is AIProviderType.OPENAI and not api_key:
        api_key = "none"
    if provider_type is AIProviderType.ANTHROPIC and not api_key:
        raise ValueError("An API key is required for the anthropic provider (LLM_TOKEN)")

    config = AIConfig(
        api_key=api_key,
        model=model,
        max_tokens=max_tokens,
        temperature=temperature,
        base_url=normalize_url(base_url),
        timeout=timeout,
        max_retries=max_retries,
    )
    return PROVIDER_REGISTRY[provider_type](config)


def create_provider_from_settings(settings) -> BaseAIProvider:
    """Create the provider described by a config.settings.Settings object."""
    return create_provider(
        provider=settings.llm_provider,
        model=settings.llm_model,
        api_key=settings.llm_token,
        base_url=settings.llm_url,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout_seconds,
        max_retries=settings.llm_max_retries,
    )
