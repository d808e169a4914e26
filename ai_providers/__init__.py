"""
AI Providers Package
doctrans - LLM backend adapters

Supports:
- OpenAI GPT (gpt-4o, ...) and any OpenAI-compatible endpoint
- Anthropic Claude (claude-sonnet-4, ...)

Usage:
    from ai_providers import UnifiedLLMClient, create_provider_from_settings

    client = UnifiedLLMClient(create_provider_from_settings(settings))
    response = await client.chat([AIMessage("user", "Hello")], system_prompt="...")
    print(response.content)
"""

from .base import (
    BaseAIProvider,
    AIProviderType,
    AIMessage,
    AIResponse,
    AIConfig
)

from .claude_provider import ClaudeProvider
from .openai_provider import OpenAIProvider

from .errors import (
    LLMError,
    TransientLLMError,
    UnrecoverableLLMError,
    LLMShutdownError,
)

from .manager import (
    PROVIDER_REGISTRY,
    PROVIDER_ALIASES,
    normalize_url,
    resolve_provider_type,
    create_provider,
    create_provider_from_settings,
)

from .unified_client import (
    UnifiedLLMClient,
    ProviderStatus,
    UsageStats,
    CumulativeStats,
)

__all__ = [
    # Base classes
    "BaseAIProvider",
    "AIProviderType",
    "AIMessage",
    "AIResponse",
    "AIConfig",

    # Providers
    "ClaudeProvider",
    "OpenAIProvider",

    # Errors
    "LLMError",
    "TransientLLMError",
    "UnrecoverableLLMError",
    "LLMShutdownError",

    # Factory
    "PROVIDER_REGISTRY",
    "PROVIDER_ALIASES",
    "normalize_url",
    "resolve_provider_type",
    "create_provider",
    "create_provider_from_settings",

    # Unified Client
    "UnifiedLLMClient",
    "ProviderStatus",
    "UsageStats",
    "CumulativeStats",
]

__version__ = "1.0.0"
