"""
Base AI Provider - Abstract Interface
doctrans - LLM backend adapters
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
from dataclasses import dataclass
from enum import Enum

from config.constants import (
    TRANSLATION_MAX_RETRIES,
    TRANSLATION_MAX_TOKENS,
    TRANSLATION_TEMPERATURE,
    TRANSLATION_TIMEOUT_SECONDS,
)


class AIProviderType(Enum):
    """Supported AI Providers"""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


@dataclass
class AIMessage:
    """Unified message format across providers"""
    role: str  # "user", "assistant"
    content: str


@dataclass
class AIResponse:
    """Unified response format"""
    content: str
    model: str
    provider: AIProviderType
    usage: Optional[Dict[str, int]] = None  # tokens used
    finish_reason: Optional[str] = None
    raw_response: Optional[Any] = None

    @property
    def input_tokens(self) -> int:
        if not self.usage:
            return 0
        return self.usage.get("input_tokens") or 0

    @property
    def output_tokens(self) -> int:
        if not self.usage:
            return 0
        return self.usage.get("output_tokens") or 0


@dataclass
class AIConfig:
    """Provider configuration"""
    api_key: str
    model: str
    max_tokens: int = TRANSLATION_MAX_TOKENS
    temperature: float = TRANSLATION_TEMPERATURE
    base_url: Optional[str] = None  # For custom endpoints
    timeout: float = TRANSLATION_TIMEOUT_SECONDS
    max_retries: int = TRANSLATION_MAX_RETRIES


class BaseAIProvider(ABC):
    """
    Abstract base class for AI providers.
    All providers must implement these methods.
    """

    def __init__(self, config: AIConfig):
        self.config = config
        self._client = None

    @property
    @abstractmethod
    def provider_type(self) -> AIProviderType:
        """Return the provider type"""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the client connection"""
        pass

    @abstractmethod
    async def complete(
        self,
        messages: List[AIMessage],
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """
        Generate a completion from the AI model.

        Args:
            messages: List of conversation messages
            system_prompt: Optional system prompt
            **kwargs: Provider-specific parameters

        Returns:
            AIResponse with the generated content
        """
        pass

    async def close(self) -> None:
        """Release the underlying HTTP resources"""
        if self._client is not None:
            await self._client.close()
            self._client = None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} model={self.config.model}>"
