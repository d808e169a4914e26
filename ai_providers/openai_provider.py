"""
OpenAI Provider - GPT-4o and OpenAI-compatible endpoints
doctrans - LLM backend adapters
"""

from typing import Optional, List, Dict, Any

import httpx
from openai import AsyncOpenAI

from .base import (
    BaseAIProvider,
    AIProviderType,
    AIMessage,
    AIResponse,
    AIConfig
)

CONNECT_TIMEOUT_SECONDS = 10.0


class OpenAIProvider(BaseAIProvider):
    """
    OpenAI GPT Provider

    Also serves OpenAI-compatible servers (local inference servers, proxies)
    through `AIConfig.base_url`; such servers usually accept any API key.
    """

    DEFAULT_MODEL = "gpt-4o"

    @property
    def provider_type(self) -> AIProviderType:
        return AIProviderType.OPENAI

    async def initialize(self) -> None:
        """Initialize OpenAI client"""
        if self._client is not None:
            return
        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout, connect=CONNECT_TIMEOUT_SECONDS)
        )
        self._client = AsyncOpenAI(
            api_key=self.config.api_key or "none",
            base_url=self.config.base_url,
            max_retries=self.config.max_retries,
            http_client=http_client,
        )

    def _convert_messages(
        self,
        messages: List[AIMessage],
        system_prompt: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Convert AIMessage to OpenAI format"""
        converted = []
        if system_prompt:
            converted.append({"role": "system", "content": system_prompt})
        for msg in messages:
            converted.append({"role": msg.role, "content": msg.content})
        return converted

    async def complete(
        self,
        messages: List[AIMessage],
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """Generate completion using OpenAI"""
        if not self._client:
            await self.initialize()

        response = await self._client.chat.completions.create(
            model=kwargs.get("model", self.config.model),
            max_tokens=kwargs.get("max_tokens", self.config.max_tokens),
            temperature=kwargs.get("temperature", self.config.temperature),
            messages=self._convert_messages(messages, system_prompt)
        )

        choice = response.choices[0]

        return AIResponse(
            content=choice.message.content or "",
            model=response.model,
            provider=self.provider_type,
            usage={
                "input_tokens": response.usage.prompt_tokens,
                "output_tokens": response.usage.completion_tokens
            } if response.usage else None,
            finish_reason=choice.finish_reason,
            raw_response=response
        )
