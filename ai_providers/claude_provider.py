"""
Claude AI Provider - Anthropic
doctrans - LLM backend adapters
"""

from typing import Optional, List, Dict, Any

import anthropic
import httpx

from .base import (
    BaseAIProvider,
    AIProviderType,
    AIMessage,
    AIResponse,
    AIConfig
)

CONNECT_TIMEOUT_SECONDS = 10.0


class ClaudeProvider(BaseAIProvider):
    """Anthropic Claude AI Provider"""

    DEFAULT_MODEL = "claude-sonnet-4-20250514"

    @property
    def provider_type(self) -> AIProviderType:
        return AIProviderType.ANTHROPIC

    async def initialize(self) -> None:
        """Initialize Anthropic client"""
        if self._client is not None:
            return
        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout, connect=CONNECT_TIMEOUT_SECONDS)
        )
        self._client = anthropic.AsyncAnthropic(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
            max_retries=self.config.max_retries,
            http_client=http_client,
        )

    def _convert_messages(self, messages: List[AIMessage]) -> List[Dict[str, Any]]:
        """Convert AIMessage to Anthropic format"""
        return [{"role": msg.role, "content": msg.content} for msg in messages]

    async def complete(
        self,
        messages: List[AIMessage],
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """Generate completion using Claude"""
        if not self._client:
            await self.initialize()

        response = await self._client.messages.create(
            model=kwargs.get("model", self.config.model),
            max_tokens=kwargs.get("max_tokens", self.config.max_tokens),
            temperature=kwargs.get("temperature", self.config.temperature),
            system=system_prompt or "",
            messages=self._convert_messages(messages)
        )

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )

        return AIResponse(
            content=text,
            model=response.model,
            provider=self.provider_type,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens
            } if response.usage else None,
            finish_reason=response.stop_reason,
            raw_response=response
        )
