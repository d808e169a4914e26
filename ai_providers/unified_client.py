"""
Unified LLM Client with failure classification and cooperative shutdown
doctrans - LLM backend adapters

Features:
- Error classification: billing/quota and invalid keys are unrecoverable,
  everything else is transient
- Shutdown signal: after the first unrecoverable failure every call fails fast
- Usage tracking: token counts per call and cumulative
"""

import threading
import time
from typing import Optional, Dict, List
from dataclasses import dataclass, field
from enum import Enum

import anthropic
import httpx
import openai

from config.logging_config import get_logger

from .base import AIMessage, AIResponse, BaseAIProvider
from .errors import LLMError, LLMShutdownError, TransientLLMError, UnrecoverableLLMError

logger = get_logger(__name__)


class ProviderStatus(Enum):
    """Provider availability status"""
    AVAILABLE = "available"
    NO_CREDIT = "no_credit"
    INVALID_KEY = "invalid_key"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    ERROR = "error"


UNRECOVERABLE_STATUSES = frozenset({ProviderStatus.NO_CREDIT, ProviderStatus.INVALID_KEY})


@dataclass
class UsageStats:
    """Token and time usage of a single call"""
    input_tokens: int = 0
    output_tokens: int = 0
    elapsed_seconds: float = 0.0
    provider: str = ""
    model: str = ""

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class CumulativeStats:
    """Cumulative statistics across multiple API calls"""
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    total_elapsed_seconds: float = 0.0
    total_calls: int = 0
    failed_calls: int = 0
    calls_by_status: Dict[str, int] = field(default_factory=dict)

    def add(self, stats: UsageStats):
        """Add stats from a single call"""
        self.total_input_tokens += stats.input_tokens
        self.total_output_tokens += stats.output_tokens
        self.total_elapsed_seconds += stats.elapsed_seconds
        self.total_calls += 1

    def add_failure(self, status: ProviderStatus):
        self.failed_calls += 1
        self.calls_by_status[status.value] = self.calls_by_status.get(status.value, 0) + 1

    def to_dict(self) -> Dict:
        return {
            "total_input_tokens": self.total_input_tokens,
            "total_output_tokens": self.total_output_tokens,
            "total_elapsed_seconds": round(self.total_elapsed_seconds, 2),
            "total_calls": self.total_calls,
            "failed_calls": self.failed_calls,
            "calls_by_status": dict(self.calls_by_status),
        }


class UnifiedLLMClient:
    """
    Shared backend client used by every concurrent translation.

    Usage:
        client = UnifiedLLMClient(create_provider_from_settings(settings))
        response = await client.chat([AIMessage("user", "Hello")], system_prompt="...")
        print(response.content, response.input_tokens, response.output_tokens)
    """

    # Billing/credit error patterns
    BILLING_ERROR_PATTERNS = [
        "credit balance is too low",
        "insufficient_quota",
        "billing",
        "exceeded your current quota",
        "account is not active",
        "payment required",
        "insufficient funds",
        "billing_hard_limit_reached",
    ]

    RATE_LIMIT_PATTERNS = [
        "rate_limit",
        "rate limit",
        "too many requests",
        "429",
    ]

    INVALID_KEY_PATTERNS = [
        "invalid api key",
        "invalid_api_key",
        "invalid x-api-key",
        "authentication",
        "unauthorized",
        "api key not found",
        "incorrect api key",
    ]

    AUTH_ERROR_TYPES = (
        openai.AuthenticationError,
        openai.PermissionDeniedError,
        anthropic.AuthenticationError,
        anthropic.PermissionDeniedError,
    )

    NETWORK_ERROR_TYPES = (
        openai.APIConnectionError,
        anthropic.APIConnectionError,
        httpx.TransportError,
    )

    def __init__(self, provider: BaseAIProvider):
        self.provider = provider
        self._lock = threading.Lock()
        self._failure_cause: Optional[BaseException] = None
        self._stats = CumulativeStats()

    # ------------------------------------------------------------------
    # Shutdown state
    # ------------------------------------------------------------------

    def signal_shutdown(self, cause: BaseException) -> bool:
        """
        Make every later call fail fast. Only the first cause is kept.

        Returns:
            True if this call initiated the shutdown.
        """
        with self._lock:
            if self._failure_cause is not None:
                return False
            self._failure_cause = cause
        logger.warning(f"LLM client shut down: {cause}")
        return True

    @property
    def has_permanent_failure(self) -> bool:
        with self._lock:
            return self._failure_cause is not None

    @property
    def failure_cause(self) -> Optional[BaseException]:
        with self._lock:
            return self._failure_cause

    @property
    def stats(self) -> CumulativeStats:
        return self._stats

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify_error(self, error: Exception) -> ProviderStatus:
        """Classify an error into a status type."""
        error_str = str(error).lower()
        body = getattr(error, "body", None)
        if body:
            error_str += " " + str(body).lower()

        # Quota exhaustion arrives as HTTP 429 too, so billing goes first
        if any(p in error_str for p in self.BILLING_ERROR_PATTERNS):
            return ProviderStatus.NO_CREDIT
        if isinstance(error, self.AUTH_ERROR_TYPES):
            return ProviderStatus.INVALID_KEY
        if isinstance(error, (openai.RateLimitError, anthropic.RateLimitError)):
            return ProviderStatus.RATE_LIMITED
        if isinstance(error, self.NETWORK_ERROR_TYPES):
            return ProviderStatus.NETWORK_ERROR
        if any(p in error_str for p in self.RATE_LIMIT_PATTERNS):
            return ProviderStatus.RATE_LIMITED
        if any(p in error_str for p in self.INVALID_KEY_PATTERNS):
            return ProviderStatus.INVALID_KEY
        return ProviderStatus.ERROR

    def is_unrecoverable(self, status: ProviderStatus) -> bool:
        return status in UNRECOVERABLE_STATUSES

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    async def chat(
        self,
        messages: List[AIMessage],
        system_prompt: Optional[str] = None,
    ) -> AIResponse:
        """
        Send one conversation to the backend.

        Raises:
            LLMShutdownError: the client was shut down earlier.
            UnrecoverableLLMError: authentication or billing failure (also
                shuts the client down).
            TransientLLMError: any other backend failure.
        """
        cause = self.failure_cause
        if cause is not None:
            raise LLMShutdownError(cause)

        start_time = time.time()
        try:
            response = await self.provider.complete(messages, system_prompt=system_prompt)
        except LLMError:
            raise
        except Exception as e:
            status = self.classify_error(e)
            with self._lock:
                self._stats.add_failure(status)
            if self.is_unrecoverable(status):
                error = UnrecoverableLLMError(f"{type(e).__name__} ({status.value}): {e}", status)
                self.signal_shutdown(error)
                raise error from e
            raise TransientLLMError(f"{type(e).__name__} ({status.value}): {e}", status) from e

        usage = UsageStats(
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            elapsed_seconds=time.time() - start_time,
            provider=response.provider.value,
            model=response.model,
        )
        with self._lock:
            self._stats.add(usage)
        logger.debug(
            f"LLM call: {usage.input_tokens} in / {usage.output_tokens} out "
            f"in {usage.elapsed_seconds:.1f}s ({usage.model})"
        )
        return response

    async def close(self) -> None:
        logger.debug(f"LLM usage: {self._stats.to_dict()}")
        await self.provider.close()
