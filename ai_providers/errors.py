"""
LLM error taxonomy.

Transient errors fail a single request; unrecoverable ones (authentication,
billing/quota) mean no further request can succeed and the whole batch must
stop.
"""

from typing import Optional


class LLMError(Exception):
    """Base class for backend failures"""

    def __init__(self, message: str, status=None):
        self.status = status
        super().__init__(message)


class TransientLLMError(LLMError):
    """Rate limit after retries, network problem, model error - only this request failed"""


class UnrecoverableLLMError(LLMError):
    """Authentication or quota/billing failure - no later request can succeed"""


class LLMShutdownError(UnrecoverableLLMError):
    """Raised for every call made after the client was shut down"""

    def __init__(self, cause: Optional[BaseException]):
        self.cause = cause
        super().__init__(
            f"LLM client shutdown due to previous permanent failure: {cause}",
            getattr(cause, "status", None),
        )
