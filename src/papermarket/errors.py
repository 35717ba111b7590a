"""Market data error types."""

from __future__ import annotations

from enum import Enum


class MarketDataErrorCode(Enum):
    """Error classification codes."""

    RATE_LIMITED = "rate_limited"
    AUTH_FAILED = "auth_failed"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    PROVIDER_ERROR = "provider_error"
    INVALID_RESPONSE = "invalid_response"
    NO_DATA = "no_data"


class MarketDataError(Exception):
    """Provider failure with error code and retryable flag.

    Raised by provider adapters only. The gateway catches every one of these
    and moves on to the next provider, so callers of the gateway never see
    them.

    Attributes:
        message: Human-readable error description.
        code: Structured error code for programmatic handling.
        retryable: Whether the same provider may succeed on a later request.
            Informational for direct adapter users; the gateway only acts on
            the code (AUTH_FAILED disables the provider) and logs the flag.
        provider: Name of the provider that raised, when known.
    """

    def __init__(
        self,
        message: str,
        code: MarketDataErrorCode = MarketDataErrorCode.PROVIDER_ERROR,
        retryable: bool = False,
        provider: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.retryable = retryable
        self.provider = provider
