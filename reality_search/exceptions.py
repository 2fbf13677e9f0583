"""Custom exception hierarchy for reality-search.

Every error raised by the routing engine derives from
:class:`RealitySearchError`. Errors that end a request carry a
machine-readable ``reason`` so the calling layer can tell policy problems
("provide your own key") from exhaustion ("try again later").

Exception Hierarchy:
    RealitySearchError (base)
    ├── ConfigurationError
    ├── ValidationError                 input errors, nothing contacted
    ├── SearchPolicyError               rejected before any attempt runs
    │   ├── RateLimitedError
    │   ├── NoCredentialsError
    │   └── NoRouteError
    ├── ProviderError                   one attempt failed, walk continues
    │   ├── ProviderTimeoutError
    │   ├── ProviderTransportError
    │   ├── ProviderHTTPError
    │   └── ProviderParseError
    └── AttemptsExhaustedError          every planned attempt failed or was skipped
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

if TYPE_CHECKING:
    from .models import AttemptTraceEntry


class FailureReason:
    """Reason codes surfaced to callers on failed searches."""

    INVALID_QUERY = "invalid_query"
    INVALID_COUNTRY = "invalid_country"
    RATE_LIMITED = "rate_limited"
    NO_CREDENTIALS = "no_credentials"
    NO_ROUTE = "no_route"
    BUDGET_EXHAUSTED = "budget_exhausted"
    ALL_ATTEMPTS_FAILED = "all_attempts_failed"


class RealitySearchError(Exception):
    """Base exception for all reality-search errors.

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(RealitySearchError):
    """Raised when there's a configuration problem."""
    pass


class SearchFailedError(RealitySearchError):
    """Base for errors that end a search request.

    Attributes:
        reason: One of the :class:`FailureReason` codes
        trace: Attempt trace accumulated before the failure (may be empty)
    """

    reason: str = FailureReason.ALL_ATTEMPTS_FAILED

    def __init__(
        self,
        message: str,
        reason: Optional[str] = None,
        trace: Optional[Sequence["AttemptTraceEntry"]] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        if reason:
            self.reason = reason
        self.trace: List["AttemptTraceEntry"] = list(trace or [])
        super().__init__(message, code, details)

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["reason"] = self.reason
        payload["attempts"] = [entry.to_dict() for entry in self.trace]
        return payload


class ValidationError(SearchFailedError):
    """Raised when request input is missing or malformed."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        reason: str = FailureReason.INVALID_QUERY,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.field = field
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, reason=reason, details=details)


class SearchPolicyError(SearchFailedError):
    """Base class for requests refused by policy before any attempt runs."""
    pass


class RateLimitedError(SearchPolicyError):
    """Raised when a client identity exceeds its request window.

    Attributes:
        retry_after: Seconds to wait before retrying (always >= 1)
    """

    reason = FailureReason.RATE_LIMITED

    def __init__(self, message: str, retry_after: int, details: Optional[Dict[str, Any]] = None):
        self.retry_after = retry_after
        details = details or {}
        details["retry_after"] = retry_after
        super().__init__(message, details=details)


class NoCredentialsError(SearchPolicyError):
    """Raised when no provider has a usable user or server credential."""

    reason = FailureReason.NO_CREDENTIALS


class NoRouteError(SearchPolicyError):
    """Raised when credentials exist but no attempt could be planned."""

    reason = FailureReason.NO_ROUTE


class AttemptsExhaustedError(SearchFailedError):
    """Raised when every planned attempt was skipped or failed."""
    pass


class ProviderError(RealitySearchError):
    """Base class for a single failed upstream attempt.

    Attributes:
        provider: Name of the provider that failed
        status_code: HTTP status if a response was received (0 otherwise)
    """

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: int = 0,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.provider = provider
        self.status_code = status_code
        details = details or {}
        if provider:
            details["provider"] = provider
        if status_code:
            details["status_code"] = status_code
        super().__init__(message, code, details)


class ProviderTimeoutError(ProviderError):
    """Raised when an upstream call exceeds the per-call timeout."""
    pass


class ProviderTransportError(ProviderError):
    """Raised on connection-level failures (DNS, TLS, reset, ...)."""
    pass


class ProviderHTTPError(ProviderError):
    """Raised when the upstream answers with a non-success status."""
    pass


class ProviderParseError(ProviderError):
    """Raised when the upstream body is not a JSON document."""
    pass


def get_error_response(error: Exception) -> Dict[str, Any]:
    """Convert any exception to an API error response.

    Args:
        error: The exception to convert

    Returns:
        Dictionary suitable for API error response
    """
    if isinstance(error, RealitySearchError):
        return error.to_dict()

    return {
        "error": "InternalError",
        "message": str(error),
        "details": {},
    }
