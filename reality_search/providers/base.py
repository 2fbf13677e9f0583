"""Base provider class with the shared upstream call and error mapping."""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import httpx

from ..exceptions import (
    ProviderHTTPError,
    ProviderParseError,
    ProviderTimeoutError,
    ProviderTransportError,
)
from ..models import CanonicalResult, LanguagePlan, ProviderAttempt, ProviderId
from ..utils.logging_security import SecureLogger

logger = logging.getLogger(__name__)


@dataclass
class ProviderRequest:
    """Fully built outbound GET request."""
    url: str
    params: Dict[str, str]
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class ProviderResponse:
    """Parsed upstream answer of a successful attempt."""
    results: List[CanonicalResult]
    http_status: int


def as_str(value: Any) -> str:
    """Coerce a JSON value to a string field ("" unless it already is one)."""
    return value if isinstance(value, str) else ""


def as_record(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_rows(value: Any) -> Optional[List[Any]]:
    return value if isinstance(value, list) else None


def derive_display_url(url: str) -> str:
    """host + path of *url*, or *url* itself when it does not parse."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return url
    if not parsed.scheme or not parsed.hostname:
        return url
    path = "" if parsed.path == "/" else parsed.path
    return f"{parsed.hostname}{path}"


def to_canonical_result(row: Dict[str, Any]) -> CanonicalResult:
    """Project one upstream row onto the canonical fields."""
    url = (
        as_str(row.get("url"))
        or as_str(row.get("link"))
        or as_str(row.get("destination"))
        or as_str(row.get("redirect_link"))
    )
    title = as_str(row.get("title")) or as_str(row.get("name"))
    snippet = (
        as_str(row.get("description"))
        or as_str(row.get("snippet"))
        or as_str(row.get("content"))
    )
    display_url = (
        as_str(row.get("display_url"))
        or as_str(row.get("displayed_link"))
        or as_str(row.get("display_link"))
        or derive_display_url(url)
    )
    return CanonicalResult(title=title, url=url, snippet=snippet, display_url=display_url)


def google_like_rows(body: Any) -> Optional[List[Any]]:
    """Result rows of a Google-style response (organic_results, results or items)."""
    root = as_record(body)
    for key in ("organic_results", "results", "items"):
        rows = as_rows(root.get(key))
        if rows is not None:
            return rows
    return None


def rows_to_results(rows: Optional[List[Any]]) -> List[CanonicalResult]:
    """Canonicalize rows in upstream order, dropping records without a URL."""
    results = [to_canonical_result(as_record(row)) for row in rows or []]
    return [result for result in results if result.url]


class BaseSearchProvider(ABC):
    """Base class for all upstream search providers.

    Subclasses implement:
    - provider_id (class attribute)
    - build_request: the provider's endpoint, parameters and auth
    - parse: the provider's response shapes

    ``fetch`` performs exactly one call. Failures are raised as
    ProviderError subclasses; retrying is the caller's business.
    """

    provider_id: ProviderId

    DEFAULT_TIMEOUT = 10.0
    DEFAULT_RESULTS = 20

    def __init__(
        self,
        base_url: str,
        results_per_request: int = DEFAULT_RESULTS,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url
        self.results_per_request = results_per_request
        self.timeout = timeout

    @property
    def provider_name(self) -> str:
        return self.provider_id.value

    @abstractmethod
    def build_request(
        self,
        query: str,
        attempt: ProviderAttempt,
        language: LanguagePlan,
    ) -> ProviderRequest:
        """Build the outbound request for *attempt*."""

    @abstractmethod
    def parse(self, body: Any) -> List[CanonicalResult]:
        """Extract canonical results from a decoded JSON body. Never raises."""

    async def fetch(
        self,
        client: httpx.AsyncClient,
        query: str,
        attempt: ProviderAttempt,
        language: LanguagePlan,
    ) -> ProviderResponse:
        """Run one upstream call for *attempt*.

        Raises:
            ProviderTimeoutError: No answer within ``timeout`` seconds
            ProviderTransportError: Connection-level failure, or a request
                httpx refuses to build (invalid URL, non-ASCII header value)
            ProviderHTTPError: Non-2xx status
            ProviderParseError: Body is not a JSON object
        """
        request = self.build_request(query, attempt, language)
        logger.debug(
            f"{self.provider_name} GET {request.url} "
            f"params={SecureLogger.sanitize_params(request.params)}"
        )

        try:
            # httpx's own timeout covers each phase; wait_for bounds the whole call
            response = await asyncio.wait_for(
                client.get(
                    request.url,
                    params=request.params,
                    headers=request.headers,
                    timeout=self.timeout,
                ),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise ProviderTimeoutError(
                f"{self.provider_name} did not answer within {self.timeout:g}s",
                provider=self.provider_name,
            ) from e
        except httpx.HTTPError as e:
            message = SecureLogger.scrub_secrets(str(e) or type(e).__name__, [attempt.credential])
            raise ProviderTransportError(
                f"{self.provider_name} transport failure: {message}",
                provider=self.provider_name,
            ) from e
        except (httpx.InvalidURL, ValueError) as e:
            # Request could not be built, e.g. a non-ASCII key in a header
            message = SecureLogger.scrub_secrets(str(e) or type(e).__name__, [attempt.credential])
            raise ProviderTransportError(
                f"{self.provider_name} request could not be sent: {message}",
                provider=self.provider_name,
            ) from e

        status = response.status_code
        if not 200 <= status < 300:
            raise ProviderHTTPError(
                f"{self.provider_name} returned HTTP {status}",
                provider=self.provider_name,
                status_code=status,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderParseError(
                f"{self.provider_name} returned a non-JSON body",
                provider=self.provider_name,
                status_code=status,
            ) from e

        if not isinstance(body, dict):
            raise ProviderParseError(
                f"{self.provider_name} returned JSON that is not an object",
                provider=self.provider_name,
                status_code=status,
            )

        return ProviderResponse(results=self.parse(body), http_status=status)
