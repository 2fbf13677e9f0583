"""Shared types for the routing engine and the HTTP surface.

Internal plan/trace records are plain dataclasses; everything serialized to
API clients is a pydantic model.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field


class ProviderId(str, Enum):
    """Configured upstream search providers."""
    SERPAPI = "serpapi"
    SEARCHAPI = "searchapi"
    BRAVE = "brave"


class CredentialSource(str, Enum):
    USER = "user"
    SERVER = "server"


class CountryResolution(str, Enum):
    """How an attempt's country parameter relates to the requested country."""
    EXACT = "exact"
    PROXY = "proxy"
    GLOBAL = "global"


class AttemptStatus(str, Enum):
    """Terminal states of one attempt in the walk."""
    SKIPPED = "skipped_budget_exhausted"
    SUCCESS = "success"
    UPSTREAM_ERROR = "upstream_error"
    TRANSPORT_ERROR = "transport_error"
    TIMEOUT = "timeout"
    PARSE_ERROR = "parse_error"


class RouteReason:
    EXACT_COUNTRY_MATCH = "exact_country_match"
    PROXY_COUNTRY_MATCH = "proxy_country_match"
    GLOBAL_FALLBACK = "global_fallback"
    GLOBAL_DEFAULT = "global_default"


@dataclass
class ProviderCredentials:
    """User-supplied and server-owned keys, by provider."""
    user: Dict[ProviderId, str] = field(default_factory=dict)
    server: Dict[ProviderId, str] = field(default_factory=dict)

    def candidates(self, provider: ProviderId) -> List[Tuple[str, CredentialSource]]:
        """Usable keys for *provider*, user key first."""
        out: List[Tuple[str, CredentialSource]] = []
        user_key = (self.user.get(provider) or "").strip()
        server_key = (self.server.get(provider) or "").strip()
        if user_key:
            out.append((user_key, CredentialSource.USER))
        if server_key:
            out.append((server_key, CredentialSource.SERVER))
        return out

    def has_any(self) -> bool:
        return self.has_any_user() or any((v or "").strip() for v in self.server.values())

    def has_any_user(self) -> bool:
        return any((v or "").strip() for v in self.user.values())


@dataclass(frozen=True)
class ProviderAttempt:
    """One fully specified (provider, credential, country parameter) combination."""
    provider: ProviderId
    credential: str = field(repr=False)
    credential_source: CredentialSource
    requested_country: Optional[str]
    resolved_country: Optional[str]
    country_param: Optional[str]
    resolution: CountryResolution
    reason: str

    @property
    def identity_key(self) -> Tuple[Any, ...]:
        return (
            self.provider,
            self.credential_source,
            self.requested_country,
            self.resolved_country,
            self.country_param,
            self.resolution,
        )


@dataclass
class CanonicalResult:
    """Provider-agnostic projection of one upstream result."""
    title: str
    url: str
    snippet: str
    display_url: str


@dataclass
class AnnotatedResult(CanonicalResult):
    """Canonical result plus fields derived by the collaborators."""
    domain: str = ""
    tld: str = "unknown"
    country_inferred: str = "unknown"
    lang_detected: str = "unknown"


@dataclass(frozen=True)
class AttemptTraceEntry:
    provider: ProviderId
    credential_source: CredentialSource
    resolution: CountryResolution
    country_param: Optional[str]
    resolved_country: Optional[str]
    reason: str
    status: AttemptStatus
    http_status: int = 0
    error: Optional[str] = None

    @classmethod
    def for_attempt(
        cls,
        attempt: ProviderAttempt,
        status: AttemptStatus,
        http_status: int = 0,
        error: Optional[str] = None,
    ) -> "AttemptTraceEntry":
        return cls(
            provider=attempt.provider,
            credential_source=attempt.credential_source,
            resolution=attempt.resolution,
            country_param=attempt.country_param,
            resolved_country=attempt.resolved_country,
            reason=attempt.reason,
            status=status,
            http_status=http_status,
            error=error,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider.value,
            "credential_source": self.credential_source.value,
            "resolution": self.resolution.value,
            "country_param": self.country_param,
            "resolved_country": self.resolved_country,
            "reason": self.reason,
            "status": self.status.value,
            "http_status": self.http_status,
            "error": self.error,
        }


@dataclass(frozen=True)
class LanguagePlan:
    """Language parameters forwarded upstream and where they came from."""
    lang_hint: Optional[str]
    search_lang: str
    search_lang_source: str
    brave_search_lang: Optional[str]
    google_hl: Optional[str]


@dataclass
class SearchRequest:
    query: str
    country_hint: Optional[str] = None
    language_hint: Optional[str] = None
    client_identity: str = "unknown"
    credentials: ProviderCredentials = field(default_factory=ProviderCredentials)
    strict_country: bool = False


# ====================
# API models
# ====================

class HistogramRow(BaseModel):
    key: str
    count: int
    pct: float


class StatsHistograms(BaseModel):
    tld: List[HistogramRow] = Field(default_factory=list)
    country_inferred: List[HistogramRow] = Field(default_factory=list)
    lang_detected: List[HistogramRow] = Field(default_factory=list)
    top_domains: List[HistogramRow] = Field(default_factory=list)


class StatsPanel(BaseModel):
    total_results: int
    distinct_domains: int
    distinct_tlds: int
    distinct_countries_inferred: int
    histograms: StatsHistograms


class CachePolicy(BaseModel):
    mode: Literal["cdn", "no-store"]
    ttl_seconds: int = 0
    swr_seconds: int = 0
    stale_if_error_seconds: int = 0


class SearchResultItem(BaseModel):
    title: str
    url: str
    display_url: str
    snippet: str
    domain: str
    tld: str
    country_inferred: str
    lang_detected: str


class AttemptTraceItem(BaseModel):
    provider: str
    credential_source: str
    resolution: str
    country_param: Optional[str] = None
    resolved_country: Optional[str] = None
    reason: str
    status: str
    http_status: int = 0
    error: Optional[str] = None


class SelectedRouteModel(BaseModel):
    provider: str
    credential_source: str
    resolution: str
    resolved_country: Optional[str] = None
    country_param: Optional[str] = None
    reason: str


class LensModel(BaseModel):
    country_hint: Optional[str] = None
    lang_hint: Optional[str] = None
    search_lang: str
    search_lang_source: str


class SearchMeta(BaseModel):
    providers_tried: List[str]
    requested_country_supported: bool
    exact_country_applied: bool
    fetched_with: Literal["server_key", "user_key", "none"]
    deduped: int
    returned: int
    build_sha: str


class SearchResponse(BaseModel):
    query: str
    normalized_query: str
    lens: LensModel
    results: List[SearchResultItem]
    attempt_trace: List[AttemptTraceItem]
    selected: Optional[SelectedRouteModel] = None
    deduped_count: int
    stats: StatsPanel
    cacheable: bool
    cache: CachePolicy
    meta: SearchMeta


class ErrorResponse(BaseModel):
    error: str
    message: str
    reason: Optional[str] = None
    retry_after: Optional[int] = None
    attempts: List[AttemptTraceItem] = Field(default_factory=list)
    details: Dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    ok: bool
    time: str
    build_sha: str
