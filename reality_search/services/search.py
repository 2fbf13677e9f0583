"""
Search Service - end-to-end handling of one search request

Pipeline:
    rate gate -> validation -> credentials -> plan -> execute
    -> annotate -> dedup -> stats -> cache policy

Input and policy errors are raised before any upstream contact and before
any budget is consumed.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

from ..config import Settings, get_settings
from ..data.iso_countries import parse_country_code
from ..exceptions import (
    FailureReason,
    NoCredentialsError,
    NoRouteError,
    RateLimitedError,
    ValidationError,
)
from ..models import (
    AnnotatedResult,
    AttemptTraceEntry,
    AttemptTraceItem,
    CachePolicy,
    CanonicalResult,
    CountryResolution,
    CredentialSource,
    LanguagePlan,
    LensModel,
    ProviderAttempt,
    SearchMeta,
    SearchRequest,
    SearchResponse,
    SearchResultItem,
    SelectedRouteModel,
    StatsPanel,
)
from ..routing import AttemptPlanner, CountryCoverageResolver, resolve_language_plan
from ..utils.lang import detect_lang
from ..utils.normalize import normalize_query
from ..utils.tld import get_domain, get_tld, infer_country_from_tld
from ..utils.url import dedup_by_canonical_url
from .attempt_executor import AttemptExecutor, trace_providers
from .cost_control import CostControl, get_cost_control
from .stats import compute_stats

logger = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    """Everything a successful search produced."""
    query: str
    normalized_query: str
    country_hint: Optional[str]
    language: LanguagePlan
    results: List[AnnotatedResult]
    attempt_trace: List[AttemptTraceEntry]
    selected: ProviderAttempt
    deduped_count: int
    stats: StatsPanel
    cacheable: bool
    cache: CachePolicy
    meta: SearchMeta

    def to_response(self) -> SearchResponse:
        return SearchResponse(
            query=self.query,
            normalized_query=self.normalized_query,
            lens=LensModel(
                country_hint=self.country_hint,
                lang_hint=self.language.lang_hint,
                search_lang=self.language.search_lang,
                search_lang_source=self.language.search_lang_source,
            ),
            results=[
                SearchResultItem(
                    title=r.title,
                    url=r.url,
                    display_url=r.display_url,
                    snippet=r.snippet,
                    domain=r.domain,
                    tld=r.tld,
                    country_inferred=r.country_inferred,
                    lang_detected=r.lang_detected,
                )
                for r in self.results
            ],
            attempt_trace=[AttemptTraceItem(**entry.to_dict()) for entry in self.attempt_trace],
            selected=SelectedRouteModel(
                provider=self.selected.provider.value,
                credential_source=self.selected.credential_source.value,
                resolution=self.selected.resolution.value,
                resolved_country=self.selected.resolved_country,
                country_param=self.selected.country_param,
                reason=self.selected.reason,
            ),
            deduped_count=self.deduped_count,
            stats=self.stats,
            cacheable=self.cacheable,
            cache=self.cache,
            meta=self.meta,
        )


def annotate(result: CanonicalResult) -> AnnotatedResult:
    """Attach domain, TLD, inferred country and detected language."""
    domain = get_domain(result.url)
    tld = get_tld(domain)
    text = " ".join(part for part in (result.title, result.snippet) if part)
    return AnnotatedResult(
        title=result.title,
        url=result.url,
        snippet=result.snippet,
        display_url=result.display_url,
        domain=domain,
        tld=tld,
        country_inferred=infer_country_from_tld(tld),
        lang_detected=detect_lang(text),
    )


def annotate_all(results: List[CanonicalResult]) -> List[AnnotatedResult]:
    return [annotate(result) for result in results]


class SearchService:
    """Routes a search through the providers and shapes the response."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        cost_control: Optional[CostControl] = None,
        executor: Optional[AttemptExecutor] = None,
    ):
        self.settings = settings or get_settings()
        self.cost_control = cost_control or get_cost_control()
        self.executor = executor or AttemptExecutor(self.cost_control.miss_budget, settings=self.settings)

    # ==========================================================================
    # Request checks
    # ==========================================================================

    def _check_rate_limit(self, identity: str) -> None:
        decision = self.cost_control.rate_limiter.check(identity)
        if not decision.allowed:
            raise RateLimitedError(
                "Rate limit exceeded. Try later.",
                retry_after=decision.retry_after_seconds,
            )

    @staticmethod
    def _parse_country(raw: Optional[str]) -> Optional[str]:
        if raw is None or not raw.strip():
            return None
        country = parse_country_code(raw)
        if country is None:
            raise ValidationError(
                f"Unknown country code: {raw.strip()[:8]!r}",
                field="country",
                reason=FailureReason.INVALID_COUNTRY,
            )
        return country

    def cache_policy(self, cacheable: bool) -> CachePolicy:
        if not cacheable:
            return CachePolicy(mode="no-store")
        return CachePolicy(
            mode="cdn",
            ttl_seconds=self.settings.cache_ttl_seconds,
            swr_seconds=self.settings.swr_seconds,
            stale_if_error_seconds=self.settings.stale_if_error_seconds,
        )

    # ==========================================================================
    # Public Methods
    # ==========================================================================

    async def search(self, request: SearchRequest) -> SearchOutcome:
        """
        Run one search request.

        Raises:
            RateLimitedError: Client identity is over its window
            ValidationError: Blank query or unknown country
            NoCredentialsError: No provider has a usable key
            NoRouteError: Keys exist but no attempt could be planned
            AttemptsExhaustedError: Every planned attempt failed or was skipped
        """
        self._check_rate_limit(request.client_identity)

        normalized = normalize_query(request.query)
        if not normalized:
            raise ValidationError("Missing required query parameter: q", field="q")

        country = self._parse_country(request.country_hint)
        language = resolve_language_plan(normalized, request.language_hint)

        credentials = request.credentials
        if not credentials.has_any():
            raise NoCredentialsError("No upstream key configured. Provide your own provider key.")

        attempts = AttemptPlanner.build_attempts(
            country,
            credentials,
            include_global=not request.strict_country,
        )
        if not attempts:
            target = country or "no country"
            raise NoRouteError(f"No configured provider can target {target} without falling back to global results.")

        walk = await self.executor.execute(normalized, attempts, language)
        selected = walk.selected

        # Language detection is CPU bound; keep it off the event loop
        loop = asyncio.get_running_loop()
        annotated = await loop.run_in_executor(None, annotate_all, list(walk.results))
        deduped = dedup_by_canonical_url(annotated)
        deduped_count = len(annotated) - len(deduped)

        cacheable = selected.credential_source is CredentialSource.SERVER
        trace = list(walk.trace)

        meta = SearchMeta(
            providers_tried=trace_providers(trace),
            requested_country_supported=bool(country) and CountryCoverageResolver.has_any_exact_support(country),
            exact_country_applied=selected.resolution is CountryResolution.EXACT,
            fetched_with="server_key" if cacheable else "user_key",
            deduped=deduped_count,
            returned=len(deduped),
            build_sha=self.settings.build_sha,
        )

        logger.info(
            f"Search served by {selected.provider.value} ({selected.resolution.value}, "
            f"{selected.credential_source.value} key) after {len(trace)} attempt(s): "
            f"{len(deduped)} results, {deduped_count} duplicates dropped"
        )

        return SearchOutcome(
            query=request.query,
            normalized_query=normalized,
            country_hint=country,
            language=language,
            results=deduped,
            attempt_trace=trace,
            selected=selected,
            deduped_count=deduped_count,
            stats=compute_stats(deduped),
            cacheable=cacheable,
            cache=self.cache_policy(cacheable),
            meta=meta,
        )
