"""
Attempt Planner - ordered provider attempts for one search request

Builds the failover plan walked by the AttemptExecutor. Three tiers are
evaluated in strict order and concatenated:

1. Exact tier: providers that natively support the requested country
2. Proxy tier: providers that support a deterministic substitute country
3. Global tier: every provider's worldwide route

Within a tier providers follow PROVIDER_PRIORITY and, per provider, the user
credential comes before the server credential. Providers without a usable
credential are skipped silently. The same input always yields the same plan.

Usage:
    from reality_search.routing import AttemptPlanner

    attempts = AttemptPlanner.build_attempts("FR", credentials)
    print([a.provider for a in attempts])
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set, Tuple

from ..models import (
    CountryResolution,
    ProviderAttempt,
    ProviderCredentials,
    ProviderId,
    RouteReason,
)
from .country_coverage import CountryCoverageResolver

logger = logging.getLogger(__name__)


class AttemptPlanner:
    """Deterministic, duplicate-free attempt plans."""

    PROVIDER_PRIORITY: Tuple[ProviderId, ...] = (
        ProviderId.SERPAPI,
        ProviderId.SEARCHAPI,
        ProviderId.BRAVE,
    )

    @classmethod
    def build_attempts(
        cls,
        requested_country: Optional[str],
        credentials: ProviderCredentials,
        include_global: bool = True,
    ) -> List[ProviderAttempt]:
        """
        Build the ordered attempt list for a request.

        Args:
            requested_country: Validated ISO code or None for no targeting
            credentials: User and server keys by provider
            include_global: Append the global tier (False for strict targeting)

        Returns:
            Attempts in execution order, without identity-key duplicates
        """
        attempts: List[ProviderAttempt] = []
        seen: Set[tuple] = set()

        def add(
            provider: ProviderId,
            resolved_country: Optional[str],
            country_param: Optional[str],
            resolution: CountryResolution,
            reason: str,
        ) -> None:
            for credential, source in credentials.candidates(provider):
                attempt = ProviderAttempt(
                    provider=provider,
                    credential=credential,
                    credential_source=source,
                    requested_country=requested_country,
                    resolved_country=resolved_country,
                    country_param=country_param,
                    resolution=resolution,
                    reason=reason,
                )
                if attempt.identity_key in seen:
                    continue
                seen.add(attempt.identity_key)
                attempts.append(attempt)

        if requested_country:
            for provider in cls.PROVIDER_PRIORITY:
                if not CountryCoverageResolver.supports_exact(provider, requested_country):
                    continue
                add(
                    provider,
                    requested_country,
                    CountryCoverageResolver.country_param(provider, requested_country),
                    CountryResolution.EXACT,
                    RouteReason.EXACT_COUNTRY_MATCH,
                )

            for provider in cls.PROVIDER_PRIORITY:
                proxy = CountryCoverageResolver.resolve_proxy(provider, requested_country)
                if not proxy:
                    continue
                add(
                    provider,
                    proxy,
                    CountryCoverageResolver.country_param(provider, proxy),
                    CountryResolution.PROXY,
                    RouteReason.PROXY_COUNTRY_MATCH,
                )

        if include_global:
            reason = RouteReason.GLOBAL_FALLBACK if requested_country else RouteReason.GLOBAL_DEFAULT
            for provider in cls.PROVIDER_PRIORITY:
                add(
                    provider,
                    None,
                    CountryCoverageResolver.global_country_param(provider),
                    CountryResolution.GLOBAL,
                    reason,
                )

        logger.debug(
            f"Planned {len(attempts)} attempt(s) for country={requested_country or 'none'}: "
            + ", ".join(f"{a.provider.value}/{a.credential_source.value}/{a.resolution.value}" for a in attempts)
        )
        return attempts
