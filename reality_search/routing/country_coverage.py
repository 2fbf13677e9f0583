"""
Country Coverage Resolver - Single Source of Truth for Provider Country Support

Answers "does provider P target country C, exactly or via a proxy country?"
from static per-provider tables. All lookups are pure; callers are expected to
pass codes already validated against the ISO universe
(see :func:`reality_search.data.parse_country_code`).

Coverage comes from the provider location catalogs as audited on 2026-02-12.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Optional, Tuple

from ..data.iso_countries import ISO_COUNTRY_CODES
from ..models import ProviderId

logger = logging.getLogger(__name__)


class CountryCoverageResolver:
    """
    Resolves per-provider country support.

    Exact coverage: the provider natively accepts the country as a parameter.
    Proxy coverage: the provider lacks the country but accepts a fixed
    substitute from its proxy table. Proxies never chain.
    """

    # ==========================================================================
    # Exact coverage
    # ==========================================================================

    # SerpAPI missing: AX, CU, IR, KP, SY.
    SERPAPI_UNSUPPORTED: FrozenSet[str] = frozenset({"AX", "CU", "IR", "KP", "SY"})

    # SearchApi.io missing: AX, BL, BQ, CW, MF, SS, SX.
    SEARCHAPI_UNSUPPORTED: FrozenSet[str] = frozenset({"AX", "BL", "BQ", "CW", "MF", "SS", "SX"})

    # Brave's `country` parameter accepts an explicit allow-list only.
    BRAVE_SUPPORTED: FrozenSet[str] = frozenset({
        "AR", "AU", "AT", "BE", "BR", "CA", "CL", "DK", "FI", "FR", "DE", "HK",
        "IN", "ID", "IT", "JP", "KR", "MY", "MX", "NL", "NZ", "NO", "CN", "PL",
        "PT", "PH", "RU", "SA", "ZA", "ES", "SE", "CH", "TW", "TR", "GB", "US",
    })

    SUPPORTED_COUNTRIES: Dict[ProviderId, FrozenSet[str]] = {
        ProviderId.SERPAPI: frozenset(ISO_COUNTRY_CODES - SERPAPI_UNSUPPORTED),
        ProviderId.SEARCHAPI: frozenset(ISO_COUNTRY_CODES - SEARCHAPI_UNSUPPORTED),
        ProviderId.BRAVE: BRAVE_SUPPORTED,
    }

    # ==========================================================================
    # Proxy countries (uncovered country -> substitute)
    # ==========================================================================

    PROXY_COUNTRIES: Dict[ProviderId, Dict[str, str]] = {
        ProviderId.SERPAPI: {
            "AX": "FI",  # Åland Islands -> Finland
        },
        ProviderId.SEARCHAPI: {
            "AX": "FI",
            "BL": "FR", "MF": "FR",
            "BQ": "NL", "CW": "NL", "SX": "NL",
        },
        ProviderId.BRAVE: {
            "AX": "FI",
            # French overseas collectivities and departments
            "BL": "FR", "MF": "FR", "GF": "FR", "GP": "FR", "MQ": "FR",
            "RE": "FR", "YT": "FR", "PM": "FR",
            # Former Netherlands Antilles
            "BQ": "NL", "CW": "NL", "SX": "NL",
            # US territories
            "UM": "US", "PR": "US", "GU": "US", "VI": "US", "AS": "US", "MP": "US",
            "EH": "ES",
            # Crown dependencies and British overseas territories
            "GI": "GB", "IM": "GB", "JE": "GB", "GG": "GB",
            # Nordic dependencies
            "FO": "DK", "GL": "DK", "SJ": "NO", "BV": "NO",
        },
    }

    # ==========================================================================
    # Provider parameter encoding
    # ==========================================================================

    # Brave wants uppercase codes and an explicit "ALL" for worldwide results;
    # the Google-style providers take lowercase `gl` and omit it for global.
    UPPERCASE_PARAM_PROVIDERS: FrozenSet[ProviderId] = frozenset({ProviderId.BRAVE})
    GLOBAL_COUNTRY_SENTINEL: Dict[ProviderId, str] = {ProviderId.BRAVE: "ALL"}

    # ==========================================================================
    # Public Methods
    # ==========================================================================

    @classmethod
    def supports_exact(cls, provider: ProviderId, country: str) -> bool:
        """Check if *provider* natively accepts *country*."""
        if not country:
            return False
        return country in cls.SUPPORTED_COUNTRIES.get(provider, frozenset())

    @classmethod
    def resolve_proxy(cls, provider: ProviderId, country: str) -> Optional[str]:
        """
        Get the substitute country *provider* should be queried with.

        Returns None when the provider already supports the country exactly,
        has no proxy entry, or the proxy entry points at a country the
        provider does not exactly support.
        """
        if not country or cls.supports_exact(provider, country):
            return None
        proxy = cls.PROXY_COUNTRIES.get(provider, {}).get(country)
        if proxy and cls.supports_exact(provider, proxy):
            return proxy
        if proxy:
            logger.debug(f"Ignoring proxy {country}->{proxy} for {provider.value}: not exactly supported")
        return None

    @classmethod
    def has_any_exact_support(cls, country: str) -> bool:
        """Check if at least one configured provider exactly supports *country*."""
        return any(cls.supports_exact(provider, country) for provider in ProviderId)

    @classmethod
    def has_any_targeted_support(cls, country: str) -> bool:
        """Check if at least one provider supports *country* exactly or via proxy."""
        return any(
            cls.supports_exact(provider, country) or cls.resolve_proxy(provider, country)
            for provider in ProviderId
        )

    @classmethod
    def country_param(cls, provider: ProviderId, country: str) -> str:
        """Encode *country* the way *provider* expects it."""
        if provider in cls.UPPERCASE_PARAM_PROVIDERS:
            return country.upper()
        return country.lower()

    @classmethod
    def global_country_param(cls, provider: ProviderId) -> Optional[str]:
        """Country parameter for the provider's worldwide route (None = omit)."""
        return cls.GLOBAL_COUNTRY_SENTINEL.get(provider)

    @classmethod
    def coverage_counts(cls) -> Tuple[int, int]:
        """(exact, targeted) coverage counts over the ISO universe."""
        exact = sum(1 for c in ISO_COUNTRY_CODES if cls.has_any_exact_support(c))
        targeted = sum(1 for c in ISO_COUNTRY_CODES if cls.has_any_targeted_support(c))
        return exact, targeted
