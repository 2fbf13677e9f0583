"""
Upstream search providers.

Each provider owns its request format and its response parsing; the
registry maps a ProviderId to the strategy used for it.
"""
from __future__ import annotations

from typing import Dict, Optional, Type

from ..config import Settings, get_settings
from ..exceptions import ConfigurationError
from ..models import ProviderId
from .base import BaseSearchProvider, ProviderRequest, ProviderResponse
from .brave import BraveSearchProvider
from .searchapi import SearchApiProvider
from .serpapi import SerpApiProvider

PROVIDER_CLASSES: Dict[ProviderId, Type[BaseSearchProvider]] = {
    ProviderId.SERPAPI: SerpApiProvider,
    ProviderId.SEARCHAPI: SearchApiProvider,
    ProviderId.BRAVE: BraveSearchProvider,
}


def get_provider(provider_id: ProviderId, settings: Optional[Settings] = None) -> BaseSearchProvider:
    """Instantiate the strategy for *provider_id* from settings."""
    settings = settings or get_settings()
    provider_cls = PROVIDER_CLASSES.get(provider_id)
    if provider_cls is None:
        raise ConfigurationError(f"No search provider registered for {provider_id!r}")
    return provider_cls(
        base_url=settings.base_url_for(provider_id),
        results_per_request=settings.results_per_request,
        timeout=settings.upstream_timeout_seconds,
    )


__all__ = [
    "BaseSearchProvider",
    "BraveSearchProvider",
    "PROVIDER_CLASSES",
    "ProviderRequest",
    "ProviderResponse",
    "SearchApiProvider",
    "SerpApiProvider",
    "get_provider",
]
