"""SearchApi.io provider (Google engine, bearer auth)."""

import logging

from ..models import LanguagePlan, ProviderAttempt, ProviderId
from .base import ProviderRequest
from .serpapi import SerpApiProvider

logger = logging.getLogger(__name__)


class SearchApiProvider(SerpApiProvider):
    """Provider for searchapi.io.

    Same Google parameter set and response shapes as SerpAPI; the key is
    additionally sent as a bearer token.
    """

    provider_id = ProviderId.SEARCHAPI

    def build_request(
        self,
        query: str,
        attempt: ProviderAttempt,
        language: LanguagePlan,
    ) -> ProviderRequest:
        return ProviderRequest(
            url=self.base_url,
            params=self.build_google_params(query, attempt, language),
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {attempt.credential}",
            },
        )
