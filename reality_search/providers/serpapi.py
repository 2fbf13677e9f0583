"""
SerpAPI provider (Google engine).

The key travels as the `api_key` query parameter, so request URLs must
never be logged unsanitized.
"""

import logging
from typing import Any, Dict, List

from ..models import CanonicalResult, LanguagePlan, ProviderAttempt, ProviderId
from .base import BaseSearchProvider, ProviderRequest, google_like_rows, rows_to_results

logger = logging.getLogger(__name__)


class SerpApiProvider(BaseSearchProvider):
    """Provider for serpapi.com Google results."""

    provider_id = ProviderId.SERPAPI

    def build_google_params(
        self,
        query: str,
        attempt: ProviderAttempt,
        language: LanguagePlan,
    ) -> Dict[str, str]:
        params: Dict[str, str] = {
            "engine": "google",
            "q": query,
            "num": str(self.results_per_request),
            "api_key": attempt.credential,
        }
        # No `gl` means Google's worldwide results
        if attempt.country_param:
            params["gl"] = attempt.country_param
        if language.google_hl:
            params["hl"] = language.google_hl
        return params

    def build_request(
        self,
        query: str,
        attempt: ProviderAttempt,
        language: LanguagePlan,
    ) -> ProviderRequest:
        return ProviderRequest(
            url=self.base_url,
            params=self.build_google_params(query, attempt, language),
            headers={"Accept": "application/json"},
        )

    def parse(self, body: Any) -> List[CanonicalResult]:
        return rows_to_results(google_like_rows(body))
