"""
Brave Search API provider.

Brave authenticates through the X-Subscription-Token header and always
expects a `country` parameter; worldwide results use the "ALL" sentinel.
"""

import logging
from typing import Any, Dict, List

from ..models import CanonicalResult, LanguagePlan, ProviderAttempt, ProviderId
from .base import BaseSearchProvider, ProviderRequest, as_record, as_rows, rows_to_results

logger = logging.getLogger(__name__)


class BraveSearchProvider(BaseSearchProvider):
    """Provider for the Brave web search endpoint."""

    provider_id = ProviderId.BRAVE
    GLOBAL_COUNTRY = "ALL"

    def build_request(
        self,
        query: str,
        attempt: ProviderAttempt,
        language: LanguagePlan,
    ) -> ProviderRequest:
        params: Dict[str, str] = {
            "q": query,
            "count": str(self.results_per_request),
            "country": attempt.country_param or self.GLOBAL_COUNTRY,
        }
        if language.brave_search_lang:
            params["search_lang"] = language.brave_search_lang

        return ProviderRequest(
            url=self.base_url,
            params=params,
            headers={
                "X-Subscription-Token": attempt.credential,
                "Accept": "application/json",
            },
        )

    def parse(self, body: Any) -> List[CanonicalResult]:
        # Current responses nest rows under "web"; older ones had top-level "results"
        root = as_record(body)
        rows = as_rows(as_record(root.get("web")).get("results"))
        if rows is None:
            rows = as_rows(root.get("results"))
        return rows_to_results(rows)
