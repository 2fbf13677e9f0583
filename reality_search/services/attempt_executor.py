"""
Attempt Executor - sequential failover over a planned attempt list

Walks the attempts strictly in plan order, one upstream call at a time, and
stops at the first success. Server-credential attempts are charged against
the daily miss budget before they run; a refused charge skips the attempt
without contacting the provider. Upstream failures are recorded in the trace
and never abort the walk.

Trace accumulation is a fold: ``advance(state, attempt, outcome)`` returns a
new WalkState and touches nothing else.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import httpx

from ..config import Settings, get_settings
from ..exceptions import (
    AttemptsExhaustedError,
    FailureReason,
    ProviderHTTPError,
    ProviderParseError,
    ProviderTimeoutError,
    ProviderTransportError,
)
from ..models import (
    AttemptStatus,
    AttemptTraceEntry,
    CanonicalResult,
    CredentialSource,
    LanguagePlan,
    ProviderAttempt,
    ProviderId,
)
from ..providers import BaseSearchProvider, get_provider
from ..utils.logging_security import SecureLogger
from .http_pool import get_http_client
from .miss_budget import DailyMissBudget

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttemptOutcome:
    """Terminal state of one attempt plus whatever it produced."""
    status: AttemptStatus
    http_status: int = 0
    error: Optional[str] = None
    results: Tuple[CanonicalResult, ...] = ()


@dataclass(frozen=True)
class WalkState:
    """Accumulated trace and the winning attempt, if any."""
    trace: Tuple[AttemptTraceEntry, ...] = ()
    selected: Optional[ProviderAttempt] = None
    results: Tuple[CanonicalResult, ...] = ()

    @property
    def done(self) -> bool:
        return self.selected is not None

    @property
    def all_skipped(self) -> bool:
        return bool(self.trace) and all(e.status is AttemptStatus.SKIPPED for e in self.trace)


def advance(state: WalkState, attempt: ProviderAttempt, outcome: AttemptOutcome) -> WalkState:
    """Fold one attempt outcome into the walk state."""
    entry = AttemptTraceEntry.for_attempt(
        attempt,
        outcome.status,
        http_status=outcome.http_status,
        error=outcome.error,
    )
    trace = state.trace + (entry,)
    if outcome.status is AttemptStatus.SUCCESS:
        return WalkState(trace=trace, selected=attempt, results=outcome.results)
    return replace(state, trace=trace)


class AttemptExecutor:
    """Runs planned attempts against the upstream providers."""

    def __init__(
        self,
        miss_budget: DailyMissBudget,
        settings: Optional[Settings] = None,
        provider_factory: Callable[[ProviderId, Settings], BaseSearchProvider] = get_provider,
    ):
        self.miss_budget = miss_budget
        self.settings = settings or get_settings()
        self._provider_factory = provider_factory
        self._providers: Dict[ProviderId, BaseSearchProvider] = {}

    def provider_for(self, provider_id: ProviderId) -> BaseSearchProvider:
        if provider_id not in self._providers:
            self._providers[provider_id] = self._provider_factory(provider_id, self.settings)
        return self._providers[provider_id]

    async def run_attempt(
        self,
        client: httpx.AsyncClient,
        query: str,
        attempt: ProviderAttempt,
        language: LanguagePlan,
    ) -> AttemptOutcome:
        """Execute one attempt; upstream failures become outcomes, never exceptions."""
        provider = self.provider_for(attempt.provider)
        start = time.perf_counter()
        try:
            response = await provider.fetch(client, query, attempt, language)
        except ProviderTimeoutError as e:
            outcome = AttemptOutcome(AttemptStatus.TIMEOUT, error=e.message)
        except ProviderTransportError as e:
            outcome = AttemptOutcome(AttemptStatus.TRANSPORT_ERROR, error=e.message)
        except ProviderHTTPError as e:
            outcome = AttemptOutcome(AttemptStatus.UPSTREAM_ERROR, http_status=e.status_code, error=e.message)
        except ProviderParseError as e:
            outcome = AttemptOutcome(AttemptStatus.PARSE_ERROR, http_status=e.status_code, error=e.message)
        else:
            outcome = AttemptOutcome(
                AttemptStatus.SUCCESS,
                http_status=response.http_status,
                results=tuple(response.results),
            )

        elapsed_ms = (time.perf_counter() - start) * 1000
        if outcome.status is AttemptStatus.SUCCESS:
            logger.info(
                f"{attempt.provider.value} ({attempt.credential_source.value}, {attempt.resolution.value}, "
                f"country={attempt.country_param}) returned {len(outcome.results)} results in {elapsed_ms:.0f}ms"
            )
        else:
            logger.warning(
                f"{attempt.provider.value} ({attempt.credential_source.value}, {attempt.resolution.value}) "
                f"key {SecureLogger.mask_credential(attempt.credential)} failed with "
                f"{outcome.status.value} after {elapsed_ms:.0f}ms: {outcome.error}"
            )
        return outcome

    async def execute(
        self,
        query: str,
        attempts: Sequence[ProviderAttempt],
        language: LanguagePlan,
    ) -> WalkState:
        """
        Walk *attempts* in order until one succeeds.

        Returns:
            The final WalkState (``selected`` set)

        Raises:
            AttemptsExhaustedError: No attempt succeeded; reason is
                budget_exhausted when every attempt was skipped for budget
        """
        client = get_http_client()
        state = WalkState()

        for attempt in attempts:
            if attempt.credential_source is CredentialSource.SERVER and not self.miss_budget.try_consume():
                outcome = AttemptOutcome(AttemptStatus.SKIPPED, error="daily miss budget exhausted")
            else:
                outcome = await self.run_attempt(client, query, attempt, language)

            state = advance(state, attempt, outcome)
            if state.done:
                return state

        if state.all_skipped:
            raise AttemptsExhaustedError(
                "Live refresh paused to stay within the daily budget. Try later or use your own key.",
                reason=FailureReason.BUDGET_EXHAUSTED,
                trace=state.trace,
            )

        raise AttemptsExhaustedError(
            f"All {len(state.trace)} upstream attempt(s) failed.",
            reason=FailureReason.ALL_ATTEMPTS_FAILED,
            trace=state.trace,
        )


def trace_providers(trace: Sequence[AttemptTraceEntry]) -> List[str]:
    """Distinct providers in the order they appear in *trace*."""
    seen: List[str] = []
    for entry in trace:
        if entry.provider.value not in seen:
            seen.append(entry.provider.value)
    return seen
