"""Observational statistics over the returned result set."""
from __future__ import annotations

import math
from collections import Counter
from typing import Iterable, List, Sequence

from ..models import AnnotatedResult, HistogramRow, StatsHistograms, StatsPanel

UNKNOWN = "unknown"


def percentage(count: int, total: int) -> float:
    """Share of *total* in percent, one decimal, halves rounded up."""
    if total <= 0:
        return 0
    return math.floor((count / total) * 100 * 10 + 0.5) / 10


def histogram(values: Iterable[str], total: int) -> List[HistogramRow]:
    """Rows sorted by count descending, then key ascending."""
    counts = Counter(values)
    rows = [HistogramRow(key=key, count=count, pct=percentage(count, total)) for key, count in counts.items()]
    rows.sort(key=lambda row: (-row.count, row.key))
    return rows


def compute_stats(results: Sequence[AnnotatedResult]) -> StatsPanel:
    total = len(results)

    domains = [r.domain for r in results if r.domain]
    tlds = [r.tld for r in results if r.tld]
    countries = [r.country_inferred for r in results if r.country_inferred]
    langs = [r.lang_detected for r in results if r.lang_detected]

    return StatsPanel(
        total_results=total,
        distinct_domains=len(set(domains)),
        distinct_tlds=len(set(tlds)),
        distinct_countries_inferred=len({c for c in countries if c != UNKNOWN}),
        histograms=StatsHistograms(
            tld=histogram(tlds, total),
            country_inferred=histogram(countries, total),
            lang_detected=histogram(langs, total),
            top_domains=histogram(domains, total),
        ),
    )
