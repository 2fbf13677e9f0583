from __future__ import annotations

from reality_search.models import AnnotatedResult
from reality_search.services.stats import compute_stats, percentage


def result(domain: str, tld: str, country: str, lang: str) -> AnnotatedResult:
    return AnnotatedResult(
        title="t",
        url=f"https://{domain}/" if domain else "",
        snippet="s",
        display_url=domain,
        domain=domain,
        tld=tld,
        country_inferred=country,
        lang_detected=lang,
    )


class TestPercentage:
    def test_one_decimal(self):
        assert percentage(1, 3) == 33.3
        assert percentage(2, 3) == 66.7

    def test_half_rounds_up(self):
        assert percentage(1, 8) == 12.5
        assert percentage(1, 16) == 6.3

    def test_zero_total(self):
        assert percentage(0, 0) == 0


class TestComputeStats:
    def test_empty(self):
        panel = compute_stats([])
        assert panel.total_results == 0
        assert panel.distinct_domains == 0
        assert panel.histograms.tld == []

    def test_counts_and_tie_break(self):
        results = [
            result("b.com", "com", "unknown", "en"),
            result("a.de", "de", "DE", "de"),
            result("a.fr", "fr", "FR", "fr"),
            result("b.com", "com", "unknown", "en"),
        ]
        panel = compute_stats(results)

        assert panel.total_results == 4
        assert panel.distinct_domains == 3
        assert panel.distinct_tlds == 3
        # "unknown" is not a country
        assert panel.distinct_countries_inferred == 2

        assert [(r.key, r.count, r.pct) for r in panel.histograms.tld] == [
            ("com", 2, 50.0),
            ("de", 1, 25.0),
            ("fr", 1, 25.0),
        ]
        assert [r.key for r in panel.histograms.country_inferred] == ["unknown", "DE", "FR"]
        assert [r.key for r in panel.histograms.top_domains] == ["b.com", "a.de", "a.fr"]

    def test_empty_keys_are_not_counted(self):
        panel = compute_stats([result("", "", "", ""), result("x.com", "com", "unknown", "en")])
        assert panel.total_results == 2
        assert panel.distinct_domains == 1
        assert [(r.key, r.count, r.pct) for r in panel.histograms.top_domains] == [("x.com", 1, 50.0)]
