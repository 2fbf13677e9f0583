from __future__ import annotations

from dataclasses import dataclass

import pytest

from reality_search.utils.url import canonicalize_url, dedup_by_canonical_url


@dataclass
class Row:
    url: str
    tag: str = ""


class TestCanonicalizeUrl:
    def test_tracking_params_fragment_and_order(self):
        raw = "https://Example.com/path?utm_source=x&b=2&a=1#frag"
        assert canonicalize_url(raw) == "https://example.com/path?a=1&b=2"

    def test_all_tracking_params_dropped(self):
        raw = "https://example.com/?gclid=1&FBCLID=2&mc_cid=3&mc_eid=4&igshid=5&UTM_Medium=6&keep=yes"
        assert canonicalize_url(raw) == "https://example.com/?keep=yes"

    def test_sorts_by_key_then_value(self):
        assert canonicalize_url("https://example.com/p?b=1&a=2&a=1") == "https://example.com/p?a=1&a=2&b=1"

    def test_path_case_is_kept(self):
        assert canonicalize_url("https://EXAMPLE.com/Some/Path") == "https://example.com/Some/Path"

    def test_empty_path_becomes_root(self):
        assert canonicalize_url("https://Example.com") == "https://example.com/"

    @pytest.mark.parametrize("raw", ["", "   "])
    def test_blank(self, raw):
        assert canonicalize_url(raw) == ""

    @pytest.mark.parametrize("raw", ["not a url", "/relative/path?utm_source=x", "example.com/page"])
    def test_non_absolute_input_is_trimmed_only(self, raw):
        assert canonicalize_url(f"  {raw} ") == raw

    def test_unparseable_input_never_raises(self):
        assert canonicalize_url("http://[::1") == "http://[::1"

    @pytest.mark.parametrize(
        "raw",
        [
            "https://Example.com/path?utm_source=x&b=2&a=1#frag",
            "https://example.com/search?q=hello+world&lang=en",
            "https://example.com/a%20b?x=%2F&y=",
            "HTTP://User@Example.COM:8080/x?b=&a",
            "not a url",
        ],
    )
    def test_idempotent(self, raw):
        once = canonicalize_url(raw)
        assert canonicalize_url(once) == once


class TestDedup:
    def test_keeps_first_occurrence_in_order(self):
        rows = [
            Row("https://example.com/a?utm_source=1"),
            Row("https://EXAMPLE.com/a"),
            Row("https://example.com/b"),
        ]
        assert [r.url for r in dedup_by_canonical_url(rows)] == [
            "https://example.com/a?utm_source=1",
            "https://example.com/b",
        ]

    def test_blank_urls_are_always_kept(self):
        rows = [Row("", "one"), Row("   ", "two"), Row("", "three")]
        assert [r.tag for r in dedup_by_canonical_url(rows)] == ["one", "two", "three"]

    def test_non_absolute_urls_dedup_on_trimmed_value(self):
        rows = [Row("foo", "one"), Row(" foo ", "two"), Row("bar", "three")]
        assert [r.tag for r in dedup_by_canonical_url(rows)] == ["one", "three"]

    def test_idempotent_and_stable(self):
        rows = [
            Row("https://a.com/1", "a"),
            Row("", "blank"),
            Row("https://b.com/1", "b"),
            Row("https://A.com/1#x", "a-dup"),
            Row("https://c.com/1", "c"),
        ]
        once = dedup_by_canonical_url(rows)
        assert [r.tag for r in once] == ["a", "blank", "b", "c"]
        assert dedup_by_canonical_url(once) == once
