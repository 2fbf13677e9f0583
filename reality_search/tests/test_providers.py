from __future__ import annotations

import unittest
from dataclasses import replace

import httpx

from reality_search.exceptions import (
    ProviderHTTPError,
    ProviderParseError,
    ProviderTimeoutError,
    ProviderTransportError,
)
from reality_search.models import (
    CountryResolution,
    CredentialSource,
    ProviderAttempt,
    ProviderId,
)
from reality_search.providers import (
    BraveSearchProvider,
    SearchApiProvider,
    SerpApiProvider,
    get_provider,
)
from reality_search.routing import resolve_language_plan
from reality_search.tests.utils import (
    MockAsyncClient,
    MockAsyncResponse,
    SlowAsyncClient,
    connect_error,
    run,
)

NO_LANG = resolve_language_plan("", "all")
FRENCH = resolve_language_plan("", "fr")


def make_attempt(provider: ProviderId, country_param, resolution=CountryResolution.EXACT) -> ProviderAttempt:
    return ProviderAttempt(
        provider=provider,
        credential="secret-key-123456",
        credential_source=CredentialSource.SERVER,
        requested_country="FR",
        resolved_country="FR" if resolution is not CountryResolution.GLOBAL else None,
        country_param=country_param,
        resolution=resolution,
        reason="exact_country_match",
    )


class BraveProviderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.provider = BraveSearchProvider(base_url="https://brave.test/search", results_per_request=20)

    def test_request_format(self) -> None:
        request = self.provider.build_request("hello", make_attempt(ProviderId.BRAVE, "FR"), FRENCH)
        self.assertEqual(request.url, "https://brave.test/search")
        self.assertEqual(request.params, {"q": "hello", "count": "20", "country": "FR", "search_lang": "fr"})
        self.assertEqual(request.headers["X-Subscription-Token"], "secret-key-123456")

    def test_global_request_uses_all_sentinel(self) -> None:
        attempt = make_attempt(ProviderId.BRAVE, None, CountryResolution.GLOBAL)
        request = self.provider.build_request("hello", attempt, NO_LANG)
        self.assertEqual(request.params["country"], "ALL")
        self.assertNotIn("search_lang", request.params)

    def test_parse_web_results(self) -> None:
        body = {
            "web": {
                "results": [
                    {"title": "A", "url": "https://a.com/x", "description": "desc", "display_url": "a.com/x"},
                    {"title": "no url"},
                    {"name": "B", "url": "https://b.com/", "snippet": 42},
                ]
            }
        }
        results = self.provider.parse(body)
        self.assertEqual(len(results), 2)
        self.assertEqual(results[0].snippet, "desc")
        self.assertEqual(results[0].display_url, "a.com/x")
        self.assertEqual(results[1].title, "B")
        # wrong-typed fields become ""
        self.assertEqual(results[1].snippet, "")
        self.assertEqual(results[1].display_url, "b.com")

    def test_parse_top_level_results(self) -> None:
        results = self.provider.parse({"results": [{"url": "https://c.com/page", "title": "C"}]})
        self.assertEqual([r.display_url for r in results], ["c.com/page"])

    def test_parse_unexpected_shapes(self) -> None:
        self.assertEqual(self.provider.parse({}), [])
        self.assertEqual(self.provider.parse({"web": {"results": "nope"}}), [])
        self.assertEqual(self.provider.parse({"web": {"results": [None, 3, "x"]}}), [])


class GoogleLikeProviderTests(unittest.TestCase):
    def test_serpapi_request_format(self) -> None:
        provider = SerpApiProvider(base_url="https://serp.test/search.json", results_per_request=10)
        request = provider.build_request("hello", make_attempt(ProviderId.SERPAPI, "fr"), FRENCH)
        self.assertEqual(
            request.params,
            {"engine": "google", "q": "hello", "num": "10", "api_key": "secret-key-123456", "gl": "fr", "hl": "fr"},
        )
        self.assertNotIn("Authorization", request.headers)

    def test_serpapi_global_omits_gl(self) -> None:
        provider = SerpApiProvider(base_url="https://serp.test/search.json")
        attempt = make_attempt(ProviderId.SERPAPI, None, CountryResolution.GLOBAL)
        request = provider.build_request("hello", attempt, NO_LANG)
        self.assertNotIn("gl", request.params)
        self.assertNotIn("hl", request.params)

    def test_searchapi_bearer_auth(self) -> None:
        provider = SearchApiProvider(base_url="https://searchapi.test/api/v1/search")
        request = provider.build_request("hello", make_attempt(ProviderId.SEARCHAPI, "de"), NO_LANG)
        self.assertEqual(request.headers["Authorization"], "Bearer secret-key-123456")
        self.assertEqual(request.params["gl"], "de")
        self.assertEqual(request.params["engine"], "google")

    def test_container_fallbacks(self) -> None:
        provider = SerpApiProvider(base_url="https://serp.test/search.json")
        organic = provider.parse({"organic_results": [{"link": "https://a.com/", "title": "A", "snippet": "s"}]})
        results = provider.parse({"results": [{"destination": "https://b.com/", "content": "c"}]})
        items = provider.parse({"items": [{"redirect_link": "https://c.com/r", "displayed_link": "c.com > r"}]})

        self.assertEqual([r.url for r in organic], ["https://a.com/"])
        self.assertEqual(results[0].snippet, "c")
        self.assertEqual(items[0].display_url, "c.com > r")

    def test_organic_results_take_precedence(self) -> None:
        provider = SerpApiProvider(base_url="https://serp.test/search.json")
        body = {"organic_results": [], "results": [{"link": "https://ignored.com/"}]}
        self.assertEqual(provider.parse(body), [])


class FetchTests(unittest.TestCase):
    def setUp(self) -> None:
        self.provider = SerpApiProvider(base_url="https://serp.test/search.json", timeout=0.05)
        self.attempt = make_attempt(ProviderId.SERPAPI, "fr")

    def test_success(self) -> None:
        client = MockAsyncClient([MockAsyncResponse({"organic_results": [{"link": "https://a.com/"}]})])
        response = run(self.provider.fetch(client, "q", self.attempt, NO_LANG))
        self.assertEqual(response.http_status, 200)
        self.assertEqual(len(response.results), 1)
        self.assertEqual(client.calls[0]["params"]["gl"], "fr")

    def test_success_with_zero_results(self) -> None:
        client = MockAsyncClient([MockAsyncResponse({"organic_results": []})])
        response = run(self.provider.fetch(client, "q", self.attempt, NO_LANG))
        self.assertEqual(response.results, [])

    def test_http_error(self) -> None:
        client = MockAsyncClient([MockAsyncResponse({"error": "quota"}, status_code=429)])
        with self.assertRaises(ProviderHTTPError) as ctx:
            run(self.provider.fetch(client, "q", self.attempt, NO_LANG))
        self.assertEqual(ctx.exception.status_code, 429)

    def test_non_json_body(self) -> None:
        client = MockAsyncClient([MockAsyncResponse(text="<html>oops</html>")])
        with self.assertRaises(ProviderParseError):
            run(self.provider.fetch(client, "q", self.attempt, NO_LANG))

    def test_non_object_json(self) -> None:
        client = MockAsyncClient([MockAsyncResponse(["not", "an", "object"])])
        with self.assertRaises(ProviderParseError):
            run(self.provider.fetch(client, "q", self.attempt, NO_LANG))

    def test_transport_error_hides_key(self) -> None:
        client = MockAsyncClient([connect_error("failed for api_key=secret-key-123456")])
        with self.assertRaises(ProviderTransportError) as ctx:
            run(self.provider.fetch(client, "q", self.attempt, NO_LANG))
        self.assertNotIn("secret-key-123456", ctx.exception.message)

    def test_httpx_timeout(self) -> None:
        client = MockAsyncClient([httpx.ReadTimeout("read timed out")])
        with self.assertRaises(ProviderTimeoutError):
            run(self.provider.fetch(client, "q", self.attempt, NO_LANG))

    def test_hanging_call_is_cancelled(self) -> None:
        with self.assertRaises(ProviderTimeoutError):
            run(self.provider.fetch(SlowAsyncClient(delay=5.0), "q", self.attempt, NO_LANG))

    def test_unsendable_key_is_a_transport_error(self) -> None:
        provider = BraveSearchProvider(base_url="https://brave.test/search")
        attempt = replace(make_attempt(ProviderId.BRAVE, "FR"), credential="clé")
        sent: list = []

        async def fetch():
            async with httpx.AsyncClient(transport=httpx.MockTransport(sent.append)) as client:
                return await provider.fetch(client, "q", attempt, NO_LANG)

        with self.assertRaises(ProviderTransportError) as ctx:
            run(fetch())
        self.assertEqual(sent, [])
        self.assertNotIn("clé", ctx.exception.message)


class RegistryTests(unittest.TestCase):
    def test_get_provider_uses_settings(self) -> None:
        from reality_search.config import Settings

        settings = Settings(RESULTS_PER_REQUEST=7, UPSTREAM_TIMEOUT_SECONDS=3.0)
        provider = get_provider(ProviderId.BRAVE, settings)
        self.assertIsInstance(provider, BraveSearchProvider)
        self.assertEqual(provider.results_per_request, 7)
        self.assertEqual(provider.timeout, 3.0)
        self.assertEqual(provider.base_url, settings.brave_base_url)

    def test_every_provider_is_registered(self) -> None:
        for provider_id in ProviderId:
            self.assertEqual(get_provider(provider_id).provider_id, provider_id)

    def test_unknown_provider_is_a_configuration_error(self) -> None:
        from reality_search.exceptions import ConfigurationError

        with self.assertRaises(ConfigurationError):
            get_provider("bing")  # type: ignore[arg-type]
