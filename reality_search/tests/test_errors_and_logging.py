from __future__ import annotations

import unittest

from fastapi import Request

from reality_search.exceptions import (
    AttemptsExhaustedError,
    FailureReason,
    NoCredentialsError,
    ProviderHTTPError,
    RateLimitedError,
    ValidationError,
    get_error_response,
)
from reality_search.models import AttemptStatus, AttemptTraceEntry, ProviderCredentials, ProviderId
from reality_search.routing import AttemptPlanner
from reality_search.utils.logging_security import SecureLogger


class ErrorResponseTests(unittest.TestCase):
    def test_rate_limited_payload(self) -> None:
        payload = get_error_response(RateLimitedError("slow down", retry_after=12))
        self.assertEqual(payload["error"], "RateLimitedError")
        self.assertEqual(payload["reason"], FailureReason.RATE_LIMITED)
        self.assertEqual(payload["details"]["retry_after"], 12)
        self.assertEqual(payload["attempts"], [])

    def test_validation_field(self) -> None:
        error = ValidationError("bad country", field="country", reason=FailureReason.INVALID_COUNTRY)
        payload = error.to_dict()
        self.assertEqual(payload["reason"], "invalid_country")
        self.assertEqual(payload["details"]["field"], "country")

    def test_class_level_reasons(self) -> None:
        self.assertEqual(NoCredentialsError("none").reason, "no_credentials")

    def test_exhausted_carries_trace_without_keys(self) -> None:
        credentials = ProviderCredentials(server={ProviderId.SERPAPI: "very-secret-key"})
        attempt = AttemptPlanner.build_attempts(None, credentials)[0]
        entry = AttemptTraceEntry.for_attempt(attempt, AttemptStatus.UPSTREAM_ERROR, http_status=502)
        error = AttemptsExhaustedError("failed", reason=FailureReason.ALL_ATTEMPTS_FAILED, trace=[entry])
        payload = get_error_response(error)
        self.assertEqual(payload["attempts"][0]["status"], "upstream_error")
        self.assertEqual(payload["attempts"][0]["http_status"], 502)
        self.assertNotIn("very-secret-key", repr(payload))

    def test_provider_error_details(self) -> None:
        error = ProviderHTTPError("brave returned HTTP 500", provider="brave", status_code=500)
        self.assertEqual(error.details, {"provider": "brave", "status_code": 500})

    def test_unknown_exception(self) -> None:
        payload = get_error_response(RuntimeError("boom"))
        self.assertEqual(payload["error"], "InternalError")


class SecureLoggerTests(unittest.TestCase):
    def test_sanitize_headers(self) -> None:
        sanitized = SecureLogger.sanitize_headers({
            "Authorization": "Bearer abc",
            "X-Subscription-Token": "brave-key",
            "X-User-Serpapi-Key": "user-key",
            "Accept": "application/json",
        })
        self.assertEqual(sanitized["Authorization"], "Bearer [REDACTED]")
        self.assertEqual(sanitized["X-Subscription-Token"], "[REDACTED]")
        self.assertEqual(sanitized["X-User-Serpapi-Key"], "[REDACTED]")
        self.assertEqual(sanitized["Accept"], "application/json")

    def test_request_log_headers_are_sanitized(self) -> None:
        request = Request({
            "type": "http",
            "method": "GET",
            "path": "/api/search",
            "query_string": b"q=coffee&api_key=leaked",
            "headers": [(b"x-user-brave-key", b"user-secret"), (b"accept", b"*/*")],
            "client": ("1.2.3.4", 5000),
        })
        plain = SecureLogger.format_request_log(request, "req-1")
        self.assertNotIn("headers", plain)
        self.assertTrue(plain["byo_key"])

        detailed = SecureLogger.format_request_log(request, "req-1", include_headers=True)
        self.assertEqual(detailed["headers"]["x-user-brave-key"], "[REDACTED]")
        self.assertEqual(detailed["headers"]["accept"], "*/*")
        self.assertEqual(detailed["query_params"]["api_key"], "[REDACTED]")
        self.assertNotIn("user-secret", str(detailed))

    def test_sanitize_params(self) -> None:
        sanitized = SecureLogger.sanitize_params({"q": "coffee", "api_key": "k", "gl": "fr"})
        self.assertEqual(sanitized, {"q": "coffee", "api_key": "[REDACTED]", "gl": "fr"})

    def test_redact_secrets_in_text(self) -> None:
        text = "GET https://serpapi.com/search.json?q=x&api_key=abcdef123&gl=fr failed"
        self.assertNotIn("abcdef123", SecureLogger.redact_secrets(text))

    def test_scrub_known_secret(self) -> None:
        self.assertEqual(SecureLogger.scrub_secrets("token xyz leaked", ["xyz", None]), "token [REDACTED] leaked")

    def test_mask_credential(self) -> None:
        self.assertEqual(SecureLogger.mask_credential("abcdefghijkl"), "****ijkl")
        self.assertEqual(SecureLogger.mask_credential("short"), "****")
        self.assertEqual(SecureLogger.mask_credential(None), "[NONE]")

    def test_request_ids_are_unique(self) -> None:
        ids = {SecureLogger.generate_request_id() for _ in range(50)}
        self.assertEqual(len(ids), 50)
        self.assertTrue(all(i.startswith("req_") for i in ids))
