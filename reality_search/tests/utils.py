from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, Iterable, List, Optional, Union

import httpx


class MockAsyncResponse:
    def __init__(
        self,
        json_data: Any = None,
        *,
        status_code: int = 200,
        text: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self._json = json_data
        self._text = text
        self.status_code = status_code
        self.headers = headers or {}

    def json(self) -> Any:
        if self._text is not None:
            # Same failure mode as httpx.Response.json on a non-JSON body
            return json.loads(self._text)
        return self._json


class MockAsyncClient:
    """Replays canned responses (or raises canned exceptions) in order and records each call."""

    def __init__(self, responses: Iterable[Union[MockAsyncResponse, BaseException]]) -> None:
        self._responses: List[Union[MockAsyncResponse, BaseException]] = list(responses)
        self.calls: List[Dict[str, Any]] = []

    async def __aenter__(self) -> "MockAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        **_kwargs,
    ) -> MockAsyncResponse:
        self.calls.append({"url": str(url), "params": dict(params or {}), "headers": dict(headers or {})})
        if not self._responses:
            raise AssertionError("No more mock responses available")
        response = self._responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


class SlowAsyncClient(MockAsyncClient):
    """Client whose calls never finish within any reasonable timeout."""

    def __init__(self, delay: float = 5.0) -> None:
        super().__init__([])
        self.delay = delay

    async def get(self, url: str, **kwargs) -> MockAsyncResponse:
        self.calls.append({"url": str(url), "params": dict(kwargs.get("params") or {}), "headers": {}})
        await asyncio.sleep(self.delay)
        raise AssertionError("slow call was not cancelled")


def connect_error(message: str = "connection refused") -> httpx.ConnectError:
    return httpx.ConnectError(message, request=httpx.Request("GET", "https://upstream.invalid/"))


def brave_body(*urls: str) -> Dict[str, Any]:
    return {
        "web": {
            "results": [
                {"title": f"Result {i}", "url": url, "description": f"Snippet number {i} for this result"}
                for i, url in enumerate(urls, start=1)
            ]
        }
    }


def google_body(*urls: str) -> Dict[str, Any]:
    return {
        "organic_results": [
            {"title": f"Result {i}", "link": url, "snippet": f"Snippet number {i} for this result"}
            for i, url in enumerate(urls, start=1)
        ]
    }


def run(coro):
    """Helper to run async functions in synchronous tests."""
    return asyncio.run(coro)
