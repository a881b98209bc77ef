from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import pytest
from httpx_retries import Retry

from tests.helpers.http import RecordingHandler, mock_client
from thesisync.adapters.http_resilience import (
    CacheConfig,
    ResilienceConfig,
    ResilientClient,
    RetryPolicy,
    build_retry,
)


def test_build_retry_maps_policy() -> None:
    retry = build_retry(
        RetryPolicy(total=3, backoff_factor=0.25, status_forcelist=frozenset({503}))
    )

    assert isinstance(retry, Retry)
    assert retry.total == 3
    assert retry.backoff_factor == 0.25


def test_client_applies_base_url_and_default_headers() -> None:
    handler = RecordingHandler(lambda _: httpx.Response(200, json={}))
    config = ResilienceConfig(
        name="test",
        base_url="https://api.test/v1/",
        default_headers={"api-key": "abc"},
    )

    async def scenario() -> None:
        async with mock_client(config, handler) as client:
            await client.get("things/1", params={"q": "x"})

    asyncio.run(scenario())

    request = handler.requests[0]
    assert str(request.url) == "https://api.test/v1/things/1?q=x"
    assert request.headers["api-key"] == "abc"


def test_client_retries_rate_limited_responses(fast_resilience: ResilienceConfig) -> None:
    responses = iter([httpx.Response(429), httpx.Response(502), httpx.Response(200, json={})])
    handler = RecordingHandler(lambda _: next(responses))

    async def scenario() -> int:
        async with mock_client(fast_resilience, handler) as client:
            response = await client.get("student-projects")
            return response.status_code

    assert asyncio.run(scenario()) == 200
    assert len(handler.requests) == 3


def test_client_returns_last_response_when_retries_exhausted(
    fast_resilience: ResilienceConfig,
) -> None:
    handler = RecordingHandler(lambda _: httpx.Response(503))

    async def scenario() -> int:
        async with mock_client(fast_resilience, handler) as client:
            return (await client.get("student-projects")).status_code

    assert asyncio.run(scenario()) == 503
    assert len(handler.requests) == fast_resilience.retry.total + 1


def test_unknown_cache_backend_is_rejected() -> None:
    cache = CacheConfig(backend="redis")  # type: ignore[arg-type]
    config = ResilienceConfig(name="test", cache=cache)

    with pytest.raises(ValueError, match="Unsupported cache backend"):
        ResilientClient(config)


def test_sqlite_cache_requires_path() -> None:
    config = ResilienceConfig(name="test", cache=CacheConfig(backend="sqlite"))

    with pytest.raises(ValueError, match="sqlite_path"):
        ResilientClient(config)


def test_sqlite_cache_creates_missing_parent_directory(tmp_path: Path) -> None:
    cache_path = tmp_path / "cache" / "nested" / "geocoding.sqlite"
    config = ResilienceConfig(
        name="test",
        cache=CacheConfig(backend="sqlite", sqlite_path=str(cache_path)),
    )

    client = ResilientClient(config)
    asyncio.run(client.aclose())

    assert cache_path.parent.is_dir()
