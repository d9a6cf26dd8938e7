"""Tests for studify.providers.generation (httpx MockTransport, no network)."""
import asyncio
import json

import httpx
import pytest

from studify.core import Settings
from studify.providers import generation
from studify.providers.generation import (
    GenerationServiceError,
    GenerationTimeoutError,
    GenerationUpstreamError,
    WebhookGenerationProvider,
)

URL = "https://workflow.example.com/webhook/roadmap"


def _provider(handler, **kwargs) -> WebhookGenerationProvider:
    return WebhookGenerationProvider(URL, transport=httpx.MockTransport(handler), **kwargs)


async def test_posts_request_body_and_decodes_json() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"result": '{"daily_plan": []}'})

    response = await _provider(handler, api_key="secret").generate_plan("Python", "custom", 10)

    assert seen["body"] == {"course": "Python", "durationType": "custom", "customDays": 10}
    assert seen["auth"] == "Bearer secret"
    assert response.payload == {"result": '{"daily_plan": []}'}
    assert response.status_code == 200
    assert json.loads(response.raw_text) == response.payload


async def test_non_json_body_is_returned_as_text() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="Day 1: Intro\n- Setup")

    response = await _provider(handler).generate_plan("Python", "recommended", None)
    assert response.payload == "Day 1: Intro\n- Setup"


async def test_too_deeply_nested_json_is_returned_as_text() -> None:
    body = "[" * 100000 + "]" * 100000

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=body, headers={"Content-Type": "application/json"})

    response = await _provider(handler).generate_plan("Python", "recommended", None)
    assert response.payload == body


@pytest.mark.parametrize("status_code,fragment", [(500, "returned 500"), (524, "high load"), (404, "returned 404")])
async def test_error_status_raises_upstream_error(status_code: int, fragment: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text="upstream failure")

    with pytest.raises(GenerationUpstreamError, match=fragment) as exc_info:
        await _provider(handler).generate_plan("Python", "recommended", None)
    assert exc_info.value.status_code == status_code


async def test_connection_error_is_service_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GenerationServiceError) as exc_info:
        await _provider(handler).generate_plan("Python", "recommended", None)
    assert not isinstance(exc_info.value, GenerationTimeoutError)


async def test_httpx_timeout_is_timeout_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(GenerationTimeoutError):
        await _provider(handler).generate_plan("Python", "recommended", None)


async def test_slow_service_is_cancelled_at_timeout() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json={})

    with pytest.raises(GenerationTimeoutError):
        await _provider(handler, timeout_seconds=0.05).generate_plan("Python", "recommended", None)


async def test_probe_uses_probe_timeout_and_test_course() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"result": "ok"})

    response = await _provider(handler, probe_timeout_seconds=1.0).probe()
    assert seen["body"]["course"] == "Test Course"
    assert response.payload == {"result": "ok"}


def test_factory_requires_service_url(monkeypatch) -> None:
    monkeypatch.setattr(generation, "get_settings", lambda: Settings(generation_service_url=None))
    with pytest.raises(RuntimeError, match="GENERATION_SERVICE_URL"):
        generation.get_generation_provider()


def test_factory_builds_webhook_provider(monkeypatch) -> None:
    settings = Settings(generation_service_url=URL, generation_timeout_seconds=60)
    monkeypatch.setattr(generation, "get_settings", lambda: settings)
    provider = generation.get_generation_provider()
    assert isinstance(provider, WebhookGenerationProvider)
    assert provider.timeout_seconds == 60
