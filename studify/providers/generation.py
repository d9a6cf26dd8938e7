import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from studify.core import get_settings

logger = logging.getLogger(__name__)


class GenerationServiceError(Exception):
    """Raised when the AI generation service is unreachable or answers with an error."""


class GenerationTimeoutError(GenerationServiceError):
    """Raised when the generation call exceeds its timeout and is cancelled."""


class GenerationUpstreamError(GenerationServiceError):
    """Raised when the generation service answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)


@dataclass
class GenerationResponse:
    """Service answer: decoded JSON when the body is JSON, else the text itself."""
    payload: Any
    raw_text: str
    status_code: int
    elapsed_seconds: float


class GenerationProvider(ABC):
    @abstractmethod
    async def generate_plan(
        self, course: str, duration_type: str, custom_days: int | None
    ) -> GenerationResponse:
        pass

    @abstractmethod
    async def probe(self) -> GenerationResponse:
        """Cheap reachability check with a short timeout."""
        pass


class WebhookGenerationProvider(GenerationProvider):
    """Generation workflow exposed as an HTTP webhook (POST {course, durationType, customDays})."""

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        timeout_seconds: float = 180.0,
        probe_timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.probe_timeout_seconds = probe_timeout_seconds
        self._transport = transport

    async def _post(self, body: dict, timeout_seconds: float) -> GenerationResponse:
        headers = {"Content-Type": "application/json", "User-Agent": "Studify-Backend/1.0"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        loop = asyncio.get_running_loop()
        started = loop.time()
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(timeout_seconds), transport=self._transport
            ) as client:
                # wait_for bounds the whole exchange; httpx timeouts are per phase.
                r = await asyncio.wait_for(
                    client.post(self.url, json=body, headers=headers),
                    timeout=timeout_seconds,
                )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise GenerationTimeoutError(
                "The AI is taking longer than expected to generate your roadmap. "
                "Please try again in a few minutes."
            ) from e
        except httpx.RequestError as e:
            raise GenerationServiceError(
                f"AI service unavailable (connection error: {type(e).__name__})."
            ) from e

        elapsed = loop.time() - started
        if r.status_code >= 400:
            body_text = r.text or ""
            if body_text:
                logger.warning("Generation service error %s: %s", r.status_code, body_text[:500])
            if r.status_code == 524:
                raise GenerationUpstreamError(
                    r.status_code,
                    "Our AI service is experiencing high load. Please try again in a moment.",
                )
            raise GenerationUpstreamError(
                r.status_code,
                f"AI service unavailable: returned {r.status_code}.",
            )

        raw_text = r.text or ""
        try:
            payload: Any = r.json()
        except (ValueError, RecursionError):
            # Some workflows answer with bare text; the pipeline copes with strings.
            payload = raw_text
        return GenerationResponse(
            payload=payload,
            raw_text=raw_text,
            status_code=r.status_code,
            elapsed_seconds=elapsed,
        )

    async def generate_plan(
        self, course: str, duration_type: str, custom_days: int | None
    ) -> GenerationResponse:
        logger.info("Calling generation service (timeout %.0fs)", self.timeout_seconds)
        response = await self._post(
            {"course": course, "durationType": duration_type, "customDays": custom_days},
            self.timeout_seconds,
        )
        logger.info("Generation response received in %.2f seconds", response.elapsed_seconds)
        return response

    async def probe(self) -> GenerationResponse:
        return await self._post(
            {"course": "Test Course", "durationType": "recommended", "customDays": None},
            self.probe_timeout_seconds,
        )


def get_generation_provider() -> GenerationProvider:
    s = get_settings()
    if s.generation_service_url:
        return WebhookGenerationProvider(
            url=s.generation_service_url,
            api_key=s.generation_api_key,
            timeout_seconds=s.generation_timeout_seconds,
            probe_timeout_seconds=s.probe_timeout_seconds,
        )
    raise RuntimeError(
        "Generation service not configured. Set GENERATION_SERVICE_URL."
    )
