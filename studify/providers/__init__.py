from .generation import (
    GenerationProvider,
    GenerationResponse,
    GenerationServiceError,
    GenerationTimeoutError,
    GenerationUpstreamError,
    WebhookGenerationProvider,
    get_generation_provider,
)

__all__ = [
    "GenerationProvider",
    "GenerationResponse",
    "GenerationServiceError",
    "GenerationTimeoutError",
    "GenerationUpstreamError",
    "WebhookGenerationProvider",
    "get_generation_provider",
]
