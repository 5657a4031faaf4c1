"""Backend HTTP clients."""

from gembridge.gateway.clients.base import BackendClient
from gembridge.gateway.clients.gemini_client import (
    GeminiClient,
    GeminiClientConfig,
    UpstreamError,
)

__all__ = [
    "BackendClient",
    "GeminiClient",
    "GeminiClientConfig",
    "UpstreamError",
]
