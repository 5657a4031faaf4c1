"""Pytest configuration and fixtures."""

from dataclasses import dataclass, field
from typing import Any

import pytest

from gembridge.gateway.transforms.types import BackendCall


@dataclass
class FakeBackendClient:
    """Backend client double that records calls and replays canned results.

    Each entry in `responses` is either a dict (returned) or an exception
    (raised), consumed in order.
    """

    responses: list[Any] = field(default_factory=list)
    calls: list[tuple[BackendCall, str, str | None]] = field(default_factory=list)

    async def send(
        self,
        call: BackendCall,
        api_key: str,
        trace_id: str | None = None,
    ) -> dict[str, Any]:
        self.calls.append((call, api_key, trace_id))
        result = self.responses.pop(0) if self.responses else {}
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def fake_client():
    """A backend client double with no queued responses."""
    return FakeBackendClient()


@pytest.fixture
def generate_response():
    """Gemini generateContent response with nested content parts."""
    return {
        "candidates": [
            {
                "content": {"parts": [{"text": "Hello from Gemini!"}], "role": "model"},
                "finishReason": "STOP",
            }
        ]
    }


@pytest.fixture
def embed_response():
    """Gemini embedContent response."""
    return {"embedding": {"values": [0.1, 0.2, 0.3]}}


@pytest.fixture
def batch_embed_response():
    """Gemini batchEmbedContents response for three inputs."""
    return {
        "embeddings": [
            {"values": [0.1, 0.1]},
            {"values": [0.2, 0.2]},
            {"values": [0.3, 0.3]},
        ]
    }
