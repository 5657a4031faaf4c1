"""Backend client protocol.

The orchestrator depends on this interface only, so tests can hand it a
fake instead of a real HTTP client.
"""

from __future__ import annotations

from typing import Any, Protocol

from gembridge.gateway.transforms.types import BackendCall


class BackendClient(Protocol):
    """Sends one backend call and returns the raw decoded response."""

    async def send(
        self,
        call: BackendCall,
        api_key: str,
        trace_id: str | None = None,
    ) -> dict[str, Any]: ...
