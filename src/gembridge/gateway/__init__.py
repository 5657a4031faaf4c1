"""gembridge gateway - OpenAI-compatible API in front of Gemini.

Accepts OpenAI API requests and serves them from the Gemini generative
language API.

Components:
- Server: aiohttp routes for the OpenAI endpoints
- Orchestrator: per-request translate -> dispatch -> translate back
- Transforms: OpenAI <-> Gemini format conversion and usage estimation
- Clients: HTTP client for the Gemini API
- Errors: error variants and the uniform error envelope

Usage (via compose.py convenience functions):
    from gembridge.compose import create_gateway
    import asyncio

    asyncio.run(create_gateway(api_key="AIza..."))

Usage (direct):
    from gembridge.gateway.server import GatewayConfig, GatewayServer
    import asyncio

    async def main():
        config = GatewayConfig(api_key="AIza...", port=3000)
        server = GatewayServer(config=config)
        await server.serve()

    asyncio.run(main())
"""

from gembridge.gateway.errors import (
    BackendError,
    ConfigurationError,
    Err,
    InternalError,
    Ok,
    normalize_error,
)
from gembridge.gateway.orchestrator import GatewayOrchestrator
from gembridge.gateway.tracing import RequestTracer

__all__ = [
    "BackendError",
    "ConfigurationError",
    "Err",
    "GatewayOrchestrator",
    "InternalError",
    "Ok",
    "RequestTracer",
    "normalize_error",
]
