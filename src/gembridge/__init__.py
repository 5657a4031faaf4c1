"""gembridge - OpenAI-compatible API gateway for Google Gemini.

Clients that speak the OpenAI wire format (chat completions, completions,
embeddings, model listing) can use Gemini without modification. Requests
are translated to Gemini calls and responses are translated back.

Layers:
    gateway/    Server, orchestrator, transforms, backend client, errors
    core/       Shared infrastructure (logging)
    frontends/  Command line interface

Quick Start:
    >>> from gembridge.compose import create_gateway
    >>> await create_gateway(api_key="AIza...", port=3000)

Programmatic use without HTTP:
    >>> from gembridge.gateway import GatewayOrchestrator
    >>> from gembridge.gateway.clients import GeminiClient, GeminiClientConfig
    >>> client = GeminiClient(config=GeminiClientConfig())
    >>> await client.connect()
    >>> orchestrator = GatewayOrchestrator(client=client, api_key="AIza...")
    >>> result = await orchestrator.create_completion(request)
"""

from gembridge.__version__ import __version__

__all__ = ["__version__"]
