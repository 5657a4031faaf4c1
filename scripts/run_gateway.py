#!/usr/bin/env python
"""Run the OpenAI-compatible Gemini gateway with debug logging.

Usage:
    export GEMINI_API_KEY="AIza..."
    uv run python scripts/run_gateway.py

Then point an OpenAI client at it:
    export OPENAI_BASE_URL="http://127.0.0.1:3000/v1"
"""
import asyncio
import os

from gembridge.core.logging_config import configure_logging
from gembridge.gateway.server import GatewayConfig, GatewayServer

# Use DEBUG to see request lifecycle transitions
configure_logging(level=os.environ.get("GEMBRIDGE_LOG_LEVEL", "DEBUG"))


async def main():
    api_key = os.environ.get("GEMINI_API_KEY")
    if not api_key:
        print("Warning: GEMINI_API_KEY is not set; only /v1/models will succeed")

    debug_dir = os.environ.get("GEMBRIDGE_DEBUG_DIR", ".gembridge")
    config = GatewayConfig(
        host="127.0.0.1",
        port=int(os.environ.get("GATEWAY_PORT", "3000")),
        api_key=api_key,
        debug_dir=debug_dir,
    )

    print(f"Starting gateway on http://{config.host}:{config.port}")
    print(f"Backend: {config.base_url}")
    print(f"Debug logs: {debug_dir}/logs/{{session_id}}/")
    print()
    print("Configure an OpenAI client:")
    print(f"  export OPENAI_BASE_URL=http://{config.host}:{config.port}/v1")
    print()

    server = GatewayServer(config=config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
