"""OpenAI-compatible gateway server.

Exposes the OpenAI endpoints below and serves them from the Gemini API:

    GET  /v1/models
    POST /v1/chat/completions
    POST /v1/completions
    POST /v1/embeddings

This server:
1. Accepts OpenAI format requests
2. Validates them and hands them to the GatewayOrchestrator
3. Returns the OpenAI-shaped result, or the error envelope with the
   envelope's code as HTTP status
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from aiohttp import web
from pydantic import BaseModel

from gembridge.gateway.clients.gemini_client import (
    DEFAULT_BASE_URL,
    GeminiClient,
    GeminiClientConfig,
)
from gembridge.gateway.errors import (
    INVALID_REQUEST_ERROR_TYPE,
    Err,
    Result,
    envelope,
    normalize_error,
    status_of,
)
from gembridge.gateway.orchestrator import GatewayOrchestrator
from gembridge.gateway.tracing import RequestTracer
from gembridge.gateway.transforms.gemini import GeminiTransformer
from gembridge.gateway.transforms.openai import OpenAITransformer
from gembridge.gateway.transforms.types import (
    DEFAULT_CHAT_MODEL,
    DEFAULT_EMBEDDING_MODEL,
    BackendCall,
)
from gembridge.gateway.transforms.validation import (
    ChatCompletionBody,
    CompletionBody,
    EmbeddingBody,
    validate_request,
)

logger = logging.getLogger(__name__)

INDEX_FILE = "admin.html"


@dataclass
class GatewayConfig:
    """Configuration for the gateway server."""

    host: str = "127.0.0.1"
    port: int = 3000

    # Backend configuration
    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    chat_model: str = DEFAULT_CHAT_MODEL
    embedding_model: str = DEFAULT_EMBEDDING_MODEL

    # Client configuration
    connect_timeout: float = 10.0
    read_timeout: float = 300.0

    # Request limits
    max_body_size: int = 10 * 1024 * 1024  # 10MB

    # Static assets (admin page), served from / when set
    static_dir: str | None = None

    # Debug: save raw requests/responses to files
    debug_dir: str | None = None  # e.g., "/tmp/gembridge-debug"


@dataclass
class GatewayServer:
    """HTTP server that accepts OpenAI API requests and answers them via Gemini.

    Example:
        >>> config = GatewayConfig(api_key="AIza...")
        >>> server = GatewayServer(config=config)
        >>> await server.serve()
    """

    config: GatewayConfig
    _app: web.Application | None = None
    _runner: web.AppRunner | None = None
    _client: GeminiClient | None = None
    _orchestrator: GatewayOrchestrator | None = None
    _shutdown_event: asyncio.Event = field(default_factory=asyncio.Event)
    _tracer: RequestTracer = field(init=False)

    def __post_init__(self) -> None:
        """Initialize tracer with debug directory from config."""
        self._tracer = RequestTracer(debug_dir=self.config.debug_dir)

    def build_app(self) -> web.Application:
        """Create the aiohttp application with all routes registered."""
        app = web.Application(client_max_size=self.config.max_body_size)
        app.router.add_get("/v1/models", self._handle_models)
        app.router.add_post("/v1/chat/completions", self._handle_chat_completions)
        app.router.add_post("/v1/completions", self._handle_completions)
        app.router.add_post("/v1/embeddings", self._handle_embeddings)
        app.router.add_get("/health", self._handle_health)
        app.router.add_post("/api/shutdown", self._handle_shutdown)
        self._add_static_routes(app)
        return app

    def _add_static_routes(self, app: web.Application) -> None:
        if not self.config.static_dir:
            return

        root = Path(self.config.static_dir)
        if not root.is_dir():
            logger.warning("Static directory %s does not exist, not serving assets", root)
            return

        index = root / INDEX_FILE
        if index.is_file():

            async def _handle_index(request: web.Request) -> web.FileResponse:
                return web.FileResponse(index)

            app.router.add_get("/", _handle_index)
        app.router.add_static("/", root)
        logger.info("Serving static assets from %s", root)

    async def start(self) -> int:
        """Start the server without blocking.

        Returns:
            The port the server is listening on (useful when port=0).
        """
        if not self.config.api_key:
            logger.warning(
                "GEMINI_API_KEY is not set; generation and embedding requests will fail"
            )

        self._client = GeminiClient(
            config=GeminiClientConfig(
                base_url=self.config.base_url,
                connect_timeout=self.config.connect_timeout,
                read_timeout=self.config.read_timeout,
            )
        )
        await self._client.connect()

        self._orchestrator = GatewayOrchestrator(
            client=self._client,
            api_key=self.config.api_key,
            gemini=GeminiTransformer(
                chat_model=self.config.chat_model,
                embedding_model=self.config.embedding_model,
            ),
            openai=OpenAITransformer(
                default_model=self.config.chat_model,
                embedding_model=self.config.embedding_model,
            ),
            on_dispatch=self._save_backend_call,
        )

        self._app = self.build_app()
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()

        site = web.TCPSite(self._runner, self.config.host, self.config.port)
        await site.start()

        port = self.config.port
        server = getattr(site, "_server", None)
        if server is not None and server.sockets:
            port = server.sockets[0].getsockname()[1]

        logger.info(
            "Gateway listening on %s:%s -> %s",
            self.config.host,
            port,
            self.config.base_url,
        )
        return port

    async def serve(self) -> None:
        """Start the server and block until shutdown is requested."""
        await self.start()

        await self._shutdown_event.wait()
        logger.info("Gateway shutdown requested")
        await self.stop()

    async def stop(self) -> None:
        """Stop the server."""
        if self._client:
            await self._client.close()
            self._client = None
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
        self._orchestrator = None

    def _save_backend_call(self, trace_id: str, call: BackendCall) -> None:
        self._tracer.save_debug(
            trace_id,
            "2_gemini_request.json",
            {"model": call.model, "method": call.method, "payload": call.payload},
        )

    async def _read_body(
        self,
        request: web.Request,
        body_model: type[BaseModel],
        kind: str,
    ) -> tuple[str, BaseModel | None, web.Response | None]:
        """Parse and validate a JSON request body.

        Returns:
            (trace_id, parsed body or None, error response or None)
        """
        content_type = request.headers.get("Content-Type", "")
        if "application/json" not in content_type:
            trace_id = self._tracer.generate_trace_id(kind, None)
            return trace_id, None, self._invalid_request(
                f"Content-Type must be application/json, got: {content_type}",
                trace_id,
            )

        try:
            body = await request.json()
        except web.HTTPRequestEntityTooLarge as e:
            trace_id = self._tracer.generate_trace_id(kind, None)
            return trace_id, None, self._invalid_request(e.text or e.reason, trace_id, e.status)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            trace_id = self._tracer.generate_trace_id(kind, None)
            return trace_id, None, self._invalid_request(f"Invalid JSON: {e}", trace_id)

        trace_id = self._tracer.generate_trace_id(kind, body)
        logger.info("[%s] Incoming %s %s", trace_id, request.method, request.path)
        self._tracer.save_debug(trace_id, "1_openai_request.json", body)

        parsed, errors = validate_request(body_model, body)
        if errors:
            return trace_id, None, self._invalid_request("; ".join(errors), trace_id)

        return trace_id, parsed, None

    def _respond(
        self,
        result: Result[dict[str, Any]],
        trace_id: str,
        success_status: int,
        start_time: float,
    ) -> web.Response:
        """Turn an orchestrator result into an HTTP response."""
        if isinstance(result, Err):
            payload = normalize_error(result.error)
            status = status_of(payload)
            self._tracer.log_response(
                trace_id,
                status,
                time.time() - start_time,
                error=payload["error"]["message"],
            )
        else:
            payload = result.value
            status = success_status
            self._tracer.log_response(trace_id, status, time.time() - start_time)

        self._tracer.save_debug(trace_id, "3_openai_response.json", payload)
        return web.json_response(payload, status=status, headers={"X-Trace-Id": trace_id})

    def _invalid_request(self, message: str, trace_id: str, status: int = 400) -> web.Response:
        """Return an invalid_request_error envelope (400 unless told otherwise)."""
        logger.info("[%s] Rejected request: %s", trace_id, message)
        return web.json_response(
            envelope(message, INVALID_REQUEST_ERROR_TYPE, status),
            status=status,
            headers={"X-Trace-Id": trace_id},
        )

    def _require_orchestrator(self) -> GatewayOrchestrator:
        if self._orchestrator is None:
            raise web.HTTPServiceUnavailable(reason="Gateway not started")
        return self._orchestrator

    async def _handle_models(self, request: web.Request) -> web.Response:
        """Handle GET /v1/models."""
        orchestrator = self._require_orchestrator()
        start_time = time.time()
        trace_id = self._tracer.generate_trace_id("models", None)
        return self._respond(orchestrator.list_models(), trace_id, 200, start_time)

    async def _handle_chat_completions(self, request: web.Request) -> web.Response:
        """Handle POST /v1/chat/completions."""
        orchestrator = self._require_orchestrator()
        start_time = time.time()
        trace_id, body, error = await self._read_body(request, ChatCompletionBody, "chat")
        if error is not None:
            return error
        assert isinstance(body, ChatCompletionBody)

        result = await orchestrator.create_chat_completion(body.to_internal(), trace_id)
        return self._respond(result, trace_id, 201, start_time)

    async def _handle_completions(self, request: web.Request) -> web.Response:
        """Handle POST /v1/completions."""
        orchestrator = self._require_orchestrator()
        start_time = time.time()
        trace_id, body, error = await self._read_body(request, CompletionBody, "completion")
        if error is not None:
            return error
        assert isinstance(body, CompletionBody)

        result = await orchestrator.create_completion(body.to_internal(), trace_id)
        return self._respond(result, trace_id, 201, start_time)

    async def _handle_embeddings(self, request: web.Request) -> web.Response:
        """Handle POST /v1/embeddings."""
        orchestrator = self._require_orchestrator()
        start_time = time.time()
        trace_id, body, error = await self._read_body(request, EmbeddingBody, "embedding")
        if error is not None:
            return error
        assert isinstance(body, EmbeddingBody)

        result = await orchestrator.create_embedding(body.to_internal(), trace_id)
        return self._respond(result, trace_id, 201, start_time)

    async def _handle_health(self, request: web.Request) -> web.Response:
        """Handle GET /health."""
        return web.json_response({"status": "ok"})

    async def _handle_shutdown(self, request: web.Request) -> web.Response:
        """Handle POST /api/shutdown."""
        self._shutdown_event.set()
        return web.json_response({"success": True, "message": "Shutdown initiated"})
