"""Gateway orchestrator.

Runs one OpenAI request through translate -> dispatch -> translate back.

Each request moves through:

    RECEIVED -> TRANSLATED -> DISPATCHED -> COMPLETED
                                        \\-> FAILED

Any failure on the way goes straight to FAILED and comes back as an ``Err``
carrying a classified error; nothing is raised to the caller. There are no
retries and at most one backend call per request.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

import aiohttp

from gembridge.gateway.clients.base import BackendClient
from gembridge.gateway.clients.gemini_client import UpstreamError
from gembridge.gateway.errors import (
    BackendError,
    ConfigurationError,
    Err,
    GatewayError,
    InternalError,
    Ok,
    Result,
)
from gembridge.gateway.transforms.gemini import GeminiTransformer
from gembridge.gateway.transforms.openai import OpenAITransformer
from gembridge.gateway.transforms.types import (
    BackendCall,
    ChatCompletionRequest,
    CompletionRequest,
    EmbeddingRequest,
)

logger = logging.getLogger(__name__)


class RequestState(Enum):
    """Lifecycle of a single gateway request."""

    RECEIVED = auto()
    TRANSLATED = auto()
    DISPATCHED = auto()
    COMPLETED = auto()
    FAILED = auto()


def classify_exception(exc: BaseException) -> GatewayError:
    """Classify an exception raised while talking to the backend."""
    if isinstance(exc, UpstreamError):
        return BackendError(
            status_code=exc.status_code,
            backend_message=exc.backend_message,
            transport_message=str(exc) or None,
        )
    if isinstance(exc, asyncio.TimeoutError):
        return BackendError(transport_message=str(exc) or "Request to upstream timed out")
    if isinstance(exc, aiohttp.ClientResponseError):
        return BackendError(status_code=exc.status, transport_message=exc.message or None)
    if isinstance(exc, aiohttp.ClientError):
        return BackendError(transport_message=str(exc) or type(exc).__name__)
    return InternalError(message=str(exc) or None)


@dataclass
class RequestRun:
    """Tracks the state of one request for logging."""

    trace_id: str
    operation: str
    state: RequestState = RequestState.RECEIVED

    def advance(self, state: RequestState) -> None:
        logger.debug(
            "[%s] %s: %s -> %s", self.trace_id, self.operation, self.state.name, state.name
        )
        self.state = state

    def fail(self, error: GatewayError) -> Err:
        self.advance(RequestState.FAILED)
        logger.warning("[%s] %s failed: %s", self.trace_id, self.operation, error)
        return Err(error)


@dataclass
class GatewayOrchestrator:
    """Composes translator, backend client and error classification per request.

    The client and the API key are passed in explicitly. The orchestrator
    keeps no per-request state between calls, so one instance can serve
    concurrent requests.
    """

    client: BackendClient
    api_key: str | None
    gemini: GeminiTransformer = field(default_factory=GeminiTransformer)
    openai: OpenAITransformer = field(default_factory=OpenAITransformer)

    # Called with (trace_id, call) right before the backend call (for debug dumps)
    on_dispatch: Callable[[str, BackendCall], None] | None = None

    def list_models(self) -> Result[dict[str, Any]]:
        """Return the advertised model list. Needs no backend call."""
        return Ok(self.openai.model_list())

    async def create_chat_completion(
        self,
        request: ChatCompletionRequest,
        trace_id: str = "-",
    ) -> Result[dict[str, Any]]:
        """Handle /v1/chat/completions."""
        return await self._run(
            RequestRun(trace_id, "chat_completion"),
            lambda: self.gemini.chat_to_upstream(request),
            lambda call, data: self.openai.chat_completion(request, self.gemini.extract_text(data)),
        )

    async def create_completion(
        self,
        request: CompletionRequest,
        trace_id: str = "-",
    ) -> Result[dict[str, Any]]:
        """Handle /v1/completions."""
        return await self._run(
            RequestRun(trace_id, "completion"),
            lambda: self.gemini.completion_to_upstream(request),
            lambda call, data: self.openai.completion(request, self.gemini.extract_text(data)),
        )

    async def create_embedding(
        self,
        request: EmbeddingRequest,
        trace_id: str = "-",
    ) -> Result[dict[str, Any]]:
        """Handle /v1/embeddings."""
        return await self._run(
            RequestRun(trace_id, "embedding"),
            lambda: self.gemini.embedding_to_upstream(request),
            lambda call, data: self.openai.embedding_list(
                request, self.gemini.extract_embeddings(call, data)
            ),
        )

    async def _run(
        self,
        run: RequestRun,
        translate: Callable[[], BackendCall],
        respond: Callable[[BackendCall, dict[str, Any]], dict[str, Any]],
    ) -> Result[dict[str, Any]]:
        # Credential check happens before any translation or network call
        if not self.api_key:
            return run.fail(ConfigurationError())

        try:
            call = translate()
        except Exception as e:
            logger.exception("[%s] Failed to translate request", run.trace_id)
            return run.fail(InternalError(message=str(e) or None))
        run.advance(RequestState.TRANSLATED)

        logger.info(
            "[%s] %s -> %s:%s",
            run.trace_id,
            run.operation,
            call.model,
            call.method,
        )
        if self.on_dispatch:
            try:
                self.on_dispatch(run.trace_id, call)
            except Exception:
                logger.exception("[%s] on_dispatch hook failed", run.trace_id)
        run.advance(RequestState.DISPATCHED)
        try:
            data = await self.client.send(call, self.api_key, run.trace_id)
        except Exception as e:
            return run.fail(classify_exception(e))

        try:
            payload = respond(call, data)
        except Exception as e:
            logger.exception("[%s] Failed to translate backend response", run.trace_id)
            return run.fail(InternalError(message=str(e) or None))

        run.advance(RequestState.COMPLETED)
        return Ok(payload)
