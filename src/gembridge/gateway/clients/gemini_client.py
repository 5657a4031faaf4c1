"""Gemini client for backend API calls.

Uses aiohttp.ClientSession, matching the rest of the gateway.

Sends exactly one POST per call. There is no retry, backoff or circuit
breaker here; the only timeout is the session's transport timeout.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any

import aiohttp

from gembridge.gateway.transforms.types import BackendCall

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1/models"

# Status used when the backend answered 2xx with a body we cannot decode
MALFORMED_RESPONSE_STATUS = 502


class UpstreamError(Exception):
    """Raised when the backend API returns an error or an unusable body."""

    def __init__(
        self,
        message: str,
        status_code: int,
        response_body: str | None = None,
        backend_message: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
        self.backend_message = backend_message


def parse_backend_message(body: str | None) -> str | None:
    """Pull error.message out of a Gemini error body, if there is one."""
    if not body:
        return None
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"] or None
    return None


@dataclass
class GeminiClientConfig:
    """Configuration for Gemini client."""

    base_url: str = DEFAULT_BASE_URL

    # Timeouts (seconds)
    connect_timeout: float = 10.0
    read_timeout: float = 300.0


@dataclass
class GeminiClient:
    """HTTP client for the Gemini generative language API.

    Owns the aiohttp session and nothing else; it does not translate payloads.
    The API key is passed per call so the client never holds the credential.
    """

    config: GeminiClientConfig
    _session: aiohttp.ClientSession | None = None

    async def connect(self) -> None:
        """Initialize HTTP session."""
        timeout = aiohttp.ClientTimeout(
            connect=self.config.connect_timeout,
            total=self.config.read_timeout,
        )
        self._session = aiohttp.ClientSession(
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    def url_for(self, call: BackendCall) -> str:
        """Backend URL for a call, without the credential."""
        return f"{self.config.base_url.rstrip('/')}/{call.model}:{call.method}"

    async def send(
        self,
        call: BackendCall,
        api_key: str,
        trace_id: str | None = None,
    ) -> dict[str, Any]:
        """Send one backend call and return the decoded JSON body.

        Args:
            call: Backend call built by the translator
            api_key: Gemini API key, sent as the `key` query parameter
            trace_id: Optional trace ID for correlation

        Returns:
            Decoded JSON response body

        Raises:
            UpstreamError: If the backend returns a non-2xx status or a body
                that is not a JSON object
            aiohttp.ClientError: On connection-level failures
        """
        trace_id = trace_id or f"req_{int(time.time() * 1000)}"

        if self._session is None:
            raise RuntimeError("Client not connected. Call connect() first.")

        url = self.url_for(call)
        start_time = time.time()
        logger.debug("[%s] POST %s", trace_id, url)

        async with self._session.post(
            url,
            params={"key": api_key},
            json=call.payload,
        ) as response:
            body = await response.text()
            duration = time.time() - start_time

            if response.status >= 400:
                logger.warning(
                    "[%s] Upstream error %d from %s (%.2fs): %s",
                    trace_id,
                    response.status,
                    call.method,
                    duration,
                    body[:500],
                )
                raise UpstreamError(
                    f"Upstream returned {response.status}",
                    response.status,
                    body,
                    parse_backend_message(body),
                )

            try:
                data = json.loads(body)
            except json.JSONDecodeError as e:
                raise UpstreamError(
                    f"Malformed response from upstream: {e}",
                    MALFORMED_RESPONSE_STATUS,
                    body,
                ) from e

            if not isinstance(data, dict):
                raise UpstreamError(
                    "Malformed response from upstream: expected a JSON object",
                    MALFORMED_RESPONSE_STATUS,
                    body,
                )

            logger.debug(
                "[%s] Upstream %s complete: status=%d (%.2fs)",
                trace_id,
                call.method,
                response.status,
                duration,
            )
            return data
