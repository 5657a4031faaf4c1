"""Request tracing for the gateway server.

Provides human-readable trace IDs and debug data saving.
"""

from __future__ import annotations

import itertools
import json
import logging
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _context_words(text: str) -> str:
    words = text.split()[:3]
    return "_".join(w[:8] for w in words if w and not w.startswith("<"))[:20]


class RequestTracer:
    """Handles request tracing and debug data saving for the gateway server.

    Debug files are saved to: {debug_dir}/logs/{session_id}/{trace_id}/

    Example:
        tracer = RequestTracer(debug_dir="/tmp/debug")
        trace_id = tracer.generate_trace_id("chat", body)
        tracer.save_debug(trace_id, "1_openai_request.json", body)
    """

    def __init__(self, debug_dir: str | Path | None = None):
        """Create a tracer.

        Args:
            debug_dir: Root for debug dumps. Nothing is written when unset.
        """
        self._sequence = itertools.count(1)
        self._session_dir: Path | None = None
        if debug_dir:
            session = time.strftime("%Y-%m-%d_%H-%M-%S")
            self._session_dir = Path(debug_dir) / "logs" / session

    @property
    def debug_dir(self) -> Path | None:
        """This tracer's session folder, or None when dumps are disabled."""
        return self._session_dir

    def generate_trace_id(self, kind: str, body: Any) -> str:
        """Generate a human-readable trace ID with sequence number and context.

        Format: {counter}_{hhmmss}_{kind}_{context}
        Example: 00001_031333_chat_Please_write_a
        """
        sequence = next(self._sequence)
        timestamp = time.strftime("%H%M%S")

        context = "empty"
        if isinstance(body, dict):
            # Last user message for chat, the prompt for completions,
            # the first input for embeddings
            text: Any = None
            for m in reversed(body.get("messages") or []):
                if isinstance(m, dict) and m.get("role") == "user":
                    text = m.get("content")
                    break
            if text is None:
                text = body.get("prompt")
            if text is None:
                text = body.get("input")
                if isinstance(text, list) and text:
                    text = text[0]
            if isinstance(text, str) and text.strip():
                context = _context_words(text)

        # Clean context for filesystem
        context = "".join(c if c.isalnum() or c == "_" else "" for c in context) or "request"

        return f"{sequence:05d}_{timestamp}_{kind}_{context}"

    def save_debug(self, trace_id: str, filename: str, data: Any) -> None:
        """Dump data as {debug_dir}/{trace_id}/{filename}. No-op without a debug dir."""
        if self._session_dir is None:
            return

        target = self._session_dir / trace_id / filename
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(json.dumps(data, indent=2, default=str))
        except OSError as e:
            logger.warning("[%s] Failed to save debug file %s: %s", trace_id, filename, e)
        else:
            logger.debug("[%s] Saved debug file: %s", trace_id, target)

    def log_response(
        self,
        trace_id: str,
        status_code: int,
        duration_s: float,
        error: str | None = None,
    ) -> None:
        """Log a response event.

        Args:
            trace_id: Trace ID for this request.
            status_code: HTTP status code.
            duration_s: Request duration in seconds.
            error: Error message if request failed.
        """
        if error:
            logger.warning(
                "[%s] request_failed: status=%d, error=%s (%.2fs)",
                trace_id,
                status_code,
                error[:100],
                duration_s,
            )
        else:
            logger.info(
                "[%s] request_complete: status=%d (%.2fs)",
                trace_id,
                status_code,
                duration_s,
            )
