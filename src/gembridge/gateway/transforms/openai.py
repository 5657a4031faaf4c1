"""OpenAI API response builder.

Builds OpenAI-shaped response bodies from generated text and embedding
vectors produced by the backend.

OpenAI API Reference:
- Chat: {id: "chatcmpl-…", object: "chat.completion", choices: [{message}], usage}
- Completion: {id: "cmpl-…", object: "text_completion", choices: [{text}], usage}
- Embeddings: {object: "list", data: [{object: "embedding", embedding, index}], usage}
- Models: {object: "list", data: [{id, object: "model", created, owned_by}]}
"""

import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .types import (
    DEFAULT_CHAT_MODEL,
    DEFAULT_EMBEDDING_MODEL,
    ChatCompletionRequest,
    CompletionRequest,
    EmbeddingRequest,
)
from .usage import completion_usage, count_chars, embedding_usage

# Models advertised on /v1/models
ADVERTISED_MODELS = ("gemini-pro", "gemini-pro-vision")
MODEL_OWNER = "google"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class OpenAITransformer:
    """Builds OpenAI-format responses.

    Identifiers are derived from the current millisecond timestamp. They are
    not unique across processes or restarts.
    """

    default_model: str = DEFAULT_CHAT_MODEL
    embedding_model: str = DEFAULT_EMBEDDING_MODEL

    def model_list(self) -> dict[str, Any]:
        """Return the /v1/models payload."""
        return {
            "object": "list",
            "data": [
                {
                    "id": model_id,
                    "object": "model",
                    "created": _now_ms(),
                    "owned_by": MODEL_OWNER,
                }
                for model_id in ADVERTISED_MODELS
            ],
        }

    def chat_completion(
        self,
        request: ChatCompletionRequest,
        generated_text: str,
        timestamp: int | None = None,
    ) -> dict[str, Any]:
        """Build a chat.completion response.

        Args:
            request: The original chat request
            generated_text: Text extracted from the backend response
            timestamp: Millisecond timestamp for id/created (defaults to now)
        """
        timestamp = timestamp or _now_ms()
        prompt_chars = count_chars(msg.content for msg in request.messages)
        return {
            "id": f"chatcmpl-{timestamp}",
            "object": "chat.completion",
            "created": timestamp,
            "model": request.model or self.default_model,
            "system_fingerprint": f"fp_{timestamp}",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": generated_text},
                    "finish_reason": "stop",
                }
            ],
            "usage": completion_usage(prompt_chars, generated_text),
        }

    def completion(
        self,
        request: CompletionRequest,
        generated_text: str,
        timestamp: int | None = None,
    ) -> dict[str, Any]:
        """Build a text_completion response."""
        timestamp = timestamp or _now_ms()
        return {
            "id": f"cmpl-{timestamp}",
            "object": "text_completion",
            "created": timestamp,
            "model": request.model or self.default_model,
            "choices": [
                {
                    "text": generated_text,
                    "index": 0,
                    "logprobs": None,
                    "finish_reason": "stop",
                }
            ],
            "usage": completion_usage(len(request.prompt), generated_text),
        }

    def embedding_list(
        self,
        request: EmbeddingRequest,
        vectors: Sequence[Sequence[float]],
    ) -> dict[str, Any]:
        """Build an embedding list response. Entries keep the input order."""
        return {
            "object": "list",
            "data": [
                {"object": "embedding", "embedding": list(vector), "index": i}
                for i, vector in enumerate(vectors)
            ],
            "model": self.embedding_model,
            "usage": embedding_usage(request.inputs),
        }
