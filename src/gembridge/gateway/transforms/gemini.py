"""Gemini generateContent / embedContent transformer.

Converts internal requests into Gemini backend calls and pulls generated
text and embedding vectors out of Gemini responses.

Gemini API Reference:
- Generate: POST /models/{model}:generateContent with {contents, generationConfig}
- Contents: [{role?, parts: [{text}]}], roles are "user" and "model"
- Embed: POST /models/{model}:embedContent with {content: {parts: [{text}]}}
- Batch embed: POST /models/{model}:batchEmbedContents with {requests: [{content}]}
"""

from dataclasses import dataclass
from typing import Any

from .types import (
    DEFAULT_CHAT_MODEL,
    DEFAULT_EMBEDDING_MODEL,
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_TEMPERATURE,
    NO_RESPONSE_TEXT,
    BackendCall,
    ChatCompletionRequest,
    CompletionRequest,
    EmbeddingRequest,
    GenerationConfig,
)

# OpenAI role -> Gemini role. Anything not listed passes through as-is.
ROLE_MAP = {
    "assistant": "model",
}


def _text_content(text: str, role: str | None = None) -> dict[str, Any]:
    content: dict[str, Any] = {}
    if role is not None:
        content["role"] = role
    content["parts"] = [{"text": text}]
    return content


@dataclass
class GeminiTransformer:
    """Transforms internal requests to Gemini calls and parses Gemini responses."""

    chat_model: str = DEFAULT_CHAT_MODEL
    embedding_model: str = DEFAULT_EMBEDDING_MODEL

    def generation_config(
        self,
        temperature: float | None,
        max_tokens: int | None,
    ) -> GenerationConfig:
        """Apply client overrides on top of the fixed generation defaults."""
        return GenerationConfig(
            temperature=DEFAULT_TEMPERATURE if temperature is None else temperature,
            max_output_tokens=DEFAULT_MAX_OUTPUT_TOKENS if max_tokens is None else max_tokens,
        )

    def chat_to_upstream(self, request: ChatCompletionRequest) -> BackendCall:
        """Convert a chat completion request to a generateContent call.

        Each message becomes one content entry, in order. Only the assistant
        role is renamed; system messages go through unchanged.
        """
        contents = [
            _text_content(msg.content, ROLE_MAP.get(msg.role, msg.role))
            for msg in request.messages
        ]
        config = self.generation_config(request.temperature, request.max_tokens)
        return BackendCall(
            model=self.chat_model,
            method="generateContent",
            payload={"contents": contents, "generationConfig": config.to_dict()},
        )

    def completion_to_upstream(self, request: CompletionRequest) -> BackendCall:
        """Convert a text completion request to a generateContent call.

        The prompt becomes a single content entry without a role.
        """
        config = self.generation_config(request.temperature, request.max_tokens)
        return BackendCall(
            model=self.chat_model,
            method="generateContent",
            payload={
                "contents": [_text_content(request.prompt)],
                "generationConfig": config.to_dict(),
            },
        )

    def embedding_to_upstream(self, request: EmbeddingRequest) -> BackendCall:
        """Convert an embedding request to an embedContent or batchEmbedContents call.

        The single-item endpoint does not accept a list, so one input must go
        to embedContent and two or more to batchEmbedContents.
        """
        inputs = request.inputs
        if len(inputs) > 1:
            return BackendCall(
                model=self.embedding_model,
                method="batchEmbedContents",
                payload={"requests": [{"content": _text_content(text)} for text in inputs]},
            )
        return BackendCall(
            model=self.embedding_model,
            method="embedContent",
            payload={"content": _text_content(inputs[0])},
        )

    def extract_text(self, response: dict[str, Any]) -> str:
        """Extract generated text from a generateContent response.

        Tries candidates[0].content.parts[0].text, then candidates[0].text,
        then falls back to a fixed placeholder. Some response variants skip
        the nested content structure and only set the top-level text.
        """
        candidates = response.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return NO_RESPONSE_TEXT
        candidate = candidates[0]
        if not isinstance(candidate, dict):
            return NO_RESPONSE_TEXT

        content = candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if isinstance(parts, list) and parts and isinstance(parts[0], dict):
            text = parts[0].get("text")
            if isinstance(text, str) and text:
                return text

        text = candidate.get("text")
        if isinstance(text, str) and text:
            return text

        return NO_RESPONSE_TEXT

    def extract_embeddings(self, call: BackendCall, response: dict[str, Any]) -> list[list[float]]:
        """Extract embedding vectors from an embed response, in input order.

        Raises:
            KeyError: If the response lacks the expected embedding fields
        """
        if call.is_batch:
            embeddings = response["embeddings"]
        else:
            embeddings = [response["embedding"]]
        return [embedding["values"] for embedding in embeddings]
