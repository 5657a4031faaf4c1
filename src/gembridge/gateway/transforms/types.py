"""Types shared by the gateway transformers.

These represent validated inbound requests in a framework-free form and the
backend calls built from them. All of them are request-scoped.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

# Backend generation defaults. topP/topK are never exposed to clients.
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_OUTPUT_TOKENS = 1024
DEFAULT_TOP_P = 0.8
DEFAULT_TOP_K = 40

DEFAULT_CHAT_MODEL = "gemini-pro"
DEFAULT_EMBEDDING_MODEL = "text-embedding-004"

NO_RESPONSE_TEXT = "No response generated"

BackendMethod = Literal["generateContent", "embedContent", "batchEmbedContents"]


@dataclass(frozen=True)
class ChatMessage:
    """A single chat message as sent by an OpenAI client."""

    role: Literal["user", "assistant", "system"]
    content: str


@dataclass(frozen=True)
class ChatCompletionRequest:
    """OpenAI chat completion request."""

    model: str
    messages: tuple[ChatMessage, ...]
    temperature: float | None = None
    max_tokens: int | None = None


@dataclass(frozen=True)
class CompletionRequest:
    """OpenAI legacy text completion request."""

    model: str
    prompt: str
    temperature: float | None = None
    max_tokens: int | None = None


@dataclass(frozen=True)
class EmbeddingRequest:
    """OpenAI embedding request. `input` may be one string or several."""

    model: str
    input: str | tuple[str, ...]

    @property
    def inputs(self) -> tuple[str, ...]:
        """Input normalized to an ordered sequence."""
        if isinstance(self.input, str):
            return (self.input,)
        return tuple(self.input)


@dataclass(frozen=True)
class GenerationConfig:
    """Backend generation parameters."""

    temperature: float = DEFAULT_TEMPERATURE
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    top_p: float = DEFAULT_TOP_P
    top_k: int = DEFAULT_TOP_K

    def to_dict(self) -> dict[str, Any]:
        return {
            "temperature": self.temperature,
            "maxOutputTokens": self.max_output_tokens,
            "topP": self.top_p,
            "topK": self.top_k,
        }


@dataclass(frozen=True)
class BackendCall:
    """One call to the backend: which model, which method, what payload.

    Built by the translator, executed by the backend client. The client adds
    the credential and the base URL; it never looks inside the payload.
    """

    model: str
    method: BackendMethod
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def is_batch(self) -> bool:
        return self.method == "batchEmbedContents"
