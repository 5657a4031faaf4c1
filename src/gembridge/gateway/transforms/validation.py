"""Pydantic models for OpenAI API request validation.

These models validate incoming request bodies before they reach the
orchestrator and convert them into the internal request types.
"""

from typing import Any, Literal, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictFloat,
    StrictInt,
    ValidationError,
    field_validator,
)

from .types import (
    ChatCompletionRequest,
    ChatMessage,
    CompletionRequest,
    EmbeddingRequest,
)


def _as_float(v: float | None) -> float | None:
    return None if v is None else float(v)


def _require_text(v: str, name: str) -> str:
    if not v:
        raise ValueError(f"{name} should not be empty")
    return v


class Message(BaseModel):
    """A message in the conversation."""

    model_config = ConfigDict(extra="allow")

    role: Literal["user", "assistant", "system"]
    content: str

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _require_text(v, "content")


class _GenerationBody(BaseModel):
    """Fields shared by chat and text completion bodies."""

    model_config = ConfigDict(extra="allow")

    model: str
    # Numeric strings like "0.5" are rejected, not coerced
    temperature: StrictFloat | StrictInt | None = None
    max_tokens: StrictInt | None = None

    @field_validator("model")
    @classmethod
    def validate_model(cls, v: str) -> str:
        return _require_text(v, "model")

    @field_validator("max_tokens")
    @classmethod
    def validate_max_tokens(cls, v: int | None) -> int | None:
        """Validate max_tokens is positive."""
        if v is not None and v <= 0:
            raise ValueError("max_tokens must be positive")
        return v


class ChatCompletionBody(_GenerationBody):
    """OpenAI /v1/chat/completions request body."""

    messages: list[Message]

    @field_validator("messages")
    @classmethod
    def validate_messages(cls, v: list[Message]) -> list[Message]:
        """Validate messages list is not empty."""
        if not v:
            raise ValueError("messages list cannot be empty")
        return v

    def to_internal(self) -> ChatCompletionRequest:
        return ChatCompletionRequest(
            model=self.model,
            messages=tuple(ChatMessage(role=m.role, content=m.content) for m in self.messages),
            temperature=_as_float(self.temperature),
            max_tokens=self.max_tokens,
        )


class CompletionBody(_GenerationBody):
    """OpenAI /v1/completions request body."""

    prompt: str

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        return _require_text(v, "prompt")

    def to_internal(self) -> CompletionRequest:
        return CompletionRequest(
            model=self.model,
            prompt=self.prompt,
            temperature=_as_float(self.temperature),
            max_tokens=self.max_tokens,
        )


class EmbeddingBody(BaseModel):
    """OpenAI /v1/embeddings request body."""

    model_config = ConfigDict(extra="allow")

    model: str
    input: str | list[str]

    @field_validator("model")
    @classmethod
    def validate_model(cls, v: str) -> str:
        return _require_text(v, "model")

    @field_validator("input")
    @classmethod
    def validate_input(cls, v: str | list[str]) -> str | list[str]:
        """Validate input is a non-empty string or a non-empty list."""
        if not v:
            raise ValueError("input should not be empty")
        return v

    def to_internal(self) -> EmbeddingRequest:
        value = self.input if isinstance(self.input, str) else tuple(self.input)
        return EmbeddingRequest(model=self.model, input=value)


BodyT = TypeVar("BodyT", bound=BaseModel)


def format_validation_error(error: ValidationError) -> list[str]:
    """Flatten a pydantic ValidationError into "field: message" strings."""
    messages: list[str] = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        message = item.get("msg", "invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return messages


def validate_request(
    model_cls: type[BodyT],
    body: Any,
) -> tuple[BodyT | None, list[str]]:
    """Validate an OpenAI request body against a pydantic model.

    Args:
        model_cls: The body model to validate against
        body: The decoded JSON request body

    Returns:
        Tuple of (parsed model or None, list of validation error messages)
    """
    try:
        return model_cls.model_validate(body), []
    except ValidationError as e:
        return None, format_validation_error(e)
