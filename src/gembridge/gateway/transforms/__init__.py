"""API transformers for format conversion.

This module provides transformers for converting OpenAI API requests into
Gemini backend calls and Gemini responses back into OpenAI API responses.
"""

from .gemini import GeminiTransformer
from .openai import OpenAITransformer
from .types import (
    BackendCall,
    ChatCompletionRequest,
    ChatMessage,
    CompletionRequest,
    EmbeddingRequest,
    GenerationConfig,
)
from .usage import estimate_tokens
from .validation import (
    ChatCompletionBody,
    CompletionBody,
    EmbeddingBody,
    validate_request,
)

__all__ = [
    # Transformers
    "GeminiTransformer",
    "OpenAITransformer",
    # Types
    "BackendCall",
    "ChatCompletionRequest",
    "ChatMessage",
    "CompletionRequest",
    "EmbeddingRequest",
    "GenerationConfig",
    # Usage
    "estimate_tokens",
    # Validation
    "ChatCompletionBody",
    "CompletionBody",
    "EmbeddingBody",
    "validate_request",
]
