"""Tests for OpenAI request body validation."""

import pytest

from gembridge.gateway.transforms.types import ChatMessage
from gembridge.gateway.transforms.validation import (
    ChatCompletionBody,
    CompletionBody,
    EmbeddingBody,
    validate_request,
)


class TestChatCompletionBody:
    """Tests for /v1/chat/completions body validation."""

    def test_valid_body(self):
        """A valid body parses and converts to the internal request."""
        body, errors = validate_request(
            ChatCompletionBody,
            {
                "model": "gpt-4",
                "messages": [
                    {"role": "system", "content": "Be brief."},
                    {"role": "user", "content": "Hi"},
                ],
                "temperature": 0.2,
                "max_tokens": 64,
            },
        )

        assert errors == []
        request = body.to_internal()
        assert request.model == "gpt-4"
        assert request.messages == (
            ChatMessage(role="system", content="Be brief."),
            ChatMessage(role="user", content="Hi"),
        )
        assert request.temperature == 0.2
        assert request.max_tokens == 64

    def test_optional_fields_default_to_none(self):
        """temperature and max_tokens are optional."""
        body, errors = validate_request(
            ChatCompletionBody,
            {"model": "gpt-4", "messages": [{"role": "user", "content": "Hi"}]},
        )

        assert errors == []
        request = body.to_internal()
        assert request.temperature is None
        assert request.max_tokens is None

    def test_extra_fields_allowed(self):
        """Unknown OpenAI fields like n or user are ignored, not rejected."""
        _, errors = validate_request(
            ChatCompletionBody,
            {
                "model": "gpt-4",
                "messages": [{"role": "user", "content": "Hi"}],
                "user": "abc",
                "n": 1,
            },
        )

        assert errors == []

    def test_empty_messages_rejected(self):
        """An empty messages list is invalid."""
        body, errors = validate_request(ChatCompletionBody, {"model": "gpt-4", "messages": []})

        assert body is None
        assert any("messages" in e for e in errors)

    def test_missing_messages_rejected(self):
        """messages is required."""
        _, errors = validate_request(ChatCompletionBody, {"model": "gpt-4"})

        assert any("messages" in e for e in errors)

    def test_unknown_role_rejected(self):
        """Only user, assistant and system roles are accepted."""
        _, errors = validate_request(
            ChatCompletionBody,
            {"model": "gpt-4", "messages": [{"role": "tool", "content": "x"}]},
        )

        assert any("role" in e for e in errors)

    def test_empty_content_rejected(self):
        """Message content must not be empty."""
        _, errors = validate_request(
            ChatCompletionBody,
            {"model": "gpt-4", "messages": [{"role": "user", "content": ""}]},
        )

        assert any("content" in e for e in errors)

    def test_non_positive_max_tokens_rejected(self):
        """max_tokens must be positive."""
        _, errors = validate_request(
            ChatCompletionBody,
            {
                "model": "gpt-4",
                "messages": [{"role": "user", "content": "Hi"}],
                "max_tokens": 0,
            },
        )

        assert any("max_tokens" in e for e in errors)

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("temperature", "0.5"),
            ("max_tokens", "5"),
            ("max_tokens", 5.5),
            ("max_tokens", True),
        ],
    )
    def test_numeric_fields_not_coerced(self, field, value):
        """Sampling fields must be JSON numbers, not strings or booleans."""
        body, errors = validate_request(
            ChatCompletionBody,
            {"model": "gpt-4", "messages": [{"role": "user", "content": "Hi"}], field: value},
        )

        assert body is None
        assert any(field in e for e in errors)

    def test_integer_temperature_accepted(self):
        """An integral temperature is a valid number and becomes a float."""
        body, errors = validate_request(
            ChatCompletionBody,
            {"model": "gpt-4", "messages": [{"role": "user", "content": "Hi"}], "temperature": 1},
        )

        assert errors == []
        temperature = body.to_internal().temperature
        assert temperature == 1.0
        assert isinstance(temperature, float)

    def test_empty_model_rejected(self):
        """model must not be empty."""
        _, errors = validate_request(
            ChatCompletionBody,
            {"model": "", "messages": [{"role": "user", "content": "Hi"}]},
        )

        assert any("model" in e for e in errors)

    def test_non_object_body_rejected(self):
        """A JSON array is not a valid body."""
        body, errors = validate_request(ChatCompletionBody, [1, 2, 3])

        assert body is None
        assert errors


class TestCompletionBody:
    """Tests for /v1/completions body validation."""

    def test_valid_body(self):
        """A valid body converts to a CompletionRequest."""
        body, errors = validate_request(
            CompletionBody, {"model": "text-davinci-003", "prompt": "Say hi"}
        )

        assert errors == []
        assert body.to_internal().prompt == "Say hi"

    def test_empty_prompt_rejected(self):
        """prompt must not be empty."""
        _, errors = validate_request(CompletionBody, {"model": "m", "prompt": ""})

        assert any("prompt" in e for e in errors)


class TestEmbeddingBody:
    """Tests for /v1/embeddings body validation."""

    def test_string_input(self):
        """A string input stays a string."""
        body, errors = validate_request(EmbeddingBody, {"model": "m", "input": "hello"})

        assert errors == []
        request = body.to_internal()
        assert request.input == "hello"
        assert request.inputs == ("hello",)

    def test_list_input(self):
        """A list input becomes an ordered tuple."""
        body, errors = validate_request(EmbeddingBody, {"model": "m", "input": ["a", "b"]})

        assert errors == []
        assert body.to_internal().inputs == ("a", "b")

    def test_empty_list_rejected(self):
        """An empty input list is invalid."""
        _, errors = validate_request(EmbeddingBody, {"model": "m", "input": []})

        assert any("input" in e for e in errors)

    def test_non_string_items_rejected(self):
        """List items must be strings."""
        _, errors = validate_request(EmbeddingBody, {"model": "m", "input": [{"a": 1}]})

        assert errors
