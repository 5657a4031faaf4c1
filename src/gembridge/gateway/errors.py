"""Error variants, result type and the error envelope.

Every orchestrator operation returns ``Ok(payload)`` or ``Err(error)`` where
``error`` is one of three variants:

    ConfigurationError  backend credential missing, detected before any call
    BackendError        backend unreachable, failed status or malformed payload
    InternalError       anything else

``normalize_error`` maps any variant to the OpenAI-style envelope
``{"error": {"message", "type", "code"}}``. The envelope is the whole
response body and ``code`` doubles as the HTTP status.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")

MISSING_API_KEY_MESSAGE = "Gemini API key not configured"
UNKNOWN_BACKEND_MESSAGE = "Unknown error occurred"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"

BACKEND_ERROR_TYPE = "gemini_error"
INTERNAL_ERROR_TYPE = "internal_error"
INVALID_REQUEST_ERROR_TYPE = "invalid_request_error"

INTERNAL_STATUS = 500


@dataclass(frozen=True)
class ConfigurationError:
    """Gateway is missing configuration it needs (e.g. the backend API key)."""

    message: str = MISSING_API_KEY_MESSAGE


@dataclass(frozen=True)
class BackendError:
    """Backend call failed.

    Attributes:
        status_code: HTTP status returned by the backend, None if it never answered
        backend_message: Message from the backend's structured error body
        transport_message: Message from the HTTP client / transport layer
    """

    status_code: int | None = None
    backend_message: str | None = None
    transport_message: str | None = None


@dataclass(frozen=True)
class InternalError:
    """Unexpected failure inside the gateway."""

    message: str | None = None


GatewayError = ConfigurationError | BackendError | InternalError


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Success variant of Result."""

    value: T

    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failure variant of Result."""

    error: GatewayError

    def is_ok(self) -> bool:
        return False


Result = Ok[T] | Err


def envelope(message: str, error_type: str, code: int) -> dict[str, Any]:
    """Build the error envelope."""
    return {
        "error": {
            "message": message,
            "type": error_type,
            "code": code,
        }
    }


def normalize_error(error: GatewayError) -> dict[str, Any]:
    """Map any gateway error to the error envelope.

    Total over the three variants; never raises.
    """
    if isinstance(error, ConfigurationError):
        return envelope(error.message, INTERNAL_ERROR_TYPE, INTERNAL_STATUS)

    if isinstance(error, BackendError):
        message = error.backend_message or error.transport_message or UNKNOWN_BACKEND_MESSAGE
        return envelope(
            f"Gemini API error: {message}",
            BACKEND_ERROR_TYPE,
            error.status_code or INTERNAL_STATUS,
        )

    return envelope(
        error.message or UNEXPECTED_ERROR_MESSAGE,
        INTERNAL_ERROR_TYPE,
        INTERNAL_STATUS,
    )


def status_of(payload: dict[str, Any]) -> int:
    """HTTP status for an error envelope."""
    return int(payload["error"]["code"])
