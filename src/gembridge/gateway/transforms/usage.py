"""Local token usage estimation.

The backend never reports token counts back to us, so usage is approximated
as one token per four characters, rounded up.
"""

import math
from collections.abc import Iterable

CHARS_PER_TOKEN = 4


def estimate_tokens(char_count: int) -> int:
    """Estimate tokens for a character count."""
    return math.ceil(char_count / CHARS_PER_TOKEN)


def count_chars(texts: Iterable[str]) -> int:
    """Total character count of several texts."""
    return sum(len(text) for text in texts)


def completion_usage(prompt_chars: int, completion_text: str) -> dict[str, int]:
    """Build the OpenAI usage block for a chat or text completion.

    total_tokens is estimated from the combined character count, so it can
    differ by one from prompt_tokens + completion_tokens.
    """
    completion_chars = len(completion_text)
    return {
        "prompt_tokens": estimate_tokens(prompt_chars),
        "completion_tokens": estimate_tokens(completion_chars),
        "total_tokens": estimate_tokens(prompt_chars + completion_chars),
    }


def embedding_usage(inputs: Iterable[str]) -> dict[str, int]:
    """Build the OpenAI usage block for an embedding request."""
    tokens = estimate_tokens(count_chars(inputs))
    return {"prompt_tokens": tokens, "total_tokens": tokens}
