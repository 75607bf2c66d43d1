"""Factory functions for creating tokenizers."""

from typing import Literal, overload

from ._models.tokenizer import Tokenizer
from .pattern import TokenPattern

Pattern = Literal[
    "classic",
    "gpt2",
    "gpt4",
    "gpt4o",
    "llama3",
    "qwen2",
]


def list_patterns() -> list[str]:
    """Return names of all available built-in pre-tokenizer patterns."""
    return [pat.name.lower() for pat in TokenPattern]


def get_pattern(name: Pattern) -> str:
    """Return the regex of a built-in pattern (case-insensitive)."""
    return TokenPattern.get(name)


@overload
def get_tokenizer(vocab_size: int, pattern: Pattern = ...) -> Tokenizer: ...


@overload
def get_tokenizer(vocab_size: int, *, custom_pattern: str) -> Tokenizer: ...


def get_tokenizer(
    vocab_size: int,
    pattern: Pattern = "classic",
    *,
    custom_pattern: str | None = None,
) -> Tokenizer:
    """
    Create a tokenizer with a built-in or custom pre-tokenizer pattern.

    :param vocab_size: Target vocabulary size, at least 256.
    :param pattern: Built-in pattern name (e.g., "classic", "gpt2", "llama3").
                    Ignored if custom_pattern is provided.
    :param custom_pattern: Custom regex pattern string. Overrides pattern parameter.
    :return: Configured, untrained tokenizer instance.
    :raises ConfigurationError: If vocab_size is below 256.
    :raises PatternError: If the pattern name is unknown or custom_pattern is
                          invalid regex.

    .. code-block:: python

        # Use built-in pattern
        tokenizer = get_tokenizer(1000, "gpt2")

        # Use custom pattern
        tokenizer = get_tokenizer(1000, custom_pattern=r"\\p{L}+|\\p{N}+|\\s+")
    """
    # tokenizer initializer handles invalid custom patterns
    if custom_pattern is not None:
        return Tokenizer(vocab_size, custom_pattern)

    # get() handles invalid pattern names
    return Tokenizer(vocab_size, TokenPattern.get(pattern))
