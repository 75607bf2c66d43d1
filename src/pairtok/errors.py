"""Custom exception hierarchy for pairtok tokenization errors."""

import regex as re

from .types import Token


class PairTokError(Exception):
    """Base exception for all pairtok errors."""


class ConfigurationError(PairTokError):
    """Raised when a tokenizer is constructed with invalid options."""

    def __init__(self, message: str, *, vocab_size: int | None = None) -> None:
        """Initialize with an optional vocab_size that gets appended to the message."""
        if vocab_size is not None:
            message = f"{message} (vocab size: {vocab_size})"
        super().__init__(message)
        self.vocab_size = vocab_size


class PatternError(ConfigurationError):
    """Raised when compiling and/or validating pre-tokenizer patterns."""

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        regex_err: re.error | None = None,
    ) -> None:
        """
        Initialize PatternError with pattern details.

        :param message: Error message.
        :param pattern: The regex pattern that failed.
        :param regex_err: The underlying error from the regex library.
        """
        extra = ""
        if pattern is not None:
            extra += f" (pattern: {pattern!r})"
        if regex_err is not None:
            extra += f" (reason: {regex_err})"
        super().__init__(message + extra)
        self.pattern = pattern
        self.regex_err = regex_err


class VocabularyError(PairTokError):
    """Raised when vocabulary lookups or construction fail."""

    def __init__(self, message: str, *, invalid_tok: Token | None = None) -> None:
        # decoding: token not in vocab
        if invalid_tok is not None:
            message = f"{message} (invalid token: {invalid_tok})"
        super().__init__(message)
        self.invalid_tok = invalid_tok


__all__ = [
    "PairTokError",
    "ConfigurationError",
    "PatternError",
    "VocabularyError",
]
