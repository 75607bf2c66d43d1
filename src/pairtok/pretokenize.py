"""
Pre-tokenization: split raw text into independent words.

Words are the unit of training. A pair of symbols is only ever counted
(and merged) when both symbols belong to the same word.
"""

import logging

import regex as re

from .errors import PatternError

log = logging.getLogger(__name__)


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """
    Compile and validate a pre-tokenizer pattern.

    :param pattern: Regex pattern string to compile.
    :return: Compiled regex pattern.
    :raises PatternError: If pattern is invalid.
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError("invalid regex pattern", pattern=pattern, regex_err=e) from e


def split_words(text: str | bytes, compiled_pat: re.Pattern[str]) -> list[bytes]:
    """
    Split text into UTF-8 encoded words using a compiled pattern.

    Byte input is decoded as UTF-8 first; invalid sequences are replaced by
    U+FFFD so they still take part in training. Text not covered by any match
    of the pattern is dropped.

    :param text: Raw corpus text or bytes.
    :param compiled_pat: Pattern returned by :func:`compile_pattern`.
    :return: Words in corpus order.
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")

    words = [
        m.group(0).encode("utf-8", errors="replace")
        for m in compiled_pat.finditer(text)
    ]
    log.debug(f"split {len(text)} chars into {len(words)} words")
    return words


__all__ = ["compile_pattern", "split_words"]
