"""Unit tests for built-in patterns and the pre-tokenizer."""

import pytest

import pairtok as ptok
from pairtok.errors import PatternError
from pairtok.pattern import DEFAULT_PATTERN, TokenPattern
from pairtok.pretokenize import compile_pattern, split_words


@pytest.fixture(scope="module")
def classic():
    return compile_pattern(DEFAULT_PATTERN)


# Pattern registry
# ---------------------------------------------------------------------------


def test_list_patterns():
    """All built-in patterns are listed by lower-case name."""
    names = ptok.list_patterns()
    assert "classic" in names
    assert "gpt2" in names
    assert len(names) == len(TokenPattern)


@pytest.mark.parametrize("name", ptok.list_patterns())
def test_builtin_patterns_compile(name):
    """Every built-in pattern is a valid regex."""
    compile_pattern(ptok.get_pattern(name))


def test_get_is_case_insensitive():
    """Names resolve regardless of case."""
    assert TokenPattern.get("GPT4O") == TokenPattern.GPT4O.value
    assert TokenPattern.get("Classic") == DEFAULT_PATTERN


def test_unknown_pattern_name():
    """Unknown names raise PatternError."""
    with pytest.raises(PatternError):
        TokenPattern.get("gpt9")


def test_invalid_regex():
    """Invalid regex raises PatternError with the regex error attached."""
    with pytest.raises(PatternError) as exc_info:
        compile_pattern(r"[a-")
    assert exc_info.value.regex_err is not None


# Word splitting
# ---------------------------------------------------------------------------


def test_split_letters_and_spaces(classic):
    """Letter runs keep their leading space."""
    assert split_words(b"Hello world", classic) == [b"Hello", b" world"]


def test_split_contractions(classic):
    """Contractions are separate words."""
    assert split_words("I'll go", classic) == [b"I", b"'ll", b" go"]


def test_split_digits_and_punctuation(classic):
    """Digits and punctuation form their own runs."""
    assert split_words("abc 123!!", classic) == [b"abc", b" 123", b"!!"]


def test_split_whitespace_runs(classic):
    """Whitespace runs become one word."""
    assert split_words("a  b", classic) == [b"a", b"  ", b"b"]


def test_split_unicode_letters(classic):
    """Non-ASCII letters are letters."""
    assert split_words("naïve café", classic) == [
        "naïve".encode(),
        " café".encode(),
    ]


def test_split_invalid_utf8(classic):
    """Invalid UTF-8 is replaced before splitting."""
    assert split_words(b"\xffab", classic) == ["�".encode(), b"ab"]
