"""Unit tests for Tokenizer train/encode/split/decode and edge cases."""

import pytest

import pairtok as ptok
from pairtok.errors import ConfigurationError, PatternError, VocabularyError


CORPUS = b"hello world hello world"


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tokenizer():
    """Return a Tokenizer trained until the corpus runs out of pairs."""
    tok = ptok.Tokenizer(vocab_size=1000)
    tok.train(CORPUS, show_progress=False)
    return tok


# Construction
# ---------------------------------------------------------------------------


def test_vocab_size_below_256_raises():
    """A vocab size below the byte alphabet is rejected."""
    with pytest.raises(ConfigurationError) as exc_info:
        ptok.Tokenizer(vocab_size=255)
    assert exc_info.value.vocab_size == 255


def test_invalid_pattern_raises():
    """A pattern that does not compile is rejected at construction."""
    with pytest.raises(PatternError) as exc_info:
        ptok.Tokenizer(vocab_size=300, pattern=r"(unclosed")
    assert exc_info.value.pattern == r"(unclosed"
    # pattern problems are configuration problems
    assert isinstance(exc_info.value, ConfigurationError)


def test_untrained_tokenizer_uses_bytes():
    """Before training every byte is its own token."""
    tok = ptok.Tokenizer(vocab_size=300)
    assert len(tok.vocab) == 256
    assert tok.encode(b"hi!") == [104, 105, 33]


# Encode-decode round-trip
# ---------------------------------------------------------------------------


def test_encode_decode_roundtrip(tokenizer):
    """Encode then decode returns the original bytes."""
    data = b"Hello, world! hello again."
    assert tokenizer.decode(tokenizer.encode(data)) == data


def test_encode_decode_roundtrip_unicode(tokenizer):
    """Round-trip preserves multi-byte characters."""
    text = "café naïve 日本語 🎉"
    tokens = tokenizer.encode(text)
    assert tokenizer.decode_text(tokens) == text
    assert tokenizer.decode(tokens) == text.encode("utf-8")


def test_encode_decode_roundtrip_arbitrary_bytes(tokenizer):
    """Bytes that are not valid UTF-8 still round-trip."""
    data = bytes(range(256)) + b"\xff\xfe hello"
    assert tokenizer.decode(tokenizer.encode(data)) == data


# Edge cases
# ---------------------------------------------------------------------------


def test_empty_input(tokenizer):
    """Empty input encodes to empty list and decodes back."""
    assert tokenizer.encode(b"") == []
    assert tokenizer.split(b"") == []
    assert tokenizer.decode([]) == b""


def test_single_byte(tokenizer):
    """Single byte round-trips."""
    assert tokenizer.encode(b"x") == [ord("x")]
    assert tokenizer.decode([ord("x")]) == b"x"


def test_decode_unknown_token_raises(tokenizer):
    """Decoding an id outside the vocabulary raises VocabularyError."""
    with pytest.raises(VocabularyError) as exc_info:
        tokenizer.decode([104, len(tokenizer.vocab)])
    assert exc_info.value.invalid_tok == len(tokenizer.vocab)


def test_decode_negative_token_raises(tokenizer):
    """Negative ids are not looked up from the end of the table."""
    with pytest.raises(VocabularyError):
        tokenizer.decode([-1])


def test_decode_non_int_token_raises(tokenizer):
    """Ids that are not integers are reported as vocabulary errors."""
    with pytest.raises(VocabularyError) as exc_info:
        tokenizer.decode([104, "a"])
    assert exc_info.value.invalid_tok == "a"
    with pytest.raises(VocabularyError):
        tokenizer.decode([1.0])


@pytest.mark.parametrize("data", [3, None, [104, 105]])
def test_encode_rejects_non_bytes_input(tokenizer, data):
    """Inputs that are neither bytes-like nor text are rejected."""
    with pytest.raises(TypeError):
        tokenizer.encode(data)
    with pytest.raises(TypeError):
        tokenizer.split(data)


def test_encode_accepts_bytes_like_input(tokenizer):
    """bytearray and memoryview encode like the equivalent bytes."""
    expected = tokenizer.encode(CORPUS)
    assert tokenizer.encode(bytearray(CORPUS)) == expected
    assert tokenizer.encode(memoryview(CORPUS)) == expected


def test_encode_is_deterministic(tokenizer):
    """Encoding the same bytes twice gives the same ids."""
    data = b"hello hello world, worldly hellos"
    assert tokenizer.encode(data) == tokenizer.encode(data)


# Vocabulary growth
# ---------------------------------------------------------------------------


def test_base_case_vocab_256():
    """A 256 token vocabulary encodes one id per byte."""
    tok = ptok.Tokenizer(vocab_size=256)
    tok.train(CORPUS, show_progress=False)
    assert len(tok.vocab) == 256
    assert tok.encode(CORPUS) == list(CORPUS)


def test_vocab_reaches_target():
    """Training stops exactly at the requested size when pairs remain."""
    tok = ptok.Tokenizer(vocab_size=260)
    tok.train(CORPUS, show_progress=False)
    assert len(tok.vocab) == 260


def test_vocab_stops_early_when_pairs_run_out(tokenizer, caplog):
    """An exhausted corpus yields a smaller vocabulary and a warning."""
    assert 256 < len(tokenizer.vocab) < 1000

    tok = ptok.Tokenizer(vocab_size=300)
    with caplog.at_level("WARNING", logger="pairtok"):
        tok.train(b"a", show_progress=False)
    assert len(tok.vocab) == 256
    assert "stopping early" in caplog.text


def test_retrain_replaces_vocabulary():
    """Training again starts from the byte tokens instead of stacking."""
    tok = ptok.Tokenizer(vocab_size=257)
    tok.train(b"aaaa", show_progress=False)
    first = tok.vocab
    tok.train(b"bbbb", show_progress=False)
    assert len(tok.vocab) == 257
    assert tok.vocab.encoder[256] == b"bb"
    # the earlier snapshot is untouched
    assert first.encoder[256] == b"aa"


def test_vocabulary_is_read_only(tokenizer):
    """The trained vocabulary cannot be modified."""
    with pytest.raises(TypeError):
        tokenizer.vocab.ranks[b"new"] = 5000
    assert isinstance(tokenizer.vocab.encoder, tuple)


def test_vocab_size_is_read_only():
    """The configured vocab size cannot be changed after construction."""
    tok = ptok.Tokenizer(vocab_size=300)
    with pytest.raises(AttributeError):
        tok.vocab_size = 100
    assert tok.vocab_size == 300
    tok.train(b"aaaa", show_progress=False)
    assert 256 < len(tok.vocab) <= tok.vocab_size


# Worked examples
# ---------------------------------------------------------------------------


def test_aaaa_single_merge():
    """Corpus "aaaa" with one merge learns "aa" and encodes to two tokens."""
    tok = ptok.Tokenizer(vocab_size=257)
    tok.train(b"aaaa", show_progress=False)

    assert tok.vocab.encoder[256] == b"aa"
    tokens = tok.encode(b"aaaa")
    assert tokens == [256, 256]
    assert tok.decode(tokens) == b"aaaa"


def test_repeated_words_become_single_tokens(tokenizer):
    """Frequent words are merged before less frequent ones."""
    ranks = tokenizer.vocab.ranks
    assert b"hello" in ranks
    assert b" world" in ranks
    # " world" occurs twice, " hello" once
    assert ranks[b" world"] < ranks[b" hello"]

    assert tokenizer.split(CORPUS) == [b"hello", b" world", b" hello", b" world"]
    assert len(tokenizer.encode(CORPUS)) < len(CORPUS)


def test_split_hello_world():
    """Split of the training text yields its words."""
    tok = ptok.Tokenizer(vocab_size=1000)
    tok.train(b"Hello world", show_progress=False)

    pieces = tok.split(b"Hello world")
    assert pieces == [b"Hello", b" world"]
    assert b"".join(pieces) == b"Hello world"
    assert tok.decode(tok.encode(b"Hello world")) == b"Hello world"


# Batch encode/decode
# ---------------------------------------------------------------------------


def test_encode_batch_decode_batch(tokenizer):
    """Batch encode and decode match single-input results."""
    inputs = [b"First.", "Second hello world.", b"", b"Third world"]
    encoded = tokenizer.encode_batch(inputs, num_workers=2)
    decoded = tokenizer.decode_batch(encoded)

    for data, tokens, out in zip(inputs, encoded, decoded):
        raw = data.encode("utf-8") if isinstance(data, str) else data
        assert tokens == tokenizer.encode(data)
        assert out == raw


def test_encode_batch_empty(tokenizer):
    """An empty batch encodes to an empty list."""
    assert tokenizer.encode_batch([]) == []


# Factory
# ---------------------------------------------------------------------------


def test_get_tokenizer_builtin_pattern():
    """Factory resolves built-in pattern names."""
    tok = ptok.get_tokenizer(300, "gpt2")
    assert tok.pat == ptok.get_pattern("gpt2")
    assert tok.vocab_size == 300


def test_get_tokenizer_custom_pattern():
    """Factory accepts a custom pattern."""
    tok = ptok.get_tokenizer(300, custom_pattern=r"\p{L}+|\s+")
    tok.train("ab ab ab", show_progress=False)
    # the space is its own word, so no token contains it
    assert all(b" " not in b or b == b" " for b in tok.vocab.encoder)


def test_get_tokenizer_unknown_pattern_raises():
    """Unknown pattern names raise PatternError."""
    with pytest.raises(PatternError):
        ptok.get_tokenizer(300, "not-a-pattern")
