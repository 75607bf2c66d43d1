"""
Regex pre-tokenized byte-level BPE tokenizer.
"""

import logging
from collections.abc import Iterable, Sequence

import regex as re

from .._decorators import measure_time
from .._trainer import _train_bpe
from ..errors import ConfigurationError
from ..pattern import DEFAULT_PATTERN
from ..pretokenize import compile_pattern, split_words
from ..types import Token
from .vocabulary import Vocabulary

log = logging.getLogger(__name__)

MIN_VOCAB_SIZE = 256


class Tokenizer:
    """
    Byte-level BPE tokenizer.

    Training splits the corpus into words with the configured pattern and
    learns merged tokens inside those words. Encoding runs the pair-rank
    merge engine over the input against the trained :class:`Vocabulary`.

    Until :meth:`train` is called the tokenizer uses the 256 single-byte
    tokens, so every input byte encodes to its own token.

    .. code-block:: python

        tok = Tokenizer(vocab_size=1000)
        tok.train(b"hello world hello world")
        ids = tok.encode(b"hello world")
        assert tok.decode(ids) == b"hello world"
    """

    def __init__(self, vocab_size: int, pattern: str | None = None) -> None:
        """
        Configure a tokenizer.

        :param vocab_size: Target vocabulary size including the 256 byte tokens.
        :param pattern: Pre-tokenizer regex; defaults to ``TokenPattern.CLASSIC``.
        :raises ConfigurationError: If ``vocab_size`` is less than 256.
        :raises PatternError: If ``pattern`` is not a valid regex.
        """
        if vocab_size < MIN_VOCAB_SIZE:
            raise ConfigurationError(
                f"vocab size must be at least {MIN_VOCAB_SIZE}", vocab_size=vocab_size
            )
        self._vocab_size = vocab_size
        # regex pattern for splitting train data
        self.pat: str = DEFAULT_PATTERN if pattern is None else pattern
        self.compiled_pat: re.Pattern[str] = compile_pattern(self.pat)
        self.vocab: Vocabulary = Vocabulary.base()

    @property
    def vocab_size(self) -> int:
        """Configured target vocabulary size (read-only)."""
        return self._vocab_size

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(vocab_size={self.vocab_size}, "
            f"trained_size={len(self.vocab)})"
        )

    @measure_time
    def train(
        self,
        corpus: bytes | str | list[str],
        verbose: bool = False,
        show_progress: bool = True,
    ) -> Vocabulary:
        """
        Learn a vocabulary from ``corpus``.

        Each call starts again from the 256 byte tokens and replaces the
        current vocabulary once training has finished. The tokenizer must not
        be used by other threads while training.

        :param corpus: Training data; bytes are decoded as UTF-8 (invalid
                       sequences replaced), lists of strings are concatenated.
        :param verbose: Log each learned merge when ``True``.
        :param show_progress: Display a progress bar when ``True``.
        :returns: The newly trained vocabulary.
        """
        # handle list input
        if isinstance(corpus, list):
            corpus = "".join(corpus)

        words = split_words(corpus, self.compiled_pat)
        n_merges = self.vocab_size - MIN_VOCAB_SIZE

        result = _train_bpe(
            words, n_merges, verbose=verbose, show_progress=show_progress
        )

        if result.n_merges_completed < n_merges:
            log.warning(
                f"no more byte pairs to merge after {result.n_merges_completed} merges "
                f"(requested {n_merges}) stopping early"
            )

        self.vocab = Vocabulary(result.encoder)
        log.info(
            f"trained vocabulary with {len(self.vocab)} tokens "
            f"from {len(words)} words"
        )
        return self.vocab

    def encode(self, data: bytes | str) -> list[Token]:
        """Encode bytes (or UTF-8 text) into token ids."""
        return self.vocab.encode(data)

    def split(self, data: bytes | str) -> list[bytes]:
        """Split bytes into the slices that encode to one token each."""
        return self.vocab.split(data)

    def decode(self, tokens: Iterable[Token]) -> bytes:
        """
        Decode token ids back into bytes.

        :raises VocabularyError: If any token id is not in the vocabulary.
        """
        return self.vocab.decode(tokens)

    def decode_text(self, tokens: Iterable[Token], errors: str = "replace") -> str:
        """Decode token ids into UTF-8 text."""
        return self.vocab.decode_text(tokens, errors=errors)

    def encode_batch(
        self, inputs: Sequence[bytes | str], num_workers: int | None = None
    ) -> list[list[Token]]:
        """Encode many inputs in parallel across inputs."""
        if not inputs:
            return []
        return self.vocab.encode_batch(inputs, num_workers=num_workers)

    def decode_batch(self, token_batch: Iterable[Iterable[Token]]) -> list[bytes]:
        """Decode several token sequences."""
        return self.vocab.decode_batch(token_batch)


__all__ = ["Tokenizer", "MIN_VOCAB_SIZE"]
