"""
Immutable vocabulary snapshot used for encoding, splitting and decoding.
"""

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
import logging
import os

from .._bpe import pair_encode, pair_split
from ..errors import VocabularyError
from ..types import EncoderTable, Ranks, Token, TokenBytes

log = logging.getLogger(__name__)


class Vocabulary:
    """
    A trained, read-only BPE vocabulary.

    Holds the encoder table (token id -> bytes) and its inverse, the ranks
    (bytes -> token id). Ids ``0..255`` are the single bytes; every later id
    is a merged token and its id is also its merge priority.

    Instances never change after construction, so one vocabulary can be
    shared by any number of threads calling :meth:`encode`, :meth:`split`
    and :meth:`decode` concurrently.
    """

    __slots__ = ("_encoder", "_ranks")

    def __init__(self, encoder: Sequence[TokenBytes]) -> None:
        """
        Build a vocabulary from an encoder table.

        :param encoder: Token bytes indexed by token id.
        :raises VocabularyError: If the first 256 entries are not the single
                                 bytes in order, or an entry is empty or
                                 duplicated.
        """
        table: EncoderTable = tuple(bytes(b) for b in encoder)
        if len(table) < 256 or any(table[i] != bytes([i]) for i in range(256)):
            raise VocabularyError("first 256 tokens must be the single bytes")

        ranks: dict[TokenBytes, Token] = {}
        for tok, b in enumerate(table):
            if not b:
                raise VocabularyError("empty token bytes", invalid_tok=tok)
            if b in ranks:
                raise VocabularyError("duplicate token bytes", invalid_tok=tok)
            ranks[b] = tok

        self._encoder = table
        self._ranks: Ranks = MappingProxyType(ranks)
        log.debug(f"built vocabulary with {len(table)} tokens")

    @classmethod
    def base(cls) -> "Vocabulary":
        """Return the vocabulary of the 256 single bytes (no merges)."""
        return cls([bytes([b]) for b in range(256)])

    @property
    def encoder(self) -> EncoderTable:
        """Token bytes indexed by token id."""
        return self._encoder

    @property
    def ranks(self) -> Ranks:
        """Read-only mapping from token bytes to token id (= merge rank)."""
        return self._ranks

    def __len__(self) -> int:
        return len(self._encoder)

    def __contains__(self, token_bytes: object) -> bool:
        return token_bytes in self._ranks

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={len(self)})"

    def encode(self, data: bytes | str) -> list[Token]:
        """
        Encode bytes into token ids.

        The merge engine runs over the whole input; ``str`` input is encoded
        as UTF-8 first.

        :param data: Input to encode.
        :returns: Token ids, empty for empty input.
        :raises TypeError: If ``data`` is neither bytes-like nor ``str``.
        """
        return pair_encode(_as_bytes(data), self._ranks)

    def split(self, data: bytes | str) -> list[bytes]:
        """Return the byte slices :meth:`encode` would assign one token each."""
        return pair_split(_as_bytes(data), self._ranks)

    def decode(self, tokens: Iterable[Token]) -> bytes:
        """
        Decode token ids back into bytes.

        :param tokens: Token sequence to decode.
        :returns: Concatenated token bytes.
        :raises VocabularyError: If any token id is not an int in the vocabulary.
        """
        n = len(self._encoder)
        parts: list[bytes] = []
        for tok in tokens:
            if not isinstance(tok, int) or not (0 <= tok < n):
                raise VocabularyError("token not found in vocabulary", invalid_tok=tok)
            parts.append(self._encoder[tok])
        return b"".join(parts)

    def decode_text(self, tokens: Iterable[Token], errors: str = "replace") -> str:
        """
        Decode token ids into UTF-8 text.

        :param errors: How to handle invalid UTF-8, as for ``bytes.decode``.
        """
        return self.decode(tokens).decode("utf-8", errors=errors)

    def encode_batch(
        self, inputs: Sequence[bytes | str], num_workers: int | None = None
    ) -> list[list[Token]]:
        """
        Encode many inputs, in parallel across inputs.

        :param inputs: Inputs to encode.
        :param num_workers: Thread count; defaults to the CPU count. ``0`` is
                            treated as one worker.
        :returns: Token sequences in input order.
        """
        if num_workers is None:
            workers = os.cpu_count() or 1
        else:
            workers = max(1, num_workers)

        if workers == 1 or len(inputs) <= 1:
            return [self.encode(data) for data in inputs]

        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(self.encode, inputs))

    def decode_batch(self, token_batch: Iterable[Iterable[Token]]) -> list[bytes]:
        """Decode several token sequences."""
        return [self.decode(tokens) for tokens in token_batch]


def _as_bytes(data: bytes | str) -> bytes:
    """
    Convert encode input to bytes.

    :raises TypeError: If ``data`` is neither text nor bytes-like.
    """
    if isinstance(data, str):
        return data.encode("utf-8", errors="replace")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected bytes-like or str input, got {type(data).__name__}")


__all__ = ["Vocabulary"]
