"""Standalone BPE training module."""

from collections import Counter, defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
import heapq
import logging

from tqdm import tqdm

from ._bpe import merge_pair
from ._progress import _is_enabled
from ._sanitise import render_bytes
from .types import Encoding, Token, TokenBytes, TokenPair

log = logging.getLogger(__name__)


@dataclass
class BPETrainingResult:
    """Results from one BPE training run."""

    ranks: dict[TokenBytes, Token]
    encoder: list[TokenBytes]
    merges: Encoding
    n_merges_completed: int


class BPETrainer:
    """
    BPE trainer that learns merged tokens from pre-tokenized words.

    The trainer exclusively owns all mutable training state: the growing
    vocabulary, the current symbol sequence of every distinct word and the
    global pair frequencies. Identical words are stored once together with
    their number of occurrences.

    Pair frequencies are updated incrementally: after each merge only the
    words that contained the merged pair are rewritten and recounted. The
    most frequent pair is found through a max-heap of ``(-count, pair)``
    entries; an entry is stale once its count no longer matches the counter.
    Among equally frequent pairs the smallest ``(left, right)`` id pair wins.

    Example:
       >>> trainer = BPETrainer([b"hello", b" world", b" hello"])
       >>> result = trainer.train(n_merges=10, show_progress=False)
       >>> print(f"Learned {result.n_merges_completed} merges")
    """

    def __init__(self, words: Iterable[bytes]) -> None:
        # seed with the 256 single byte tokens
        self.encoder: list[TokenBytes] = [bytes([b]) for b in range(256)]
        self.ranks: dict[TokenBytes, Token] = {b: i for i, b in enumerate(self.encoder)}
        self.merges: Encoding = {}

        word_freqs = Counter(words)
        # current symbol ids of each distinct word and its frequency
        self.words: list[list[Token]] = [list(word) for word in word_freqs]
        self.freqs: list[int] = list(word_freqs.values())
        self._index_pairs()

    def _index_pairs(self) -> None:
        """Count every adjacent pair of the current words and rebuild the heap."""
        self.pair_counts: Counter[TokenPair] = Counter()
        # pair -> indices of words that (may) contain it
        self.pair_words: defaultdict[TokenPair, set[int]] = defaultdict(set)
        for wid, (word, freq) in enumerate(zip(self.words, self.freqs)):
            for pair in zip(word, word[1:]):
                self.pair_counts[pair] += freq
                self.pair_words[pair].add(wid)

        self._heap: list[tuple[int, TokenPair]] = [
            (-count, pair) for pair, count in self.pair_counts.items()
        ]
        heapq.heapify(self._heap)

        log.debug(
            f"indexed {len(self.words)} distinct words "
            f"and {len(self.pair_counts)} distinct pairs"
        )

    def train(
        self, n_merges: int, verbose: bool = False, show_progress: bool = True
    ) -> BPETrainingResult:
        """
        Learn up to ``n_merges`` new tokens.

        Training stops early when no adjacent pair is left in any word.

        :param n_merges: Number of new tokens to add on top of the 256 bytes.
        :param verbose: Log each learned merge when ``True``.
        :param show_progress: Display a progress bar when ``True`` and progress
                              bars are globally enabled.
        :return: Training results containing ranks, encoder table and merges.
        """
        target = len(self.encoder) + n_merges
        completed = 0

        with tqdm(
            total=n_merges,
            desc="training",
            unit="merge",
            disable=not (show_progress and _is_enabled()),
        ) as bar:
            while len(self.encoder) < target:
                pair = self._pop_most_frequent()
                if pair is None:
                    break

                count = self.pair_counts[pair]
                new_bytes = self.encoder[pair[0]] + self.encoder[pair[1]]
                new_tok = self.ranks.get(new_bytes)
                if new_tok is None:
                    new_tok = len(self.encoder)
                    self.encoder.append(new_bytes)
                    self.ranks[new_bytes] = new_tok
                    completed += 1
                    bar.update(1)
                else:
                    # different pair, same bytes: reuse the earlier token
                    log.debug(f"pair {pair} reuses existing token {new_tok}")
                self.merges[pair] = new_tok

                self._apply_merge(pair, new_tok)

                if verbose:
                    log.info(
                        f"merge {completed}/{n_merges}: {pair} -> {new_tok} "
                        f"[{render_bytes(new_bytes)}] (count {count})"
                    )

        return BPETrainingResult(
            ranks=self.ranks,
            encoder=self.encoder,
            merges=self.merges,
            n_merges_completed=completed,
        )

    def _pop_most_frequent(self) -> TokenPair | None:
        """Pop the most frequent pair off the heap, skipping stale entries."""
        while self._heap:
            neg_count, pair = heapq.heappop(self._heap)
            if self.pair_counts.get(pair, 0) == -neg_count:
                return pair
        return None

    def _apply_merge(self, pair: TokenPair, new_tok: Token) -> None:
        """Rewrite every word containing ``pair`` and update pair counts."""
        touched: set[TokenPair] = set()

        for wid in sorted(self.pair_words.pop(pair, ())):
            word = self.words[wid]
            merged = merge_pair(word, pair, new_tok)
            # stale index entry: pair vanished from this word earlier
            if len(merged) == len(word):
                continue

            freq = self.freqs[wid]
            for old in zip(word, word[1:]):
                self.pair_counts[old] -= freq
                touched.add(old)
            for new in zip(merged, merged[1:]):
                self.pair_counts[new] += freq
                self.pair_words[new].add(wid)
                touched.add(new)
            self.words[wid] = merged

        for p in touched:
            count = self.pair_counts[p]
            if count <= 0:
                del self.pair_counts[p]
            else:
                heapq.heappush(self._heap, (-count, p))


def _train_bpe(
    words: Iterable[bytes],
    n_merges: int,
    verbose: bool = False,
    show_progress: bool = True,
) -> BPETrainingResult:
    """
    Train a BPE vocabulary from pre-tokenized words.

    :param words: UTF-8 encoded words produced by the pre-tokenizer.
    :param n_merges: Maximum number of new tokens to learn.
    :param verbose: Log each learned merge when ``True``.
    :param show_progress: Display a progress bar during training when ``True``.
    :returns: Training output containing ranks, encoder table, merge rules and
              completed merge count.
    """
    trainer = BPETrainer(words)
    return trainer.train(n_merges, verbose=verbose, show_progress=show_progress)


__all__ = ["BPETrainer", "BPETrainingResult", "_train_bpe"]
