"""
Core Byte Pair Encoding (BPE) operations.

The merge engine contracts a byte string into the coarsest segmentation
allowed by a vocabulary. Every vocabulary id doubles as a merge rank: when
several adjacent pairs are mergeable, the one whose concatenation has the
lowest id (i.e. was learned first) is merged, and ties go to the leftmost
position.
"""

import heapq

from typing_extensions import deprecated

from .types import Ranks, Token, TokenPair


def merge_boundaries(data: bytes, ranks: Ranks) -> list[int]:
    """
    Run the pair-rank merge engine over ``data``.

    Boundaries are identified by their byte offset. Each live boundary knows
    the next live boundary (linked list) and the rank of the pair that starts
    at it. Candidate merges sit in a min-heap keyed by ``(rank, offset)``;
    entries made stale by earlier merges are skipped when popped. This gives
    the same result as rescanning all boundaries for the minimum after every
    merge, see :func:`slow_merge_boundaries`.

    :param data: Input bytes.
    :param ranks: Vocabulary mapping token bytes to ids. Must contain all
                  single bytes that occur in ``data``.
    :return: Strictly increasing offsets starting at 0 and ending at
             ``len(data)``. Consecutive offsets delimit one token each.
    """
    n = len(data)
    if n < 2:
        return list(range(n + 1))

    # nxt[i] / prv[i]: neighbouring live boundaries of boundary i
    nxt = list(range(1, n + 2))
    prv = list(range(-1, n))
    # rank of the pair (symbol at i, symbol after it), None when not mergeable
    rank_at: list[Token | None] = [ranks.get(data[i : i + 2]) for i in range(n - 1)]
    rank_at.extend((None, None))
    alive = [True] * (n + 1)

    heap = [(rank, i) for i, rank in enumerate(rank_at) if rank is not None]
    heapq.heapify(heap)

    while heap:
        rank, i = heapq.heappop(heap)
        if not alive[i] or rank_at[i] != rank:
            continue

        # drop the boundary between the two merged symbols
        j = nxt[i]
        alive[j] = False
        k = nxt[j]
        nxt[i] = k
        prv[k] = i

        # merged symbol + its successor
        new_rank = ranks.get(data[i : nxt[k]]) if k < n else None
        rank_at[i] = new_rank
        if new_rank is not None:
            heapq.heappush(heap, (new_rank, i))

        # predecessor + merged symbol
        p = prv[i]
        if p >= 0:
            new_rank = ranks.get(data[p:k])
            if new_rank != rank_at[p]:
                rank_at[p] = new_rank
                if new_rank is not None:
                    heapq.heappush(heap, (new_rank, p))

    bounds = [0]
    while bounds[-1] < n:
        bounds.append(nxt[bounds[-1]])
    return bounds


@deprecated(
    "Reference implementation for documentation only. Use `merge_boundaries()` for production."
)
def slow_merge_boundaries(data: bytes, ranks: Ranks) -> list[int]:
    """
    Quadratic reference version of :func:`merge_boundaries`.

    Keeps a list of ``[offset, rank]`` parts, ending with a part for the last
    symbol and an end-of-input sentinel, and rescans the whole list for the
    minimum rank after every merge.
    """
    n = len(data)
    if n < 2:
        return list(range(n + 1))

    parts: list[list] = [[i, ranks.get(data[i : i + 2])] for i in range(n - 1)]
    parts.append([n - 1, None])
    parts.append([n, None])

    def rank_of(idx: int) -> Token | None:
        if idx + 2 >= len(parts):
            return None
        return ranks.get(data[parts[idx][0] : parts[idx + 2][0]])

    while True:
        best = None
        for idx, (_, rank) in enumerate(parts):
            if rank is not None and (best is None or rank < parts[best][1]):
                best = idx
        if best is None:
            break

        del parts[best + 1]
        parts[best][1] = rank_of(best)
        if best > 0:
            parts[best - 1][1] = rank_of(best - 1)

    return [offset for offset, _ in parts]


def pair_encode(data: bytes, ranks: Ranks) -> list[Token]:
    """Encode ``data`` into the ids of its merged spans."""
    bounds = merge_boundaries(data, ranks)
    return [ranks[data[start:end]] for start, end in zip(bounds, bounds[1:])]


def pair_split(data: bytes, ranks: Ranks) -> list[bytes]:
    """Split ``data`` into the byte slices of its merged spans."""
    bounds = merge_boundaries(data, ranks)
    return [data[start:end] for start, end in zip(bounds, bounds[1:])]


def merge_pair(tokens: list[Token], target: TokenPair, new_tok: Token) -> list[Token]:
    """
    Merge all occurrences of a target token pair into a single new token.

    Occurrences are replaced greedily from left to right and never overlap,
    so ``[a, a, a]`` merged on ``(a, a)`` becomes ``[new_tok, a]``.

    Note: merged tokens may represent partial UTF-8 sequences.
    """
    newtoks: list[Token] = []

    i = 0
    n = len(tokens)
    while i < n:
        # check if we can form a pair and it matches the target
        if i < n - 1 and tokens[i] == target[0] and tokens[i + 1] == target[1]:
            newtoks.append(new_tok)
            i += 2
        else:
            newtoks.append(tokens[i])
            i += 1

    return newtoks


__all__ = [
    "merge_boundaries",
    "slow_merge_boundaries",
    "pair_encode",
    "pair_split",
    "merge_pair",
]
