from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

EXACT_SCORE = 1.0
SUBSTRING_SCORE = 0.8
# Subsequence scores stay strictly below this ceiling.
SUBSEQUENCE_CEILING = 0.6


@dataclass(frozen=True)
class Match:
    score: float
    indices: tuple[int, ...]


def fuzzy_match(query: str, key: str) -> Optional[Match]:
    """Case-insensitive fuzzy match of query against key.

    Contiguous occurrences score 1.0 (full equality) or 0.8. Otherwise the
    query characters are matched greedily in order and the score shrinks as
    the matched span widens. Returns None when any character is missing.
    """
    q = query.lower()
    k = key.lower()
    if len(k) != len(key):
        # Offsets must stay valid for key as given.
        k = "".join(c.lower() if len(c.lower()) == 1 else c for c in key)
    if not q or not k:
        return None

    start = k.find(q)
    if start >= 0:
        score = EXACT_SCORE if k == q else SUBSTRING_SCORE
        return Match(score, tuple(range(start, start + len(q))))

    indices: list[int] = []
    pos = 0
    for ch in q:
        found = k.find(ch, pos)
        if found < 0:
            return None
        indices.append(found)
        pos = found + 1

    span = indices[-1] - indices[0] + 1
    return Match(SUBSEQUENCE_CEILING * len(q) / span, tuple(indices))


def best_match(query: str, title: str, extra_keys: Iterable[str] = ()) -> Optional[Match]:
    """Score query against a title and its extra keys; the best score wins.

    Indices are reported only when the title itself produced the best match,
    so they are always valid offsets into the title.
    """
    best = fuzzy_match(query, title)
    for key in extra_keys:
        candidate = fuzzy_match(query, key)
        if candidate is None:
            continue
        if best is None or candidate.score > best.score:
            best = Match(candidate.score, ())
    return best
