from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..models.search import CATEGORY_PRIORITY, RankedResults, ResultGroup, SearchResult


def rank(results: Iterable[SearchResult]) -> list[SearchResult]:
    """Stable sort by score desc, then category priority, then discovery order."""
    indexed = list(enumerate(results))
    indexed.sort(key=lambda t: (-t[1].score, CATEGORY_PRIORITY[t[1].result_type], t[0]))
    return [r for _, r in indexed]


def deduplicate(results: Iterable[SearchResult]) -> list[SearchResult]:
    """Keep the first result for each payload target."""
    seen: set[tuple[str, str, str]] = set()
    unique: list[SearchResult] = []
    for result in results:
        key = result.payload.dedup_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(result)
    return unique


def group(results: Sequence[SearchResult]) -> tuple[ResultGroup, ...]:
    """Partition by group label in order of first appearance.

    Results with an empty label share one unlabeled bucket.
    """
    order: list[str] = []
    buckets: dict[str, list[SearchResult]] = {}
    for result in results:
        label = result.group_label or ""
        if label not in buckets:
            buckets[label] = []
            order.append(label)
        buckets[label].append(result)
    return tuple(ResultGroup(label=label, results=tuple(buckets[label])) for label in order)


def aggregate(
    results: Iterable[SearchResult],
    max_results: int,
    *,
    warnings: Sequence[str] = (),
    interpreter: Optional[str] = None,
) -> RankedResults:
    """Merge interpreter and fuzzy-match results into the final ranked list."""
    ranked = deduplicate(rank(results))[: max(0, max_results)]
    return RankedResults(
        results=tuple(ranked),
        groups=group(ranked),
        warnings=tuple(warnings),
        interpreter=interpreter,
    )
