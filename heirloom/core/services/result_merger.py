"""
Result merging across parallel vector queries.
"""

from collections.abc import Sequence

from heirloom.core.entities import MergedResult, ScoredMatch


def merge_results(
    result_sets: Sequence[Sequence[ScoredMatch]],
    top_k: int,
) -> list[MergedResult]:
    """
    Merge ranked result lists into one deduplicated ranking.

    Policy:
    - Sets are flattened in input order (original query first).
    - The first occurrence of a document id wins, including its score;
      later occurrences are discarded, not averaged or max-merged.
    - The kept matches are sorted by score descending. Equal scores keep
      insertion order (Python's sort is stable, also with reverse=True).
    - The result is truncated to top_k.

    Args:
        result_sets: One list of matches per query, in query order
        top_k: Maximum number of merged results

    Returns:
        Merged results, each tagged with the index of the query that produced it
    """
    seen: set[str] = set()
    merged: list[MergedResult] = []

    for set_index, matches in enumerate(result_sets):
        for match in matches:
            if match.document_id in seen:
                continue
            seen.add(match.document_id)
            merged.append(
                MergedResult(
                    document_id=match.document_id,
                    score=match.score,
                    metadata=dict(match.metadata),
                    record_id=match.record_id,
                    source_query_index=set_index,
                )
            )

    merged = sorted(merged, key=lambda m: m.score, reverse=True)
    return merged[: max(top_k, 0)]


class ResultMerger:
    """Stateless merger with a default result limit."""

    def __init__(self, top_k: int = 10):
        self.top_k = top_k

    def merge(
        self,
        result_sets: Sequence[Sequence[ScoredMatch]],
        top_k: int | None = None,
    ) -> list[MergedResult]:
        return merge_results(result_sets, self.top_k if top_k is None else top_k)
