"""
Unit tests for result merging.

Tests:
- First-seen deduplication across lists
- Score ordering with stable ties
- Truncation
- Determinism
"""

from fakes import match

from heirloom.core.services import ResultMerger, merge_results


def ids(results):
    return [r.document_id for r in results]


class TestMergeResults:
    """Tests for merge_results."""

    def test_first_occurrence_wins(self):
        merged = merge_results(
            [
                [match("a", 0.9), match("b", 0.7)],
                [match("a", 0.95), match("c", 0.6)],
                [],
            ],
            top_k=10,
        )

        assert [(r.document_id, r.score) for r in merged] == [("a", 0.9), ("b", 0.7), ("c", 0.6)]

    def test_source_query_index(self):
        merged = merge_results([[match("a", 0.5)], [match("a", 0.9), match("b", 0.8)]], top_k=10)

        by_id = {r.document_id: r for r in merged}
        assert by_id["a"].source_query_index == 0
        assert by_id["b"].source_query_index == 1

    def test_later_higher_score_outranks(self):
        merged = merge_results([[match("a", 0.2)], [match("b", 0.9)]], top_k=10)
        assert ids(merged) == ["b", "a"]

    def test_ties_keep_first_seen_order(self):
        merged = merge_results(
            [[match("x", 0.5), match("y", 0.5)], [match("z", 0.5), match("w", 0.6)]],
            top_k=10,
        )
        assert ids(merged) == ["w", "x", "y", "z"]

    def test_truncates_to_top_k(self):
        sets = [[match(f"d{i}", 1.0 - i / 100) for i in range(8)], [match(f"e{i}", 0.5) for i in range(8)]]
        merged = merge_results(sets, top_k=10)

        assert len(merged) == 10
        assert ids(merged)[:8] == [f"d{i}" for i in range(8)]

    def test_no_duplicate_ids(self):
        sets = [[match("a", 0.3), match("a", 0.9)], [match("a", 0.1)]]
        merged = merge_results(sets, top_k=10)
        assert ids(merged) == ["a"]
        assert merged[0].score == 0.3

    def test_sorted_non_increasing(self):
        sets = [[match("a", 0.1), match("b", 0.7)], [match("c", 0.4), match("d", 0.9)]]
        scores = [r.score for r in merge_results(sets, top_k=10)]
        assert scores == sorted(scores, reverse=True)

    def test_empty_inputs(self):
        assert merge_results([], top_k=10) == []
        assert merge_results([[], []], top_k=10) == []

    def test_zero_top_k(self):
        assert merge_results([[match("a", 0.9)]], top_k=0) == []

    def test_deterministic(self):
        sets = [[match("a", 0.5), match("b", 0.5)], [match("c", 0.5)]]
        assert ids(merge_results(sets, 10)) == ids(merge_results(sets, 10))

    def test_does_not_mutate_input(self):
        original = match("a", 0.9, tags=["x"])
        merged = merge_results([[original]], top_k=10)
        merged[0].metadata["title"] = "changed"
        assert original.metadata["title"] == "Item a"


class TestResultMerger:
    """Tests for the ResultMerger wrapper."""

    def test_default_limit(self):
        merger = ResultMerger(top_k=2)
        merged = merger.merge([[match("a", 0.9), match("b", 0.8), match("c", 0.7)]])
        assert ids(merged) == ["a", "b"]

    def test_override_limit(self):
        merger = ResultMerger(top_k=2)
        merged = merger.merge([[match("a", 0.9), match("b", 0.8), match("c", 0.7)]], top_k=3)
        assert len(merged) == 3
