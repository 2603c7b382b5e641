"""
ResultFuser 테스트

- merge: ID별 최고 점수, 동점은 먼저 본 것, 멱등
- rerank: 점수 내림차순, 안정 정렬, limit
- hybrid: alpha 가중 결합, 키워드 점수기 교체
"""

from typing import Sequence

import pytest

from agentic_tutor.rag.fusion import (
    ConstantKeywordScorer,
    HybridSearchResult,
    KeywordScorer,
    ResultFuser,
    extract_keywords,
    hybrid_score,
)
from agentic_tutor.rag.stores.base import SearchResponse, SearchResult

from conftest import make_result


class TestMerge:
    """ID 기준 병합"""

    def test_keeps_maximum_score_per_id(self):
        fuser = ResultFuser()

        merged = fuser.merge([
            [make_result("a", 0.3)],
            [make_result("a", 0.9)],
            [make_result("a", 0.5)],
        ])

        assert len(merged) == 1
        assert merged[0].score == 0.9

    def test_tie_keeps_first_seen(self):
        fuser = ResultFuser()

        merged = fuser.merge([
            [make_result("a", 0.7, content="first")],
            [make_result("a", 0.7, content="second")],
        ])

        assert merged[0].content == "first"

    def test_one_result_per_unique_id(self):
        fuser = ResultFuser()

        merged = fuser.merge([
            [make_result("a", 0.9), make_result("b", 0.6)],
            [make_result("b", 0.8), make_result("c", 0.4)],
            [make_result("a", 0.75)],
        ])

        assert [(r.id, r.score) for r in merged] == [("a", 0.9), ("b", 0.8), ("c", 0.4)]

    def test_merge_is_idempotent(self):
        fuser = ResultFuser()
        merged = fuser.merge([
            [make_result("a", 0.2), make_result("b", 0.6)],
            [make_result("a", 0.8)],
        ])

        again = fuser.merge([merged])

        assert [(r.id, r.score) for r in again] == [(r.id, r.score) for r in merged]

    def test_merging_set_with_itself(self):
        fuser = ResultFuser()
        s = [make_result("a", 0.4), make_result("b", 0.7), make_result("a", 0.6)]

        doubled = fuser.merge([s, s])
        single = fuser.merge([s])

        assert [(r.id, r.score) for r in doubled] == [(r.id, r.score) for r in single]

    def test_merge_responses(self):
        fuser = ResultFuser()
        responses = [
            SearchResponse(results=[make_result("a", 0.4)], count=1, query="q1"),
            SearchResponse(results=[make_result("a", 0.6), make_result("b", 0.5)], count=2, query="q2"),
        ]

        merged = fuser.merge_responses(responses)

        assert {r.id: r.score for r in merged} == {"a": 0.6, "b": 0.5}

    def test_empty_input(self):
        assert ResultFuser().merge([]) == []


class TestRerank:
    """점수 재정렬"""

    def test_sorted_descending_and_truncated(self):
        fuser = ResultFuser()
        results = [make_result(str(i), score) for i, score in enumerate([0.2, 0.9, 0.5, 0.7, 0.1])]

        ranked = fuser.rerank(results, 3)

        scores = [r.score for r in ranked]
        assert scores == [0.9, 0.7, 0.5]
        assert all(a >= b for a, b in zip(scores, scores[1:]))

    def test_ties_keep_input_order(self):
        fuser = ResultFuser()
        results = [make_result("x", 0.5), make_result("y", 0.8), make_result("z", 0.5)]

        ranked = fuser.rerank(results, 10)

        assert [r.id for r in ranked] == ["y", "x", "z"]

    def test_zero_limit(self):
        assert ResultFuser().rerank([make_result("a", 0.9)], 0) == []


class TestHybridScore:
    """하이브리드 점수"""

    def test_weighted_combination(self):
        assert hybrid_score(0.8, 0.5, 0.7) == 0.71
        assert hybrid_score(0.8, 0.5, 0.7) == pytest.approx(0.7 * 0.8 + 0.3 * 0.5)

    def test_alpha_one_returns_semantic_score_exactly(self):
        for s in [0.0, 0.1234567, 0.8, 1.0]:
            assert hybrid_score(s, 0.5, 1.0) == s

    def test_alpha_zero_returns_keyword_score(self):
        assert hybrid_score(0.8, 0.5, 0.0) == pytest.approx(0.5)

    @pytest.mark.parametrize("alpha", [-0.1, 1.5])
    def test_alpha_out_of_range(self, alpha):
        with pytest.raises(ValueError):
            hybrid_score(0.8, 0.5, alpha)

    def test_fuser_method_matches_function(self):
        assert ResultFuser().hybrid_score(0.6, 0.2, 0.4) == hybrid_score(0.6, 0.2, 0.4)


class _OverlapScorer(KeywordScorer):
    """본문에 포함된 키워드 비율"""

    def score(self, keywords: Sequence[str], result: SearchResult) -> float:
        if not keywords:
            return 0.0
        hits = sum(1 for k in keywords if k in result.content.lower())
        return hits / len(keywords)


class TestApplyHybrid:
    """하이브리드 점수 적용"""

    def test_default_scorer_uses_placeholder_constant(self):
        fuser = ResultFuser()

        scored = fuser.apply_hybrid([make_result("a", 0.8)], ["binary"], alpha=0.7)

        assert isinstance(scored[0], HybridSearchResult)
        assert scored[0].semantic_score == 0.8
        assert scored[0].keyword_score == 0.5
        assert scored[0].score == pytest.approx(0.71)
        assert scored[0].metadata == {"doc": "a"}

    def test_custom_constant(self):
        fuser = ResultFuser(ConstantKeywordScorer(0.0))

        scored = fuser.apply_hybrid([make_result("a", 0.8)], [], alpha=0.5)

        assert scored[0].score == pytest.approx(0.4)

    def test_pluggable_scorer_changes_ranking(self):
        fuser = ResultFuser(_OverlapScorer())
        results = [
            make_result("a", 0.70, content="An unrelated paragraph"),
            make_result("b", 0.65, content="A binary search tree keeps keys sorted"),
        ]

        ranked = fuser.rerank(fuser.apply_hybrid(results, ["binary", "search", "tree"], alpha=0.5), 2)

        assert [r.id for r in ranked] == ["b", "a"]
        assert ranked[0].keyword_score == 1.0


class TestExtractKeywords:

    def test_drops_stopwords_and_short_tokens(self):
        assert extract_keywords("What is a binary search tree?") == ["binary", "search", "tree"]

    def test_lowercases(self):
        assert extract_keywords("Explain Python DECORATORS") == ["explain", "python", "decorators"]

    def test_empty(self):
        assert extract_keywords("is it") == []
