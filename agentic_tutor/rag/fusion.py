"""
Result Fusion

다중 검색 결과 병합(중복 제거), 점수 재정렬, 하이브리드 점수 계산
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence
import logging
import re

from .stores.base import SearchResult, SearchResponse

logger = logging.getLogger(__name__)


KEYWORD_STOPWORDS = frozenset({
    "the", "is", "at", "which", "on", "a", "an", "and", "or", "but",
    "in", "with", "to", "for", "of", "as", "from", "by", "how", "what",
    "where", "when", "why", "who", "i", "you", "we", "they", "it",
})


def extract_keywords(question: str) -> List[str]:
    """불용어 제거 후 3글자 이상 소문자 토큰"""
    tokens = re.split(r"\W+", question.lower())
    return [t for t in tokens if len(t) > 2 and t not in KEYWORD_STOPWORDS]


@dataclass
class HybridSearchResult(SearchResult):
    """하이브리드 점수가 적용된 검색 결과 (score = 하이브리드 점수)"""
    semantic_score: float = 0.0
    keyword_score: float = 0.0


class KeywordScorer(ABC):
    """키워드 점수 계산기 인터페이스 (어휘 기반 점수 교체 지점)"""

    @abstractmethod
    def score(self, keywords: Sequence[str], result: SearchResult) -> float:
        """
        Args:
            keywords: 질문에서 추출한 키워드
            result: 시맨틱 검색 결과

        Returns:
            [0, 1] 범위의 키워드 점수
        """
        pass


class ConstantKeywordScorer(KeywordScorer):
    """
    고정 상수 키워드 점수

    실제 어휘 점수가 아닌 자리 표시 값. 어휘 점수기가 준비되면 교체한다.
    """

    def __init__(self, value: float = 0.5):
        self.value = value

    def score(self, keywords: Sequence[str], result: SearchResult) -> float:
        return self.value


def hybrid_score(semantic_score: float, keyword_score: float, alpha: float) -> float:
    """
    alpha * semantic + (1 - alpha) * keyword

    alpha = 1 이면 시맨틱 점수와 정확히 같다.
    """
    if not 0.0 <= alpha <= 1.0:
        raise ValueError(f"alpha must be in [0, 1], got {alpha}")
    if alpha == 1.0:
        return semantic_score
    return alpha * semantic_score + (1 - alpha) * keyword_score


class ResultFuser:
    """검색 결과 융합기"""

    def __init__(self, keyword_scorer: Optional[KeywordScorer] = None):
        self.keyword_scorer = keyword_scorer or ConstantKeywordScorer()

    def merge(self, result_sets: Iterable[Sequence[SearchResult]]) -> List[SearchResult]:
        """
        ID 기준 병합

        같은 ID는 가장 높은 점수만 유지 (동점이면 먼저 본 것 유지).
        결과 순서는 ID를 처음 본 순서.
        """
        best: dict = {}

        for results in result_sets:
            for result in results:
                existing = best.get(result.id)
                if existing is None or result.score > existing.score:
                    best[result.id] = result

        return list(best.values())

    def merge_responses(self, responses: Iterable[SearchResponse]) -> List[SearchResult]:
        """SearchResponse 목록 병합"""
        return self.merge(r.results for r in responses)

    def rerank(self, results: Sequence[SearchResult], limit: int) -> List[SearchResult]:
        """점수 내림차순 정렬 후 limit개로 자르기 (동점은 입력 순서 유지)"""
        ordered = sorted(results, key=lambda r: r.score, reverse=True)
        return ordered[:max(limit, 0)]

    def hybrid_score(self, semantic_score: float, keyword_score: float, alpha: float) -> float:
        return hybrid_score(semantic_score, keyword_score, alpha)

    def apply_hybrid(
        self,
        results: Sequence[SearchResult],
        keywords: Sequence[str],
        alpha: float
    ) -> List[HybridSearchResult]:
        """시맨틱 결과에 하이브리드 점수 적용"""
        hybrid_results = []

        for result in results:
            keyword = self.keyword_scorer.score(keywords, result)
            hybrid_results.append(HybridSearchResult(
                id=result.id,
                content=result.content,
                score=hybrid_score(result.score, keyword, alpha),
                metadata=result.metadata,
                semantic_score=result.score,
                keyword_score=keyword,
            ))

        logger.debug(
            f"Hybrid scoring: {len(hybrid_results)} results, alpha={alpha}, "
            f"scorer={type(self.keyword_scorer).__name__}"
        )

        return hybrid_results
