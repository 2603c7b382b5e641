"""
Vector Store Base

벡터 저장소 추상 인터페이스 정의 (검색 전용)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional


@dataclass
class SearchResult:
    """벡터 검색 결과"""

    id: str
    content: str
    score: float = 0.0  # 유사도 점수 (0~1, 높을수록 유사)
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchResponse:
    """검색 호출 1회의 결과"""

    results: List[SearchResult] = field(default_factory=list)
    count: int = 0
    query: str = ""
    collection: str = ""

    @property
    def best_score(self) -> float:
        return max((r.score for r in self.results), default=0.0)


class VectorStore(ABC):
    """
    벡터 저장소 추상 인터페이스

    임베딩 계산과 인덱스 관리는 저장소 쪽 책임이다.
    이 인터페이스는 텍스트 쿼리 기반 유사도 검색만 노출한다.
    """

    @abstractmethod
    async def search(
        self,
        collection: str,
        query_text: str,
        top_k: int = 5,
        where: Optional[Dict[str, Any]] = None
    ) -> SearchResponse:
        """
        유사도 검색

        Args:
            collection: 논리 컬렉션 키 (e.g., "knowledge", "roadmaps")
            query_text: 검색 쿼리 텍스트
            top_k: 반환할 최대 결과 수
            where: 메타데이터 필터 (field -> value)

        Returns:
            SearchResponse (점수 내림차순)
        """
        pass
