"""
RAG Retriever

벡터 저장소 검색 실행기 - 단일 검색 및 멀티 쿼리 동시 검색
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Sequence
import asyncio
import logging

from ..config import FanoutPolicy
from .stores.base import VectorStore, SearchResponse

logger = logging.getLogger(__name__)


@dataclass
class FanoutResult:
    """멀티 쿼리 검색 결과"""
    responses: List[SearchResponse] = field(default_factory=list)
    failed_queries: List[str] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        """중복 제거 전 결과 수 합계"""
        return sum(r.count for r in self.responses)


class RetrievalExecutor:
    """
    검색 실행기

    재시도 없음. 검색 실패는 호출자에게 그대로 전파된다.
    """

    def __init__(
        self,
        store: VectorStore,
        fanout_policy: FanoutPolicy = FanoutPolicy.STRICT
    ):
        self.store = store
        self.fanout_policy = fanout_policy

    async def search(
        self,
        collection: str,
        query_text: str,
        top_k: int,
        where: Optional[Dict[str, Any]] = None
    ) -> SearchResponse:
        """단일 검색 (정확히 1회 호출)"""
        try:
            return await self.store.search(collection, query_text, top_k=top_k, where=where or None)
        except Exception as e:
            logger.error(f"Search failed (collection={collection}): {e}")
            raise

    async def search_many(
        self,
        collection: str,
        queries: Sequence[str],
        top_k: int,
        policy: Optional[FanoutPolicy] = None
    ) -> FanoutResult:
        """
        여러 쿼리 동시 검색

        STRICT: 모든 검색 완료를 기다리며, 하나라도 실패하면 첫 예외를 그대로 전파
                (대기 중인 나머지 검색은 취소)
        BEST_EFFORT: 실패한 검색은 로그 후 제외, 전부 실패하면 첫 예외 전파

        Args:
            collection: 컬렉션 키
            queries: 검색 쿼리 목록
            top_k: 쿼리당 결과 수
            policy: 실패 정책 (None이면 기본 정책)

        Returns:
            FanoutResult (입력 쿼리 순서 유지)
        """
        effective_policy = policy or self.fanout_policy

        tasks = [
            asyncio.ensure_future(self.store.search(collection, q, top_k=top_k, where=None))
            for q in queries
        ]

        if effective_policy == FanoutPolicy.STRICT:
            try:
                responses = await asyncio.gather(*tasks)
            except Exception as e:
                for task in tasks:
                    if not task.done():
                        task.cancel()
                logger.error(f"Multi-query search failed: {e}")
                raise
            return FanoutResult(responses=list(responses))

        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        result = FanoutResult()
        first_error: Optional[BaseException] = None
        for query, outcome in zip(queries, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"Search branch failed for '{query[:50]}': {outcome}")
                result.failed_queries.append(query)
                first_error = first_error or outcome
            else:
                result.responses.append(outcome)

        if not result.responses and first_error is not None:
            logger.error(f"All {len(queries)} search branches failed")
            raise first_error

        return result
