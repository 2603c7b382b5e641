"""
Multi-Query RAG Strategy

질문 변형 생성 → 변형별 동시 검색 → ID 기준 병합 → 재정렬 → 답변
"""

import logging

from ...config import RAGConfig
from ...schema.answer import AnswerResponse, MultiQueryDiagnostics
from ...schema.question import Question, StrategyType
from .base import RAGStrategy

logger = logging.getLogger(__name__)


class MultiQueryRAG(RAGStrategy):
    """
    Multi-Query RAG Strategy

    1. 원본 + (n-1)개 변형 질문 생성
    2. 변형별 검색을 동시에 실행 (fan-out 정책에 따라 실패 처리)
    3. 같은 문서는 최고 점수만 남기고 병합
    4. 점수순으로 top_k * multiplier 개까지 재정렬
    """

    strategy_type = StrategyType.MULTI_QUERY

    async def _execute(
        self,
        question: Question,
        config: RAGConfig,
        collection: str,
        template: str
    ) -> AnswerResponse:
        queries = await self.transformer.generate_variants(question.text, config.num_queries)

        fanout = await self.executor.search_many(
            collection,
            queries,
            config.top_k,
            policy=config.fanout_policy,
        )

        merged = self.fuser.merge_responses(fanout.responses)
        ranked = self.fuser.rerank(merged, config.top_k * config.multi_query_rerank_multiplier)

        logger.debug(
            f"Multi-query fusion: {fanout.total_count} results → {len(merged)} unique "
            f"({len(fanout.failed_queries)} failed branches)"
        )

        return await self._finalize(
            question.text,
            ranked,
            MultiQueryDiagnostics,
            prompt_template=template,
            queries=queries,
            results_before_dedup=fanout.total_count,
            results_after_dedup=len(merged),
        )
