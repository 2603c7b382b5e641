"""
Hybrid RAG Strategy

시맨틱 점수와 키워드 점수를 alpha로 가중 결합
"""

import logging

from ...config import RAGConfig
from ...schema.answer import AnswerResponse, HybridDiagnostics
from ...schema.question import Question, StrategyType
from ..fusion import extract_keywords
from .base import RAGStrategy

logger = logging.getLogger(__name__)


class HybridRAG(RAGStrategy):
    """
    Hybrid RAG Strategy

    1. 시맨틱 검색 (top_k * fetch_multiplier)
    2. 키워드 추출 → 키워드 점수기
    3. hybrid = alpha * semantic + (1 - alpha) * keyword
    4. 하이브리드 점수순 top_k → 게이트도 하이브리드 점수 기준
    """

    strategy_type = StrategyType.HYBRID

    async def _execute(
        self,
        question: Question,
        config: RAGConfig,
        collection: str,
        template: str
    ) -> AnswerResponse:
        alpha = config.hybrid_alpha

        response = await self.executor.search(
            collection,
            question.text,
            config.top_k * config.hybrid_fetch_multiplier,
        )

        keywords = extract_keywords(question.text)
        scored = self.fuser.apply_hybrid(response.results, keywords, alpha)
        ranked = self.fuser.rerank(scored, config.top_k)

        logger.debug(f"Hybrid keywords: {keywords}")

        return await self._finalize(
            question.text,
            ranked,
            HybridDiagnostics,
            prompt_template=template,
            alpha=alpha,
            keywords=keywords,
        )
