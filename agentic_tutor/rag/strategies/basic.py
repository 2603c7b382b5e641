"""
Basic RAG Strategy

기본 RAG 파이프라인: 검색 → 답변 생성
"""

import logging

from ...config import EMPTY_COLLECTION_ANSWER, RAGConfig
from ...schema.answer import AnswerResponse, BasicDiagnostics
from ...schema.question import Question, StrategyType
from .base import RAGStrategy

logger = logging.getLogger(__name__)


class BasicRAG(RAGStrategy):
    """
    Basic RAG Strategy

    가장 단순한 전략. 컬렉션이 비어 있으면 LLM 호출 없이 안내 문구를 반환한다.
    """

    strategy_type = StrategyType.BASIC

    async def _execute(
        self,
        question: Question,
        config: RAGConfig,
        collection: str,
        template: str
    ) -> AnswerResponse:
        response = await self.executor.search(collection, question.text, config.top_k)

        if response.count == 0:
            logger.info(f"Collection '{collection}' returned no documents")
            return self.synthesizer.canned(
                EMPTY_COLLECTION_ANSWER.format(collection=collection),
                BasicDiagnostics(
                    threshold=self.gate.min_score,
                    template=template,
                    collection_empty=True,
                ),
            )

        ranked = self.fuser.rerank(response.results, config.top_k)

        return await self._finalize(
            question.text,
            ranked,
            BasicDiagnostics,
            prompt_template=template,
            template=template,
        )
