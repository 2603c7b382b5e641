"""
Self-Query RAG Strategy

질문에서 메타데이터 필터를 추출해 필터 검색
"""

from ...config import RAGConfig
from ...schema.answer import AnswerResponse, SelfQueryDiagnostics
from ...schema.question import Question, StrategyType
from .base import RAGStrategy


class SelfQueryRAG(RAGStrategy):
    """
    Self-Query RAG Strategy

    추출 실패 시 원본 질문 + 빈 필터로 검색한다.
    """

    strategy_type = StrategyType.SELF_QUERY

    async def _execute(
        self,
        question: Question,
        config: RAGConfig,
        collection: str,
        template: str
    ) -> AnswerResponse:
        filters = await self.transformer.extract_filters(question.text)

        response = await self.executor.search(
            collection,
            filters.semantic_query,
            config.top_k,
            where=dict(filters.where) if filters.has_conditions else None,
        )
        ranked = self.fuser.rerank(response.results, config.top_k)

        return await self._finalize(
            question.text,
            ranked,
            SelfQueryDiagnostics,
            prompt_template=template,
            filters=filters,
        )
