"""
Conversational RAG Strategy

대화 이력으로 후속 질문을 독립 질문으로 바꾼 뒤 검색
"""

from ...config import RAGConfig
from ...schema.answer import AnswerResponse, ConversationalDiagnostics
from ...schema.question import Question, StrategyType
from .base import RAGStrategy


class ConversationalRAG(RAGStrategy):
    """
    Conversational RAG Strategy

    검색에는 독립 질문을, 답변 생성에는 원본 질문과 최근 대화를 사용한다.
    """

    strategy_type = StrategyType.CONVERSATIONAL

    async def _execute(
        self,
        question: Question,
        config: RAGConfig,
        collection: str,
        template: str
    ) -> AnswerResponse:
        standalone = await self.transformer.contextualize(
            question.text,
            question.conversation_history
        )

        response = await self.executor.search(collection, standalone, config.top_k)
        ranked = self.fuser.rerank(response.results, config.top_k)

        return await self._finalize(
            question.text,
            ranked,
            ConversationalDiagnostics,
            prompt_template=template,
            history=question.recent_history(config.history_turns),
            contextualized_question=standalone,
        )
