"""
Adaptive RAG Engine

요청 진입점: 전략 선택 → 전략 파이프라인 실행 → 추적/로그
"""

from typing import Any, Dict, Optional, Union
import logging
import time

from ..config import RAGConfig
from ..llm.base import LLMClient
from ..observability.tracer import Tracer, get_tracer
from ..schema.answer import AnswerResponse
from ..schema.question import AskRequest, Question, StrategyType
from .fusion import ConstantKeywordScorer, KeywordScorer, ResultFuser
from .gate import ConfidenceGate
from .query_processor import QueryTransformer
from .retriever import RetrievalExecutor
from .stores.base import VectorStore
from .strategies import PipelineComponents, create_rag_strategy
from .synthesizer import AnswerSynthesizer

logger = logging.getLogger(__name__)


class AdaptiveRAGEngine:
    """
    적응형 RAG 답변 엔진

    벡터 저장소와 LLM 클라이언트는 주입받는다.
    요청 간 상태를 보관하지 않으므로 동시 요청에 그대로 사용할 수 있다.

    Usage:
        engine = AdaptiveRAGEngine(store=ChromaStore(), llm=LLMGateway())
        response = await engine.answer("What is a binary search tree?", "multi_query")
    """

    def __init__(
        self,
        store: VectorStore,
        llm: LLMClient,
        config: Optional[RAGConfig] = None,
        tracer: Optional[Tracer] = None,
        keyword_scorer: Optional[KeywordScorer] = None
    ):
        self.config = config or RAGConfig()
        self.llm = llm
        self.tracer = tracer or get_tracer()

        self.components = PipelineComponents(
            transformer=QueryTransformer(llm, history_turns=self.config.history_turns),
            executor=RetrievalExecutor(store, fanout_policy=self.config.fanout_policy),
            fuser=ResultFuser(
                keyword_scorer or ConstantKeywordScorer(self.config.keyword_placeholder_score)
            ),
            gate=ConfidenceGate(self.config.min_score),
            synthesizer=AnswerSynthesizer(
                llm,
                preview_chars=self.config.source_preview_chars,
                insufficient_answer=self.config.insufficient_answer,
            ),
        )

    async def answer(
        self,
        question: Union[str, Question],
        strategy: Union[str, StrategyType] = StrategyType.MULTI_QUERY
    ) -> AnswerResponse:
        """
        질문에 답변

        Args:
            question: 질문 문자열 또는 Question
            strategy: 전략 타입 또는 별칭

        Returns:
            AnswerResponse

        Raises:
            ValueError: 알 수 없는 전략/템플릿
            Exception: 검색/답변 생성 실패 (그대로 전파)
        """
        if isinstance(question, str):
            question = Question(text=question)

        rag_strategy = create_rag_strategy(strategy, self.components, self.config)
        strategy_name = rag_strategy.strategy_type.value

        start_time = time.time()

        async with self.tracer.trace(
            name="rag_answer",
            input={"question": question.text, "options": question.options.to_dict()},
            metadata={"strategy": strategy_name},
            tags=["rag", strategy_name],
        ) as trace:
            response = await rag_strategy.execute(question)

            data = response.to_dict()
            trace.log_retrieval(
                strategy_name,
                data["sources"],
                best_score=response.diagnostics.best_score,
                threshold=response.diagnostics.threshold,
            )
            if response.is_grounded:
                trace.log_generation(self.llm.model_name, response.answer)
            trace.log_output(data)

        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(
            f"[{strategy_name}] answered: sources={len(response.sources)}, "
            f"confidence={response.confidence:.3f}, grounded={response.is_grounded}, "
            f"time={elapsed_ms:.0f}ms"
        )

        return response

    async def ask(self, request: Union[AskRequest, Dict[str, Any]]) -> AnswerResponse:
        """
        상위 계층 요청 처리

        Args:
            request: AskRequest 또는 {question, strategy, options} 페이로드

        Raises:
            pydantic.ValidationError: 잘못된 요청
        """
        if not isinstance(request, AskRequest):
            request = AskRequest.from_payload(request)

        return await self.answer(request.to_question(), request.strategy)
