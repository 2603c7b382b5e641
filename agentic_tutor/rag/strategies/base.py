"""
RAG Strategy Base Classes

전략 공통 파이프라인: (전략별 변환 → 검색 → 융합) → 게이트 → (근거 부족 | 답변 생성)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Type
import logging

from ...config import RAGConfig
from ...schema.answer import AnswerResponse
from ...schema.question import ConversationTurn, Question, StrategyType
from ..fusion import ResultFuser
from ..gate import ConfidenceGate
from ..prompts import DEFAULT_TEMPLATE, get_template
from ..query_processor import QueryTransformer
from ..retriever import RetrievalExecutor
from ..stores.base import SearchResult
from ..synthesizer import AnswerSynthesizer

logger = logging.getLogger(__name__)


@dataclass
class PipelineComponents:
    """전략이 공유하는 파이프라인 구성 요소"""
    transformer: QueryTransformer
    executor: RetrievalExecutor
    fuser: ResultFuser
    gate: ConfidenceGate
    synthesizer: AnswerSynthesizer


class RAGStrategy(ABC):
    """
    RAG Strategy 추상 베이스 클래스

    모든 전략은 이 클래스를 상속받아 `_execute`를 구현한다.
    요청 간 상태를 보관하지 않으므로 인스턴스를 동시에 재사용해도 안전하다.
    """

    strategy_type: StrategyType = None

    def __init__(self, components: PipelineComponents, config: Optional[RAGConfig] = None):
        self.components = components
        self.config = config or RAGConfig()

    @property
    def transformer(self) -> QueryTransformer:
        return self.components.transformer

    @property
    def executor(self) -> RetrievalExecutor:
        return self.components.executor

    @property
    def fuser(self) -> ResultFuser:
        return self.components.fuser

    @property
    def gate(self) -> ConfidenceGate:
        return self.components.gate

    @property
    def synthesizer(self) -> AnswerSynthesizer:
        return self.components.synthesizer

    async def execute(self, question: Question) -> AnswerResponse:
        """
        RAG 파이프라인 실행

        Args:
            question: 질문 (요청 옵션이 설정 기본값보다 우선)

        Returns:
            AnswerResponse: 근거 기반 답변 또는 근거 부족 응답

        Raises:
            ValueError: 알 수 없는 프롬프트 템플릿
            Exception: 검색/답변 생성 실패는 그대로 전파
        """
        template = question.options.template or DEFAULT_TEMPLATE
        get_template(template)

        config = self.request_config(question)
        collection = question.options.collection or config.default_collection

        logger.debug(
            f"[{self.strategy_type.value}] collection={collection}, "
            f"top_k={config.top_k}, question={question.text[:50]}"
        )

        return await self._execute(question, config, collection, template)

    def request_config(self, question: Question) -> RAGConfig:
        """요청 옵션을 반영한 설정"""
        options = question.options
        return self.config.merged(
            top_k=options.top_k,
            num_queries=options.num_queries,
            hybrid_alpha=options.alpha,
            default_collection=options.collection,
        )

    @abstractmethod
    async def _execute(
        self,
        question: Question,
        config: RAGConfig,
        collection: str,
        template: str
    ) -> AnswerResponse:
        """전략별 파이프라인"""
        pass

    async def _finalize(
        self,
        question: str,
        candidates: Sequence[SearchResult],
        diagnostics_cls: Type,
        prompt_template: str = DEFAULT_TEMPLATE,
        history: Optional[Sequence[ConversationTurn]] = None,
        **diagnostics: Any
    ) -> AnswerResponse:
        """
        게이트 판정 후 근거 부족 응답 또는 답변 생성

        근거가 없으면 LLM을 호출하지 않는다.
        """
        decision = self.gate.evaluate(candidates)
        report = diagnostics_cls(
            best_score=decision.best_score,
            threshold=decision.threshold,
            **diagnostics
        )

        if not decision.passed:
            logger.info(
                f"[{self.strategy_type.value}] Insufficient evidence "
                f"(best={decision.best_score:.3f}, threshold={decision.threshold})"
            )
            return self.synthesizer.insufficient(report)

        return await self.synthesizer.synthesize(
            question,
            decision.evidence,
            report,
            history=history,
            template=prompt_template,
        )
