"""
Answer Synthesizer

게이트를 통과한 근거로 프롬프트를 구성하고 LLM을 한 번 호출해 답변 생성
"""

from typing import List, Optional, Sequence
import logging

from ..llm.base import LLMClient
from ..schema.answer import AnswerResponse, Diagnostics, Source
from ..schema.question import ConversationTurn
from ..config import INSUFFICIENT_ANSWER
from .prompts import CONVERSATION_BLOCK, DEFAULT_TEMPLATE, get_template
from .query_processor import format_history
from .stores.base import SearchResult

logger = logging.getLogger(__name__)


def build_context(evidence: Sequence[SearchResult]) -> str:
    """[1] content, [2] content, ... 형태의 컨텍스트 블록"""
    return "\n\n".join(
        f"[{i}] {result.content}"
        for i, result in enumerate(evidence, start=1)
    )


def to_sources(evidence: Sequence[SearchResult], preview_chars: int = 200) -> List[Source]:
    """근거 문서 → 응답 출처 (내용은 미리보기 길이로 자름)"""
    sources = []
    for result in evidence:
        content = result.content
        if len(content) > preview_chars:
            content = content[:preview_chars] + "..."
        sources.append(Source(
            content=content,
            score=result.score,
            metadata=dict(result.metadata or {}),
        ))
    return sources


class AnswerSynthesizer:
    """
    근거 기반 답변 생성기

    성공 경로에서 요청당 정확히 1회 LLM을 호출한다.
    생성 실패는 흡수하지 않고 그대로 전파된다.
    """

    def __init__(
        self,
        llm: LLMClient,
        preview_chars: int = 200,
        insufficient_answer: str = INSUFFICIENT_ANSWER
    ):
        self.llm = llm
        self.preview_chars = preview_chars
        self.insufficient_answer = insufficient_answer

    def build_prompt(
        self,
        question: str,
        evidence: Sequence[SearchResult],
        history: Optional[Sequence[ConversationTurn]] = None,
        template: str = DEFAULT_TEMPLATE
    ) -> str:
        """
        컨텍스트 블록 → (최근 대화) → 질문 순서의 프롬프트

        Args:
            question: 사용자 질문 (원본)
            evidence: 게이트를 통과한 결과 (점수 내림차순)
            history: 대화형 전략에서만 전달되는 최근 대화
            template: 프롬프트 템플릿 이름

        Returns:
            프롬프트 문자열
        """
        conversation = ""
        if history:
            conversation = CONVERSATION_BLOCK.format(history=format_history(history))

        return get_template(template).format(
            context=build_context(evidence),
            conversation=conversation,
            question=question,
        )

    async def synthesize(
        self,
        question: str,
        evidence: Sequence[SearchResult],
        diagnostics: Diagnostics,
        history: Optional[Sequence[ConversationTurn]] = None,
        template: str = DEFAULT_TEMPLATE
    ) -> AnswerResponse:
        """
        답변 생성

        Args:
            question: 사용자 질문
            evidence: 비어 있지 않은 근거 목록 (점수 내림차순)
            diagnostics: 전략별 진단 정보
            history: 최근 대화 (대화형 전략)
            template: 프롬프트 템플릿 이름

        Returns:
            AnswerResponse (confidence = 최상위 근거 점수)
        """
        if not evidence:
            raise ValueError("synthesize() requires at least one evidence document")

        prompt = self.build_prompt(question, evidence, history=history, template=template)

        try:
            response = await self.llm.invoke(prompt)
        except Exception as e:
            logger.error(f"Answer generation failed: {e}")
            raise

        logger.debug(
            f"Generated answer from {len(evidence)} sources "
            f"(model={getattr(response, 'model', 'unknown')})"
        )

        return AnswerResponse(
            answer=response.content,
            sources=to_sources(evidence, self.preview_chars),
            confidence=max(r.score for r in evidence),
            diagnostics=diagnostics,
        )

    def insufficient(self, diagnostics: Diagnostics) -> AnswerResponse:
        """근거 부족 응답 (LLM 호출 없음)"""
        return self.canned(self.insufficient_answer, diagnostics)

    def canned(self, answer: str, diagnostics: Diagnostics) -> AnswerResponse:
        """고정 문구 응답 (LLM 호출 없음)"""
        return AnswerResponse(
            answer=answer,
            sources=[],
            confidence=0.0,
            diagnostics=diagnostics,
        )
