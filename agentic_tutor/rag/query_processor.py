"""
Query Processor

전략별 질문 변환: 변형 생성, 대화 맥락 독립화, 메타데이터 필터 추출

모든 변환은 실패해도 파이프라인을 중단시키지 않는다 (원본 질문으로 통과).
"""

from typing import List, Sequence
import logging
import re

from ..llm.base import LLMClient
from ..schema.filters import MetadataFilter, parse_metadata_filter
from ..schema.question import ConversationTurn

logger = logging.getLogger(__name__)


VARIANTS_PROMPT = """You are an AI assistant generating alternative phrasings of a user's question to improve information retrieval.

Original question: "{question}"

Generate {num_alternatives} alternative phrasings of this question. Each should ask the same thing but with different wording. Return ONLY the questions, one per line, without numbering or explanations."""

CONTEXTUALIZE_PROMPT = """Given the following conversation history and a follow-up question, rephrase the follow-up question to be a standalone question that contains all necessary context.

Conversation history:
{history}

Follow-up question: {question}

Standalone question:"""

FILTER_PROMPT = """Extract structured metadata filters from the following question. Return a JSON object with:
- "semanticQuery": The core semantic part of the question
- "where": Metadata filters as key-value pairs (topic, difficulty, tags, etc.)

Question: "{question}"

Return ONLY valid JSON, no explanations:"""

_NUMBERING = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s*")


def format_history(turns: Sequence[ConversationTurn]) -> str:
    """대화 이력 → "role: content" 줄 목록"""
    return "\n".join(turn.format() for turn in turns)


class QueryTransformer:
    """
    LLM 기반 질문 변환기

    - generate_variants: 원본 + (n-1)개 변형
    - contextualize: 최근 대화 이력으로 독립 질문 생성
    - extract_filters: {semanticQuery, where} 추출
    """

    def __init__(self, llm: LLMClient, history_turns: int = 3):
        self.llm = llm
        self.history_turns = history_turns

    async def generate_variants(self, question: str, n: int = 3) -> List[str]:
        """
        질문 변형 생성

        원본 질문은 항상 첫 번째 변형으로 그대로 포함된다.

        Args:
            question: 원본 질문
            n: 반환할 최대 변형 수 (원본 포함)

        Returns:
            [question, alt_1, ..., alt_{n-1}]
        """
        if n <= 1:
            return [question]

        prompt = VARIANTS_PROMPT.format(question=question, num_alternatives=n - 1)

        try:
            response = await self.llm.invoke(prompt)
        except Exception as e:
            logger.warning(f"Failed to generate query variations, using original: {e}")
            return [question]

        alternatives = []
        for line in (response.content or "").split("\n"):
            cleaned = _NUMBERING.sub("", line).strip().strip('"')
            if cleaned and cleaned != question:
                alternatives.append(cleaned)

        variants = [question] + alternatives[:n - 1]
        logger.debug(f"Generated query variations: {variants}")
        return variants

    async def contextualize(self, question: str, history: Sequence[ConversationTurn]) -> str:
        """
        대화 이력 기반 독립 질문 생성

        Args:
            question: 후속 질문
            history: 대화 이력 (오래된 순)

        Returns:
            독립 질문 (이력이 없거나 실패하면 원본)
        """
        if not history:
            return question

        recent = list(history)[-self.history_turns:] if self.history_turns > 0 else []
        if not recent:
            return question

        prompt = CONTEXTUALIZE_PROMPT.format(
            history=format_history(recent),
            question=question
        )

        try:
            response = await self.llm.invoke(prompt)
        except Exception as e:
            logger.warning(f"Failed to contextualize question, using original: {e}")
            return question

        standalone = (response.content or "").strip()
        if not standalone:
            logger.warning("Contextualization returned empty text, using original")
            return question

        logger.debug(f"Contextualized question: {standalone}")
        return standalone

    async def extract_filters(self, question: str) -> MetadataFilter:
        """
        메타데이터 필터 추출

        Returns:
            MetadataFilter (실패 시 {semantic_query: question, where: {}})
        """
        prompt = FILTER_PROMPT.format(question=question)

        try:
            response = await self.llm.invoke(prompt)
            filters = parse_metadata_filter(response.content or "", question)
        except Exception as e:
            logger.warning(f"Failed to extract metadata filters: {e}")
            return MetadataFilter.passthrough(question)

        logger.debug(f"Extracted metadata filters: {filters.model_dump()}")
        return filters
