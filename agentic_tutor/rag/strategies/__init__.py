"""
RAG Strategies Package

적응형 RAG 파이프라인 전략 모음

Strategies:
- MultiQueryRAG: 질문 변형 → 동시 검색 → 융합
- ConversationalRAG: 대화 이력으로 질문 독립화
- SelfQueryRAG: 메타데이터 필터 추출 검색
- HybridRAG: 시맨틱 + 키워드 가중 결합
- BasicRAG: 단일 검색 → 답변

Usage:
    from agentic_tutor.rag.strategies import create_rag_strategy, PipelineComponents

    strategy = create_rag_strategy("multi-query", components, config)
    response = await strategy.execute(question)
"""

from typing import Optional, Type, Union

from ...config import RAGConfig
from ...schema.question import StrategyType, parse_strategy_type
from .base import RAGStrategy, PipelineComponents
from .multi_query import MultiQueryRAG
from .conversational import ConversationalRAG
from .self_query import SelfQueryRAG
from .hybrid import HybridRAG
from .basic import BasicRAG


# Strategy registry
_STRATEGY_REGISTRY = {
    StrategyType.MULTI_QUERY: MultiQueryRAG,
    StrategyType.CONVERSATIONAL: ConversationalRAG,
    StrategyType.SELF_QUERY: SelfQueryRAG,
    StrategyType.HYBRID: HybridRAG,
    StrategyType.BASIC: BasicRAG,
}


def resolve_strategy_type(strategy_type: Union[str, StrategyType]) -> StrategyType:
    """문자열/enum → StrategyType ("multi-query", "multiQuery" 표기 허용)"""
    return parse_strategy_type(strategy_type)


def select_strategy(strategy_type: Union[str, StrategyType]) -> Type[RAGStrategy]:
    """
    전략 타입 → 전략 클래스

    I/O 없는 순수 함수.
    """
    return _STRATEGY_REGISTRY[resolve_strategy_type(strategy_type)]


def create_rag_strategy(
    strategy_type: Union[str, StrategyType],
    components: PipelineComponents,
    config: Optional[RAGConfig] = None,
) -> RAGStrategy:
    """
    RAG Strategy 팩토리 함수

    Args:
        strategy_type: 전략 타입 또는 별칭
        components: 공유 파이프라인 구성 요소
        config: 설정 (None이면 기본값)

    Returns:
        RAGStrategy 인스턴스
    """
    strategy_class = select_strategy(strategy_type)
    return strategy_class(components, config)


def get_available_strategies() -> list[str]:
    """사용 가능한 전략 목록 반환"""
    return [s.value for s in _STRATEGY_REGISTRY.keys()]


__all__ = [
    # Base
    "RAGStrategy",
    "PipelineComponents",
    # Strategies
    "MultiQueryRAG",
    "ConversationalRAG",
    "SelfQueryRAG",
    "HybridRAG",
    "BasicRAG",
    # Factory
    "resolve_strategy_type",
    "select_strategy",
    "create_rag_strategy",
    "get_available_strategies",
]
