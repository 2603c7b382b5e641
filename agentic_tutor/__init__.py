"""
Agentic Tutor Core

교육 플랫폼 AI 튜터용 적응형 RAG 답변 엔진

Usage:
    from agentic_tutor import AdaptiveRAGEngine, RAGConfig
    from agentic_tutor.llm import LLMGateway
    from agentic_tutor.rag.stores import ChromaStore

    engine = AdaptiveRAGEngine(ChromaStore(), LLMGateway(), RAGConfig.from_env())
    response = await engine.answer("What is recursion?", "hybrid")
"""

__version__ = "0.1.0"

from .config import RAGConfig, FanoutPolicy
from .schema import (
    Question,
    AskRequest,
    AnswerResponse,
    StrategyType,
    MetadataFilter,
)
from .rag import AdaptiveRAGEngine

__all__ = [
    "__version__",
    "RAGConfig",
    "FanoutPolicy",
    "Question",
    "AskRequest",
    "AnswerResponse",
    "StrategyType",
    "MetadataFilter",
    "AdaptiveRAGEngine",
]
