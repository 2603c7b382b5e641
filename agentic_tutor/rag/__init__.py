# RAG Components
from .stores import (
    VectorStore,
    SearchResult,
    SearchResponse,
    ChromaStore,
    ChromaStoreConfig,
)
from .query_processor import QueryTransformer
from .retriever import RetrievalExecutor, FanoutResult
from .fusion import (
    ResultFuser,
    KeywordScorer,
    ConstantKeywordScorer,
    HybridSearchResult,
    hybrid_score,
    extract_keywords,
)
from .gate import ConfidenceGate, GateDecision
from .synthesizer import AnswerSynthesizer
from .strategies import (
    RAGStrategy,
    PipelineComponents,
    select_strategy,
    create_rag_strategy,
    get_available_strategies,
)
from .engine import AdaptiveRAGEngine

__all__ = [
    # Stores
    "VectorStore",
    "SearchResult",
    "SearchResponse",
    "ChromaStore",
    "ChromaStoreConfig",
    # Pipeline
    "QueryTransformer",
    "RetrievalExecutor",
    "FanoutResult",
    "ResultFuser",
    "KeywordScorer",
    "ConstantKeywordScorer",
    "HybridSearchResult",
    "hybrid_score",
    "extract_keywords",
    "ConfidenceGate",
    "GateDecision",
    "AnswerSynthesizer",
    # Strategies
    "RAGStrategy",
    "PipelineComponents",
    "select_strategy",
    "create_rag_strategy",
    "get_available_strategies",
    # Engine
    "AdaptiveRAGEngine",
]
