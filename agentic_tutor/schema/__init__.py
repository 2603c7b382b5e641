"""
Schema Package

질문/필터/응답 스키마 정의
"""

from .base import SchemaBase, FrozenSchema
from .question import (
    StrategyType,
    parse_strategy_type,
    ConversationTurn,
    QueryOptions,
    Question,
    AskRequest,
)
from .filters import (
    MetadataFilter,
    find_first_json_object,
    parse_metadata_filter,
)
from .answer import (
    Source,
    Diagnostics,
    MultiQueryDiagnostics,
    ConversationalDiagnostics,
    SelfQueryDiagnostics,
    HybridDiagnostics,
    BasicDiagnostics,
    AnswerResponse,
)

__all__ = [
    # Base
    "SchemaBase",
    "FrozenSchema",
    # Question
    "StrategyType",
    "parse_strategy_type",
    "ConversationTurn",
    "QueryOptions",
    "Question",
    "AskRequest",
    # Filters
    "MetadataFilter",
    "find_first_json_object",
    "parse_metadata_filter",
    # Answer
    "Source",
    "Diagnostics",
    "MultiQueryDiagnostics",
    "ConversationalDiagnostics",
    "SelfQueryDiagnostics",
    "HybridDiagnostics",
    "BasicDiagnostics",
    "AnswerResponse",
]
