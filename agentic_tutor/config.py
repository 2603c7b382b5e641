"""
RAG Configuration

답변 엔진 설정 (환경 변수 기반)
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict
import os


INSUFFICIENT_ANSWER = (
    "I don't have enough information to answer this question accurately."
)

EMPTY_COLLECTION_ANSWER = (
    "The {collection} collection is currently empty. "
    "Please add some content first to enable knowledge search."
)


class FanoutPolicy(str, Enum):
    """멀티 쿼리 동시 검색 실패 정책"""
    STRICT = "strict"              # 하나라도 실패하면 전체 실패
    BEST_EFFORT = "best_effort"    # 실패한 검색은 버리고 나머지로 진행


@dataclass
class RAGConfig:
    """RAG 파이프라인 설정"""
    # 검색 설정
    top_k: int = 5
    min_score: float = 0.5
    default_collection: str = "knowledge"

    # Multi-query 설정
    num_queries: int = 3
    multi_query_rerank_multiplier: int = 2
    fanout_policy: FanoutPolicy = FanoutPolicy.STRICT

    # Conversational 설정
    history_turns: int = 3

    # Hybrid 설정
    hybrid_alpha: float = 0.7
    hybrid_fetch_multiplier: int = 2
    keyword_placeholder_score: float = 0.5

    # 응답 설정
    source_preview_chars: int = 200
    insufficient_answer: str = INSUFFICIENT_ANSWER

    def __post_init__(self):
        if isinstance(self.fanout_policy, str):
            try:
                self.fanout_policy = FanoutPolicy(self.fanout_policy.lower())
            except ValueError:
                raise ValueError(
                    f"Unknown fanout policy: {self.fanout_policy}. "
                    f"Available: {[p.value for p in FanoutPolicy]}"
                )

        if self.top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {self.top_k}")
        if self.num_queries < 1:
            raise ValueError(f"num_queries must be >= 1, got {self.num_queries}")
        if not 0.0 <= self.hybrid_alpha <= 1.0:
            raise ValueError(f"hybrid_alpha must be in [0, 1], got {self.hybrid_alpha}")
        if not 0.0 <= self.min_score <= 1.0:
            raise ValueError(f"min_score must be in [0, 1], got {self.min_score}")
        if self.history_turns < 0:
            raise ValueError(f"history_turns must be >= 0, got {self.history_turns}")

    @classmethod
    def from_env(cls, **overrides: Any) -> "RAGConfig":
        """환경 변수에서 설정 로드 (overrides가 우선)"""
        env: Dict[str, Any] = {
            "top_k": int(os.environ.get("RAG_TOP_K", "5")),
            "min_score": float(os.environ.get("RAG_MIN_SCORE", "0.5")),
            "default_collection": os.environ.get("RAG_DEFAULT_COLLECTION", "knowledge"),
            "num_queries": int(os.environ.get("RAG_NUM_QUERIES", "3")),
            "fanout_policy": os.environ.get("RAG_FANOUT_POLICY", "strict"),
            "history_turns": int(os.environ.get("RAG_HISTORY_TURNS", "3")),
            "hybrid_alpha": float(os.environ.get("RAG_HYBRID_ALPHA", "0.7")),
            "source_preview_chars": int(os.environ.get("RAG_SOURCE_PREVIEW_CHARS", "200")),
        }
        env.update({
            k: v for k, v in overrides.items()
            if k in cls.__dataclass_fields__
        })
        return cls(**env)

    def merged(self, **overrides: Any) -> "RAGConfig":
        """일부 값을 덮어쓴 새 설정 반환"""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({
            k: v for k, v in overrides.items()
            if k in self.__dataclass_fields__ and v is not None
        })
        return RAGConfig(**values)
