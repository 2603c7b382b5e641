"""
Question Schemas

질문, 대화 이력, 요청 옵션 및 상위 계층 요청 스키마
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import Field, field_validator

from .base import FrozenSchema


class StrategyType(str, Enum):
    """검색 전략 타입"""
    MULTI_QUERY = "multi_query"          # 질문 변형 → 동시 검색 → 융합
    CONVERSATIONAL = "conversational"    # 대화 이력으로 질문 독립화
    SELF_QUERY = "self_query"            # 메타데이터 필터 추출
    HYBRID = "hybrid"                    # 시맨틱 + 키워드 가중 결합
    BASIC = "basic"                      # 단일 검색 → 답변


# 문자열 별칭 ("-"는 "_"로, 대소문자 무시)
STRATEGY_ALIASES = {
    "multi_query": StrategyType.MULTI_QUERY,
    "multiquery": StrategyType.MULTI_QUERY,
    "multi": StrategyType.MULTI_QUERY,
    "conversational": StrategyType.CONVERSATIONAL,
    "conversation": StrategyType.CONVERSATIONAL,
    "self_query": StrategyType.SELF_QUERY,
    "selfquery": StrategyType.SELF_QUERY,
    "hybrid": StrategyType.HYBRID,
    "basic": StrategyType.BASIC,
    "single_shot": StrategyType.BASIC,
}


def parse_strategy_type(value: Union[str, StrategyType]) -> StrategyType:
    """문자열/enum → StrategyType ("multi-query", "multiQuery" 표기 허용)"""
    if isinstance(value, StrategyType):
        return value

    key = str(value).replace("-", "_").lower()
    if key not in STRATEGY_ALIASES:
        raise ValueError(
            f"Unknown strategy type: {value}. "
            f"Available: {list(STRATEGY_ALIASES.keys())}"
        )
    return STRATEGY_ALIASES[key]


class ConversationTurn(FrozenSchema):
    """대화 이력 한 턴"""
    role: str = Field(..., min_length=1)
    content: str

    def format(self) -> str:
        return f"{self.role}: {self.content}"


class QueryOptions(FrozenSchema):
    """요청 옵션 (None이면 설정 기본값 사용)"""
    collection: Optional[str] = Field(None, min_length=1)
    top_k: Optional[int] = Field(None, ge=1)
    num_queries: Optional[int] = Field(None, ge=1)
    alpha: Optional[float] = Field(None, ge=0.0, le=1.0)
    template: Optional[str] = None


class Question(FrozenSchema):
    """답변 엔진 입력"""
    text: str = Field(..., min_length=1)
    conversation_history: List[ConversationTurn] = Field(default_factory=list)
    options: QueryOptions = Field(default_factory=QueryOptions)

    def recent_history(self, turns: int) -> List[ConversationTurn]:
        """최근 N개 턴"""
        if turns <= 0:
            return []
        return list(self.conversation_history[-turns:])


class AskRequest(FrozenSchema):
    """상위 계층(API 라우트) 요청"""
    question: str = Field(..., min_length=1, description="Natural language question")
    strategy: StrategyType = StrategyType.MULTI_QUERY
    collection: Optional[str] = Field(None, min_length=1)
    top_k: Optional[int] = Field(None, ge=1, le=50)
    num_queries: Optional[int] = Field(None, ge=1, le=10)
    conversation_history: List[ConversationTurn] = Field(default_factory=list)
    alpha: Optional[float] = Field(None, ge=0.0, le=1.0)
    template: Optional[str] = None

    @field_validator("strategy", mode="before")
    @classmethod
    def _resolve_strategy(cls, value: Any) -> StrategyType:
        return parse_strategy_type(value)

    def to_question(self) -> Question:
        """엔진 입력으로 변환"""
        return Question(
            text=self.question,
            conversation_history=self.conversation_history,
            options=QueryOptions(
                collection=self.collection,
                top_k=self.top_k,
                num_queries=self.num_queries,
                alpha=self.alpha,
                template=self.template,
            ),
        )

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AskRequest":
        """{question, strategy, options: {...}} 형태의 페이로드 파싱"""
        options = dict(payload.get("options") or {})
        history = options.pop("conversation_history", None) or options.pop("conversationHistory", None)
        if "collectionKey" in options:
            options["collection"] = options.pop("collectionKey")
        if "topK" in options:
            options["top_k"] = options.pop("topK")
        if "numQueries" in options:
            options["num_queries"] = options.pop("numQueries")

        data: Dict[str, Any] = {"question": payload.get("question", "")}
        if payload.get("strategy"):
            data["strategy"] = payload["strategy"]
        if history:
            data["conversation_history"] = history
        data.update(options)
        return cls.model_validate(data)
