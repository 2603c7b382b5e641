"""
Answer Schemas

답변 응답 + 전략별 진단 정보 (strategy 태그로 구분되는 유니온)
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from .base import FrozenSchema
from .filters import MetadataFilter


class Source(FrozenSchema):
    """답변 근거 문서 (미리보기)"""
    content: str
    score: float
    metadata: Dict[str, Any] = Field(default_factory=dict)


class _DiagnosticsBase(FrozenSchema):
    """공통 진단 필드"""
    best_score: float = 0.0     # 게이트 이전 최고 점수
    threshold: float = 0.0      # 적용된 min_score


class MultiQueryDiagnostics(_DiagnosticsBase):
    strategy: Literal["multi_query"] = "multi_query"
    queries: List[str] = Field(default_factory=list)
    results_before_dedup: int = 0
    results_after_dedup: int = 0


class ConversationalDiagnostics(_DiagnosticsBase):
    strategy: Literal["conversational"] = "conversational"
    contextualized_question: str = ""


class SelfQueryDiagnostics(_DiagnosticsBase):
    strategy: Literal["self_query"] = "self_query"
    filters: Optional[MetadataFilter] = None


class HybridDiagnostics(_DiagnosticsBase):
    strategy: Literal["hybrid"] = "hybrid"
    alpha: float = 0.7
    keywords: List[str] = Field(default_factory=list)


class BasicDiagnostics(_DiagnosticsBase):
    strategy: Literal["basic"] = "basic"
    template: str = "qa"
    collection_empty: bool = False


Diagnostics = Annotated[
    Union[
        MultiQueryDiagnostics,
        ConversationalDiagnostics,
        SelfQueryDiagnostics,
        HybridDiagnostics,
        BasicDiagnostics,
    ],
    Field(discriminator="strategy"),
]


class AnswerResponse(FrozenSchema):
    """
    답변 엔진 응답

    근거가 있는 답변 또는 "정보 부족" 응답 중 하나로만 생성된다.
    """
    answer: str
    sources: List[Source] = Field(default_factory=list)
    confidence: float = 0.0
    diagnostics: Diagnostics

    @property
    def strategy(self) -> str:
        return self.diagnostics.strategy

    @property
    def is_grounded(self) -> bool:
        """근거 문서 기반 답변 여부"""
        return bool(self.sources)

    def to_dict(self) -> Dict[str, Any]:
        """JSON 응답 형태로 변환"""
        data = self.model_dump()
        data["strategy"] = self.strategy
        return data
