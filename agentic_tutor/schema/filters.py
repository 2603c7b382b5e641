"""
Metadata Filter Schema

자연어 질문에서 추출한 메타데이터 필터 + LLM 출력 파서

LLM 출력은 신뢰할 수 없는 텍스트로 취급한다:
첫 번째 올바른 JSON 객체만 파싱하고, 스키마와 맞지 않으면 기본값으로 되돌린다.
"""

from typing import Any, Dict, List, Optional, Union
import json
import logging

from pydantic import ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr, ValidationError

from .base import FrozenSchema, SchemaBase

logger = logging.getLogger(__name__)


Scalar = Union[StrictStr, StrictBool, StrictInt, StrictFloat]
FilterValue = Union[Scalar, List[Scalar]]


class MetadataFilter(FrozenSchema):
    """시맨틱 쿼리 + 메타데이터 where 조건"""
    semantic_query: str = Field(..., min_length=1)
    where: Dict[str, FilterValue] = Field(default_factory=dict)

    @classmethod
    def passthrough(cls, question: str) -> "MetadataFilter":
        """추출 실패 시 기본값"""
        return cls(semantic_query=question, where={})

    @property
    def has_conditions(self) -> bool:
        return bool(self.where)


class _FilterPayload(SchemaBase):
    """LLM이 내보낸 JSON 페이로드 스키마"""

    # 알 수 없는 키는 무시, 알려진 키는 타입 엄격 검증
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    semantic_query: Optional[StrictStr] = Field(None, alias="semanticQuery")
    where: Optional[Dict[StrictStr, FilterValue]] = None


def find_first_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    텍스트에서 첫 번째로 올바르게 파싱되는 JSON 객체 반환

    '{' 위치마다 raw_decode를 시도하고, dict로 파싱되는 첫 결과를 사용한다.

    Returns:
        파싱된 dict (없으면 None)
    """
    decoder = json.JSONDecoder()
    start = text.find("{")

    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            value = None

        if isinstance(value, dict):
            return value

        start = text.find("{", start + 1)

    return None


def parse_metadata_filter(raw: str, question: str) -> MetadataFilter:
    """
    LLM 원문 출력 → MetadataFilter

    구조가 맞지 않으면 ValueError (호출자가 기본값으로 처리)

    Args:
        raw: LLM 출력 원문
        question: 원본 질문 (semanticQuery 누락 시 사용)

    Raises:
        ValueError: JSON 객체가 없거나 스키마 검증 실패
    """
    payload = find_first_json_object(raw)
    if payload is None:
        raise ValueError("No JSON object found in model output")

    try:
        parsed = _FilterPayload.model_validate(payload)
    except ValidationError as e:
        raise ValueError(f"Filter payload failed validation: {e.error_count()} errors") from e

    semantic_query = (parsed.semantic_query or "").strip() or question
    return MetadataFilter(semantic_query=semantic_query, where=parsed.where or {})
