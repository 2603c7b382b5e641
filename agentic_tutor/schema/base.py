"""
Base Schema Classes

공통 베이스 클래스 정의
"""

from typing import Dict, Any, TypeVar, Type
from pydantic import BaseModel, ConfigDict


T = TypeVar("T", bound="SchemaBase")


class SchemaBase(BaseModel):
    """모든 스키마의 베이스 클래스"""

    model_config = ConfigDict(
        # JSON 직렬화 시 enum을 값으로
        use_enum_values=True,
        # 추가 필드 허용 안함
        extra="forbid",
    )

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return self.model_dump()

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """딕셔너리에서 생성"""
        return cls.model_validate(data)


class FrozenSchema(SchemaBase):
    """요청 단위로 생성되는 불변 스키마"""

    model_config = ConfigDict(
        use_enum_values=True,
        extra="forbid",
        frozen=True,
    )
