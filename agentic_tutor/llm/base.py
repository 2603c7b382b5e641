"""
LLM Client Base

언어 모델 추상 인터페이스: invoke(prompt) -> LLMResponse
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class LLMResponse:
    """LLM 응답"""
    content: str
    model: str = ""
    provider: str = ""

    # 토큰 사용량
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    # 메타데이터
    latency_ms: float = 0.0
    cost: Optional[float] = None
    finish_reason: Optional[str] = None

    # 원본 응답 (디버깅용)
    raw_response: Optional[Any] = None


class LLMClient(ABC):
    """
    단일 프롬프트 → 텍스트 완성 클라이언트

    호출 간 암묵적 메모리 없음. 생성자 주입으로 사용한다.
    """

    @abstractmethod
    async def invoke(self, prompt: str) -> LLMResponse:
        """
        프롬프트 완성

        Args:
            prompt: 전체 프롬프트 텍스트

        Returns:
            LLMResponse
        """
        pass

    @property
    def model_name(self) -> str:
        """추적용 모델 이름"""
        return type(self).__name__
