"""
LLM Gateway

LiteLLM 기반 LLM 게이트웨이
- 통일된 invoke(prompt) 인터페이스
- 폴백 모델, 비용/토큰 추적
"""

from dataclasses import dataclass, field
from collections import deque
from typing import Any, Deque, Dict, List, Optional
from enum import Enum
import logging
import os
import time

import litellm
from litellm import acompletion

from .base import LLMClient, LLMResponse

logger = logging.getLogger(__name__)


class ModelProvider(str, Enum):
    """지원 프로바이더"""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"
    GROQ = "groq"
    GEMINI = "gemini"


@dataclass
class GatewayConfig:
    """게이트웨이 설정"""
    # 기본 모델
    default_model: str = "groq/llama-3.3-70b-versatile"

    # 요청 설정
    temperature: float = 0.7
    max_tokens: Optional[int] = 2048
    timeout: float = 60.0

    # 재시도는 클라이언트(LiteLLM) 레벨에서만
    max_retries: int = 0

    # 폴백 모델 (기본 모델 실패 시)
    fallback_models: List[str] = field(default_factory=list)

    # 비용 추적
    track_cost: bool = True

    # 시스템 프롬프트 (선택)
    system_prompt: Optional[str] = None

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """환경 변수에서 설정 로드"""
        max_tokens = os.environ.get("LLM_MAX_TOKENS", "2048")
        fallbacks = os.environ.get("LLM_FALLBACK_MODELS", "")
        return cls(
            default_model=os.environ.get("LLM_MODEL", cls.default_model),
            temperature=float(os.environ.get("LLM_TEMPERATURE", "0.7")),
            max_tokens=int(max_tokens) if max_tokens else None,
            timeout=float(os.environ.get("LLM_TIMEOUT", "60")),
            max_retries=int(os.environ.get("LLM_MAX_RETRIES", "0")),
            fallback_models=[m.strip() for m in fallbacks.split(",") if m.strip()],
        )


@dataclass
class GatewayStats:
    """게이트웨이 누적 통계 (지연 시간은 최근 100건)"""
    requests: int = 0
    tokens: int = 0
    cost_usd: float = 0.0
    latencies: Deque[float] = field(default_factory=lambda: deque(maxlen=100))

    def record(self, response: LLMResponse) -> None:
        self.requests += 1
        self.tokens += response.total_tokens
        self.cost_usd += response.cost or 0.0
        self.latencies.append(response.latency_ms)

    def to_dict(self) -> Dict[str, Any]:
        avg_latency = sum(self.latencies) / len(self.latencies) if self.latencies else 0.0
        return {
            "total_requests": self.requests,
            "total_tokens": self.tokens,
            "total_cost_usd": round(self.cost_usd, 4),
            "avg_latency_ms": round(avg_latency, 2),
        }


# 모델명 접두사 → 프로바이더
_PROVIDER_PREFIXES = {
    "gpt-": ModelProvider.OPENAI,
    "openai/": ModelProvider.OPENAI,
    "claude-": ModelProvider.ANTHROPIC,
    "anthropic/": ModelProvider.ANTHROPIC,
    "ollama/": ModelProvider.OLLAMA,
    "groq/": ModelProvider.GROQ,
    "gemini/": ModelProvider.GEMINI,
}


def provider_for(model: str) -> str:
    """모델명에서 프로바이더 추출 (알 수 없으면 "unknown")"""
    for prefix, provider in _PROVIDER_PREFIXES.items():
        if model.startswith(prefix):
            return provider.value
    return "unknown"


class LLMGateway(LLMClient):
    """
    LiteLLM 게이트웨이

    사용 예시:
        gateway = LLMGateway(GatewayConfig(default_model="gpt-4o-mini"))
        response = await gateway.invoke("What is recursion?")
        print(response.content)
    """

    def __init__(self, config: Optional[GatewayConfig] = None):
        self.config = config or GatewayConfig()
        self.stats = GatewayStats()
        self._configure_litellm()

    def _configure_litellm(self) -> None:
        """LiteLLM 설정"""
        litellm.drop_params = True  # 지원하지 않는 파라미터 자동 제거

        if self.config.max_retries:
            litellm.num_retries = self.config.max_retries

    @property
    def model_name(self) -> str:
        return self.config.default_model

    async def invoke(self, prompt: str) -> LLMResponse:
        """
        단일 프롬프트 호출

        Args:
            prompt: 프롬프트

        Returns:
            LLMResponse

        Raises:
            모든 모델 실패 시 마지막 예외를 그대로 전파
        """
        messages = []
        if self.config.system_prompt:
            messages.append({"role": "system", "content": self.config.system_prompt})
        messages.append({"role": "user", "content": prompt})

        start_time = time.time()

        try:
            response, model = await self._call_with_fallback(messages)
        except Exception as e:
            logger.error(f"LLM call failed: {e}")
            raise

        latency = (time.time() - start_time) * 1000

        llm_response = self._parse_response(response, model, latency)
        self.stats.record(llm_response)

        return llm_response

    async def _call_with_fallback(self, messages: List[Dict[str, str]]) -> tuple:
        """폴백 로직 포함 호출"""
        models_to_try = [self.config.default_model] + self.config.fallback_models
        last_error: Optional[Exception] = None

        for model in models_to_try:
            try:
                logger.debug(f"Trying model: {model}")
                response = await acompletion(
                    model=model,
                    messages=messages,
                    temperature=self.config.temperature,
                    max_tokens=self.config.max_tokens,
                    timeout=self.config.timeout,
                )
                return response, model
            except Exception as e:
                logger.warning(f"Model {model} failed: {e}")
                last_error = e

        raise last_error

    def _parse_response(
        self,
        response: Any,
        model: str,
        latency_ms: float
    ) -> LLMResponse:
        """LiteLLM 응답 파싱"""
        choice = response.choices[0]
        usage = getattr(response, "usage", None)

        cost = None
        if self.config.track_cost:
            try:
                cost = litellm.completion_cost(completion_response=response)
            except Exception as e:
                logger.debug(f"Cost calculation unavailable for {model}: {e}")

        return LLMResponse(
            content=choice.message.content or "",
            model=getattr(response, "model", None) or model,
            provider=provider_for(model),
            prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
            total_tokens=getattr(usage, "total_tokens", 0) or 0,
            latency_ms=latency_ms,
            cost=cost,
            finish_reason=getattr(choice, "finish_reason", None),
            raw_response=response,
        )

    def get_stats(self) -> Dict[str, Any]:
        """게이트웨이 통계"""
        return {**self.stats.to_dict(), "default_model": self.config.default_model}
