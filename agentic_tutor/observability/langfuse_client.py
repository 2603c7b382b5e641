"""
Langfuse Client

RAG 요청 추적용 Langfuse 래퍼 (v3 span API)

자격 증명이 없으면 비활성화되며 모든 호출이 no-op이 된다.
Langfuse 쪽 실패는 로그만 남기고 호출자에게 전파하지 않는다.
"""

from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass
import os
import logging

from langfuse import Langfuse

logger = logging.getLogger(__name__)


@dataclass
class LangfuseConfig:
    """Langfuse 설정 (비어 있는 값은 LANGFUSE_* 환경 변수로 채움)"""
    public_key: Optional[str] = None
    secret_key: Optional[str] = None
    host: str = "https://cloud.langfuse.com"
    enabled: bool = True
    debug: bool = False

    def __post_init__(self):
        self.public_key = self.public_key or os.environ.get("LANGFUSE_PUBLIC_KEY")
        self.secret_key = self.secret_key or os.environ.get("LANGFUSE_SECRET_KEY")
        self.host = os.environ.get("LANGFUSE_HOST") or self.host


def _guarded(action: str, fn: Callable[[], Any]) -> Any:
    try:
        return fn()
    except Exception as e:
        logger.error(f"Langfuse {action} failed: {e}")
        return None


class Span:
    """Langfuse span 래퍼 (span이 None이면 no-op)"""

    def __init__(self, span: Optional[Any] = None):
        self._span = span

    @property
    def is_recording(self) -> bool:
        return self._span is not None

    @property
    def trace_id(self) -> str:
        return getattr(self._span, "trace_id", "") or ""

    def update(self, **fields: Any):
        """스팬 속성 갱신 (None 값은 제외)"""
        values = {k: v for k, v in fields.items() if v is not None}
        if self._span and values:
            _guarded("span update", lambda: self._span.update(**values))

    def update_trace(self, **fields: Any):
        values = {k: v for k, v in fields.items() if v is not None}
        if self._span and values:
            _guarded("trace update", lambda: self._span.update_trace(**values))

    def end(self, output: Optional[Any] = None):
        if not self._span:
            return
        self.update(output=output)
        _guarded("span end", self._span.end)

    def span(self, name: str, input: Optional[Any] = None, metadata: Optional[Dict[str, Any]] = None) -> "Span":
        """하위 스팬"""
        if not self._span:
            return Span()
        child = _guarded(
            "child span",
            lambda: self._span.start_span(name=name, input=input, metadata=metadata or {}),
        )
        return Span(child)

    def generation(self, name: str, model: str, output: Optional[Any] = None, metadata: Optional[Dict[str, Any]] = None):
        """LLM 호출 기록 (즉시 종료)"""
        if not self._span:
            return

        def record():
            gen = self._span.start_generation(name=name, model=model, metadata=metadata or {})
            if output is not None:
                gen.update(output=output)
            gen.end()

        _guarded("generation", record)


class LangfuseClient:
    """
    Langfuse 클라이언트 (lazy 초기화)

    Usage:
        client = LangfuseClient()
        span = client.start_trace("rag_answer", input={"question": q})
        ...
        span.end(output=answer)
        client.flush()
    """

    def __init__(self, config: Optional[LangfuseConfig] = None):
        self.config = config or LangfuseConfig()
        self._client: Optional[Langfuse] = None
        self._initialized = False

    @property
    def is_available(self) -> bool:
        """Langfuse 사용 가능 여부 (첫 호출 시 초기화)"""
        if not self._initialized:
            self._initialized = True
            self._client = self._connect()
        return self._client is not None

    def _connect(self) -> Optional[Langfuse]:
        if not self.config.enabled:
            logger.info("Langfuse is disabled")
            return None

        if not (self.config.public_key and self.config.secret_key):
            logger.warning(
                "Langfuse credentials not found; tracing disabled. "
                "Set LANGFUSE_PUBLIC_KEY and LANGFUSE_SECRET_KEY to enable it."
            )
            return None

        client = _guarded("initialization", lambda: Langfuse(
            public_key=self.config.public_key,
            secret_key=self.config.secret_key,
            host=self.config.host,
            debug=self.config.debug,
        ))
        if client is not None:
            logger.info(f"Langfuse initialized: host={self.config.host}")
        return client

    def start_trace(
        self,
        name: str,
        input: Optional[Any] = None,
        metadata: Optional[Dict[str, Any]] = None,
        tags: Optional[List[str]] = None
    ) -> Span:
        """
        루트 스팬 생성 + 트레이스 이름/태그 지정

        Returns:
            Span (Langfuse 미사용 시 no-op)
        """
        if not self.is_available:
            return Span()

        root = Span(_guarded(
            "trace start",
            lambda: self._client.start_span(name=name, input=input, metadata=metadata or {}),
        ))
        root.update_trace(name=name, input=input, tags=tags or None)
        return root

    def flush(self):
        """버퍼된 이벤트 전송"""
        if self._client:
            _guarded("flush", self._client.flush)


# Global client instance
_langfuse_client: Optional[LangfuseClient] = None


def get_langfuse_client(config: Optional[LangfuseConfig] = None) -> LangfuseClient:
    """전역 Langfuse 클라이언트 반환"""
    global _langfuse_client
    if _langfuse_client is None:
        _langfuse_client = LangfuseClient(config)
    return _langfuse_client
