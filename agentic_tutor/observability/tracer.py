"""
Tracer

RAG 요청 단위 추적 (요청당 스팬 1개)
"""

from typing import Optional, Dict, Any, List, Sequence
from dataclasses import dataclass
from contextlib import asynccontextmanager
import logging

from .langfuse_client import LangfuseClient, Span, get_langfuse_client

logger = logging.getLogger(__name__)


@dataclass
class TracerConfig:
    """Tracer 설정"""
    enabled: bool = True
    include_inputs: bool = True
    include_outputs: bool = True
    max_output_length: int = 2000


class Tracer:
    """
    RAG 요청 Tracer

    요청마다 독립된 TraceContext를 만들기 때문에 동시 요청 간 공유 상태가 없다.
    """

    def __init__(
        self,
        config: Optional[TracerConfig] = None,
        langfuse_client: Optional[LangfuseClient] = None
    ):
        self.config = config or TracerConfig()
        self._langfuse = langfuse_client or get_langfuse_client()

    @property
    def is_enabled(self) -> bool:
        """추적 활성화 여부"""
        return self.config.enabled and self._langfuse.is_available

    @asynccontextmanager
    async def trace(
        self,
        name: str,
        input: Optional[Any] = None,
        metadata: Optional[Dict[str, Any]] = None,
        tags: Optional[List[str]] = None
    ):
        """
        트레이스 컨텍스트 매니저

        예외는 스팬에 기록한 뒤 그대로 다시 발생시킨다.

        Usage:
            async with tracer.trace("rag_answer", input=question) as t:
                response = await strategy.execute(question)
                t.log_output(response.to_dict())
        """
        if self.is_enabled:
            span = self._langfuse.start_trace(
                name=name,
                input=input if self.config.include_inputs else "[REDACTED]",
                metadata=metadata,
                tags=tags
            )
        else:
            span = Span(None)

        context = TraceContext(span, self)
        try:
            yield context
        except Exception as e:
            context.log_error(e)
            raise
        finally:
            span.end(output=context.output)
            if span.is_recording:
                span.update_trace(output=context.output)
                self._langfuse.flush()

    def _truncate_output(self, output: Any) -> Any:
        """출력 길이 제한"""
        if not self.config.include_outputs:
            return "[REDACTED]"
        if isinstance(output, str) and len(output) > self.config.max_output_length:
            return output[:self.config.max_output_length] + "...[truncated]"
        return output


class TraceContext:
    """요청 하나의 트레이스 컨텍스트"""

    def __init__(self, span: Span, tracer: Tracer):
        self._span = span
        self._tracer = tracer
        self.output: Optional[Any] = None

    @property
    def trace_id(self) -> str:
        return self._span.trace_id

    def log_output(self, output: Any):
        """최종 출력 설정"""
        self.output = self._tracer._truncate_output(output)

    def log_error(self, error: BaseException):
        """에러 기록"""
        self._span.update(
            level="ERROR",
            status_message=f"{type(error).__name__}: {error}",
            metadata={"error": str(error), "error_type": type(error).__name__}
        )

    def log_retrieval(self, strategy: str, sources: Sequence[Dict[str, Any]], best_score: float, threshold: float):
        """검색/게이트 결과 요약"""
        self._span.span(
            name=f"retrieval_{strategy}",
            metadata={
                "result_count": len(sources),
                "best_score": best_score,
                "threshold": threshold,
            }
        ).end(output=[
            {"score": s.get("score", 0.0), "metadata": s.get("metadata", {})}
            for s in sources
        ])

    def log_generation(self, model: str, output: str):
        """답변 생성 호출 기록"""
        self._span.generation(
            name="answer_synthesis",
            model=model,
            output=self._tracer._truncate_output(output)
        )


# Global tracer instance
_tracer: Optional[Tracer] = None


def get_tracer(config: Optional[TracerConfig] = None) -> Tracer:
    """전역 Tracer 반환"""
    global _tracer
    if _tracer is None:
        _tracer = Tracer(config)
    return _tracer
