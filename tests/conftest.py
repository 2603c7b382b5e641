"""
테스트 공용 픽스처

결정적 테스트 더블:
- FakeLLM: 스크립트 응답 + 호출 기록
- FakeVectorStore: 쿼리별 스크립트 결과 + 실패 주입
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import pytest

from agentic_tutor.config import RAGConfig
from agentic_tutor.llm.base import LLMClient, LLMResponse
from agentic_tutor.observability import LangfuseClient, LangfuseConfig, Tracer, TracerConfig
from agentic_tutor.rag.engine import AdaptiveRAGEngine
from agentic_tutor.rag.stores.base import SearchResponse, SearchResult, VectorStore


def make_result(
    doc_id: str,
    score: float,
    content: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> SearchResult:
    return SearchResult(
        id=doc_id,
        content=content if content is not None else f"content of {doc_id}",
        score=score,
        metadata=metadata or {"doc": doc_id},
    )


class FakeLLM(LLMClient):
    """스크립트 기반 LLM (응답 큐 → handler → default 순)"""

    def __init__(
        self,
        responses: Optional[List[str]] = None,
        handler: Optional[Callable[[str], str]] = None,
        error: Optional[Exception] = None,
        default: str = "Generated answer"
    ):
        self.responses = list(responses or [])
        self.handler = handler
        self.error = error
        self.default = default
        self.prompts: List[str] = []

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    @property
    def model_name(self) -> str:
        return "fake-model"

    async def invoke(self, prompt: str) -> LLMResponse:
        self.prompts.append(prompt)
        await asyncio.sleep(0)

        if self.error is not None:
            raise self.error
        if self.responses:
            content = self.responses.pop(0)
        elif self.handler is not None:
            content = self.handler(prompt)
        else:
            content = self.default

        return LLMResponse(content=content, model="fake-model", provider="fake")


@dataclass
class SearchCall:
    collection: str
    query: str
    top_k: int
    where: Optional[Dict[str, Any]]


class FakeVectorStore(VectorStore):
    """쿼리별 결과/실패/지연을 지정할 수 있는 벡터 저장소"""

    def __init__(
        self,
        results_by_query: Optional[Dict[str, List[SearchResult]]] = None,
        default_results: Optional[List[SearchResult]] = None,
        failures: Optional[Dict[str, Exception]] = None,
        delays: Optional[Dict[str, float]] = None
    ):
        self.results_by_query = results_by_query or {}
        self.default_results = default_results or []
        self.failures = failures or {}
        self.delays = delays or {}
        self.calls: List[SearchCall] = []
        self.cancelled: List[str] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def search(
        self,
        collection: str,
        query_text: str,
        top_k: int = 5,
        where: Optional[Dict[str, Any]] = None
    ) -> SearchResponse:
        self.calls.append(SearchCall(collection, query_text, top_k, where))

        try:
            await asyncio.sleep(self.delays.get(query_text, 0))
        except asyncio.CancelledError:
            self.cancelled.append(query_text)
            raise

        if query_text in self.failures:
            raise self.failures[query_text]

        results = list(self.results_by_query.get(query_text, self.default_results))[:top_k]
        return SearchResponse(
            results=results,
            count=len(results),
            query=query_text,
            collection=collection,
        )


def route_prompts(
    variants: str = "",
    contextualized: str = "",
    filters: str = "{}",
    answer: str = "Generated answer"
) -> Callable[[str], str]:
    """프롬프트 종류별 응답 handler"""

    def handler(prompt: str) -> str:
        if "alternative phrasings" in prompt:
            return variants
        if "Standalone question:" in prompt:
            return contextualized
        if "Extract structured metadata filters" in prompt:
            return filters
        return answer

    return handler


@pytest.fixture
def disabled_tracer() -> Tracer:
    """Langfuse 없이 동작하는 no-op Tracer"""
    return Tracer(
        TracerConfig(enabled=False),
        LangfuseClient(LangfuseConfig(enabled=False)),
    )


@pytest.fixture
def make_engine(disabled_tracer):
    """엔진 팩토리"""

    def factory(store: VectorStore, llm: LLMClient, **config: Any) -> AdaptiveRAGEngine:
        return AdaptiveRAGEngine(
            store=store,
            llm=llm,
            config=RAGConfig(**config),
            tracer=disabled_tracer,
        )

    return factory
