"""
RetrievalExecutor 테스트

- 단일 검색: 정확히 1회 호출, 실패 그대로 전파
- 동시 검색: STRICT (전부 성공 또는 첫 예외), BEST_EFFORT (부분 결과)
"""

import asyncio

import pytest

from agentic_tutor.config import FanoutPolicy
from agentic_tutor.rag.retriever import RetrievalExecutor

from conftest import FakeVectorStore, make_result


class TestSearch:
    """단일 검색"""

    @pytest.mark.asyncio
    async def test_single_call_with_filters(self):
        store = FakeVectorStore(default_results=[make_result("a", 0.9)])
        executor = RetrievalExecutor(store)

        response = await executor.search("roadmaps", "python", 5, where={"difficulty": "beginner"})

        assert store.call_count == 1
        assert store.calls[0].collection == "roadmaps"
        assert store.calls[0].where == {"difficulty": "beginner"}
        assert response.count == 1

    @pytest.mark.asyncio
    async def test_empty_where_is_not_sent(self):
        store = FakeVectorStore()
        executor = RetrievalExecutor(store)

        await executor.search("knowledge", "python", 5, where={})

        assert store.calls[0].where is None

    @pytest.mark.asyncio
    async def test_failure_propagates_unchanged(self):
        error = ConnectionError("vector store unreachable")
        store = FakeVectorStore(failures={"python": error})
        executor = RetrievalExecutor(store)

        with pytest.raises(ConnectionError) as exc_info:
            await executor.search("knowledge", "python", 5)

        assert exc_info.value is error
        assert store.call_count == 1


class TestSearchManyStrict:
    """STRICT 동시 검색"""

    @pytest.mark.asyncio
    async def test_responses_in_query_order(self):
        store = FakeVectorStore(
            results_by_query={
                "q1": [make_result("a", 0.9)],
                "q2": [make_result("b", 0.8), make_result("c", 0.7)],
            },
            delays={"q1": 0.02},
        )
        executor = RetrievalExecutor(store)

        fanout = await executor.search_many("knowledge", ["q1", "q2"], 5)

        assert [r.query for r in fanout.responses] == ["q1", "q2"]
        assert fanout.total_count == 3
        assert fanout.failed_queries == []

    @pytest.mark.asyncio
    async def test_searches_run_concurrently(self):
        store = FakeVectorStore(delays={"q1": 0.1, "q2": 0.1, "q3": 0.1})
        executor = RetrievalExecutor(store)

        loop = asyncio.get_running_loop()
        started = loop.time()
        await executor.search_many("knowledge", ["q1", "q2", "q3"], 5)
        elapsed = loop.time() - started

        assert elapsed < 0.25

    @pytest.mark.asyncio
    async def test_any_branch_failure_fails_whole_call(self):
        error = RuntimeError("shard offline")
        store = FakeVectorStore(
            default_results=[make_result("a", 0.9)],
            failures={"q2": error},
        )
        executor = RetrievalExecutor(store)

        with pytest.raises(RuntimeError) as exc_info:
            await executor.search_many("knowledge", ["q1", "q2", "q3"], 5)

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_pending_siblings_are_cancelled(self):
        store = FakeVectorStore(
            failures={"fast": RuntimeError("boom")},
            delays={"slow": 5.0},
        )
        executor = RetrievalExecutor(store)

        with pytest.raises(RuntimeError):
            await executor.search_many("knowledge", ["slow", "fast"], 5)

        await asyncio.sleep(0.01)
        assert store.cancelled == ["slow"]


class TestSearchManyBestEffort:
    """BEST_EFFORT 동시 검색"""

    @pytest.mark.asyncio
    async def test_failed_branches_dropped(self, caplog):
        store = FakeVectorStore(
            default_results=[make_result("a", 0.9)],
            failures={"q2": RuntimeError("shard offline")},
        )
        executor = RetrievalExecutor(store, fanout_policy=FanoutPolicy.BEST_EFFORT)

        fanout = await executor.search_many("knowledge", ["q1", "q2", "q3"], 5)

        assert [r.query for r in fanout.responses] == ["q1", "q3"]
        assert fanout.failed_queries == ["q2"]
        assert any("shard offline" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_all_branches_failing_raises_first_error(self):
        first = RuntimeError("first")
        store = FakeVectorStore(failures={"q1": first, "q2": RuntimeError("second")})
        executor = RetrievalExecutor(store, fanout_policy=FanoutPolicy.BEST_EFFORT)

        with pytest.raises(RuntimeError) as exc_info:
            await executor.search_many("knowledge", ["q1", "q2"], 5)

        assert exc_info.value is first

    @pytest.mark.asyncio
    async def test_policy_override_per_call(self):
        store = FakeVectorStore(failures={"q2": RuntimeError("x")})
        executor = RetrievalExecutor(store)

        fanout = await executor.search_many(
            "knowledge", ["q1", "q2"], 5, policy=FanoutPolicy.BEST_EFFORT
        )

        assert fanout.failed_queries == ["q2"]
