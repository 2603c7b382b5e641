"""
StrategySelector 테스트 (I/O 없는 순수 디스패치)
"""

import pytest

from agentic_tutor.schema.question import StrategyType
from agentic_tutor.rag.strategies import (
    BasicRAG,
    ConversationalRAG,
    HybridRAG,
    MultiQueryRAG,
    SelfQueryRAG,
    get_available_strategies,
    resolve_strategy_type,
    select_strategy,
)


class TestSelectStrategy:

    @pytest.mark.parametrize("strategy, expected", [
        (StrategyType.MULTI_QUERY, MultiQueryRAG),
        ("multi_query", MultiQueryRAG),
        ("multi-query", MultiQueryRAG),
        ("multiQuery", MultiQueryRAG),
        ("conversational", ConversationalRAG),
        ("selfQuery", SelfQueryRAG),
        ("self-query", SelfQueryRAG),
        ("hybrid", HybridRAG),
        ("basic", BasicRAG),
        ("single_shot", BasicRAG),
    ])
    def test_routes_to_pipeline(self, strategy, expected):
        assert select_strategy(strategy) is expected

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown strategy type"):
            select_strategy("corrective")

    def test_resolve_keeps_enum(self):
        assert resolve_strategy_type(StrategyType.HYBRID) is StrategyType.HYBRID

    def test_available_strategies(self):
        assert get_available_strategies() == [
            "multi_query", "conversational", "self_query", "hybrid", "basic"
        ]

    def test_strategy_type_attribute_matches_registry(self):
        for name in get_available_strategies():
            assert select_strategy(name).strategy_type.value == name
