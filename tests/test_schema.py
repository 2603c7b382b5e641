"""
스키마 테스트

- 필터 파서: 첫 JSON 객체만, 스키마 불일치 시 ValueError
- 요청 스키마: 검증 + 페이로드 키 매핑
"""

import pytest
from pydantic import ValidationError

from agentic_tutor.schema import (
    AskRequest,
    ConversationTurn,
    MetadataFilter,
    Question,
    StrategyType,
    find_first_json_object,
    parse_metadata_filter,
)


class TestFindFirstJsonObject:

    def test_skips_invalid_braces(self):
        text = 'prefix {not json} then {"a": 1} and {"b": 2}'

        assert find_first_json_object(text) == {"a": 1}

    def test_nested_object_returned_whole(self):
        assert find_first_json_object('x {"where": {"k": "v"}} y') == {"where": {"k": "v"}}

    def test_none_when_absent(self):
        assert find_first_json_object("[1, 2, 3]") is None
        assert find_first_json_object("") is None


class TestParseMetadataFilter:

    def test_list_values_allowed(self):
        parsed = parse_metadata_filter(
            '{"semanticQuery": "graphs", "where": {"tags": ["bfs", "dfs"], "level": 2}}',
            "graph questions",
        )

        assert parsed.where == {"tags": ["bfs", "dfs"], "level": 2}

    def test_unknown_keys_ignored(self):
        parsed = parse_metadata_filter(
            '{"semanticQuery": "graphs", "where": {}, "explanation": "none"}',
            "graph questions",
        )

        assert parsed.semantic_query == "graphs"
        assert not parsed.has_conditions

    def test_blank_semantic_query_uses_question(self):
        parsed = parse_metadata_filter('{"semanticQuery": "  "}', "graph questions")

        assert parsed.semantic_query == "graph questions"

    @pytest.mark.parametrize("raw", [
        "nothing here",
        '{"where": "difficulty=beginner"}',
        '{"where": {"difficulty": null}}',
        '{"semanticQuery": ["a"]}',
    ])
    def test_rejects_malformed(self, raw):
        with pytest.raises(ValueError):
            parse_metadata_filter(raw, "q")

    def test_passthrough(self):
        passthrough = MetadataFilter.passthrough("q")

        assert passthrough.semantic_query == "q"
        assert passthrough.where == {}

    def test_filter_is_immutable(self):
        with pytest.raises(ValidationError):
            MetadataFilter.passthrough("q").semantic_query = "other"


class TestQuestion:

    def test_empty_text_rejected(self):
        with pytest.raises(ValidationError):
            Question(text="")

    def test_recent_history(self):
        turns = [ConversationTurn(role="user", content=str(i)) for i in range(5)]
        question = Question(text="q", conversation_history=turns)

        assert [t.content for t in question.recent_history(3)] == ["2", "3", "4"]
        assert question.recent_history(0) == []


class TestAskRequest:

    def test_defaults(self):
        request = AskRequest(question="q")

        assert request.strategy == StrategyType.MULTI_QUERY.value
        assert request.to_question().options.top_k is None

    def test_from_payload_maps_camel_case_options(self):
        request = AskRequest.from_payload({
            "question": "q",
            "strategy": "self-query",
            "options": {"collectionKey": "roadmaps", "topK": 7},
        })

        assert request.strategy == "self_query"
        question = request.to_question()
        assert question.options.collection == "roadmaps"
        assert question.options.top_k == 7

    @pytest.mark.parametrize("name, expected", [
        ("multiQuery", "multi_query"),
        ("selfQuery", "self_query"),
        ("self-query", "self_query"),
        ("CONVERSATIONAL", "conversational"),
        ("single_shot", "basic"),
    ])
    def test_strategy_aliases_accepted(self, name, expected):
        request = AskRequest.from_payload({"question": "q", "strategy": name})

        assert request.strategy == expected
        assert AskRequest(question="q", strategy=name).strategy == expected

    @pytest.mark.parametrize("payload", [
        {"question": "q", "strategy": "graph"},
        {"question": "q", "options": {"topK": 0}},
        {"question": "q", "options": {"numQueries": 11}},
        {"question": "q", "options": {"unexpected": True}},
    ])
    def test_invalid_payloads(self, payload):
        with pytest.raises(ValidationError):
            AskRequest.from_payload(payload)
