"""Tests for matcher specs."""

from __future__ import annotations

import pytest

from pactum.matchers import (
    Matcher,
    boolean,
    canonical_body,
    decimal,
    each_like,
    include,
    integer,
    like,
    regex,
    reify,
    string,
    timestamp,
    to_integration,
)


class TestIntegrationJson:
    def test_like(self) -> None:
        assert like(42).model_dump() == {"pact:matcher:type": "type", "value": 42}

    def test_regex_attributes(self) -> None:
        assert regex(r"\d+", "12").model_dump() == {
            "pact:matcher:type": "regex",
            "regex": r"\d+",
            "value": "12",
        }

    def test_each_like_repeats_example(self) -> None:
        data = each_like({"id": 1}, min=2).model_dump()
        assert data["min"] == 2
        assert data["value"] == [{"id": 1}, {"id": 1}]

    def test_nested_matchers(self) -> None:
        data = each_like({"id": integer(1)}).model_dump()
        assert data["value"] == [{"id": {"pact:matcher:type": "integer", "value": 1}}]

    def test_generator_rendered(self) -> None:
        matcher = Matcher(type="type", value="x", generator="Uuid")
        assert matcher.model_dump()["pact:generator:type"] == "Uuid"

    @pytest.mark.parametrize(
        "matcher, expected_type",
        [
            (decimal(), "decimal"),
            (boolean(), "boolean"),
            (string(), "type"),
            (include("abc"), "include"),
            (timestamp("yyyy-MM-dd", "2026-01-01"), "timestamp"),
        ],
    )
    def test_types(self, matcher: Matcher, expected_type: str) -> None:
        assert matcher.model_dump()["pact:matcher:type"] == expected_type

    def test_parsed_from_integration_json(self) -> None:
        matcher = Matcher.model_validate(
            {"pact:matcher:type": "timestamp", "format": "yyyy", "value": "2026"}
        )
        assert matcher == timestamp("yyyy", "2026")


class TestCanonicalBody:
    def test_none_and_str_pass_through(self) -> None:
        assert canonical_body(None) is None
        assert canonical_body("plain") == "plain"

    def test_compact_json_with_key_order(self) -> None:
        assert canonical_body({"z": 1, "a": [1, 2]}) == '{"z":1,"a":[1,2]}'

    def test_unicode_kept(self) -> None:
        assert canonical_body({"name": "Zoë"}) == '{"name":"Zoë"}'

    def test_to_integration_handles_tuples(self) -> None:
        assert to_integration((like(1),)) == [{"pact:matcher:type": "type", "value": 1}]


class TestReify:
    def test_examples_replace_matchers(self) -> None:
        body = {"id": integer(7), "tags": each_like(like("a"), min=2), "raw": "x"}
        assert reify(body) == {"id": 7, "tags": ["a", "a"], "raw": "x"}

    def test_plain_values_unchanged(self) -> None:
        assert reify({"a": [1, "b", None]}) == {"a": [1, "b", None]}
