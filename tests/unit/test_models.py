"""Tests for the contract data model."""

from __future__ import annotations

import json

import pytest

from pactum.models import (
    EngineTestResult,
    Interaction,
    Mismatch,
    MismatchType,
    ObservedRequest,
    PactOptions,
)


class TestMismatch:
    def test_kind_known_types(self) -> None:
        assert Mismatch(type="request-not-found").kind == MismatchType.REQUEST_NOT_FOUND
        assert Mismatch(type="missing-request").kind == MismatchType.MISSING_REQUEST

    def test_unknown_type_is_other_but_preserved(self) -> None:
        mismatch = Mismatch(type="header-mismatch")
        assert mismatch.kind == MismatchType.OTHER
        assert mismatch.type == "header-mismatch"

    def test_extra_fields_preserved(self) -> None:
        mismatch = Mismatch.model_validate({"type": "body", "expected": 1, "actual": 2})
        assert json.loads(mismatch.to_json()) == {"type": "body", "expected": 1, "actual": 2}


class TestObservedRequest:
    def test_query_values_listified(self) -> None:
        request = ObservedRequest(query={"a": "1", "b": ["2", "3"]})
        assert request.query == {"a": ["1"], "b": ["2", "3"]}

    def test_body_text(self) -> None:
        assert ObservedRequest().body_text is None
        assert ObservedRequest(body="raw").body_text == "raw"
        assert ObservedRequest(body=[1, 2]).body_text == "[1,2]"


class TestEngineTestResult:
    def test_engine_aliases(self) -> None:
        result = EngineTestResult.model_validate(
            {"mockServerError": "boom", "mockServerMismatches": ['{"type": "missing-request"}']}
        )
        assert result.mock_server_error == "boom"
        assert [m.kind for m in result.mismatches()] == [MismatchType.MISSING_REQUEST]

    def test_no_mismatches(self) -> None:
        assert EngineTestResult().mismatches() == []

    def test_malformed_mismatch_raises(self) -> None:
        with pytest.raises(ValueError):
            EngineTestResult(mock_server_mismatches=["not json"]).mismatches()


class TestInteraction:
    def test_defaults(self) -> None:
        interaction = Interaction(description="d")
        assert interaction.request.method == "GET"
        assert interaction.request.path == "/"
        assert interaction.response.status == 200
        assert interaction.state_names == []

    def test_v3_states_parsed_from_aliases(self) -> None:
        interaction = Interaction.model_validate(
            {"description": "d", "providerStates": [{"name": "s", "params": {"id": 1}}]}
        )
        assert interaction.provider_states[0].parameters == {"id": 1}

    def test_empty_v2_state_dropped(self) -> None:
        interaction = Interaction.model_validate({"description": "d", "providerState": ""})
        assert interaction.provider_states == ()


class TestPactOptions:
    def test_defaults(self) -> None:
        options = PactOptions(consumer="c", provider="p")
        assert str(options.dir) == "pacts"
        assert options.cors is False
        assert options.port is None
        assert options.spec_version == "3.0.0"
