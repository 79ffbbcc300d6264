"""
Contract data model.

All models are pydantic v2 and frozen: an interaction or message is never
mutated after it has been appended to a contract. Field aliases follow the
Pact v3 contract-file keys (``providerStates``, ``name``/``params``) so that
``model_dump(by_alias=True)`` yields contract-file JSON directly.
"""

from __future__ import annotations

import json
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pactum.matchers import Matcher

_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True)


class ProviderState(BaseModel):
    """
    A named precondition the provider must be put into.

    Attributes:
        description: State name, serialized as ``name``
        parameters: Optional structured parameters, serialized as ``params``
    """

    description: str = Field(alias="name")
    parameters: Any = Field(default=None, alias="params")

    model_config = _MODEL_CONFIG


class FileReference(BaseModel):
    """A body taken from a file resolved by the engine at match time."""

    content_type: str = Field(alias="contentType")
    file: str
    part: str | None = None

    model_config = _MODEL_CONFIG

    @property
    def is_multipart(self) -> bool:
        return self.part is not None


class RequestSpec(BaseModel):
    """Expected request. Path, query values and header values may be matchers."""

    method: str = "GET"
    path: str | Matcher = "/"
    query: dict[str, str | list[str] | Matcher] | None = None
    headers: dict[str, str | list[str] | Matcher] | None = None
    body: str | None = None
    file: FileReference | None = None

    model_config = _MODEL_CONFIG


class ResponseSpec(BaseModel):
    """Expected response."""

    status: int = 200
    headers: dict[str, str | list[str] | Matcher] | None = None
    body: str | None = None
    file: FileReference | None = None

    model_config = _MODEL_CONFIG


def _upgrade_v2_state(data: Any) -> Any:
    # Pact v2 files carry a single ``providerState`` string.
    if isinstance(data, dict) and "providerState" in data and "providerStates" not in data:
        data = dict(data)
        state = data.pop("providerState")
        data["providerStates"] = [{"name": state}] if state else []
    return data


class Interaction(BaseModel):
    """One recorded request/response expectation."""

    description: str
    provider_states: tuple[ProviderState, ...] = Field(default=(), alias="providerStates")
    request: RequestSpec = Field(default_factory=RequestSpec)
    response: ResponseSpec = Field(default_factory=ResponseSpec)

    model_config = _MODEL_CONFIG

    @model_validator(mode="before")
    @classmethod
    def _accept_v2_state(cls, data: Any) -> Any:
        return _upgrade_v2_state(data)

    @property
    def state_names(self) -> list[str]:
        return [s.description for s in self.provider_states]


class Message(BaseModel):
    """One asynchronous contract unit."""

    description: str = ""
    contents: Any = None
    metadata: dict[str, Any] | None = None
    provider_states: tuple[ProviderState, ...] = Field(default=(), alias="providerStates")

    model_config = _MODEL_CONFIG

    @model_validator(mode="before")
    @classmethod
    def _accept_v2_state(cls, data: Any) -> Any:
        return _upgrade_v2_state(data)

    @property
    def state_names(self) -> list[str]:
        return [s.description for s in self.provider_states]


# =============================================================================
# Engine results
# =============================================================================


class MismatchType(StrEnum):
    """Mismatch classification used for reporting and filtering."""

    REQUEST_NOT_FOUND = "request-not-found"
    MISSING_REQUEST = "missing-request"
    OTHER = "other"


class ObservedRequest(BaseModel):
    """The raw request a mismatch refers to, as reported by the engine."""

    method: str | None = None
    path: str | None = None
    query: dict[str, list[str]] | None = None
    headers: dict[str, Any] | None = None
    body: Any = None

    model_config = ConfigDict(extra="allow")

    @field_validator("query", mode="before")
    @classmethod
    def _listify_query(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: v if isinstance(v, list) else [v] for k, v in value.items()}
        return value

    @property
    def body_text(self) -> str | None:
        if self.body is None or isinstance(self.body, str):
            return self.body
        return json.dumps(self.body, separators=(",", ":"))


class Mismatch(BaseModel):
    """
    One discrepancy between expected and observed traffic.

    ``type`` keeps whatever the engine reported; ``kind`` folds unknown
    types into ``MismatchType.OTHER``. Extra engine fields are preserved.
    """

    type: str
    path: str | None = None
    method: str | None = None
    request: ObservedRequest | None = None

    model_config = ConfigDict(extra="allow", frozen=True)

    @property
    def kind(self) -> MismatchType:
        try:
            return MismatchType(self.type)
        except ValueError:
            return MismatchType.OTHER

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


class MockServerHandle(BaseModel):
    """A running mock service owned by one session."""

    port: int
    url: str
    id: str

    model_config = ConfigDict(frozen=True)


class EngineTestResult(BaseModel):
    """Raw test result reported by the matching engine for one session."""

    mock_server_error: str | None = Field(default=None, alias="mockServerError")
    mock_server_mismatches: list[str] | None = Field(default=None, alias="mockServerMismatches")

    model_config = _MODEL_CONFIG

    def mismatches(self) -> list[Mismatch]:
        """Parse the JSON-encoded mismatches, keeping engine order."""
        return [Mismatch.model_validate_json(raw) for raw in self.mock_server_mismatches or []]


class PactOptions(BaseModel):
    """
    Options for a consumer contract.

    Attributes:
        dir: Directory the contract file is written to
        consumer: Consumer name
        provider: Provider name
        cors: Whether the mock service answers CORS pre-flight requests
        port: Fixed mock service port; ``None`` lets the engine choose
        spec_version: Pact specification version written to the contract
    """

    dir: Path = Path("pacts")
    consumer: str
    provider: str
    cors: bool = False
    port: int | None = None
    spec_version: str = "3.0.0"

    model_config = ConfigDict(frozen=True)
