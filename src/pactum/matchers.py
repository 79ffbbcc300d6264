"""
Matcher specifications.

A matcher stands in for a literal value anywhere in a request, response or
message spec. pactum never evaluates matchers: they are carried through to the
matching engine in the Pact integration-JSON form::

    {"pact:matcher:type": "type", "value": 42}

Fields typed ``T | Matcher`` therefore hold either a literal (the plain Python
value) or one of these specs.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator

MATCHER_TYPE_KEY = "pact:matcher:type"
GENERATOR_TYPE_KEY = "pact:generator:type"


class Matcher(BaseModel):
    """
    An opaque matcher spec.

    Attributes:
        type: Matcher type understood by the engine (``type``, ``regex``, ...)
        value: Example value used when the engine generates traffic
        attributes: Extra matcher attributes (``regex``, ``min``, ``format``)
        generator: Optional generator type for the example value
    """

    type: str
    value: Any = None
    attributes: dict[str, Any] = Field(default_factory=dict)
    generator: str | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _from_integration_json(cls, data: Any) -> Any:
        if isinstance(data, dict) and MATCHER_TYPE_KEY in data:
            extra = {
                k: v
                for k, v in data.items()
                if k not in (MATCHER_TYPE_KEY, GENERATOR_TYPE_KEY, "value")
            }
            return {
                "type": data[MATCHER_TYPE_KEY],
                "value": data.get("value"),
                "attributes": extra,
                "generator": data.get(GENERATOR_TYPE_KEY),
            }
        return data

    @model_serializer
    def to_integration_json(self) -> dict[str, Any]:
        """Render the matcher in the form the matching engine consumes."""
        data: dict[str, Any] = {MATCHER_TYPE_KEY: self.type}
        if self.generator:
            data[GENERATOR_TYPE_KEY] = self.generator
        data.update(self.attributes)
        data["value"] = to_integration(self.value)
        return data


def to_integration(value: Any) -> Any:
    """Recursively replace matchers in a value with their integration JSON."""
    if isinstance(value, Matcher):
        return value.to_integration_json()
    if isinstance(value, dict):
        return {k: to_integration(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_integration(v) for v in value]
    return value


def reify(value: Any) -> Any:
    """Recursively replace matchers in a value with their example values."""
    if isinstance(value, Matcher):
        return reify(value.value)
    if isinstance(value, dict):
        return {k: reify(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [reify(v) for v in value]
    return value


def canonical_body(body: Any) -> str | None:
    """Serialize a body for the matching engine.

    Strings pass through unchanged; ``None`` stays ``None``; anything else is
    rendered as compact JSON with key order preserved.
    """
    if body is None or isinstance(body, str):
        return body
    return json.dumps(to_integration(body), separators=(",", ":"), ensure_ascii=False)


# =============================================================================
# Constructors
# =============================================================================


def like(value: Any) -> Matcher:
    """Match any value of the same type as ``value``."""
    return Matcher(type="type", value=value)


def each_like(value: Any, min: int = 1) -> Matcher:
    """Match an array whose every element is like ``value``."""
    return Matcher(type="type", value=[value] * max(min, 1), attributes={"min": min})


def regex(pattern: str, example: str) -> Matcher:
    """Match strings against a regular expression."""
    return Matcher(type="regex", value=example, attributes={"regex": pattern})


def integer(example: int = 10) -> Matcher:
    return Matcher(type="integer", value=example)


def decimal(example: float = 12.34) -> Matcher:
    return Matcher(type="decimal", value=example)


def boolean(example: bool = True) -> Matcher:
    return Matcher(type="boolean", value=example)


def string(example: str = "some string") -> Matcher:
    return Matcher(type="type", value=example)


def timestamp(fmt: str, example: str) -> Matcher:
    """Match a timestamp rendered with a Java-style date format."""
    return Matcher(type="timestamp", value=example, attributes={"format": fmt})


def include(substring: str) -> Matcher:
    """Match strings containing ``substring``."""
    return Matcher(type="include", value=substring)
