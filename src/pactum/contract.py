"""
Contract files.

A contract file is the JSON artifact a successful consumer session produces
and a provider verification replays::

    {
      "consumer": {"name": "..."},
      "provider": {"name": "..."},
      "interactions": [...],      # or "messages": [...]
      "metadata": {"pactSpecification": {"version": "3.0.0"},
                   "pactum": {"version": "..."}}
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from pactum._version import get_version
from pactum.errors import ContractLoadError, ContractWriteError
from pactum.models import Interaction, Message

logger = logging.getLogger(__name__)


class Pacticipant(BaseModel):
    """A consumer or provider named in a contract."""

    name: str

    model_config = ConfigDict(frozen=True)


class ContractFile(BaseModel):
    """In-memory form of a contract file."""

    consumer: Pacticipant
    provider: Pacticipant
    interactions: list[Interaction] = Field(default_factory=list)
    messages: list[Message] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_interactions(
        cls,
        consumer: str,
        provider: str,
        interactions: Iterable[Interaction],
        spec_version: str = "3.0.0",
    ) -> ContractFile:
        return cls(
            consumer=Pacticipant(name=consumer),
            provider=Pacticipant(name=provider),
            interactions=list(interactions),
            metadata=_metadata(spec_version),
        )

    @classmethod
    def from_messages(
        cls,
        consumer: str,
        provider: str,
        messages: Iterable[Message],
        spec_version: str = "3.0.0",
    ) -> ContractFile:
        return cls(
            consumer=Pacticipant(name=consumer),
            provider=Pacticipant(name=provider),
            messages=list(messages),
            metadata=_metadata(spec_version),
        )

    @property
    def spec_version(self) -> str | None:
        return self.metadata.get("pactSpecification", {}).get("version")

    def to_json(self) -> dict[str, Any]:
        """Contract-file JSON; only the populated one of interactions/messages."""
        data: dict[str, Any] = {
            "consumer": self.consumer.model_dump(),
            "provider": self.provider.model_dump(),
        }
        if self.messages and not self.interactions:
            data["messages"] = [
                m.model_dump(mode="json", by_alias=True, exclude_none=True) for m in self.messages
            ]
        else:
            data["interactions"] = [
                i.model_dump(mode="json", by_alias=True, exclude_none=True)
                for i in self.interactions
            ]
        data["metadata"] = self.metadata
        return data

    def dumps(self) -> str:
        """Deterministic text form: same contract, same bytes."""
        return json.dumps(self.to_json(), indent=2, ensure_ascii=False) + "\n"


def _metadata(spec_version: str) -> dict[str, Any]:
    return {
        "pactSpecification": {"version": spec_version},
        "pactum": {"version": get_version()},
    }


def contract_filename(consumer: str, provider: str) -> str:
    """File name used for a consumer/provider pair."""
    return f"{consumer}-{provider}.json"


def write_contract(contract: ContractFile, directory: Path | str) -> Path:
    """
    Write a contract into ``directory``.

    Returns:
        Path of the written file.

    Raises:
        ContractWriteError: If the directory or file cannot be written.
    """
    path = Path(directory) / contract_filename(contract.consumer.name, contract.provider.name)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(contract.dumps(), encoding="utf-8")
    except OSError as e:
        raise ContractWriteError(f"Failed to write pact to file - {e}") from e
    logger.info("Wrote contract %s", path)
    return path


def load_contract(location: Path | str, *, timeout: float = 10.0) -> ContractFile:
    """
    Load a contract from a local path or an http(s) URL.

    Raises:
        ContractLoadError: If the contract cannot be fetched or parsed.
    """
    location = str(location)
    if _is_url(location):
        try:
            resp = httpx.get(location, timeout=timeout, follow_redirects=True)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise ContractLoadError(f"Failed to fetch contract {location}: {e}") from e
        return _parse(resp.text, location)
    return _parse(_read_path(location), location)


async def aload_contract(location: Path | str, *, timeout: float = 10.0) -> ContractFile:
    """
    Async variant of ``load_contract``; remote contracts are fetched with
    ``httpx.AsyncClient`` so the event loop is not blocked.

    Raises:
        ContractLoadError: If the contract cannot be fetched or parsed.
    """
    location = str(location)
    if _is_url(location):
        try:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
                resp = await client.get(location)
                resp.raise_for_status()
        except httpx.HTTPError as e:
            raise ContractLoadError(f"Failed to fetch contract {location}: {e}") from e
        return _parse(resp.text, location)
    return _parse(_read_path(location), location)


def _is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def _read_path(location: str) -> str:
    path = Path(location.removeprefix("file://"))
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ContractLoadError(f"Failed to read contract {path}: {e}") from e


def _parse(text: str, location: str) -> ContractFile:
    try:
        return ContractFile.model_validate_json(text)
    except PydanticValidationError as e:
        raise ContractLoadError(f"Invalid contract file {location}: {e}") from e
