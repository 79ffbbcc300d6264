"""
Pytest fixtures for contract tests.

Registered as a pytest plugin via the pyproject.toml entry point::

    [project.entry-points."pytest11"]
    pactum = "pactum.testing.fixtures"
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pactum.builder import Pact
from pactum.config import SessionSettings
from pactum.message import MessageConsumerPact
from pactum.testing.engine import StubMatchingEngine


@pytest.fixture()
def stub_engine() -> StubMatchingEngine:
    """A fresh scriptable matching engine."""
    return StubMatchingEngine()


@pytest.fixture()
def pact_dir(tmp_path: Path) -> Path:
    """Directory contract files are written to for this test."""
    return tmp_path / "pacts"


@pytest.fixture()
def pact(stub_engine: StubMatchingEngine, pact_dir: Path) -> Pact:
    """A consumer/provider pact bound to ``stub_engine`` with flags off."""
    return Pact(
        "test-consumer",
        "test-provider",
        dir=pact_dir,
        engine=stub_engine,
        settings=SessionSettings(),
    )


@pytest.fixture()
def message_pact(stub_engine: StubMatchingEngine, pact_dir: Path) -> MessageConsumerPact:
    """A message pact bound to ``stub_engine``."""
    return MessageConsumerPact("test-consumer", "test-provider", dir=pact_dir, engine=stub_engine)
