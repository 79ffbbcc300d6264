"""Shared pytest fixtures for pactum tests."""

from __future__ import annotations

import pytest

_PACT_ENV_VARS = (
    "PACT_DESCRIPTION",
    "PACT_PROVIDER_STATE",
    "PACT_PROVIDER_NO_STATE",
    "PACT_EXPERIMENTAL_FEATURE_ALLOW_MISSING_REQUESTS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_pact_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test with the PACT_* selectors and flags unset."""
    for name in _PACT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
