"""
Environment configuration for pactum.

The environment is read once, at the boundary, into frozen settings objects
that are then passed to ``ContractSession`` and ``VerificationFilter``. Nothing
below the boundary looks at ``os.environ``.

Environment variables:
    PACT_DESCRIPTION - replay only the interaction with this description
    PACT_PROVIDER_STATE - replay only interactions declaring this state
    PACT_PROVIDER_NO_STATE - replay only interactions declaring no state
    PACT_EXPERIMENTAL_FEATURE_ALLOW_MISSING_REQUESTS - tolerate expected
        requests the consumer test never made
    LOG_LEVEL - logging level for ``pactum.log.setup_logging``

Usage:
    from pactum.config import SessionSettings, VerificationSelectors

    settings = SessionSettings.from_env()
    selectors = VerificationSelectors.from_env()
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

DESCRIPTION_ENV_VAR = "PACT_DESCRIPTION"
PROVIDER_STATE_ENV_VAR = "PACT_PROVIDER_STATE"
PROVIDER_NO_STATE_ENV_VAR = "PACT_PROVIDER_NO_STATE"
ALLOW_MISSING_REQUESTS_ENV_VAR = "PACT_EXPERIMENTAL_FEATURE_ALLOW_MISSING_REQUESTS"
LOG_LEVEL_ENV_VAR = "LOG_LEVEL"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def is_truthy(value: str | None) -> bool:
    """Interpret a boolean-like environment value.

    Examples:
        >>> is_truthy("TRUE")
        True
        >>> is_truthy("0")
        False
    """
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def _non_empty(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


def get_log_level(environ: Mapping[str, str] | None = None) -> int:
    """Get the logging level from LOG_LEVEL, defaulting to INFO."""
    env = os.environ if environ is None else environ
    name = env.get(LOG_LEVEL_ENV_VAR, "INFO").strip().upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    logging.getLogger(__name__).warning("Unknown LOG_LEVEL value '%s', using INFO", name)
    return logging.INFO


@dataclass(frozen=True)
class SessionSettings:
    """Feature flags for consumer-side contract sessions."""

    allow_missing_requests: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SessionSettings:
        env = os.environ if environ is None else environ
        return cls(allow_missing_requests=is_truthy(env.get(ALLOW_MISSING_REQUESTS_ENV_VAR)))


@dataclass(frozen=True)
class VerificationSelectors:
    """
    Provider-side interaction selectors.

    At most one is expected to be set. When several are, precedence is
    description, then provider state, then no-state.
    """

    description: str | None = None
    provider_state: str | None = None
    no_state: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> VerificationSelectors:
        env = os.environ if environ is None else environ
        return cls(
            description=_non_empty(env.get(DESCRIPTION_ENV_VAR)),
            provider_state=_non_empty(env.get(PROVIDER_STATE_ENV_VAR)),
            no_state=is_truthy(env.get(PROVIDER_NO_STATE_ENV_VAR)),
        )

    @property
    def active(self) -> list[str]:
        """Names of the selectors that are set, in precedence order."""
        names = []
        if self.description:
            names.append("description")
        if self.provider_state:
            names.append("provider_state")
        if self.no_state:
            names.append("no_state")
        return names
