"""
Matching engine capability.

The matching engine owns request/response matching and the ephemeral mock
HTTP service. pactum only drives it through the narrow protocol below, so any
implementation (a native binding, an out-of-process mock service, or
``pactum.testing.StubMatchingEngine``) can be injected.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from pactum.models import EngineTestResult, Interaction, Message, MockServerHandle, PactOptions


@runtime_checkable
class MessageFactory(Protocol):
    """Creates concrete messages from message specs and records verified ones.

    Either method may also be a coroutine function.
    """

    def create_message(self, message: Message, options: PactOptions) -> Message:
        """Return a concrete message conforming to ``message``.

        Matchers are reified to example values. Nothing is recorded.
        """
        ...

    def record_message(self, message: Message, options: PactOptions) -> None:
        """Record ``message`` in the contract for ``options.consumer``/``options.provider``.

        Called only after the consumer handler accepted the concrete message.
        """
        ...


@runtime_checkable
class MatchingEngine(MessageFactory, Protocol):
    """Starts mock services, records traffic and writes contract files."""

    def start_mock_server(
        self,
        session_id: str,
        interactions: Sequence[Interaction],
        options: PactOptions,
    ) -> MockServerHandle:
        """Start a mock service for ``interactions``.

        Raises:
            Exception: Any failure to start; the session reports it as
                ``MockServerStartError``.
        """
        ...

    def get_test_result(self, session_id: str) -> EngineTestResult:
        """Report the server error and mismatches recorded for a session."""
        ...

    def write_pact_file(self, session_id: str, options: PactOptions) -> None:
        """Write the session's contract file into ``options.dir``."""
        ...

    def shutdown_test(self, session_id: str) -> None:
        """Stop the session's mock service. Must be idempotent."""
        ...
