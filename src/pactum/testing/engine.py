"""
Scriptable in-memory matching engine.

``StubMatchingEngine`` implements the ``MatchingEngine`` protocol without
serving any traffic: tests script what the engine reports (start failure,
server error, mismatches) and then assert on what the session did with it.
It writes real contract files, so the write path is exercised end to end.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from pactum.contract import ContractFile, write_contract
from pactum.matchers import reify
from pactum.models import (
    EngineTestResult,
    Interaction,
    Message,
    Mismatch,
    MockServerHandle,
    PactOptions,
)

logger = logging.getLogger(__name__)

_DEFAULT_BASE_PORT = 19201


@dataclass
class StubSession:
    """What the stub engine knows about one started session."""

    session_id: str
    handle: MockServerHandle
    interactions: tuple[Interaction, ...]
    options: PactOptions
    running: bool = True


@dataclass
class StubMatchingEngine:
    """
    In-memory ``MatchingEngine`` for tests.

    Args:
        mismatches: Mismatches reported for every session
        server_error: Server error reported for every session
        start_error: If set, ``start_mock_server`` raises it
        write_error: If set, ``write_pact_file`` raises it
        base_port: First port handed out; later sessions count up
    """

    mismatches: list[Mismatch] = field(default_factory=list)
    server_error: str | None = None
    start_error: Exception | None = None
    write_error: Exception | None = None
    base_port: int = _DEFAULT_BASE_PORT
    sessions: dict[str, StubSession] = field(default_factory=dict)
    shutdown_calls: list[str] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)

    def start_mock_server(
        self,
        session_id: str,
        interactions: Sequence[Interaction],
        options: PactOptions,
    ) -> MockServerHandle:
        if self.start_error is not None:
            raise self.start_error
        port = options.port or self.base_port + len(self.sessions)
        handle = MockServerHandle(port=port, url=f"http://127.0.0.1:{port}", id=session_id)
        self.sessions[session_id] = StubSession(
            session_id=session_id,
            handle=handle,
            interactions=tuple(interactions),
            options=options,
        )
        logger.debug("Stub mock server %s on port %d", session_id, port)
        return handle

    def get_test_result(self, session_id: str) -> EngineTestResult:
        return EngineTestResult(
            mock_server_error=self.server_error,
            mock_server_mismatches=[m.to_json() for m in self.mismatches] or None,
        )

    def write_pact_file(self, session_id: str, options: PactOptions) -> None:
        if self.write_error is not None:
            raise self.write_error
        session = self.sessions[session_id]
        contract = ContractFile.from_interactions(
            options.consumer,
            options.provider,
            session.interactions,
            spec_version=options.spec_version,
        )
        self.written.append(write_contract(contract, options.dir))

    def create_message(self, message: Message, options: PactOptions) -> Message:
        return message.model_copy(update={"contents": reify(message.contents)})

    def record_message(self, message: Message, options: PactOptions) -> None:
        self.messages.append(message)
        contract = ContractFile.from_messages(
            options.consumer,
            options.provider,
            self.messages,
            spec_version=options.spec_version,
        )
        self.written.append(write_contract(contract, options.dir))

    def shutdown_test(self, session_id: str) -> None:
        self.shutdown_calls.append(session_id)
        session = self.sessions.get(session_id)
        if session is not None:
            session.running = False

    @property
    def running_sessions(self) -> list[str]:
        return [s.session_id for s in self.sessions.values() if s.running]
