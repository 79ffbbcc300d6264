"""
Contract session state machine.

A ``ContractSession`` runs one consumer test against one mock service:

    IDLE -> STARTING -> RUNNING -> RECONCILING -> SUCCEEDED | FAILED -> TERMINATED

Three things can fail independently: the user's test function, the mock
service's matching, and the contract write. ``reconcile`` folds the first two
into one verdict; the session then writes the contract only on success and
shuts the mock service down on every path, start failures included.
"""

from __future__ import annotations

import inspect
import logging
import traceback
import uuid
from collections.abc import Awaitable, Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, TypeVar

from pactum.config import SessionSettings
from pactum.engine import MatchingEngine
from pactum.errors import (
    CompositeTestError,
    ContractWriteError,
    MockServerError,
    MockServerMismatchError,
    MockServerStartError,
)
from pactum.models import (
    EngineTestResult,
    Interaction,
    Mismatch,
    MismatchType,
    MockServerHandle,
    PactOptions,
)
from pactum.reporting import generate_mismatch_report

logger = logging.getLogger(__name__)

T = TypeVar("T")

TestFunction = Callable[[MockServerHandle], Awaitable[T] | T]


class SessionState(StrEnum):
    """Lifecycle states of a contract session."""

    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    RECONCILING = "reconciling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TERMINATED = "terminated"


class Outcome(StrEnum):
    """Final verdict of a session."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class Verdict:
    """Result of reconciling the test outcome with the engine's report."""

    outcome: Outcome
    error: BaseException | None = None
    diagnostics: str | None = None
    mismatches: list[Mismatch] = field(default_factory=list)


@dataclass
class SessionResult(Generic[T]):
    """Outcome of one session run.

    ``value`` is the test function's return value on success; ``error`` is
    what ``ContractSession.execute_test`` raises on failure.
    """

    outcome: Outcome
    value: T | None = None
    error: BaseException | None = None
    diagnostics: str | None = None
    mismatches: list[Mismatch] = field(default_factory=list)
    contract_written: bool = False

    @property
    def succeeded(self) -> bool:
        return self.outcome == Outcome.SUCCEEDED

    def unwrap(self) -> T | None:
        """Return the test value or raise the session error."""
        if self.error is not None:
            raise self.error
        return self.value


# =============================================================================
# Reconciliation
# =============================================================================


def filter_mismatches(mismatches: Sequence[Mismatch], *, allow_missing_requests: bool) -> list[Mismatch]:
    """Drop ``missing-request`` mismatches when the tolerance flag is on."""
    if not allow_missing_requests:
        return list(mismatches)
    return [m for m in mismatches if m.kind != MismatchType.MISSING_REQUEST]


def _composite_message(
    test_error: BaseException,
    server_error: str | None,
    mismatches: Sequence[Mismatch],
) -> str:
    message = "Test failed for the following reasons:"
    message += f"\n\n  Test code failed with an error: {test_error}"
    stack = "".join(traceback.format_exception(test_error)).rstrip()
    if stack:
        message += f"\n{stack}\n"
    if server_error:
        message += f"\n\n  {server_error}"
    if mismatches:
        message += f"\n\n  {generate_mismatch_report(mismatches, '    ')}"
    return message


def reconcile(
    test_error: BaseException | None,
    result: EngineTestResult,
    *,
    allow_missing_requests: bool = False,
) -> Verdict:
    """
    Fold the test function outcome and the engine report into one verdict.

    Args:
        test_error: What the test function raised, or None if it passed
        result: The engine's report for the session
        allow_missing_requests: Tolerate expected requests never received

    Returns:
        The verdict; the error is None only when the outcome is SUCCEEDED.
    """
    mismatches = filter_mismatches(result.mismatches(), allow_missing_requests=allow_missing_requests)
    server_error = result.mock_server_error

    if test_error is not None:
        if not server_error and not mismatches:
            return Verdict(Outcome.FAILED, error=test_error)
        message = _composite_message(test_error, server_error, mismatches)
        error = CompositeTestError(message, original=test_error)
        error.__cause__ = test_error
        return Verdict(Outcome.FAILED, error=error, diagnostics=message, mismatches=mismatches)

    if server_error:
        return Verdict(Outcome.FAILED, error=MockServerError(server_error), diagnostics=server_error)

    if mismatches:
        report = generate_mismatch_report(mismatches, "  ")
        return Verdict(
            Outcome.FAILED,
            error=MockServerMismatchError(report, mismatches),
            diagnostics=report,
            mismatches=mismatches,
        )

    return Verdict(Outcome.SUCCEEDED)


# =============================================================================
# Session
# =============================================================================


class ContractSession:
    """
    Drives one set of interactions through the matching engine.

    A session runs once and owns exactly one mock service for that run.

    Args:
        engine: The matching engine
        interactions: Finalized interactions, in contract order
        options: Contract options (names, directory, port, CORS)
        settings: Feature flags; defaults to all off
        session_id: Mock service identifier; a random one by default
    """

    def __init__(
        self,
        engine: MatchingEngine,
        interactions: Sequence[Interaction],
        options: PactOptions,
        settings: SessionSettings | None = None,
        session_id: str | None = None,
    ) -> None:
        self._engine = engine
        self._interactions = tuple(interactions)
        self._options = options
        self._settings = settings or SessionSettings()
        self.session_id = session_id or uuid.uuid4().hex
        self._state = SessionState.IDLE
        self._handle: MockServerHandle | None = None
        self._shut_down = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def handle(self) -> MockServerHandle | None:
        """The mock service handle while the session has one."""
        return self._handle

    def _transition(self, state: SessionState) -> None:
        logger.debug("Session %s: %s -> %s", self.session_id, self._state, state)
        self._state = state

    def _shutdown(self) -> None:
        if self._shut_down:
            return
        self._shut_down = True
        self._engine.shutdown_test(self.session_id)
        logger.debug("Session %s: mock server shut down", self.session_id)

    @contextmanager
    def _mock_service(self) -> Iterator[None]:
        try:
            yield
        finally:
            self._shutdown()

    def _start(self) -> MockServerHandle:
        try:
            handle = self._engine.start_mock_server(
                self.session_id, self._interactions, self._options
            )
        except Exception as e:
            raise MockServerStartError(f"Failed to start mock server - {e}") from e
        logger.info(
            "Mock server for %s -> %s started at %s",
            self._options.consumer,
            self._options.provider,
            handle.url,
        )
        return handle

    def _query_engine(self) -> EngineTestResult:
        try:
            result = self._engine.get_test_result(self.session_id)
            # malformed mismatch JSON is reported as a server error
            result.mismatches()
        except Exception as e:
            logger.exception("Could not get the result from the mock server")
            return EngineTestResult(
                mock_server_error=f"Could not get the result from the mock server - {e}"
            )
        return result

    def _write_contract(self) -> None:
        try:
            self._engine.write_pact_file(self.session_id, self._options)
        except ContractWriteError:
            raise
        except Exception as e:
            raise ContractWriteError(f"Failed to write pact to file - {e}") from e

    async def run(self, test_fn: TestFunction[T]) -> SessionResult[T]:
        """
        Run ``test_fn`` against a fresh mock service and reconcile.

        Failures of the test, the mock service or the contract write are
        reported in the result rather than raised.

        Raises:
            RuntimeError: If the session has already been run.
        """
        if self._state != SessionState.IDLE:
            raise RuntimeError(f"Session {self.session_id} has already been run")

        try:
            with self._mock_service():
                result = await self._run(test_fn)
        finally:
            self._handle = None
            self._transition(SessionState.TERMINATED)
        return result

    async def _run(self, test_fn: TestFunction[T]) -> SessionResult[T]:
        self._transition(SessionState.STARTING)
        try:
            self._handle = self._start()
        except MockServerStartError as e:
            logger.warning("Session %s: %s", self.session_id, e)
            self._transition(SessionState.FAILED)
            return SessionResult(outcome=Outcome.FAILED, error=e, diagnostics=e.message)

        self._transition(SessionState.RUNNING)
        value: Any = None
        test_error: BaseException | None = None
        try:
            value = test_fn(self._handle)
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            test_error = e

        self._transition(SessionState.RECONCILING)
        verdict = reconcile(
            test_error,
            self._query_engine(),
            allow_missing_requests=self._settings.allow_missing_requests,
        )

        written = False
        if verdict.outcome == Outcome.SUCCEEDED:
            try:
                self._write_contract()
                written = True
            except ContractWriteError as e:
                verdict = Verdict(Outcome.FAILED, error=e, diagnostics=e.message)

        if verdict.outcome == Outcome.SUCCEEDED:
            self._transition(SessionState.SUCCEEDED)
        else:
            logger.warning("Session %s failed: %s", self.session_id, verdict.error)
            self._transition(SessionState.FAILED)

        return SessionResult(
            outcome=verdict.outcome,
            value=value if verdict.outcome == Outcome.SUCCEEDED else None,
            error=verdict.error,
            diagnostics=verdict.diagnostics,
            mismatches=verdict.mismatches,
            contract_written=written,
        )

    async def execute_test(self, test_fn: TestFunction[T]) -> T | None:
        """Run ``test_fn`` and return its value, or raise the session error."""
        result = await self.run(test_fn)
        return result.unwrap()
