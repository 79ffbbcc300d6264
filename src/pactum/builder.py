"""
HTTP interaction builder.

Usage::

    pact = Pact("web-ui", "user-service", dir="pacts", engine=engine)
    (
        pact.given("a user with id 1 exists", {"id": 1})
        .upon_receiving("a request for user 1")
        .with_request("GET", "/users/1", headers={"Accept": "application/json"})
        .will_respond_with(200, body={"id": 1, "name": like("Jane")})
    )

    async def client_test(mock_server: MockServerHandle) -> None:
        user = await UserClient(mock_server.url).get_user(1)
        assert user.id == 1

    await pact.execute_test(client_test)

Provider states passed to ``given`` belong to the next interaction only.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Self, TypeVar

from pactum.config import SessionSettings
from pactum.contract import ContractFile
from pactum.engine import MatchingEngine
from pactum.errors import PactumError, ValidationError
from pactum.matchers import Matcher, canonical_body
from pactum.models import (
    FileReference,
    Interaction,
    PactOptions,
    ProviderState,
    RequestSpec,
    ResponseSpec,
)
from pactum.session import ContractSession, SessionResult, TestFunction

logger = logging.getLogger(__name__)

T = TypeVar("T")

HeaderValues = dict[str, str | list[str] | Matcher]


def flush_states(states: list[ProviderState]) -> tuple[ProviderState, ...]:
    """Validate pending provider states and hand them over."""
    for state in states:
        if not state.description:
            raise ValidationError("Provider state description must not be empty")
    return tuple(states)


@dataclass
class _Draft:
    """An interaction under construction."""

    description: str
    provider_states: tuple[ProviderState, ...]
    request: RequestSpec = field(default_factory=RequestSpec)

    def finalize(self, response: ResponseSpec) -> Interaction:
        return Interaction(
            description=self.description,
            provider_states=self.provider_states,
            request=self.request,
            response=response,
        )


class Pact:
    """
    Accumulates interactions for one consumer/provider pair.

    Args:
        consumer: Consumer name
        provider: Provider name
        dir: Directory the contract file is written to
        cors: Whether the mock service answers CORS pre-flight requests
        port: Fixed mock service port
        spec_version: Pact specification version for the contract file
        engine: Matching engine used by ``execute_test``
        settings: Session feature flags; read from the environment when omitted
    """

    def __init__(
        self,
        consumer: str,
        provider: str,
        dir: Path | str = "pacts",
        *,
        cors: bool = False,
        port: int | None = None,
        spec_version: str = "3.0.0",
        engine: MatchingEngine | None = None,
        settings: SessionSettings | None = None,
    ) -> None:
        self.options = PactOptions(
            dir=Path(dir),
            consumer=consumer,
            provider=provider,
            cors=cors,
            port=port,
            spec_version=spec_version,
        )
        self.engine = engine
        self.settings = settings or SessionSettings.from_env()
        self._states: list[ProviderState] = []
        self._draft: _Draft | None = None
        self._interactions: list[Interaction] = []

    @property
    def interactions(self) -> tuple[Interaction, ...]:
        """Finalized interactions, in the order they were added."""
        return tuple(self._interactions)

    @property
    def pending_states(self) -> tuple[ProviderState, ...]:
        return tuple(self._states)

    # =========================================================================
    # DSL
    # =========================================================================

    def given(self, provider_state: str, parameters: Any = None) -> Self:
        """Add a provider state for the next interaction."""
        state = ProviderState(description=provider_state, parameters=copy.deepcopy(parameters))
        self._states.append(state)
        return self

    def upon_receiving(self, description: str) -> Self:
        """Start a new interaction, consuming the pending provider states."""
        if not description:
            raise ValidationError("Interaction description must not be empty")
        states = flush_states(self._states)
        self._flush_pending()
        self._draft = _Draft(description=description, provider_states=states)
        self._states = []
        return self

    def with_request(
        self,
        method: str = "GET",
        path: str | Matcher = "/",
        query: dict[str, str | list[str] | Matcher] | None = None,
        headers: HeaderValues | None = None,
        body: Any = None,
    ) -> Self:
        """Describe the request of the current interaction."""
        draft = self._require_draft("with_request")
        draft.request = RequestSpec(
            method=method,
            path=path,
            query=query,
            headers=headers,
            body=canonical_body(body),
        )
        return self

    def with_request_binary_file(
        self,
        content_type: str,
        file: Path | str,
        method: str = "POST",
        path: str | Matcher = "/",
        query: dict[str, str | list[str] | Matcher] | None = None,
        headers: HeaderValues | None = None,
    ) -> Self:
        """Describe a request whose body is the contents of ``file``."""
        draft = self._require_draft("with_request_binary_file")
        draft.request = RequestSpec(
            method=method,
            path=path,
            query=query,
            headers=headers,
            file=FileReference(content_type=content_type, file=str(file)),
        )
        return self

    def with_request_multipart_file_upload(
        self,
        content_type: str,
        file: Path | str,
        part: str,
        method: str = "POST",
        path: str | Matcher = "/",
        query: dict[str, str | list[str] | Matcher] | None = None,
        headers: HeaderValues | None = None,
    ) -> Self:
        """Describe a multipart request uploading ``file`` as ``part``."""
        draft = self._require_draft("with_request_multipart_file_upload")
        draft.request = RequestSpec(
            method=method,
            path=path,
            query=query,
            headers=headers,
            file=FileReference(content_type=content_type, file=str(file), part=part),
        )
        return self

    def will_respond_with(
        self,
        status: int = 200,
        headers: HeaderValues | None = None,
        body: Any = None,
    ) -> Self:
        """Describe the response and finalize the current interaction."""
        return self._finalize(
            "will_respond_with",
            ResponseSpec(status=status, headers=headers, body=canonical_body(body)),
        )

    def with_response_binary_file(
        self,
        content_type: str,
        file: Path | str,
        status: int = 200,
        headers: HeaderValues | None = None,
    ) -> Self:
        """Respond with the contents of ``file`` and finalize the interaction."""
        return self._finalize(
            "with_response_binary_file",
            ResponseSpec(
                status=status,
                headers=headers,
                file=FileReference(content_type=content_type, file=str(file)),
            ),
        )

    def with_response_multipart_file_upload(
        self,
        content_type: str,
        file: Path | str,
        part: str,
        status: int = 200,
        headers: HeaderValues | None = None,
    ) -> Self:
        """Respond with a multipart body carrying ``file`` and finalize."""
        return self._finalize(
            "with_response_multipart_file_upload",
            ResponseSpec(
                status=status,
                headers=headers,
                file=FileReference(content_type=content_type, file=str(file), part=part),
            ),
        )

    # =========================================================================
    # Contract
    # =========================================================================

    def json(self) -> dict[str, Any]:
        """The contract as it would be written, finalized interactions only."""
        return ContractFile.from_interactions(
            self.options.consumer,
            self.options.provider,
            self._interactions,
            spec_version=self.options.spec_version,
        ).to_json()

    def session(self, session_id: str | None = None) -> ContractSession:
        """Create a session over the interactions recorded so far."""
        if self.engine is None:
            raise PactumError("No matching engine configured for this pact")
        self._flush_pending()
        return ContractSession(
            self.engine,
            self._interactions,
            self.options,
            settings=self.settings,
            session_id=session_id,
        )

    async def run_test(self, test_fn: TestFunction[T]) -> SessionResult[T]:
        """Run ``test_fn`` in a new session and return the result."""
        return await self.session().run(test_fn)

    async def execute_test(self, test_fn: TestFunction[T]) -> T | None:
        """
        Run ``test_fn`` against a mock service for the recorded interactions.

        The contract file is written only when the test passes and the mock
        service saw exactly the expected traffic.

        Raises:
            MockServerStartError: The mock service could not be started
            MockServerMismatchError: Traffic did not match the interactions
            MockServerError: The engine reported an internal error
            CompositeTestError: The test failed and the engine reported problems
            ContractWriteError: The contract file could not be written
        """
        return await self.session().execute_test(test_fn)

    # =========================================================================
    # Internals
    # =========================================================================

    def _require_draft(self, call: str) -> _Draft:
        if self._draft is None:
            raise ValidationError(f"{call}() called before upon_receiving()")
        return self._draft

    def _finalize(self, call: str, response: ResponseSpec) -> Self:
        draft = self._require_draft(call)
        self._interactions.append(draft.finalize(response))
        self._draft = None
        self._states = []
        return self

    def _flush_pending(self) -> None:
        if self._draft is None:
            return
        logger.warning(
            "Interaction '%s' has no response; recording it with status 200",
            self._draft.description,
        )
        self._interactions.append(self._draft.finalize(ResponseSpec()))
        self._draft = None


