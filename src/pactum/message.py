"""
Asynchronous message contracts.

Usage::

    pact = MessageConsumerPact("order-worker", "order-service", engine=engine)
    (
        pact.given("an order exists")
        .expects_to_receive("an order created event")
        .with_content({"orderId": like("o-1")})
        .with_metadata({"topic": "orders"})
    )
    await pact.verify(synchronous_body_handler(handle_order_created))
"""

from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Callable, Mapping, Sized
from pathlib import Path
from typing import Any, Self

from pactum.builder import flush_states
from pactum.engine import MessageFactory
from pactum.errors import PactumError, ValidationError
from pactum.handlers import as_message_handler
from pactum.models import Message, PactOptions, ProviderState

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, Sized) and len(value) == 0


class MessageConsumerPact:
    """
    Builds one message expectation and verifies a consumer handler with it.

    Args:
        consumer: Consumer name
        provider: Provider name
        dir: Directory the contract file is written to
        spec_version: Pact specification version for the contract file
        engine: Message factory used by ``verify``
    """

    def __init__(
        self,
        consumer: str,
        provider: str,
        dir: Path | str = "pacts",
        *,
        spec_version: str = "3.0.0",
        engine: MessageFactory | None = None,
    ) -> None:
        self.options = PactOptions(
            dir=Path(dir),
            consumer=consumer,
            provider=provider,
            spec_version=spec_version,
        )
        self._factory = engine
        self._states: list[ProviderState] = []
        self._description: str | None = None
        self._provider_states: tuple[ProviderState, ...] = ()
        self._contents: Any = _UNSET
        self._metadata: dict[str, Any] | None = None

    def given(self, provider_state: str, parameters: Any = None) -> Self:
        """Add a provider state for the message."""
        state = ProviderState(description=provider_state, parameters=copy.deepcopy(parameters))
        self._states.append(state)
        return self

    def expects_to_receive(self, description: str) -> Self:
        """Name the message, consuming the pending provider states."""
        if not description:
            raise ValidationError("You must provide a description for the message")
        self._provider_states = flush_states(self._states)
        self._states = []
        self._description = description
        return self

    def with_content(self, contents: Any) -> Self:
        """Set the message contents. Matchers are allowed anywhere inside."""
        if _is_empty(contents):
            raise ValidationError("You must provide non-empty message content")
        self._contents = copy.deepcopy(contents)
        return self

    def with_metadata(self, metadata: Mapping[str, Any]) -> Self:
        """Set the message metadata."""
        if _is_empty(metadata):
            raise ValidationError("You must provide non-empty message metadata")
        self._metadata = copy.deepcopy(dict(metadata))
        return self

    def json(self) -> dict[str, Any]:
        """The message as built so far, using contract-file keys."""
        data: dict[str, Any] = {}
        if self._description:
            data["description"] = self._description
        if self._provider_states:
            data["providerStates"] = [
                s.model_dump(by_alias=True, exclude_none=True) for s in self._provider_states
            ]
        if self._contents is not _UNSET:
            data["contents"] = self._contents
        if self._metadata:
            data["metadata"] = self._metadata
        return data

    def message(self) -> Message:
        """The finalized message spec.

        Raises:
            ValidationError: If no contents have been set.
        """
        if self._contents is _UNSET:
            raise ValidationError("message has not yet been properly constructed")
        return Message(
            description=self._description or "",
            contents=copy.deepcopy(self._contents),
            metadata=copy.deepcopy(self._metadata),
            provider_states=self._provider_states,
        )

    def get_service_factory(self) -> MessageFactory:
        """The engine capability that creates concrete messages."""
        if self._factory is None:
            raise PactumError("No message factory configured for this pact")
        return self._factory

    async def verify(self, handler: Callable[..., Any]) -> None:
        """
        Create a concrete message, run ``handler`` against it and record it.

        ``handler`` may be an adapted handler or a plain (sync or async)
        body handler. The message is recorded in the contract only when the
        handler succeeds.

        Raises:
            ValidationError: If the message is incomplete.
            Exception: Whatever the handler raised.
        """
        spec = self.message()
        factory = self.get_service_factory()

        created = factory.create_message(spec, self.options)
        if inspect.isawaitable(created):
            created = await created
        concrete = created if isinstance(created, Message) else spec

        logger.debug("Verifying message '%s' for %s", spec.description, self.options.consumer)
        await as_message_handler(handler)(concrete)

        recorded = factory.record_message(spec, self.options)
        if inspect.isawaitable(recorded):
            await recorded
