"""
pactum - consumer-driven contract testing.

Record the HTTP interactions or messages a consumer expects, check the
consumer's client code against a mock service driven by an external matching
engine, write the verified contract, and select which recorded interactions a
provider verification replays.
"""

from __future__ import annotations

from pactum._version import get_version
from pactum.builder import Pact
from pactum.config import SessionSettings, VerificationSelectors
from pactum.errors import (
    CompositeTestError,
    ContractLoadError,
    ContractWriteError,
    MockServerError,
    MockServerMismatchError,
    MockServerStartError,
    PactumError,
    ValidationError,
    VerificationError,
)
from pactum.handlers import asynchronous_body_handler, synchronous_body_handler
from pactum.message import MessageConsumerPact
from pactum.models import Interaction, Message, MockServerHandle, PactOptions, ProviderState
from pactum.session import ContractSession, Outcome, SessionResult

__version__ = get_version()

__all__ = [
    "__version__",
    "CompositeTestError",
    "ContractLoadError",
    "ContractSession",
    "ContractWriteError",
    "Interaction",
    "Message",
    "MessageConsumerPact",
    "MockServerError",
    "MockServerHandle",
    "MockServerMismatchError",
    "MockServerStartError",
    "Outcome",
    "Pact",
    "PactOptions",
    "PactumError",
    "ProviderState",
    "SessionResult",
    "SessionSettings",
    "ValidationError",
    "VerificationError",
    "VerificationSelectors",
    "asynchronous_body_handler",
    "synchronous_body_handler",
]
