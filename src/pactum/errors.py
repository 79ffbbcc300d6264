"""
Error types for contract building, mock-service sessions, and verification.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pactum.models import Mismatch
    from pactum.verification.verifier import VerificationResult


class PactumError(Exception):
    """Base exception for all pactum errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(PactumError):
    """
    Raised synchronously when a builder call violates the contract DSL.

    Examples:
    - Empty interaction or message description
    - Empty message content or metadata
    - Request/response attached before ``upon_receiving``
    """

    pass


class MockServerStartError(PactumError):
    """Raised when the matching engine could not start a mock service."""

    pass


class MockServerError(PactumError):
    """Raised when the matching engine reports an internal fault."""

    pass


class MockServerMismatchError(PactumError):
    """
    Raised when the test passed but the observed traffic did not match.

    Attributes:
        mismatches: The mismatches that caused the failure, in engine order.
    """

    def __init__(self, message: str, mismatches: list[Mismatch] | None = None):
        self.mismatches = list(mismatches or [])
        super().__init__(message)


class CompositeTestError(PactumError):
    """
    Raised when the test function failed and the mock service also reported
    problems.

    Attributes:
        original: The exception raised by the test function.
    """

    def __init__(self, message: str, original: BaseException):
        self.original = original
        super().__init__(message)


class ContractWriteError(PactumError):
    """Raised when a verified contract file could not be written."""

    pass


class ContractLoadError(PactumError):
    """Raised when a contract file could not be read or parsed."""

    pass


class VerificationError(PactumError):
    """
    Raised when provider verification finds failing interactions.

    Attributes:
        result: The full verification result.
    """

    def __init__(self, message: str, result: VerificationResult):
        self.result = result
        super().__init__(message)
