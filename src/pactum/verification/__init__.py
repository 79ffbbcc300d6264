"""
Provider-side verification: interaction selection and replay orchestration.
"""

from __future__ import annotations

from pactum.verification.filter import VerificationFilter, filter_interactions
from pactum.verification.verifier import (
    InteractionOutcome,
    InteractionReplayer,
    VerificationResult,
    Verifier,
    VerifyOptions,
)

__all__ = [
    "InteractionOutcome",
    "InteractionReplayer",
    "VerificationFilter",
    "VerificationResult",
    "Verifier",
    "VerifyOptions",
    "filter_interactions",
]
