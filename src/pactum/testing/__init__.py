"""
Test support: a scriptable matching engine and pytest fixtures.
"""

from __future__ import annotations

from pactum.testing.engine import StubMatchingEngine, StubSession

__all__ = [
    "StubMatchingEngine",
    "StubSession",
]
