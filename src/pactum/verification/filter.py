"""
Provider-side interaction selection.

Narrows a contract's interactions (or messages) to the ones a verification
run should replay. Precedence when several selectors are set:
description, then provider state, then no-state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar

from pactum.config import VerificationSelectors
from pactum.models import ProviderState

logger = logging.getLogger(__name__)


class Selectable(Protocol):
    description: str
    provider_states: tuple[ProviderState, ...]


S = TypeVar("S", bound=Selectable)


def _declares_state(item: Selectable, name: str) -> bool:
    return any(state.description == name for state in item.provider_states)


def filter_interactions(items: Iterable[S], selectors: VerificationSelectors) -> list[S]:
    """
    Select the interactions to replay.

    Args:
        items: Interactions or messages, in contract order
        selectors: The active selectors

    Returns:
        The selected items, order preserved.
    """
    items = list(items)
    active = selectors.active
    if len(active) > 1:
        logger.warning("Several interaction selectors set %s; using %s", active, active[0])

    if selectors.description:
        return [i for i in items if i.description == selectors.description]
    if selectors.provider_state:
        return [i for i in items if _declares_state(i, selectors.provider_state)]
    if selectors.no_state:
        return [i for i in items if not i.provider_states]
    return items


class VerificationFilter:
    """Selector-bound filter, built once per verification run."""

    def __init__(self, selectors: VerificationSelectors | None = None) -> None:
        self.selectors = selectors or VerificationSelectors()

    def __call__(self, items: Sequence[S]) -> list[S]:
        selected = filter_interactions(items, self.selectors)
        if len(selected) != len(items):
            logger.info("Selected %d of %d interactions", len(selected), len(items))
        return selected
