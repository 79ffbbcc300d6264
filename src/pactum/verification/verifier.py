"""
Provider verification runner.

Loads each contract, narrows it with the interaction selectors, puts the
provider into each declared state and hands the interaction to a replayer.
Replaying and comparing traffic is the replayer's job, not pactum's.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from pactum.config import VerificationSelectors
from pactum.contract import aload_contract
from pactum.errors import VerificationError
from pactum.models import Interaction, ProviderState
from pactum.verification.filter import VerificationFilter

logger = logging.getLogger(__name__)

StateHandler = Callable[[Any], Awaitable[None] | None]


@runtime_checkable
class InteractionReplayer(Protocol):
    """Replays one interaction against the real provider."""

    def replay(self, interaction: Interaction, provider_base_url: str) -> list[str]:
        """Return failure descriptions; an empty list means it passed."""
        ...


class VerifyOptions(BaseModel):
    """
    Options for one provider verification run.

    Attributes:
        provider: Provider name
        provider_base_url: Base URL of the running provider
        pact_urls: Contract files (paths or http(s) URLs), in order
        selectors: Interaction selectors
        state_handlers: Provider state name -> setup callable taking the params
        timeout: Timeout in seconds for fetching remote contracts
    """

    provider: str
    provider_base_url: str
    pact_urls: list[str]
    selectors: VerificationSelectors = Field(default_factory=VerificationSelectors)
    state_handlers: dict[str, StateHandler] = Field(default_factory=dict)
    timeout: float = 10.0

    model_config = ConfigDict(arbitrary_types_allowed=True)


@dataclass
class InteractionOutcome:
    """Verification outcome of one interaction."""

    pact_url: str
    description: str
    failures: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failures


@dataclass
class VerificationResult:
    """Outcomes of a verification run, in replay order."""

    provider: str
    outcomes: list[InteractionOutcome] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for o in self.outcomes if o.passed)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.passed)

    @property
    def success(self) -> bool:
        return self.failed == 0

    def summary(self) -> str:
        lines = [f"Verified {len(self.outcomes)} interaction(s) for {self.provider}"]
        for outcome in self.outcomes:
            status = "OK" if outcome.passed else "FAILED"
            lines.append(f"  {outcome.description} ... {status}")
            for failure in outcome.failures:
                lines.append(f"    - {failure}")
        return "\n".join(lines)


class Verifier:
    """Verifies a provider against its consumers' contracts."""

    def __init__(self, options: VerifyOptions, replayer: InteractionReplayer) -> None:
        self.options = options
        self.replayer = replayer
        self._filter = VerificationFilter(options.selectors)

    async def _setup_state(self, state: ProviderState) -> str | None:
        handler = self.options.state_handlers.get(state.description)
        if handler is None:
            logger.warning("No state handler found for '%s', ignoring", state.description)
            return None
        try:
            result = handler(state.parameters)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            return f"State handler for '{state.description}' failed: {e}"
        return None

    async def _verify_interaction(
        self, pact_url: str, interaction: Interaction
    ) -> InteractionOutcome:
        outcome = InteractionOutcome(pact_url=pact_url, description=interaction.description)
        for state in interaction.provider_states:
            failure = await self._setup_state(state)
            if failure:
                outcome.failures.append(failure)
        if outcome.failures:
            return outcome
        outcome.failures.extend(
            self.replayer.replay(interaction, self.options.provider_base_url)
        )
        return outcome

    async def verify_provider(self) -> VerificationResult:
        """
        Replay the selected interactions of every contract.

        Returns:
            The verification result when every interaction passed.

        Raises:
            ContractLoadError: If a contract cannot be loaded.
            VerificationError: If any interaction failed.
        """
        result = VerificationResult(provider=self.options.provider)
        for pact_url in self.options.pact_urls:
            contract = await aload_contract(pact_url, timeout=self.options.timeout)
            if contract.provider.name != self.options.provider:
                logger.warning(
                    "Contract %s is for provider '%s', not '%s'",
                    pact_url,
                    contract.provider.name,
                    self.options.provider,
                )
            if contract.messages:
                logger.warning(
                    "Contract %s holds %d message(s); message verification is not "
                    "supported, only HTTP interactions are replayed",
                    pact_url,
                    len(contract.messages),
                )
            for interaction in self._filter(contract.interactions):
                result.outcomes.append(await self._verify_interaction(pact_url, interaction))

        logger.info(
            "Verification of %s: %d passed, %d failed",
            self.options.provider,
            result.passed,
            result.failed,
        )
        if not result.success:
            raise VerificationError(result.summary(), result)
        return result
