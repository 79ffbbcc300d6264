"""
pactum command line.

``pactum interactions PACT_FILE`` lists the interactions a provider
verification would replay. Selector options default from the PACT_*
environment variables, so the listing matches what a CI run selects.
"""

from __future__ import annotations

import typer

from pactum._version import get_version
from pactum.config import (
    DESCRIPTION_ENV_VAR,
    PROVIDER_NO_STATE_ENV_VAR,
    PROVIDER_STATE_ENV_VAR,
    VerificationSelectors,
    is_truthy,
)
from pactum.contract import load_contract
from pactum.errors import ContractLoadError
from pactum.verification.filter import filter_interactions

app = typer.Typer(help="pactum - consumer-driven contract testing", no_args_is_help=True)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"pactum {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version",
    ),
) -> None:
    """pactum CLI main callback for global options."""
    pass


@app.command(name="interactions")
def list_interactions(
    pact_file: str = typer.Argument(..., help="Contract file path or URL"),
    description: str | None = typer.Option(
        None, "--description", "-d", envvar=DESCRIPTION_ENV_VAR, help="Exact description"
    ),
    state: str | None = typer.Option(
        None, "--state", "-s", envvar=PROVIDER_STATE_ENV_VAR, help="Provider state name"
    ),
    no_state: str | None = typer.Option(
        None,
        "--no-state",
        envvar=PROVIDER_NO_STATE_ENV_VAR,
        help="Only interactions without provider state (true/false)",
    ),
) -> None:
    """List the interactions selected for verification."""
    try:
        contract = load_contract(pact_file)
    except ContractLoadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    selectors = VerificationSelectors(
        description=description or None,
        provider_state=state or None,
        no_state=is_truthy(no_state),
    )
    selected = filter_interactions(contract.interactions, selectors)

    typer.echo(
        f"{contract.consumer.name} -> {contract.provider.name}: "
        f"{len(selected)} of {len(contract.interactions)} interaction(s) selected"
    )
    for interaction in selected:
        states = ", ".join(interaction.state_names)
        suffix = f" [given {states}]" if states else ""
        typer.echo(f"  • {interaction.description}{suffix}")


def main() -> None:
    app()
