"""Tests for the pactum command line."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from pactum._version import get_version
from pactum.cli import app
from pactum.contract import ContractFile, write_contract
from pactum.models import Interaction, ProviderState

runner = CliRunner()


@pytest.fixture()
def contract_path(tmp_path: Path) -> Path:
    contract = ContractFile.from_interactions(
        "web-ui",
        "user-service",
        [
            Interaction(
                description="get user",
                provider_states=(ProviderState(description="user exists"),),
            ),
            Interaction(description="list users"),
        ],
    )
    return write_contract(contract, tmp_path)


class TestInteractionsCommand:
    def test_lists_all(self, contract_path: Path) -> None:
        result = runner.invoke(app, ["interactions", str(contract_path)])
        assert result.exit_code == 0
        assert "web-ui -> user-service: 2 of 2 interaction(s) selected" in result.output
        assert "get user [given user exists]" in result.output
        assert "list users" in result.output

    def test_description_option(self, contract_path: Path) -> None:
        result = runner.invoke(app, ["interactions", str(contract_path), "--description", "list users"])
        assert result.exit_code == 0
        assert "1 of 2" in result.output
        assert "get user" not in result.output

    def test_state_option(self, contract_path: Path) -> None:
        result = runner.invoke(app, ["interactions", str(contract_path), "-s", "user exists"])
        assert "1 of 2" in result.output
        assert "get user" in result.output

    def test_no_state_from_environment(
        self, contract_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PACT_PROVIDER_NO_STATE", "true")
        result = runner.invoke(app, ["interactions", str(contract_path)])
        assert "1 of 2" in result.output
        assert "list users" in result.output

    def test_missing_contract(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["interactions", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "Error:" in result.output


class TestVersion:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip() == f"pactum {get_version()}"

    def test_version_reads_distribution_metadata(self) -> None:
        with patch("pactum._version.metadata_version", return_value="1.2.3") as lookup:
            assert get_version() == "1.2.3"
        lookup.assert_called_once_with("pactum")

    def test_uninstalled_tree_reports_placeholder(self) -> None:
        with patch("pactum._version.metadata_version", side_effect=PackageNotFoundError("pactum")):
            assert get_version() == "0.0.0"
