"""Tests for the edgekit domains CLI commands."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from edgekit.cli import app


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path, sample_config: dict[str, Any]) -> Path:
    """Create a project with edgekit.toml and a domain configuration."""
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "domains.json").write_text(json.dumps(sample_config))
    (tmp_path / "edgekit.toml").write_text(
        '[deploy]\nenvironment = "production"\nparallel_deployments = 2\n'
    )
    return tmp_path


class TestDomainsList:
    """Tests for `edgekit domains list`."""

    def test_json(self, cli_runner: CliRunner, project: Path):
        result = cli_runner.invoke(app, ["domains", "list", "-p", str(project), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output) == [
            "api.example.com",
            "app.example.com",
            "localhost:8787",
            "staging.example.com",
        ]

    def test_table(self, cli_runner: CliRunner, project: Path):
        result = cli_runner.invoke(app, ["domains", "list", "-p", str(project)])

        assert result.exit_code == 0
        assert "Domains (production)" in result.output

    def test_env_variable_domains(
        self, cli_runner: CliRunner, project: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("EDGEKIT_DOMAINS", "extra.example.com")

        result = cli_runner.invoke(app, ["domains", "list", "-p", str(project), "--json"])

        assert "extra.example.com" in json.loads(result.output)

    def test_malformed_config_exits(self, cli_runner: CliRunner, tmp_path: Path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")

        result = cli_runner.invoke(app, ["domains", "list", "-p", str(tmp_path), "-c", str(bad)])

        assert result.exit_code == 1
        assert "Failed to load domain configuration" in result.output


class TestDomainsValidate:
    """Tests for `edgekit domains validate`."""

    def test_valid(self, cli_runner: CliRunner, project: Path):
        result = cli_runner.invoke(app, ["domains", "validate", "-p", str(project), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["valid"] is True

    def test_invalid(self, cli_runner: CliRunner, tmp_path: Path):
        config = tmp_path / "domains.json"
        config.write_text(json.dumps({"domains": [], "environments": {"qa": {}}}))

        result = cli_runner.invoke(
            app, ["domains", "validate", "-p", str(tmp_path), "-c", str(config), "--json"]
        )

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["errors"] == ["At least one domain must be specified"]
        assert data["warnings"] == ["Unknown environment: qa"]


class TestDomainsPlan:
    """Tests for `edgekit domains plan`."""

    def test_plan_uses_toml_settings(self, cli_runner: CliRunner, project: Path):
        result = cli_runner.invoke(app, ["domains", "plan", "-p", str(project), "--json"])

        assert result.exit_code == 0
        plan = json.loads(result.output)
        assert plan["environment"] == "production"
        assert [len(b) for b in plan["batches"]] == [2, 2]

    def test_plan_subset_and_parallel(self, cli_runner: CliRunner, project: Path):
        result = cli_runner.invoke(
            app,
            [
                "domains",
                "plan",
                "api.example.com",
                "app.example.com",
                "-p",
                str(project),
                "-j",
                "1",
                "--json",
            ],
        )

        assert result.exit_code == 0
        assert json.loads(result.output)["batches"] == [["api.example.com"], ["app.example.com"]]

    def test_plan_unknown_domain(self, cli_runner: CliRunner, project: Path):
        result = cli_runner.invoke(app, ["domains", "plan", "ghost.com", "-p", str(project)])

        assert result.exit_code == 1
        assert "Invalid domains: ghost.com" in result.output


class TestDomainsDeploy:
    """Tests for `edgekit domains deploy`."""

    def test_dry_run(self, cli_runner: CliRunner, project: Path):
        result = cli_runner.invoke(
            app, ["domains", "deploy", "-p", str(project), "--dry-run", "--json"]
        )

        assert result.exit_code == 0
        # Log records may precede the JSON document
        data = json.loads(result.output[result.output.index("{") :])
        assert len(data["successful"]) == 4
        assert data["successful"][0]["result"]["dryRun"] is True

    def test_failed_command_exits_non_zero(self, cli_runner: CliRunner, project: Path):
        result = cli_runner.invoke(
            app,
            [
                "domains",
                "deploy",
                "api.example.com",
                "-p",
                str(project),
                "--command",
                "edgekit-no-such-binary-xyz",
            ],
        )

        assert result.exit_code == 1
        assert "failed" in result.output

    def test_account_override_passed_to_deploy_command(
        self, cli_runner: CliRunner, project: Path
    ):
        process = MagicMock()
        process.returncode = 0
        process.communicate = AsyncMock(return_value=(b"https://api.example.workers.dev\n", b""))

        with patch(
            "asyncio.create_subprocess_exec", AsyncMock(return_value=process)
        ) as create:
            result = cli_runner.invoke(
                app, ["domains", "deploy", "api.example.com", "-p", str(project), "--json"]
            )

        assert result.exit_code == 0
        assert create.call_args.kwargs["env"]["CLOUDFLARE_ACCOUNT_ID"] == "acc-123"


class TestDomainsInspect:
    """Tests for routing, failover and summary commands."""

    def test_routing(self, cli_runner: CliRunner, project: Path):
        result = cli_runner.invoke(
            app, ["domains", "routing", "api.example.com", "-p", str(project), "-e", "staging"]
        )

        assert result.exit_code == 0
        assert json.loads(result.output)["strategies"] == ["round-robin"]

    def test_failover(self, cli_runner: CliRunner, project: Path):
        result = cli_runner.invoke(
            app, ["domains", "failover", "api.example.com", "-p", str(project)]
        )

        assert result.exit_code == 0
        assert json.loads(result.output)["accountId"] == "acc-123"

    def test_summary(self, cli_runner: CliRunner, project: Path):
        result = cli_runner.invoke(app, ["domains", "summary", "-p", str(project)])

        assert result.exit_code == 0
        assert json.loads(result.output)["totalDomains"] == 4


def test_version(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "edgekit version" in result.output
