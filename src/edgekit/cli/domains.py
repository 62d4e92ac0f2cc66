"""
Domain commands for the edgekit CLI.

Commands for inspecting detected domains, validating configuration, and
planning and running multi-domain deployments.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from edgekit.core.errors import ConfigLoadError, DeploymentAbortedError, EdgekitError
from edgekit.deploy.config import OrchestratorSettings, load_orchestrator_settings
from edgekit.deploy.models import DeploymentResult
from edgekit.deploy.router import DomainRouter
from edgekit.deploy.wrangler import DEFAULT_COMMAND, WranglerDeployer

domains_app = typer.Typer(
    help="Detect, plan and deploy edge domains",
    no_args_is_help=True,
)

console = Console()

ProjectOption = Annotated[
    Path,
    typer.Option(
        "--project",
        "-p",
        help="Project directory containing edgekit.toml",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Domain configuration JSON (overrides edgekit.toml)"),
]
EnvOption = Annotated[
    str | None,
    typer.Option("--env", "-e", help="Environment tier (production, staging, development)"),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Print machine-readable JSON")]


def _load_settings(
    project_dir: Path, config_path: Path | None, environment: str | None
) -> OrchestratorSettings:
    settings = load_orchestrator_settings(project_dir / "edgekit.toml")
    updates: dict[str, Any] = {}
    if config_path is not None:
        updates["config_path"] = str(config_path)
    if environment:
        updates["environment"] = environment
    return settings.model_copy(update=updates) if updates else settings


def _build_router(settings: OrchestratorSettings, project_dir: Path) -> DomainRouter:
    """Create a router, load its configuration and detect domains."""
    router = DomainRouter(settings)
    config_file = settings.get_config_path(project_dir)
    try:
        if router.load_configuration(config_file) is None:
            console.print(f"[yellow]No domain configuration at {config_file}[/yellow]")
    except EdgekitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e
    router.detect_domains()
    return router


def _account_ids(router: DomainRouter, domains: list[str]) -> dict[str, str]:
    """Collect accountId overrides; malformed blocks are left to validation."""
    accounts: dict[str, str] = {}
    for domain in domains:
        try:
            strategy = router.get_failover_strategy(domain)
        except ConfigLoadError:
            continue
        if strategy.account_id:
            accounts[domain] = strategy.account_id
    return accounts


def _print_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2))


def _print_result(result: DeploymentResult) -> None:
    table = Table(title="Deployment Result")
    table.add_column("Domain", style="cyan")
    table.add_column("Status")
    table.add_column("Detail")

    for item in result.successful:
        detail = item.value.get("url") if isinstance(item.value, dict) else item.value
        table.add_row(item.domain, "[green]deployed[/green]", str(detail or ""))
    for failure in result.failed:
        table.add_row(failure.domain, "[red]failed[/red]", failure.error)
    for domain in result.skipped:
        table.add_row(domain, "[yellow]skipped[/yellow]", "")

    console.print(table)
    console.print(
        f"\n{len(result.successful)} successful, {len(result.failed)} failed, "
        f"{len(result.skipped)} skipped in {result.duration_ms / 1000:.1f}s"
    )


@domains_app.command(name="list")
def domains_list(
    project_dir: ProjectOption = Path("."),
    config_path: ConfigOption = None,
    environment: EnvOption = None,
    as_json: JsonOption = False,
) -> None:
    """List detected domains with their routing strategies."""
    settings = _load_settings(project_dir, config_path, environment)
    router = _build_router(settings, project_dir)

    if as_json:
        _print_json(router.domains)
        return

    if not router.domains:
        console.print("[yellow]No domains detected[/yellow]")
        return

    table = Table(title=f"Domains ({settings.environment})")
    table.add_column("Domain", style="cyan")
    table.add_column("Strategies")
    table.add_column("Rate limit", justify="right")
    table.add_column("Failover")

    for domain in router.domains:
        try:
            routing = router.get_environment_routing(domain)
            failover = router.get_failover_strategy(domain)
        except EdgekitError as e:
            console.print(f"[red]{e.message}[/red]")
            raise typer.Exit(1) from e
        table.add_row(
            domain,
            ", ".join(routing.strategies),
            str(routing.rate_limit),
            f"{failover.mode} ({len(failover.secondary_endpoints)} backups)",
        )

    console.print(table)


@domains_app.command(name="validate")
def domains_validate(
    project_dir: ProjectOption = Path("."),
    config_path: ConfigOption = None,
    as_json: JsonOption = False,
) -> None:
    """Validate the structure of the domain configuration."""
    settings = _load_settings(project_dir, config_path, None)
    router = _build_router(settings, project_dir)
    result = router.validate_configuration(router.config)

    if as_json:
        _print_json(result.to_dict())
    else:
        for error in result.errors:
            console.print(f"[red]✗ {error}[/red]")
        for warning in result.warnings:
            console.print(f"[yellow]! {warning}[/yellow]")
        if result.valid:
            console.print("[green]✓ Configuration is valid[/green]")

    if not result.valid:
        raise typer.Exit(1)


@domains_app.command(name="plan")
def domains_plan(
    domains: Annotated[
        list[str] | None, typer.Argument(help="Domains to plan (default: all detected)")
    ] = None,
    project_dir: ProjectOption = Path("."),
    config_path: ConfigOption = None,
    environment: EnvOption = None,
    parallel: Annotated[
        int | None, typer.Option("--parallel", "-j", min=1, help="Domains per batch")
    ] = None,
    as_json: JsonOption = False,
) -> None:
    """Show the batched deployment plan."""
    settings = _load_settings(project_dir, config_path, environment)
    router = _build_router(settings, project_dir)

    try:
        plan = router.plan_multi_domain_deployment(
            domains or router.domains, parallel_deployments=parallel
        )
    except EdgekitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    if as_json:
        _print_json(plan.to_dict())
        return

    console.print(
        f"\n[bold]Deployment plan[/bold] - {plan.total_domains} domains, "
        f"{len(plan.batches)} batches, environment [cyan]{plan.environment}[/cyan]\n"
    )
    for index, batch in enumerate(plan.batches, start=1):
        console.print(f"  Batch {index}: {', '.join(batch)}")
    console.print(f"\n  Phases: {', '.join(phase.name for phase in plan.phases)}")
    console.print(f"  Estimated duration: {plan.estimated_duration_ms // 60000} min")


@domains_app.command(name="deploy")
def domains_deploy(
    domains: Annotated[
        list[str] | None, typer.Argument(help="Domains to deploy (default: all detected)")
    ] = None,
    project_dir: ProjectOption = Path("."),
    config_path: ConfigOption = None,
    environment: EnvOption = None,
    parallel: Annotated[
        int | None, typer.Option("--parallel", "-j", min=1, help="Domains per batch")
    ] = None,
    rollback_on_error: Annotated[
        bool,
        typer.Option(
            "--rollback-on-error",
            help="Stop and fail the run after the first batch with a failure",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Report what would be deployed"),
    ] = False,
    command: Annotated[
        str,
        typer.Option("--command", help="Deploy CLI to invoke"),
    ] = " ".join(DEFAULT_COMMAND),
    as_json: JsonOption = False,
) -> None:
    """
    Deploy domains in batches with the platform CLI.

    Example:
        edgekit domains deploy --env staging --parallel 2
    """
    settings = _load_settings(project_dir, config_path, environment)
    router = _build_router(settings, project_dir)
    targets = domains or router.domains
    deployer = WranglerDeployer(
        environment=settings.environment,
        project_dir=project_dir,
        command=command.split(),
        dry_run=dry_run or settings.dry_run,
        account_ids=_account_ids(router, targets),
    )

    if not as_json:
        console.print(
            f"\n[bold]edgekit[/bold] - deploying {len(targets)} domains "
            f"to [cyan]{settings.environment}[/cyan]\n"
        )

    try:
        result = asyncio.run(
            router.deploy_across_domains(
                targets,
                deployer,
                parallel_deployments=parallel,
                rollback_on_error=rollback_on_error or settings.rollback_on_error,
            )
        )
    except DeploymentAbortedError as e:
        if as_json:
            _print_json(e.result.to_dict())
        else:
            _print_result(e.result)
            console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e
    except EdgekitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    if as_json:
        _print_json(result.to_dict())
    else:
        _print_result(result)

    if result.failed:
        raise typer.Exit(1)


@domains_app.command(name="routing")
def domains_routing(
    domain: Annotated[str, typer.Argument(help="Domain to inspect")],
    project_dir: ProjectOption = Path("."),
    config_path: ConfigOption = None,
    environment: EnvOption = None,
) -> None:
    """Print the routing policy for a domain."""
    settings = _load_settings(project_dir, config_path, environment)
    router = _build_router(settings, project_dir)
    try:
        routing = router.get_environment_routing(domain)
    except EdgekitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e
    _print_json(routing.to_dict())


@domains_app.command(name="failover")
def domains_failover(
    domain: Annotated[str, typer.Argument(help="Domain to inspect")],
    project_dir: ProjectOption = Path("."),
    config_path: ConfigOption = None,
) -> None:
    """Print the failover strategy for a domain."""
    settings = _load_settings(project_dir, config_path, None)
    router = _build_router(settings, project_dir)
    try:
        strategy = router.get_failover_strategy(domain)
    except EdgekitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e
    _print_json(strategy.to_dict())


@domains_app.command(name="summary")
def domains_summary(
    project_dir: ProjectOption = Path("."),
    config_path: ConfigOption = None,
    environment: EnvOption = None,
) -> None:
    """Print routing and failover for every detected domain as JSON."""
    settings = _load_settings(project_dir, config_path, environment)
    router = _build_router(settings, project_dir)
    try:
        summary = router.get_summary()
    except EdgekitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e
    _print_json(summary)
