"""Deploy and migrate commands.

Both commands resolve the environment and version, render the manifest,
apply it and wait for the cluster to report a terminal state.
"""

from typing import Annotated

import typer
from rich.syntax import Syntax

from collab_deploy.cli.console import with_error_handling
from collab_deploy.cli.context import CLIContext, get_cli_context
from collab_deploy.constants import EnvironmentName
from collab_deploy.core import DeploymentRequest, DeployOrchestrator, DeployResult
from collab_deploy.infra.k8s import RolloutState, run_sync

EnvironmentArg = Annotated[
    str,
    typer.Argument(
        help=f"Target environment ({', '.join(EnvironmentName.values())})",
        show_default=False,
    ),
]
VersionArg = Annotated[
    str, typer.Argument(help="Version to deploy, e.g. 0.42.1", show_default=False)
]
TimeoutOpt = Annotated[
    float | None,
    typer.Option("--timeout", "-t", help="Seconds to wait for the rollout", min=0.001),
]
IntervalOpt = Annotated[
    float | None,
    typer.Option("--interval", help="Seconds between status polls", min=0),
]
DryRunOpt = Annotated[
    bool,
    typer.Option("--dry-run", help="Print the rendered manifest without applying it"),
]
YesOpt = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Skip the production confirmation prompt"),
]


def _confirm_production(
    cli: CLIContext, request: DeploymentRequest, action: str, yes: bool
) -> None:
    if request.environment.name is not EnvironmentName.PRODUCTION:
        return
    confirmed = cli.console.confirm_action(
        f"{action} {request.image.tag} to production",
        details=f"Image: {request.image.image_id}\nNamespace: {request.environment.namespace}",
        force=yes,
    )
    if not confirmed:
        cli.console.print("[dim]Aborted.[/dim]")
        raise typer.Exit(1)


def _print_manifest(cli: CLIContext, request: DeploymentRequest) -> None:
    cli.console.print(Syntax(request.manifest, "yaml", theme="ansi_dark"))


def _report(cli: CLIContext, summary: str, result: DeployResult) -> None:
    cli.console.ok(
        f"{summary} "
        f"[dim]({result.polls} poll(s), {result.elapsed_seconds:.1f}s)[/dim]"
    )
    if result.environment.url:
        cli.console.info(f"URL: {result.environment.url}")


@with_error_handling
def deploy(
    ctx: typer.Context,
    environment: EnvironmentArg,
    version: VersionArg,
    timeout: TimeoutOpt = None,
    interval: IntervalOpt = None,
    dry_run: DryRunOpt = False,
    yes: YesOpt = False,
) -> None:
    """🚀 Deploy a version of collab to an environment and wait for the rollout."""
    cli = get_cli_context(ctx)
    orchestrator = DeployOrchestrator(cli.config, cli.registry, cli.controller_factory)

    request = orchestrator.prepare(environment, version)
    cli.console.print_header(
        f"Deploying collab {request.image.tag} to {request.environment.name.value}"
    )
    if dry_run:
        _print_manifest(cli, request)
        return
    _confirm_production(cli, request, "Deploy", yes)

    with cli.console.status(f"Waiting for {request.resource_name} to roll out...") as status:

        def on_poll(polls: int, state: RolloutState) -> None:
            status.update(
                f"Waiting for {request.resource_name} to roll out... "
                f"[dim]{state.value} (poll {polls})[/dim]"
            )

        orchestrator.on_poll = on_poll
        result = run_sync(
            orchestrator.execute(request, timeout=timeout, poll_interval=interval)
        )

    _report(
        cli,
        f"Deployed collab {result.image.tag} to {result.environment.name.value}",
        result,
    )


@with_error_handling
def migrate(
    ctx: typer.Context,
    environment: EnvironmentArg,
    version: VersionArg,
    timeout: TimeoutOpt = None,
    interval: IntervalOpt = None,
    dry_run: DryRunOpt = False,
    yes: YesOpt = False,
) -> None:
    """🗄️  Run the database migration job for a version and wait for it to finish."""
    cli = get_cli_context(ctx)
    orchestrator = DeployOrchestrator(cli.config, cli.registry, cli.controller_factory)

    request = orchestrator.prepare_migration(environment, version)
    cli.console.print_header(
        f"Migrating {request.environment.name.value} to {request.image.tag}"
    )
    if dry_run:
        _print_manifest(cli, request)
        return
    _confirm_production(cli, request, "Migrate", yes)

    with cli.console.status(f"Waiting for job {request.resource_name}...") as status:

        def on_poll(polls: int, state: RolloutState) -> None:
            status.update(
                f"Waiting for job {request.resource_name}... "
                f"[dim]{state.value} (poll {polls})[/dim]"
            )

        orchestrator.on_poll = on_poll
        result = run_sync(
            orchestrator.execute(request, timeout=timeout, poll_interval=interval)
        )

    _report(
        cli,
        f"Job {result.resource_name} completed in {result.environment.name.value}",
        result,
    )
