"""Status command: what is deployed where."""

from typing import Annotated

import typer
from rich.table import Table

from collab_deploy.cli.console import with_error_handling
from collab_deploy.cli.context import get_cli_context
from collab_deploy.constants import EnvironmentName
from collab_deploy.core import StatusReporter
from collab_deploy.infra.k8s import run_sync


@with_error_handling
def status(
    ctx: typer.Context,
    environment: Annotated[
        str,
        typer.Argument(
            help=f"Environment to inspect ({', '.join(EnvironmentName.values())})",
            show_default=False,
        ),
    ],
) -> None:
    """📊 Show the deployed collab image and the most recent job images."""
    cli = get_cli_context(ctx)
    reporter = StatusReporter(cli.config, cli.controller_factory)

    with cli.console.status(f"Querying {environment}..."):
        result = run_sync(reporter.status(environment))

    env = result.environment
    cli.console.print_header(f"collab in {env.name.value}")
    if env.url:
        cli.console.info(f"URL: {env.url}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Resource")
    table.add_column("Image")
    table.add_row(
        "Deployment",
        result.deployed_image or "[dim]not deployed[/dim]",
    )
    for index, image in enumerate(result.job_images, 1):
        table.add_row(f"Job #{index}", image)
    cli.console.print(table)

    if not result.job_images:
        cli.console.info("No jobs found")
