"""Main CLI application module.

This module provides the main entry point for the collab-deploy CLI.

Commands:
- deploy: Deploy a version of collab to an environment
- migrate: Run the database migration job for a version
- status: Show what is deployed in an environment
"""

from pathlib import Path
from typing import Annotated

import typer

from collab_deploy.errors import DeploymentError
from collab_deploy.infra.k8s import ControllerBackend

from .commands import deploy, migrate, status
from .console import configure_logging, console
from .context import CLIContext, build_cli_context

# Create the main CLI application
app = typer.Typer(
    help="🛠️  collab deployment tool",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def callback(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Deploy config file (default: $COLLAB_DEPLOY_CONFIG or ./deploy.yaml)",
            dir_okay=False,
        ),
    ] = None,
    backend: Annotated[
        ControllerBackend,
        typer.Option("--backend", help="Kubernetes client implementation"),
    ] = ControllerBackend.KUBECTL,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """Load configuration and build the command context."""
    configure_logging(verbose)
    if isinstance(ctx.obj, CLIContext):
        return
    try:
        ctx.obj = build_cli_context(config, backend)
    except DeploymentError as e:
        console.handle_error(f"{e.kind}: {e.message}", e.details)


app.command()(deploy)
app.command()(migrate)
app.command()(status)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
