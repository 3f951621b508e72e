"""CLI context and dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click
import typer

from collab_deploy.cli.console import CLIConsole, console
from collab_deploy.config import DeployConfig, load_config
from collab_deploy.infra.k8s import (
    ControllerBackend,
    ControllerFactory,
    get_controller_factory,
)
from collab_deploy.infra.registry import DoctlRegistry, ImageRegistry


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands."""

    console: CLIConsole
    config: DeployConfig
    registry: ImageRegistry
    controller_factory: ControllerFactory


def build_cli_context(
    config_path: Path | None = None,
    backend: ControllerBackend = ControllerBackend.KUBECTL,
) -> CLIContext:
    """Build a fresh CLIContext.

    Raises:
        ConfigurationError: If the config file cannot be loaded
    """
    config = load_config(config_path)

    return CLIContext(
        console=console,
        config=config,
        registry=DoctlRegistry(config.registry.image_prefix, config.registry.repository),
        controller_factory=get_controller_factory(backend),
    )


def get_cli_context(ctx: typer.Context | None = None) -> CLIContext:
    """Return the CLIContext from Typer, falling back to a new instance."""
    context = ctx or click.get_current_context(silent=True)
    if context and isinstance(context.obj, CLIContext):
        return context.obj
    return build_cli_context()
