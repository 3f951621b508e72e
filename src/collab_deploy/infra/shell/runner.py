"""Command runner for executing shell commands.

This module provides the command execution used by the CLI-backed
collaborators (doctl registry lookups).
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from collab_deploy.infra.k8s.controller import CommandResult


class CommandRunner:
    """Low-level command executor with consistent result handling."""

    def __init__(self, cwd: Path | None = None) -> None:
        """Initialize the command runner.

        Args:
            cwd: Working directory for commands (default: current directory)
        """
        self.cwd = cwd

    def run(
        self,
        cmd: Sequence[str],
        *,
        input_data: str | None = None,
    ) -> CommandResult:
        """Execute a command and return structured result.

        A missing executable is reported as a failed result with
        return code 127 rather than raised.

        Args:
            cmd: Command and arguments as a sequence
            input_data: Optional input to send to stdin

        Returns:
            CommandResult with success status, output, and return code
        """
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                list(cmd),
                cwd=self.cwd,
                capture_output=True,
                text=True,
                input=input_data,
            )
        except FileNotFoundError:
            return CommandResult(
                success=False,
                stderr=f"{cmd[0]} not found on PATH",
                returncode=127,
            )
        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )
