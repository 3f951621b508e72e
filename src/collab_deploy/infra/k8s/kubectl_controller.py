"""Kubectl-based implementation of KubernetesController.

Uses subprocess calls to kubectl for all operations.
"""

from __future__ import annotations

import asyncio
import json
import subprocess
from typing import Any

from loguru import logger

from .controller import (
    CommandResult,
    KubernetesController,
    RolloutState,
    container_image,
    job_state_from_job,
    recent_job_images,
    rollout_state_from_deployment,
)


class KubectlController(KubernetesController):
    """Kubernetes controller using kubectl subprocess calls.

    All methods are async but internally use asyncio.to_thread()
    to run blocking subprocess calls without blocking the event loop.
    """

    def __init__(self, context: str | None = None, kubectl: str = "kubectl") -> None:
        """Initialize the kubectl controller.

        Args:
            context: Kube context to target, or None for the current context
            kubectl: kubectl executable
        """
        self.context = context
        self.kubectl = kubectl

    async def _run_kubectl(
        self,
        args: list[str],
        *,
        input_data: str | None = None,
    ) -> CommandResult:
        """Run a kubectl command asynchronously.

        Args:
            args: Command arguments (without 'kubectl' prefix)
            input_data: Optional input to send to stdin

        Returns:
            CommandResult with execution results
        """
        cmd = [self.kubectl]
        if self.context:
            cmd.extend(["--context", self.context])
        cmd.extend(args)
        logger.debug(f"Running: {' '.join(cmd)}")

        def _run() -> CommandResult:
            try:
                result = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    input=input_data,
                )
            except FileNotFoundError:
                return CommandResult(
                    success=False,
                    stderr=f"{self.kubectl} not found on PATH",
                    returncode=127,
                )
            return CommandResult(
                success=result.returncode == 0,
                stdout=result.stdout or "",
                stderr=result.stderr or "",
                returncode=result.returncode,
            )

        return await asyncio.to_thread(_run)

    async def _get_json(self, args: list[str]) -> dict[str, Any] | None:
        result = await self._run_kubectl([*args, "-o", "json"])
        if not result.success:
            logger.warning(
                f"kubectl {' '.join(args)} failed: {result.stderr.strip()}"
            )
            return None
        try:
            loaded: dict[str, Any] = json.loads(result.stdout)
        except json.JSONDecodeError:
            logger.warning(f"kubectl {' '.join(args)} returned invalid JSON")
            return None
        return loaded

    # =========================================================================
    # Resource Operations
    # =========================================================================

    async def apply_manifest(self, namespace: str, manifest: str) -> CommandResult:
        """Apply a manifest by piping it to `kubectl apply -f -`."""
        return await self._run_kubectl(
            ["apply", "-n", namespace, "-f", "-"], input_data=manifest
        )

    # =========================================================================
    # Deployment Operations
    # =========================================================================

    async def get_rollout_state(self, namespace: str, name: str) -> RolloutState:
        """Observe the rollout state of a deployment once."""
        deployment = await self._get_json(["get", "deployment", name, "-n", namespace])
        if deployment is None:
            return RolloutState.PROGRESSING
        return rollout_state_from_deployment(deployment)

    async def get_deployment_image(self, namespace: str, name: str) -> str | None:
        """Get the image of the first container in a deployment's pod spec."""
        deployment = await self._get_json(["get", "deployment", name, "-n", namespace])
        if deployment is None:
            return None
        return container_image(deployment)

    # =========================================================================
    # Job Operations
    # =========================================================================

    async def get_job_state(self, namespace: str, name: str) -> RolloutState:
        """Observe the completion state of a job once."""
        job = await self._get_json(["get", "job", name, "-n", namespace])
        if job is None:
            return RolloutState.PROGRESSING
        return job_state_from_job(job)

    async def list_recent_job_images(self, namespace: str, limit: int) -> list[str]:
        """Get the images of the most recent jobs in a namespace."""
        jobs = await self._get_json(["get", "jobs", "-n", namespace])
        if jobs is None:
            return []
        return recent_job_images(jobs.get("items", []), limit)
