"""Kr8s-based implementation of KubernetesController.

Uses the kr8s library for native async Kubernetes reads.
"""

from __future__ import annotations

import asyncio
from typing import Any

import kr8s
from kr8s.asyncio.objects import Deployment, Job
from loguru import logger

from collab_deploy.infra.shell import CommandRunner

from .controller import (
    CommandResult,
    KubernetesController,
    RolloutState,
    container_image,
    job_state_from_job,
    recent_job_images,
    rollout_state_from_deployment,
)


class Kr8sController(KubernetesController):
    """Kubernetes controller using kr8s library.

    Note: The kr8s API client is NOT cached because it's tied to the event loop
    that was running when created. When using run_sync() which calls asyncio.run(),
    each call creates a new event loop, making the cached API unusable.
    """

    def __init__(
        self, context: str | None = None, runner: CommandRunner | None = None
    ) -> None:
        """Initialize the kr8s controller.

        Args:
            context: Kube context to target, or None for the current context
            runner: Runs the kubectl apply subprocess
        """
        self.context = context
        self.runner = runner or CommandRunner()

    async def _get_api(self) -> Any:  # Returns kr8s._api.Api
        """Create the kr8s API client for the configured context."""
        return await kr8s.asyncio.api(context=self.context)

    # =========================================================================
    # Resource Operations
    # =========================================================================

    async def apply_manifest(self, namespace: str, manifest: str) -> CommandResult:
        """Apply a manifest.

        Note: kr8s doesn't have a direct 'apply' equivalent, so we use
        kubectl subprocess for this operation.
        """
        cmd = ["kubectl"]
        if self.context:
            cmd.extend(["--context", self.context])
        cmd.extend(["apply", "-n", namespace, "-f", "-"])

        return await asyncio.to_thread(self.runner.run, cmd, input_data=manifest)

    # =========================================================================
    # Deployment Operations
    # =========================================================================

    async def _get_deployment(self, namespace: str, name: str) -> dict[str, Any] | None:
        try:
            api = await self._get_api()
            deployment = await Deployment.get(name, namespace=namespace, api=api)
            raw: dict[str, Any] = deployment.raw
            return raw
        except kr8s.NotFoundError:
            logger.warning(f"Deployment {namespace}/{name} not found")
            return None
        except Exception as e:
            logger.warning(f"Failed to read deployment {namespace}/{name}: {e}")
            return None

    async def get_rollout_state(self, namespace: str, name: str) -> RolloutState:
        """Observe the rollout state of a deployment once."""
        deployment = await self._get_deployment(namespace, name)
        if deployment is None:
            return RolloutState.PROGRESSING
        return rollout_state_from_deployment(deployment)

    async def get_deployment_image(self, namespace: str, name: str) -> str | None:
        """Get the image of the first container in a deployment's pod spec."""
        deployment = await self._get_deployment(namespace, name)
        if deployment is None:
            return None
        return container_image(deployment)

    # =========================================================================
    # Job Operations
    # =========================================================================

    async def get_job_state(self, namespace: str, name: str) -> RolloutState:
        """Observe the completion state of a job once."""
        try:
            api = await self._get_api()
            job = await Job.get(name, namespace=namespace, api=api)
            return job_state_from_job(job.raw)
        except kr8s.NotFoundError:
            logger.warning(f"Job {namespace}/{name} not found")
            return RolloutState.PROGRESSING
        except Exception as e:
            logger.warning(f"Failed to read job {namespace}/{name}: {e}")
            return RolloutState.PROGRESSING

    async def list_recent_job_images(self, namespace: str, limit: int) -> list[str]:
        """Get the images of the most recent jobs in a namespace."""
        try:
            api = await self._get_api()
            jobs = [job.raw async for job in Job.list(namespace=namespace, api=api)]
        except Exception as e:
            logger.warning(f"Failed to list jobs in {namespace}: {e}")
            return []
        return recent_job_images(jobs, limit)
