"""Deployment orchestration.

Resolves the environment and image, renders the manifest, applies it and
waits for the rollout to finish:

    environment -> image -> manifest -> apply -> wait -> result

Each step's failure is terminal for the run. Nothing is retried and nothing
is rolled back; the cluster's own rollout history is the recovery path.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial

from loguru import logger

from collab_deploy.config import DeployConfig
from collab_deploy.constants import DEFAULT_CONSTANTS
from collab_deploy.errors import (
    ApplyRejectedError,
    RolloutFailedError,
    RolloutTimeoutError,
)
from collab_deploy.infra.k8s import ControllerFactory, KubernetesController, RolloutState
from collab_deploy.infra.registry import ImageRegistry

from .environment import Environment, EnvironmentResolver
from .image import ImageReference, ImageResolver
from .manifest import ManifestRenderer

PollCallback = Callable[[int, RolloutState], None]


@dataclass(frozen=True)
class DeploymentRequest:
    """The single in-flight deployment of one orchestration run."""

    environment: Environment
    image: ImageReference
    manifest: str
    resource_name: str
    resource_kind: str = "deployment"


@dataclass(frozen=True)
class DeployResult:
    """Outcome of a successful rollout."""

    environment: Environment
    image: ImageReference
    resource_name: str
    polls: int
    elapsed_seconds: float


class DeployOrchestrator:
    """Drives a deploy or migration from environment name to finished rollout.

    Attributes:
        config: Deploy configuration
        environments: Environment resolver
        images: Image resolver
        controller_factory: Builds a cluster controller for a kube context
    """

    def __init__(
        self,
        config: DeployConfig,
        registry: ImageRegistry,
        controller_factory: ControllerFactory,
        *,
        on_poll: PollCallback | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Deploy configuration
            registry: Registry used to resolve versions
            controller_factory: Called with the environment's kube context once
                the environment is resolved
            on_poll: Optional callback invoked after every status poll
        """
        self.config = config
        self.environments = EnvironmentResolver(config)
        self.images = ImageResolver(registry)
        self.controller_factory = controller_factory
        self.on_poll = on_poll

    # =========================================================================
    # Request preparation
    # =========================================================================

    def prepare(self, environment: str, version: str) -> DeploymentRequest:
        """Resolve and render a deployment without touching the cluster.

        Raises:
            InvalidEnvironmentError: Unknown environment
            UnresolvableVersionError: Malformed or unpublished version
            MissingSubstitutionError: Template placeholder without a value
        """
        env = self.environments.resolve(environment)
        image = self.images.resolve(version)
        renderer = ManifestRenderer.from_file(
            self.config.manifests.deployment_template
            or DEFAULT_CONSTANTS.DEPLOYMENT_TEMPLATE
        )
        manifest = renderer.render(self._substitutions(env, image))
        return DeploymentRequest(
            environment=env,
            image=image,
            manifest=manifest,
            resource_name=self.config.rollout.resource_name,
        )

    def prepare_migration(self, environment: str, version: str) -> DeploymentRequest:
        """Resolve and render the database migration job for a version."""
        env = self.environments.resolve(environment)
        image = self.images.resolve(version)
        job_name = migration_job_name(image)
        renderer = ManifestRenderer.from_file(
            self.config.manifests.migration_template
            or DEFAULT_CONSTANTS.MIGRATION_TEMPLATE
        )
        substitutions = self._substitutions(env, image)
        substitutions[DEFAULT_CONSTANTS.JOB_NAME_KEY] = job_name
        return DeploymentRequest(
            environment=env,
            image=image,
            manifest=renderer.render(substitutions),
            resource_name=job_name,
            resource_kind="job",
        )

    @staticmethod
    def _substitutions(env: Environment, image: ImageReference) -> dict[str, str]:
        substitutions = {
            DEFAULT_CONSTANTS.NAMESPACE_KEY: env.namespace,
            DEFAULT_CONSTANTS.IMAGE_KEY: image.image_id,
        }
        # Left out when unset so rendering reports it as missing
        if env.certificate_id:
            substitutions[DEFAULT_CONSTANTS.CERTIFICATE_KEY] = env.certificate_id
        return substitutions

    # =========================================================================
    # Operations
    # =========================================================================

    async def deploy(
        self,
        environment: str,
        version: str,
        *,
        timeout: float | None = None,
        poll_interval: float | None = None,
    ) -> DeployResult:
        """Deploy a version of collab to an environment and wait for the rollout.

        Args:
            environment: Environment name
            version: Version to deploy, e.g. 0.42.1
            timeout: Seconds to wait for the rollout (default from config)
            poll_interval: Seconds between status polls (default from config)

        Returns:
            DeployResult once the deployment is available

        Raises:
            InvalidEnvironmentError, UnresolvableVersionError,
            MissingSubstitutionError, ApplyRejectedError, RolloutFailedError,
            RolloutTimeoutError
        """
        request = self.prepare(environment, version)
        return await self.execute(request, timeout=timeout, poll_interval=poll_interval)

    async def migrate(
        self,
        environment: str,
        version: str,
        *,
        timeout: float | None = None,
        poll_interval: float | None = None,
    ) -> DeployResult:
        """Run the database migration job for a version and wait for it to complete."""
        request = self.prepare_migration(environment, version)
        return await self.execute(request, timeout=timeout, poll_interval=poll_interval)

    async def execute(
        self,
        request: DeploymentRequest,
        *,
        timeout: float | None = None,
        poll_interval: float | None = None,
    ) -> DeployResult:
        """Apply a prepared request and wait for it to reach a terminal state.

        Raises:
            ApplyRejectedError, RolloutFailedError, RolloutTimeoutError
        """
        controller = self.controller_factory(request.environment.cluster)
        namespace = request.environment.namespace
        name = request.resource_name

        if request.resource_kind == "job":
            poll = partial(controller.get_job_state, namespace, name)
        else:
            poll = partial(controller.get_rollout_state, namespace, name)

        started = time.monotonic()
        await self._apply(request, controller)
        polls = await self._wait_for_rollout(
            request,
            poll,
            timeout=self.config.rollout.timeout_seconds if timeout is None else timeout,
            poll_interval=(
                self.config.rollout.poll_interval_seconds
                if poll_interval is None
                else poll_interval
            ),
        )
        elapsed = time.monotonic() - started
        logger.info(
            f"Rolled out {request.resource_name} {request.image.tag} to "
            f"{request.environment.name.value} after {polls} poll(s)"
        )
        return DeployResult(
            environment=request.environment,
            image=request.image,
            resource_name=request.resource_name,
            polls=polls,
            elapsed_seconds=elapsed,
        )

    async def _apply(
        self, request: DeploymentRequest, controller: KubernetesController
    ) -> None:
        namespace = request.environment.namespace
        logger.info(f"Applying {request.resource_name} manifest to namespace {namespace}")
        result = await controller.apply_manifest(namespace, request.manifest)
        if not result.success:
            raise ApplyRejectedError(
                f"Cluster rejected the {request.resource_name} manifest for {namespace}",
                details=result.stderr.strip() or result.stdout.strip() or None,
            )
        if result.stdout:
            logger.debug(result.stdout.strip())

    async def _wait_for_rollout(
        self,
        request: DeploymentRequest,
        poll: Callable[[], Awaitable[RolloutState]],
        *,
        timeout: float,
        poll_interval: float,
    ) -> int:
        """Poll until a terminal state, bounded by timeout.

        Cancelling the surrounding task stops the wait immediately; the
        rollout itself continues on the cluster.

        Returns:
            Number of polls it took to observe the available state

        Raises:
            RolloutFailedError: A failed state was observed
            RolloutTimeoutError: No terminal state within timeout seconds
        """
        polls = 0
        state = RolloutState.PROGRESSING
        target = f"{request.environment.namespace}/{request.resource_name}"

        try:
            async with asyncio.timeout(timeout):
                while True:
                    state = await poll()
                    polls += 1
                    logger.debug(f"Poll {polls}: {target} is {state.value}")
                    if self.on_poll is not None:
                        self.on_poll(polls, state)
                    if state.is_terminal:
                        break
                    await asyncio.sleep(poll_interval)
        except TimeoutError:
            raise RolloutTimeoutError(
                f"Rollout of {target} did not finish within {timeout:g}s",
                details=f"Last observed state: {state.value} after {polls} poll(s)",
            ) from None

        if state is RolloutState.FAILED:
            raise RolloutFailedError(
                f"Rollout of {target} ({request.image.image_id}) failed",
                details=(
                    "The cluster reported a failed rollout. Inspect it with "
                    f"'kubectl -n {request.environment.namespace} describe "
                    f"{request.resource_kind}/{request.resource_name}'."
                ),
            )
        return polls


def migration_job_name(image: ImageReference) -> str:
    """Kubernetes-safe migration job name for an image, e.g. collab-migrate-v0-42-1."""
    return f"{DEFAULT_CONSTANTS.MIGRATION_JOB_PREFIX}-{image.tag.replace('.', '-')}"
