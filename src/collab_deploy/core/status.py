"""Report what is deployed in an environment."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from collab_deploy.config import DeployConfig
from collab_deploy.infra.k8s import ControllerFactory

from .environment import Environment, EnvironmentResolver


@dataclass(frozen=True)
class DeploymentStatus:
    """Images currently running in an environment."""

    environment: Environment
    deployed_image: str | None
    job_images: list[str] = field(default_factory=list)


class StatusReporter:
    """Queries the cluster for deployed and recent job images.

    Only an invalid environment is an error. Cluster query failures are
    logged and reported as nothing found.
    """

    def __init__(self, config: DeployConfig, controller_factory: ControllerFactory) -> None:
        self.config = config
        self.environments = EnvironmentResolver(config)
        self.controller_factory = controller_factory

    async def status(self, environment: str) -> DeploymentStatus:
        """Get the deployed image and up to job_history_limit recent job images.

        Raises:
            InvalidEnvironmentError: If the environment name is unknown
        """
        env = self.environments.resolve(environment)
        controller = self.controller_factory(env.cluster)
        resource_name = self.config.rollout.resource_name
        limit = self.config.rollout.job_history_limit

        try:
            deployed_image = await controller.get_deployment_image(
                env.namespace, resource_name
            )
        except Exception as e:
            logger.warning(f"Could not read deployment {env.namespace}/{resource_name}: {e}")
            deployed_image = None

        try:
            job_images = await controller.list_recent_job_images(env.namespace, limit)
        except Exception as e:
            logger.warning(f"Could not list jobs in {env.namespace}: {e}")
            job_images = []

        if not job_images:
            logger.info(f"No jobs found in {env.namespace}")

        return DeploymentStatus(
            environment=env,
            deployed_image=deployed_image,
            job_images=list(job_images)[:limit],
        )
