"""Environment resolution."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from collab_deploy.config import DeployConfig
from collab_deploy.constants import EnvironmentName
from collab_deploy.errors import InvalidEnvironmentError


@dataclass(frozen=True)
class Environment:
    """A resolved deployment target."""

    name: EnvironmentName
    namespace: str
    cluster: str | None = None
    certificate_id: str | None = None
    url: str | None = None


class EnvironmentResolver:
    """Maps environment names to their configuration bundle."""

    def __init__(self, config: DeployConfig) -> None:
        self.config = config

    def resolve(self, name: str) -> Environment:
        """Resolve an environment name.

        Args:
            name: One of production, preview, nightly, staging

        Returns:
            Immutable Environment

        Raises:
            InvalidEnvironmentError: If the name is not a known environment
        """
        try:
            env_name = EnvironmentName(name)
        except ValueError:
            raise InvalidEnvironmentError(
                f"Invalid environment: {name!r}. "
                f"Choose from: {', '.join(EnvironmentName.values())}"
            ) from None

        env_config = self.config.environments.get(env_name.value)
        if env_config is None:
            raise InvalidEnvironmentError(
                f"Environment {name!r} is not configured"
            )

        environment = Environment(
            name=env_name,
            namespace=env_config.namespace or env_name.value,
            cluster=env_config.cluster,
            certificate_id=env_config.certificate_id,
            url=env_config.url,
        )
        logger.debug(
            f"Resolved environment {env_name.value}: namespace={environment.namespace} "
            f"cluster={environment.cluster or '<current context>'}"
        )
        return environment
