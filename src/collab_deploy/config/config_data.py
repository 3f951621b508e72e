"""Deploy configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from collab_deploy.constants import DEFAULT_CONSTANTS, EnvironmentName


class RegistryConfig(BaseModel):
    """Container registry holding the collab images."""

    host: str = DEFAULT_CONSTANTS.REGISTRY_HOST
    namespace: str = DEFAULT_CONSTANTS.REGISTRY_NAMESPACE
    repository: str = DEFAULT_CONSTANTS.REGISTRY_REPOSITORY

    @property
    def image_prefix(self) -> str:
        """Registry-qualified repository, e.g. registry.digitalocean.com/zed/collab."""
        parts = [self.host, self.namespace, self.repository]
        return "/".join(part.strip("/") for part in parts if part)


class RolloutConfig(BaseModel):
    """How long and how often to poll for rollout completion."""

    resource_name: str = DEFAULT_CONSTANTS.RESOURCE_NAME
    timeout_seconds: float = Field(default=DEFAULT_CONSTANTS.ROLLOUT_TIMEOUT, gt=0)
    poll_interval_seconds: float = Field(default=DEFAULT_CONSTANTS.POLL_INTERVAL, ge=0)
    job_history_limit: int = Field(default=DEFAULT_CONSTANTS.JOB_HISTORY_LIMIT, ge=0)


class ManifestConfig(BaseModel):
    """Manifest template locations. None selects the bundled template."""

    deployment_template: str | None = None
    migration_template: str | None = None


class EnvironmentConfig(BaseModel):
    """Per-environment settings."""

    namespace: str | None = None
    cluster: str | None = None
    certificate_id: str | None = None
    url: str | None = None

    @field_validator("namespace", "cluster", "certificate_id", "url", mode="before")
    @classmethod
    def _blank_as_unset(cls, value: object) -> object:
        # "${VAR:-}" substitutions leave empty strings behind
        if isinstance(value, str) and not value.strip():
            return None
        return value


def _default_environments() -> dict[str, EnvironmentConfig]:
    return {name: EnvironmentConfig() for name in EnvironmentName.values()}


class DeployConfig(BaseModel):
    """Root of the deploy configuration."""

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    rollout: RolloutConfig = Field(default_factory=RolloutConfig)
    manifests: ManifestConfig = Field(default_factory=ManifestConfig)
    environments: dict[str, EnvironmentConfig] = Field(
        default_factory=_default_environments
    )

    @field_validator("environments")
    @classmethod
    def _known_environments_only(
        cls, environments: dict[str, EnvironmentConfig]
    ) -> dict[str, EnvironmentConfig]:
        unknown = sorted(set(environments) - set(EnvironmentName.values()))
        if unknown:
            raise ValueError(
                f"Unknown environment(s): {', '.join(unknown)}. "
                f"Choose from: {', '.join(EnvironmentName.values())}"
            )
        return environments

    @model_validator(mode="after")
    def _fill_missing_environments(self) -> DeployConfig:
        # Environments left out of the file still resolve, with defaults
        for name in EnvironmentName.values():
            self.environments.setdefault(name, EnvironmentConfig())
        return self
