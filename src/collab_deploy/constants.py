"""Deployment constants.

This module centralizes the fixed names, defaults and patterns used
throughout the deployment process.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class EnvironmentName(str, Enum):
    """Deployment environment options."""

    PRODUCTION = "production"
    PREVIEW = "preview"
    NIGHTLY = "nightly"
    STAGING = "staging"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


@dataclass(frozen=True)
class DeploymentConstants:
    """Constants for collab deployment.

    All attributes are class-level and immutable.
    """

    # Kubernetes identifiers
    RESOURCE_NAME: str = "collab"
    MIGRATION_JOB_PREFIX: str = "collab-migrate"

    # Registry
    REGISTRY_HOST: str = "registry.digitalocean.com"
    REGISTRY_REPOSITORY: str = "collab"
    REGISTRY_NAMESPACE: str = "zed"

    # Timeouts (seconds)
    ROLLOUT_TIMEOUT: float = 300.0
    POLL_INTERVAL: float = 2.0

    # Number of recent jobs reported by status
    JOB_HISTORY_LIMIT: int = 5

    # Default config file, relative to the working directory
    CONFIG_FILE: str = "deploy.yaml"
    CONFIG_ENV_VAR: str = "COLLAB_DEPLOY_CONFIG"

    # Bundled manifest templates
    DEPLOYMENT_TEMPLATE: str = "collab.template.yml"
    MIGRATION_TEMPLATE: str = "migrate.template.yml"

    # Placeholder names substituted into manifest templates
    NAMESPACE_KEY: str = "namespace"
    CERTIFICATE_KEY: str = "certificate-id"
    IMAGE_KEY: str = "image-id"
    JOB_NAME_KEY: str = "job-name"

    # Matches: 0.1.0, 1.22.333
    VERSION_PATTERN: re.Pattern[str] = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+$")


DEFAULT_CONSTANTS = DeploymentConstants()
