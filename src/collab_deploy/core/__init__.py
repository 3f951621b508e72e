"""Deployment core: resolution, rendering, orchestration and status.

Example:
    from collab_deploy.config import load_config
    from collab_deploy.core import DeployOrchestrator
    from collab_deploy.infra.k8s import get_controller_factory, run_sync
    from collab_deploy.infra.registry import DoctlRegistry

    config = load_config()
    registry = DoctlRegistry(config.registry.image_prefix, config.registry.repository)
    orchestrator = DeployOrchestrator(config, registry, get_controller_factory())
    result = run_sync(orchestrator.deploy("staging", "0.42.1"))
"""

from .environment import Environment, EnvironmentResolver
from .image import ImageReference, ImageResolver, tag_for_version
from .manifest import ManifestRenderer, load_template, placeholders, render
from .orchestrator import (
    DeploymentRequest,
    DeployOrchestrator,
    DeployResult,
    migration_job_name,
)
from .status import DeploymentStatus, StatusReporter

__all__ = [
    "Environment",
    "EnvironmentResolver",
    "ImageReference",
    "ImageResolver",
    "tag_for_version",
    "ManifestRenderer",
    "load_template",
    "placeholders",
    "render",
    "DeploymentRequest",
    "DeployOrchestrator",
    "DeployResult",
    "migration_job_name",
    "DeploymentStatus",
    "StatusReporter",
]
