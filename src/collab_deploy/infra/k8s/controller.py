"""Abstract Kubernetes controller interface.

Defines the contract for the cluster operations a deployment needs, which
can be implemented by different backends (kubectl subprocess, kr8s library,
in-memory).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

# =============================================================================
# Data Types
# =============================================================================


@dataclass
class CommandResult:
    """Result of a command execution."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


class RolloutState(str, Enum):
    """State of a rollout as observed on the cluster."""

    PROGRESSING = "progressing"
    AVAILABLE = "available"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not RolloutState.PROGRESSING


# =============================================================================
# Status parsing shared by the backends
# =============================================================================


def rollout_state_from_deployment(deployment: dict[str, Any]) -> RolloutState:
    """Derive the rollout state from a Deployment object.

    Mirrors the checks `kubectl rollout status` performs: nothing is decided
    until the controller has observed the latest generation. After that a
    progress deadline or replica failure is terminal failure, and the rollout
    is available once every desired replica is updated and available.

    Args:
        deployment: Deployment as returned by the API (metadata/spec/status)

    Returns:
        RolloutState for the deployment
    """
    metadata = deployment.get("metadata", {}) or {}
    spec = deployment.get("spec", {}) or {}
    status = deployment.get("status", {}) or {}

    # Conditions describe the previous generation until this one is observed
    generation = metadata.get("generation", 0)
    observed = status.get("observedGeneration", 0)
    if observed < generation:
        return RolloutState.PROGRESSING

    for condition in status.get("conditions", []) or []:
        reason = condition.get("reason", "")
        if reason == "ProgressDeadlineExceeded":
            return RolloutState.FAILED
        if condition.get("type") == "ReplicaFailure" and condition.get("status") == "True":
            return RolloutState.FAILED

    desired = spec.get("replicas", 1)
    updated = status.get("updatedReplicas", 0)
    available = status.get("availableReplicas", 0)
    total = status.get("replicas", 0)

    # Old replicas still terminating
    if updated < desired or total > updated:
        return RolloutState.PROGRESSING
    if available < updated:
        return RolloutState.PROGRESSING
    return RolloutState.AVAILABLE


def job_state_from_job(job: dict[str, Any]) -> RolloutState:
    """Derive the completion state of a Job object."""
    status = job.get("status", {}) or {}
    for condition in status.get("conditions", []) or []:
        if condition.get("status") != "True":
            continue
        if condition.get("type") == "Complete":
            return RolloutState.AVAILABLE
        if condition.get("type") == "Failed":
            return RolloutState.FAILED

    if status.get("succeeded", 0) > 0:
        return RolloutState.AVAILABLE
    return RolloutState.PROGRESSING


def container_image(pod_template_owner: dict[str, Any]) -> str | None:
    """Image of the first container in a Deployment or Job pod template."""
    containers = (
        pod_template_owner.get("spec", {})
        .get("template", {})
        .get("spec", {})
        .get("containers", [])
    )
    if not containers:
        return None
    image: str | None = containers[0].get("image")
    return image


def recent_job_images(jobs: list[dict[str, Any]], limit: int) -> list[str]:
    """Images of the most recently created jobs, newest first."""
    ordered = sorted(
        jobs,
        key=lambda job: job.get("metadata", {}).get("creationTimestamp", ""),
        reverse=True,
    )
    images = []
    for job in ordered[:limit]:
        image = container_image(job)
        if image:
            images.append(image)
    return images


# =============================================================================
# Abstract Controller
# =============================================================================


class KubernetesController(ABC):
    """Abstract base class for Kubernetes operations.

    All methods are async to support both sync (kubectl) and async (kr8s)
    implementations. Use `run_sync()` to call from synchronous code.

    Example:
        from collab_deploy.infra.k8s import KubectlController, run_sync

        controller = KubectlController(context="do-nyc1-collab")
        image = run_sync(controller.get_deployment_image("staging", "collab"))
    """

    # =========================================================================
    # Resource Operations
    # =========================================================================

    @abstractmethod
    async def apply_manifest(self, namespace: str, manifest: str) -> CommandResult:
        """Apply a rendered manifest document.

        Args:
            namespace: Kubernetes namespace
            manifest: Manifest text (one or more YAML documents)

        Returns:
            CommandResult with apply status
        """
        ...

    # =========================================================================
    # Deployment Operations
    # =========================================================================

    @abstractmethod
    async def get_rollout_state(self, namespace: str, name: str) -> RolloutState:
        """Observe the rollout state of a deployment once.

        Args:
            namespace: Kubernetes namespace
            name: Deployment name

        Returns:
            Current RolloutState
        """
        ...

    @abstractmethod
    async def get_deployment_image(self, namespace: str, name: str) -> str | None:
        """Get the image of the first container in a deployment's pod spec.

        Args:
            namespace: Kubernetes namespace
            name: Deployment name

        Returns:
            Image identifier, or None if the deployment does not exist
        """
        ...

    # =========================================================================
    # Job Operations
    # =========================================================================

    @abstractmethod
    async def get_job_state(self, namespace: str, name: str) -> RolloutState:
        """Observe the completion state of a job once.

        Args:
            namespace: Kubernetes namespace
            name: Job name

        Returns:
            RolloutState (AVAILABLE once the job completed)
        """
        ...

    @abstractmethod
    async def list_recent_job_images(self, namespace: str, limit: int) -> list[str]:
        """Get the images of the most recent jobs in a namespace.

        Args:
            namespace: Kubernetes namespace
            limit: Maximum number of jobs to report

        Returns:
            Image identifiers, newest job first (possibly empty)
        """
        ...
