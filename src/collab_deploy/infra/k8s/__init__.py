"""Kubernetes infrastructure abstraction layer.

This module provides a clean abstraction over the Kubernetes operations a
deployment needs, supporting multiple backends (kubectl subprocess, kr8s
library, in-memory).

Example:
    from collab_deploy.infra.k8s import KubectlController, run_sync

    # Create controller
    controller = KubectlController(context="do-nyc1-collab")

    # Use async methods in sync context
    state = run_sync(controller.get_rollout_state("staging", "collab"))
"""

from .controller import CommandResult, KubernetesController, RolloutState
from .helpers import ControllerBackend, ControllerFactory, get_controller_factory
from .kubectl_controller import KubectlController
from .memory_controller import InMemoryController
from .utils import run_sync

__all__ = [
    # Controller classes
    "KubernetesController",
    "KubectlController",
    "InMemoryController",
    # Data classes
    "CommandResult",
    "RolloutState",
    # Factories
    "ControllerBackend",
    "ControllerFactory",
    "get_controller_factory",
    # Utilities
    "run_sync",
]
