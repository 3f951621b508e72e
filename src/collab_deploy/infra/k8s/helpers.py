from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from collab_deploy.infra.k8s.controller import KubernetesController


class ControllerBackend(str, Enum):
    """Available KubernetesController implementations."""

    KUBECTL = "kubectl"
    KR8S = "kr8s"


ControllerFactory = Callable[[str | None], KubernetesController]


def get_controller_factory(
    backend: ControllerBackend = ControllerBackend.KUBECTL,
) -> ControllerFactory:
    """Get a factory creating a controller for a kube context.

    The factory is called once the target environment is resolved, so no
    cluster client exists for an invalid environment.

    Args:
        backend: Which controller implementation to build

    Returns:
        Callable taking a kube context name (or None) and returning a controller
    """
    if backend == ControllerBackend.KR8S:
        from collab_deploy.infra.k8s.kr8s_controller import Kr8sController

        return lambda context: Kr8sController(context=context)

    from collab_deploy.infra.k8s.kubectl_controller import KubectlController

    return lambda context: KubectlController(context=context)
