"""In-memory implementation of KubernetesController.

Replays scripted rollout states instead of talking to a cluster, for
exercising the orchestration logic without a cluster.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import override

from .controller import CommandResult, KubernetesController, RolloutState


class InMemoryController(KubernetesController):
    """Kubernetes controller backed by scripted, in-memory state.

    Each poll of get_rollout_state/get_job_state pops the next scripted
    state; once the script is exhausted the last state repeats (PROGRESSING
    if nothing was scripted).
    """

    def __init__(
        self,
        rollout_states: Iterable[RolloutState] = (),
        job_states: Iterable[RolloutState] = (),
        *,
        apply_result: CommandResult | None = None,
        deployment_images: dict[str, str] | None = None,
        job_images: dict[str, list[str]] | None = None,
    ) -> None:
        self._rollout_states = list(rollout_states)
        self._job_states = list(job_states)
        self.apply_result = apply_result or CommandResult(success=True)
        self.deployment_images = dict(deployment_images or {})
        self.job_images = {ns: list(images) for ns, images in (job_images or {}).items()}

        self.applied: list[tuple[str, str]] = []
        self.rollout_polls = 0
        self.job_polls = 0
        self.calls: list[str] = []

    @staticmethod
    def _next(script: list[RolloutState], poll: int) -> RolloutState:
        if not script:
            return RolloutState.PROGRESSING
        return script[min(poll, len(script) - 1)]

    @override
    async def apply_manifest(self, namespace: str, manifest: str) -> CommandResult:
        self.calls.append("apply_manifest")
        self.applied.append((namespace, manifest))
        return self.apply_result

    @override
    async def get_rollout_state(self, namespace: str, name: str) -> RolloutState:
        self.calls.append("get_rollout_state")
        state = self._next(self._rollout_states, self.rollout_polls)
        self.rollout_polls += 1
        return state

    @override
    async def get_deployment_image(self, namespace: str, name: str) -> str | None:
        self.calls.append("get_deployment_image")
        return self.deployment_images.get(namespace)

    @override
    async def get_job_state(self, namespace: str, name: str) -> RolloutState:
        self.calls.append("get_job_state")
        state = self._next(self._job_states, self.job_polls)
        self.job_polls += 1
        return state

    @override
    async def list_recent_job_images(self, namespace: str, limit: int) -> list[str]:
        self.calls.append("list_recent_job_images")
        return self.job_images.get(namespace, [])[:limit]
