"""Tests for deriving rollout state from Kubernetes objects."""

import pytest

from collab_deploy.infra.k8s import RolloutState
from collab_deploy.infra.k8s.controller import (
    container_image,
    job_state_from_job,
    recent_job_images,
    rollout_state_from_deployment,
)


def _deployment(
    *,
    generation: int = 2,
    observed: int = 2,
    replicas: int = 2,
    updated: int = 2,
    available: int = 2,
    total: int = 2,
    conditions: list[dict] | None = None,
) -> dict:
    return {
        "metadata": {"generation": generation},
        "spec": {
            "replicas": replicas,
            "template": {"spec": {"containers": [{"image": "r/collab:v1.0.0"}]}},
        },
        "status": {
            "observedGeneration": observed,
            "updatedReplicas": updated,
            "availableReplicas": available,
            "replicas": total,
            "conditions": conditions or [],
        },
    }


class TestRolloutStateFromDeployment:
    """Tests for rollout_state_from_deployment."""

    def test_fully_rolled_out_is_available(self) -> None:
        assert rollout_state_from_deployment(_deployment()) is RolloutState.AVAILABLE

    @pytest.mark.parametrize(
        "overrides",
        [
            {"observed": 1},
            {"updated": 1},
            {"available": 1},
            {"total": 3},
        ],
        ids=["generation-not-observed", "not-updated", "not-available", "old-pods"],
    )
    def test_incomplete_rollout_is_progressing(self, overrides: dict) -> None:
        assert rollout_state_from_deployment(_deployment(**overrides)) is RolloutState.PROGRESSING

    def test_progress_deadline_is_failed(self) -> None:
        deployment = _deployment(
            updated=1,
            conditions=[
                {
                    "type": "Progressing",
                    "status": "False",
                    "reason": "ProgressDeadlineExceeded",
                }
            ],
        )

        assert rollout_state_from_deployment(deployment) is RolloutState.FAILED

    def test_replica_failure_is_failed(self) -> None:
        deployment = _deployment(
            conditions=[{"type": "ReplicaFailure", "status": "True", "reason": "FailedCreate"}]
        )

        assert rollout_state_from_deployment(deployment) is RolloutState.FAILED

    def test_stale_deadline_before_new_generation_is_observed(self) -> None:
        """A redeploy after a timed-out rollout starts as progressing."""
        deployment = _deployment(
            generation=6,
            observed=5,
            updated=1,
            conditions=[
                {
                    "type": "Progressing",
                    "status": "False",
                    "reason": "ProgressDeadlineExceeded",
                }
            ],
        )

        assert rollout_state_from_deployment(deployment) is RolloutState.PROGRESSING

    def test_empty_object_is_progressing(self) -> None:
        assert rollout_state_from_deployment({}) is RolloutState.PROGRESSING


class TestJobState:
    """Tests for job_state_from_job."""

    def test_complete_condition(self) -> None:
        job = {"status": {"conditions": [{"type": "Complete", "status": "True"}]}}
        assert job_state_from_job(job) is RolloutState.AVAILABLE

    def test_failed_condition(self) -> None:
        job = {"status": {"conditions": [{"type": "Failed", "status": "True"}]}}
        assert job_state_from_job(job) is RolloutState.FAILED

    def test_running_job(self) -> None:
        assert job_state_from_job({"status": {"active": 1}}) is RolloutState.PROGRESSING


class TestJobImages:
    """Tests for image extraction helpers."""

    def test_container_image(self) -> None:
        assert container_image(_deployment()) == "r/collab:v1.0.0"
        assert container_image({}) is None

    def test_recent_job_images_newest_first(self) -> None:
        jobs = [
            {
                "metadata": {"creationTimestamp": timestamp},
                "spec": {"template": {"spec": {"containers": [{"image": image}]}}},
            }
            for timestamp, image in [
                ("2024-01-01T00:00:00Z", "r/collab:v0.1.0"),
                ("2024-03-01T00:00:00Z", "r/collab:v0.3.0"),
                ("2024-02-01T00:00:00Z", "r/collab:v0.2.0"),
            ]
        ]

        assert recent_job_images(jobs, 2) == ["r/collab:v0.3.0", "r/collab:v0.2.0"]
        assert recent_job_images([], 5) == []
