import os

import pytest

# Keep a developer's own config out of the test run
os.environ.pop("COLLAB_DEPLOY_CONFIG", None)
os.environ.pop("COLLAB_CERTIFICATE_ID", None)

from collab_deploy.config import DeployConfig  # noqa: E402
from collab_deploy.infra.registry import StaticRegistry  # noqa: E402

IMAGE_PREFIX = "registry.example.com/team/collab"


@pytest.fixture
def deploy_config() -> DeployConfig:
    """Config with a certificate for every environment and fast polling."""
    return DeployConfig.model_validate(
        {
            "rollout": {"timeout_seconds": 5, "poll_interval_seconds": 0},
            "environments": {
                "production": {"cluster": "prod-cluster", "certificate_id": "cert-prod"},
                "preview": {"certificate_id": "cert-preview"},
                "nightly": {"certificate_id": "cert-nightly"},
                "staging": {
                    "cluster": "staging-cluster",
                    "certificate_id": "cert-staging",
                    "url": "https://collab-staging.example.com",
                },
            },
        }
    )


@pytest.fixture
def registry() -> StaticRegistry:
    """Registry holding two published versions."""
    return StaticRegistry(IMAGE_PREFIX, ["v0.41.0", "v0.42.1"])
