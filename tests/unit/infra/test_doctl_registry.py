"""Tests for doctl registry lookups."""

from unittest.mock import MagicMock

import pytest

from collab_deploy.errors import UnresolvableVersionError
from collab_deploy.infra.k8s import CommandResult
from collab_deploy.infra.registry import DoctlRegistry


class TestDoctlRegistry:
    """Tests for DoctlRegistry."""

    @pytest.fixture
    def mock_runner(self) -> MagicMock:
        """Create a mock command runner."""
        return MagicMock()

    @pytest.fixture
    def registry(self, mock_runner: MagicMock) -> DoctlRegistry:
        """Create DoctlRegistry with a mock runner."""
        return DoctlRegistry("registry.digitalocean.com/zed/collab", "collab", mock_runner)

    def test_lists_tags(self, registry: DoctlRegistry, mock_runner: MagicMock) -> None:
        mock_runner.run.return_value = CommandResult(
            success=True, stdout="v0.42.1\nv0.42.0\n\n", stderr="", returncode=0
        )

        assert registry.list_tags() == ["v0.42.1", "v0.42.0"]
        cmd = mock_runner.run.call_args[0][0]
        assert cmd[:4] == ["doctl", "registry", "repository", "list-tags"]
        assert "collab" in cmd

    def test_resolve_version(self, registry: DoctlRegistry, mock_runner: MagicMock) -> None:
        mock_runner.run.return_value = CommandResult(success=True, stdout="v0.42.1\n")

        assert registry.resolve_version("v0.42.1") == (
            "registry.digitalocean.com/zed/collab:v0.42.1"
        )
        assert registry.resolve_version("v0.43.0") is None

    def test_doctl_failure_raises(
        self, registry: DoctlRegistry, mock_runner: MagicMock
    ) -> None:
        mock_runner.run.return_value = CommandResult(
            success=False, stderr="Error: Unable to authenticate you\n", returncode=1
        )

        with pytest.raises(UnresolvableVersionError) as excinfo:
            registry.list_tags()

        assert excinfo.value.details == "Error: Unable to authenticate you"
