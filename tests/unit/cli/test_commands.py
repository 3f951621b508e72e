"""Tests for the deploy, migrate and status commands."""

import sys
from unittest.mock import MagicMock

import pytest
from loguru import logger
from typer.testing import CliRunner

from collab_deploy.cli import app
from collab_deploy.cli.console import CLIConsole
from collab_deploy.cli.context import CLIContext
from collab_deploy.config import DeployConfig
from collab_deploy.infra.k8s import InMemoryController, RolloutState
from collab_deploy.infra.registry import StaticRegistry

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging():
    """The CLI callback points loguru at the runner's stderr; reset it afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr)


def _cli_context(
    config: DeployConfig, registry: StaticRegistry, controller: InMemoryController
) -> CLIContext:
    return CLIContext(
        console=CLIConsole(),
        config=config,
        registry=registry,
        controller_factory=MagicMock(return_value=controller),
    )


class TestDeployCommand:
    """Tests for `deploy`."""

    def test_successful_deploy_exits_zero(
        self, deploy_config: DeployConfig, registry: StaticRegistry
    ) -> None:
        controller = InMemoryController([RolloutState.PROGRESSING, RolloutState.AVAILABLE])
        obj = _cli_context(deploy_config, registry, controller)

        result = runner.invoke(app, ["deploy", "staging", "0.42.1"], obj=obj)

        assert result.exit_code == 0, result.output
        assert "Deployed collab v0.42.1 to staging" in result.output
        assert len(controller.applied) == 1

    def test_failed_rollout_exits_one(
        self, deploy_config: DeployConfig, registry: StaticRegistry
    ) -> None:
        controller = InMemoryController([RolloutState.FAILED])
        obj = _cli_context(deploy_config, registry, controller)

        result = runner.invoke(app, ["deploy", "staging", "0.42.1"], obj=obj)

        assert result.exit_code == 1
        assert "RolloutFailed" in result.output

    def test_timeout_exits_one(
        self, deploy_config: DeployConfig, registry: StaticRegistry
    ) -> None:
        obj = _cli_context(deploy_config, registry, InMemoryController())

        result = runner.invoke(
            app,
            ["deploy", "staging", "0.42.1", "--timeout", "0.05", "--interval", "0.01"],
            obj=obj,
        )

        assert result.exit_code == 1
        assert "RolloutTimeout" in result.output

    def test_invalid_environment_exits_one(
        self, deploy_config: DeployConfig, registry: StaticRegistry
    ) -> None:
        controller = InMemoryController([RolloutState.AVAILABLE])
        obj = _cli_context(deploy_config, registry, controller)

        result = runner.invoke(app, ["deploy", "prod", "0.42.1"], obj=obj)

        assert result.exit_code == 1
        assert "InvalidEnvironment" in result.output
        obj.controller_factory.assert_not_called()

    def test_unknown_version_exits_one(
        self, deploy_config: DeployConfig, registry: StaticRegistry
    ) -> None:
        obj = _cli_context(deploy_config, registry, InMemoryController())

        result = runner.invoke(app, ["deploy", "staging", "9.9.9"], obj=obj)

        assert result.exit_code == 1
        assert "UnresolvableVersion" in result.output

    def test_dry_run_prints_manifest_without_applying(
        self, deploy_config: DeployConfig, registry: StaticRegistry
    ) -> None:
        controller = InMemoryController()
        obj = _cli_context(deploy_config, registry, controller)

        result = runner.invoke(
            app, ["deploy", "staging", "0.42.1", "--dry-run"], obj=obj
        )

        assert result.exit_code == 0, result.output
        assert "kind: Deployment" in result.output
        assert controller.calls == []

    def test_production_requires_confirmation(
        self, deploy_config: DeployConfig, registry: StaticRegistry
    ) -> None:
        controller = InMemoryController([RolloutState.AVAILABLE])
        obj = _cli_context(deploy_config, registry, controller)

        result = runner.invoke(
            app, ["deploy", "production", "0.42.1"], obj=obj, input="n\n"
        )

        assert result.exit_code == 1
        assert "Aborted" in result.output
        assert controller.applied == []

    def test_production_with_yes_skips_prompt(
        self, deploy_config: DeployConfig, registry: StaticRegistry
    ) -> None:
        controller = InMemoryController([RolloutState.AVAILABLE])
        obj = _cli_context(deploy_config, registry, controller)

        result = runner.invoke(app, ["deploy", "production", "0.42.1", "--yes"], obj=obj)

        assert result.exit_code == 0, result.output
        assert controller.applied[0][0] == "production"


class TestMigrateCommand:
    """Tests for `migrate`."""

    def test_migration_job_runs(
        self, deploy_config: DeployConfig, registry: StaticRegistry
    ) -> None:
        controller = InMemoryController(job_states=[RolloutState.AVAILABLE])
        obj = _cli_context(deploy_config, registry, controller)

        result = runner.invoke(app, ["migrate", "nightly", "0.41.0"], obj=obj)

        assert result.exit_code == 0, result.output
        assert "collab-migrate-v0-41-0" in result.output
        assert controller.job_polls == 1


class TestStatusCommand:
    """Tests for `status`."""

    def test_status_with_no_jobs(
        self, deploy_config: DeployConfig, registry: StaticRegistry
    ) -> None:
        controller = InMemoryController(deployment_images={"staging": "r/collab:v0.42.1"})
        obj = _cli_context(deploy_config, registry, controller)

        result = runner.invoke(app, ["status", "staging"], obj=obj)

        assert result.exit_code == 0, result.output
        assert "r/collab:v0.42.1" in result.output
        assert "No jobs found" in result.output

    def test_status_lists_jobs(
        self, deploy_config: DeployConfig, registry: StaticRegistry
    ) -> None:
        controller = InMemoryController(
            job_images={"preview": ["r/collab:v0.42.1", "r/collab:v0.41.0"]}
        )
        obj = _cli_context(deploy_config, registry, controller)

        result = runner.invoke(app, ["status", "preview"], obj=obj)

        assert result.exit_code == 0, result.output
        assert "Job #2" in result.output
        assert "not deployed" in result.output

    @pytest.mark.parametrize("name", ["qa", "Staging"])
    def test_status_invalid_environment(
        self, deploy_config: DeployConfig, registry: StaticRegistry, name: str
    ) -> None:
        obj = _cli_context(deploy_config, registry, InMemoryController())

        result = runner.invoke(app, ["status", name], obj=obj)

        assert result.exit_code == 1
        assert "InvalidEnvironment" in result.output
