import pytest
import typer

from collab_deploy.cli.console import with_error_handling
from collab_deploy.errors import DeploymentError, RolloutTimeoutError


def test_with_error_handling_handles_deployment_error():
    @with_error_handling
    def _command() -> None:
        raise DeploymentError("Boom", details="extra")

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 1


def test_with_error_handling_handles_error_kinds(capsys):
    @with_error_handling
    def _command() -> None:
        raise RolloutTimeoutError("Rollout of staging/collab did not finish within 5s")

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 1
    assert "RolloutTimeout" in capsys.readouterr().out


def test_with_error_handling_handles_keyboard_interrupt():
    @with_error_handling
    def _command() -> None:
        raise KeyboardInterrupt

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 130


def test_with_error_handling_passes_through_success():
    calls = []

    @with_error_handling
    def _command(value: int) -> None:
        calls.append(value)

    _command(3)

    assert calls == [3]
