"""Unit tests for manifest rendering."""

import pytest

from collab_deploy.core.manifest import (
    ManifestRenderer,
    load_template,
    placeholders,
    render,
)
from collab_deploy.errors import ConfigurationError, MissingSubstitutionError


class TestRender:
    """Tests for placeholder substitution."""

    def test_missing_placeholder_is_named(self) -> None:
        with pytest.raises(MissingSubstitutionError) as excinfo:
            render("a=${a}\nb=${b}\n", {"a": "x"})

        assert excinfo.value.missing == ["b"]
        assert "b" in excinfo.value.message
        assert excinfo.value.kind == "MissingSubstitution"

    def test_all_missing_placeholders_are_reported_sorted(self) -> None:
        with pytest.raises(MissingSubstitutionError) as excinfo:
            render("${zeta} ${image-id} ${zeta}", {})

        assert excinfo.value.missing == ["image-id", "zeta"]

    def test_rendering_is_deterministic(self) -> None:
        template = "first: ${a}\nsecond: ${b}\nagain: ${a}\n"
        substitutions = {"a": "x", "b": "y"}

        outputs = {render(template, substitutions) for _ in range(5)}

        assert outputs == {"first: x\nsecond: y\nagain: x\n"}

    def test_extra_substitutions_are_ignored(self) -> None:
        assert render("${a}", {"a": "1", "unused": "2"}) == "1"

    def test_values_are_not_rescanned(self) -> None:
        """A value that looks like a placeholder is inserted literally."""
        assert render("${a}", {"a": "${b}"}) == "${b}"

    def test_non_placeholder_dollar_signs_untouched(self) -> None:
        template = "cost: $5\nshell: $HOME\nempty: ${}\n"
        assert render(template, {}) == template

    def test_placeholders_in_first_use_order(self) -> None:
        assert placeholders("${b} ${a} ${b} ${certificate-id}") == [
            "b",
            "a",
            "certificate-id",
        ]


class TestTemplates:
    """Tests for the bundled templates."""

    def test_deployment_template_placeholders(self) -> None:
        renderer = ManifestRenderer.from_file("collab.template.yml")
        assert set(renderer.placeholders) == {"namespace", "certificate-id", "image-id"}

    def test_migration_template_placeholders(self) -> None:
        renderer = ManifestRenderer.from_file("migrate.template.yml")
        assert set(renderer.placeholders) == {"namespace", "job-name", "image-id"}

    def test_template_from_path(self, tmp_path) -> None:
        path = tmp_path / "t.yml"
        path.write_text("name: ${namespace}")

        assert load_template(str(path)) == "name: ${namespace}"

    def test_bundled_name_ignores_working_directory(self, tmp_path, monkeypatch) -> None:
        (tmp_path / "collab.template.yml").write_text("kind: Unrelated\n")
        monkeypatch.chdir(tmp_path)

        template = load_template("collab.template.yml")

        assert "kind: Unrelated" not in template
        assert "kind: Deployment" in template

    def test_relative_path_is_read_from_disk(self, tmp_path, monkeypatch) -> None:
        (tmp_path / "deploy").mkdir()
        (tmp_path / "deploy" / "collab.template.yml").write_text("ns: ${namespace}\n")
        monkeypatch.chdir(tmp_path)

        assert load_template("deploy/collab.template.yml") == "ns: ${namespace}\n"

    def test_unknown_template_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            load_template("does-not-exist.yml")
