"""Manifest template rendering.

Templates use ``${name}`` placeholders, where names may contain letters,
digits, underscores and dashes (``${namespace}``, ``${image-id}``).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from importlib import resources
from pathlib import Path

from collab_deploy.errors import ConfigurationError, MissingSubstitutionError

PLACEHOLDER_PATTERN = re.compile(r"\$\{([A-Za-z0-9_-]+)\}")


def placeholders(template: str) -> list[str]:
    """Placeholder names used in a template, in order of first use."""
    return list(dict.fromkeys(PLACEHOLDER_PATTERN.findall(template)))


def render(template: str, substitutions: Mapping[str, str]) -> str:
    """Substitute every placeholder in a template.

    Keys in substitutions that the template does not use are ignored.

    Raises:
        MissingSubstitutionError: Naming every placeholder without a value
    """
    missing = sorted(name for name in placeholders(template) if name not in substitutions)
    if missing:
        raise MissingSubstitutionError(missing)

    return PLACEHOLDER_PATTERN.sub(lambda match: substitutions[match.group(1)], template)


def load_template(name_or_path: str) -> str:
    """Read a manifest template.

    A bare file name naming a bundled template always selects the bundled
    copy, whatever the working directory holds.

    Args:
        name_or_path: File name of a bundled template, or a filesystem path

    Raises:
        ConfigurationError: If the template cannot be read
    """
    path = Path(name_or_path)
    if len(path.parts) == 1:
        bundled = resources.files("collab_deploy.manifests").joinpath(name_or_path)
        if bundled.is_file():
            return bundled.read_text()

    try:
        return path.read_text()
    except (FileNotFoundError, IsADirectoryError) as e:
        raise ConfigurationError(f"Manifest template not found: {name_or_path}") from e


class ManifestRenderer:
    """Renders a fixed template."""

    def __init__(self, template: str) -> None:
        self.template = template

    @classmethod
    def from_file(cls, name_or_path: str) -> ManifestRenderer:
        return cls(load_template(name_or_path))

    @property
    def placeholders(self) -> list[str]:
        return placeholders(self.template)

    def render(self, substitutions: Mapping[str, str]) -> str:
        return render(self.template, substitutions)
