"""Image resolution.

Maps the version a human types (``0.42.1`` or ``v0.42.1``) to the image
that was pushed for it.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from collab_deploy.constants import DEFAULT_CONSTANTS
from collab_deploy.errors import UnresolvableVersionError
from collab_deploy.infra.registry import ImageRegistry


@dataclass(frozen=True)
class ImageReference:
    """A version paired with its registry-qualified image."""

    version: str
    tag: str
    image_id: str


def tag_for_version(version: str) -> str:
    """Registry tag for a version, e.g. 0.42.1 -> v0.42.1.

    Raises:
        UnresolvableVersionError: If the version is not MAJOR.MINOR.PATCH
    """
    bare = version.strip().removeprefix("v")
    if not DEFAULT_CONSTANTS.VERSION_PATTERN.match(bare):
        raise UnresolvableVersionError(
            f"Invalid version number '{version}'",
            details="Expected MAJOR.MINOR.PATCH, e.g. 0.42.1",
        )
    return f"v{bare}"


class ImageResolver:
    """Resolves versions against an image registry. Never retries."""

    def __init__(self, registry: ImageRegistry) -> None:
        self.registry = registry

    def resolve(self, version: str) -> ImageReference:
        """Resolve a version to an image.

        Raises:
            UnresolvableVersionError: If the version is malformed or not pushed
        """
        tag = tag_for_version(version)
        image_id = self.registry.resolve_version(tag)
        if image_id is None:
            raise UnresolvableVersionError(
                f"No such image tag: '{self.registry.image_prefix}:{tag}'"
            )

        logger.info(f"Resolved version {version} to {image_id}")
        return ImageReference(version=tag.removeprefix("v"), tag=tag, image_id=image_id)
