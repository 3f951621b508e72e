"""Container registry interface."""

from abc import ABC, abstractmethod


class ImageRegistry(ABC):
    """Abstract interface for the registry holding collab images."""

    def __init__(self, image_prefix: str) -> None:
        """
        Args:
            image_prefix: Registry-qualified repository, e.g. registry.example.com/team/collab
        """
        self.image_prefix = image_prefix

    @abstractmethod
    def list_tags(self) -> list[str]:
        """List the tags pushed to the repository."""
        pass

    def resolve_version(self, tag: str) -> str | None:
        """Map a tag to a registry-qualified image identifier.

        Args:
            tag: Image tag, e.g. v0.42.1

        Returns:
            Image identifier, or None if the tag is not in the registry
        """
        if tag not in self.list_tags():
            return None
        return f"{self.image_prefix}:{tag}"
