"""DigitalOcean container registry lookups through doctl."""

from __future__ import annotations

from typing import override

from loguru import logger

from collab_deploy.errors import UnresolvableVersionError
from collab_deploy.infra.registry.base import ImageRegistry
from collab_deploy.infra.shell import CommandRunner


class DoctlRegistry(ImageRegistry):
    """Registry backed by `doctl registry repository list-tags`."""

    def __init__(
        self,
        image_prefix: str,
        repository: str,
        runner: CommandRunner | None = None,
    ) -> None:
        super().__init__(image_prefix)
        self.repository = repository
        self.runner = runner or CommandRunner()

    @override
    def list_tags(self) -> list[str]:
        """List repository tags.

        Raises:
            UnresolvableVersionError: If doctl cannot list the repository
        """
        result = self.runner.run(
            [
                "doctl",
                "registry",
                "repository",
                "list-tags",
                self.repository,
                "--no-header",
                "--format",
                "Tag",
            ]
        )
        if not result.success:
            raise UnresolvableVersionError(
                f"Could not list tags for repository '{self.repository}'",
                details=result.stderr.strip() or None,
            )

        tags = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        logger.debug(f"Found {len(tags)} tags in {self.repository}")
        return tags
