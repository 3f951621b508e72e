from __future__ import annotations

from collections.abc import Iterable
from typing import override

from collab_deploy.infra.registry.base import ImageRegistry


class StaticRegistry(ImageRegistry):
    """In-memory registry with a fixed set of tags."""

    def __init__(self, image_prefix: str, tags: Iterable[str] = ()) -> None:
        super().__init__(image_prefix)
        self.tags = list(tags)
        self.lookups = 0

    @override
    def list_tags(self) -> list[str]:
        self.lookups += 1
        return list(self.tags)
