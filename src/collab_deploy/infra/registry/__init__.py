"""Container registry collaborators."""

from .base import ImageRegistry
from .doctl import DoctlRegistry
from .memory import StaticRegistry

__all__ = ["ImageRegistry", "DoctlRegistry", "StaticRegistry"]
