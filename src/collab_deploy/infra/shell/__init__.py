from .runner import CommandRunner

__all__ = ["CommandRunner"]
