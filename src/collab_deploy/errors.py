"""Deployment error kinds.

Every failure of a deploy, migrate or status run surfaces as one of these.
None of them is recovered locally: the CLI reports the kind and cause and
exits non-zero.
"""

from __future__ import annotations


class DeploymentError(Exception):
    """Raised when a deployment operation fails."""

    kind = "DeploymentError"

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigurationError(DeploymentError):
    """The deploy configuration file is unreadable or invalid."""

    kind = "ConfigurationError"


class InvalidEnvironmentError(DeploymentError):
    """The environment name is not one of the known environments."""

    kind = "InvalidEnvironment"


class UnresolvableVersionError(DeploymentError):
    """The version cannot be mapped to an image in the registry."""

    kind = "UnresolvableVersion"


class MissingSubstitutionError(DeploymentError):
    """A manifest placeholder has no value."""

    kind = "MissingSubstitution"

    def __init__(self, missing: list[str], details: str | None = None):
        self.missing = missing
        super().__init__(
            f"No value for manifest placeholder(s): {', '.join(missing)}",
            details,
        )


class ApplyRejectedError(DeploymentError):
    """The cluster rejected the manifest."""

    kind = "ApplyRejected"


class RolloutFailedError(DeploymentError):
    """The rollout reached a failed terminal state."""

    kind = "RolloutFailed"


class RolloutTimeoutError(DeploymentError):
    """The rollout did not reach a terminal state in time."""

    kind = "RolloutTimeout"
