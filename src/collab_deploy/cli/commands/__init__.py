"""CLI commands.

- deploy: Deploy a collab version and wait for the rollout
- migrate: Run the migration job for a version
- status: Show deployed and recent job images
"""

from .deploy import deploy, migrate
from .status import status

__all__ = ["deploy", "migrate", "status"]
