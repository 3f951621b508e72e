"""collab-deploy - deploy and inspect the collab service.

Subpackages:
- collab_deploy.cli - Typer command line interface
- collab_deploy.config - Deploy configuration loading
- collab_deploy.core - Environment, image and manifest resolution, orchestration
- collab_deploy.infra - Cluster and registry collaborators
"""

__version__ = "0.1.0"
