"""Deploy configuration.

Example:
    from collab_deploy.config import load_config

    config = load_config()
    print(config.environments["staging"].namespace)
"""

from .config_data import (
    DeployConfig,
    EnvironmentConfig,
    ManifestConfig,
    RegistryConfig,
    RolloutConfig,
)
from .config_loader import load_config, resolve_config_path

__all__ = [
    "DeployConfig",
    "EnvironmentConfig",
    "ManifestConfig",
    "RegistryConfig",
    "RolloutConfig",
    "load_config",
    "resolve_config_path",
]
