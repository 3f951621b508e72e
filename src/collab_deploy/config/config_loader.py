"""Deploy configuration loading."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from loguru import logger
from pydantic import ValidationError

from collab_deploy.config.config_data import DeployConfig
from collab_deploy.config.config_utils import substitute_env_vars
from collab_deploy.constants import DEFAULT_CONSTANTS
from collab_deploy.errors import ConfigurationError

CONFIG_PATH = Path(DEFAULT_CONSTANTS.CONFIG_FILE)

# Environment variable consulted when no file provides a certificate id
CERTIFICATE_ENV_VAR = "COLLAB_CERTIFICATE_ID"


def resolve_config_path(
    file_path: Path | None = None, environ: Mapping[str, str] | None = None
) -> Path | None:
    """Pick the config file: explicit path, then $COLLAB_DEPLOY_CONFIG, then ./deploy.yaml.

    Returns:
        Path to an existing config file, or None to use built-in defaults

    Raises:
        ConfigurationError: If an explicitly requested file does not exist
    """
    env = os.environ if environ is None else environ

    requested = file_path or (
        Path(env[DEFAULT_CONSTANTS.CONFIG_ENV_VAR])
        if env.get(DEFAULT_CONSTANTS.CONFIG_ENV_VAR)
        else None
    )
    if requested is not None:
        if not requested.exists():
            raise ConfigurationError(f"Config file not found: {requested}")
        return requested

    return CONFIG_PATH if CONFIG_PATH.exists() else None


def load_config(
    file_path: Path | None = None, environ: Mapping[str, str] | None = None
) -> DeployConfig:
    """
    Load the deploy configuration with environment variable substitution.

    The YAML file must have a top-level 'config:' key. ${VAR}, ${VAR:-default}
    and ${VAR:?message} references are substituted before parsing. Environment
    variables are only read here; the returned DeployConfig is passed
    explicitly to everything downstream.

    Args:
        file_path: Path to the YAML file (default: $COLLAB_DEPLOY_CONFIG or deploy.yaml)
        environ: Variables to substitute from (default: os.environ)

    Returns:
        Validated DeployConfig

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid
    """
    env = os.environ if environ is None else environ
    path = resolve_config_path(file_path, env)

    if path is None:
        logger.info("No deploy config file found, using built-in defaults")
        return _default_config(env)

    logger.info(f"Loading deploy configuration from {path}")
    try:
        content = substitute_env_vars(path.read_text(), env)
    except ValueError as e:
        raise ConfigurationError(f"Cannot load {path}", details=str(e)) from e

    try:
        loaded: Any = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing YAML in {path}", details=str(e)) from e

    if not isinstance(loaded, dict) or "config" not in loaded:
        raise ConfigurationError(
            f"Invalid YAML structure in {path}: missing 'config' key"
        )

    try:
        config = DeployConfig.model_validate(loaded["config"] or {})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}", details=str(e)) from e

    _apply_certificate_fallback(config, env)
    return config


def _default_config(environ: Mapping[str, str]) -> DeployConfig:
    config = DeployConfig()
    _apply_certificate_fallback(config, environ)
    return config


def _apply_certificate_fallback(
    config: DeployConfig, environ: Mapping[str, str]
) -> None:
    certificate_id = environ.get(CERTIFICATE_ENV_VAR, "").strip()
    if not certificate_id:
        return
    for name, env_config in config.environments.items():
        if env_config.certificate_id is None:
            logger.debug(f"Using ${CERTIFICATE_ENV_VAR} as certificate id for {name}")
            env_config.certificate_id = certificate_id
