# site_deployer/core/config_loader.py
"""Deployment configuration loading"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

import yaml

from ..api.exceptions import ConfigError
from ..constants import PROJECT_CONFIG_FILE, ENV_CONFIG_PATH
from ..models.config import DeployConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load DeployConfig from .site-deployer.yaml"""

    def __init__(self, project_root: Optional[Path] = None):
        """Initialize config loader

        Args:
            project_root: Directory the default config file is looked up in
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()

    def find_config(self, environ: Optional[Mapping[str, str]] = None) -> Optional[Path]:
        """Get config path from the environment or the project root

        Returns:
            Path to an existing config file, or None
        """
        environ = os.environ if environ is None else environ

        env_path = environ.get(ENV_CONFIG_PATH)
        if env_path:
            path = Path(env_path)
            if not path.exists():
                raise ConfigError(f"Configuration file not found: {path} (from ${ENV_CONFIG_PATH})")
            return path

        path = self.project_root / PROJECT_CONFIG_FILE
        return path if path.exists() else None

    def load(self, config_path: Optional[Path] = None) -> DeployConfig:
        """Load configuration

        A missing default config file is not an error; the built-in defaults
        are used instead.

        Args:
            config_path: Explicit config file (must exist)

        Returns:
            DeployConfig instance

        Raises:
            ConfigError: If the file is missing, not valid YAML, or invalid
        """
        if config_path is not None:
            config_path = Path(config_path)
            if not config_path.exists():
                raise ConfigError(f"Configuration file not found: {config_path}")
        else:
            config_path = self.find_config()

        if config_path is None:
            logger.debug("No configuration file found, using defaults")
            return DeployConfig()

        logger.debug(f"Loading configuration from {config_path}")
        try:
            with open(config_path, 'r') as f:
                content = os.path.expandvars(f.read())
            data = yaml.safe_load(content) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration {config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration {config_path} must be a mapping")

        try:
            return DeployConfig.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration {config_path}: {e}")
