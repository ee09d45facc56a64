"""API layer for site-deployer"""

from .exceptions import (
    SiteDeployerError,
    ResolutionError,
    PolicyAmbiguityError,
    ValidationError,
    ConfigError,
    ActionError,
    DeployError,
)

__all__ = [
    "SiteDeployerError",
    "ResolutionError",
    "PolicyAmbiguityError",
    "ValidationError",
    "ConfigError",
    "ActionError",
    "DeployError",
]
