# site_deployer/models/__init__.py
"""Data models for site-deployer"""

from .facts import RepoFacts
from .target import (
    TargetKind,
    TargetDescriptor,
    DeploymentPlan,
    list_target_names,
    serialize_actions,
)
from .config import DeployConfig, FirebaseConfig, TargetSiteConfig
from .result import ValidationResult, DeployResult

__all__ = [
    # Repository facts
    "RepoFacts",

    # Target models
    "TargetKind",
    "TargetDescriptor",
    "DeploymentPlan",
    "list_target_names",
    "serialize_actions",

    # Config models
    "DeployConfig",
    "FirebaseConfig",
    "TargetSiteConfig",

    # Result models
    "ValidationResult",
    "DeployResult",
]
