"""Site Deployer - Deployment target resolution for versioned documentation sites.

Decides which hosting target(s) a build should be deployed to, based on the
current branch and the version branches on the remote, validates the
resulting plan and runs the deployment.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Core API
from .core import (
    BranchVersionResolver,
    DeploymentPlanner,
    PlanValidator,
    ConfigLoader,
    build_target_registry,
)
from .services import DeployService

# Data models
from .models import (
    RepoFacts,
    TargetKind,
    TargetDescriptor,
    DeploymentPlan,
    DeployConfig,
    DeployResult,
    ValidationResult,
)
from .utils import VersionKey

# Exceptions
from .api.exceptions import (
    SiteDeployerError,
    ResolutionError,
    PolicyAmbiguityError,
    ValidationError,
    ConfigError,
    ActionError,
    DeployError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "BranchVersionResolver",
    "DeploymentPlanner",
    "PlanValidator",
    "ConfigLoader",
    "build_target_registry",
    "DeployService",

    # Data models
    "RepoFacts",
    "TargetKind",
    "TargetDescriptor",
    "DeploymentPlan",
    "DeployConfig",
    "DeployResult",
    "ValidationResult",
    "VersionKey",

    # Exceptions
    "SiteDeployerError",
    "ResolutionError",
    "PolicyAmbiguityError",
    "ValidationError",
    "ConfigError",
    "ActionError",
    "DeployError",
]
