"""Exception definitions for site-deployer"""

from typing import List, Optional

from ..constants import ErrorCode


class SiteDeployerError(Exception):
    """Base exception for site-deployer"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ResolutionError(SiteDeployerError):
    """A required branch or ref lookup returned no usable result"""

    def __init__(self, message: str, ref: Optional[str] = None):
        super().__init__(message, ErrorCode.RESOLUTION_FAILED)
        self.ref = ref


class PolicyAmbiguityError(SiteDeployerError):
    """More than one deployment rule applies, or a rule points at a missing target"""

    def __init__(self, message: str, rule: Optional[str] = None):
        super().__init__(message, ErrorCode.POLICY_AMBIGUOUS)
        self.rule = rule


class ValidationError(SiteDeployerError):
    """Deployment plan invariant violated"""

    def __init__(self, message: str, invariant: str, targets: Optional[List[str]] = None):
        super().__init__(message, ErrorCode.PLAN_VALIDATION_FAILED)
        self.invariant = invariant
        self.targets = targets or []


class ConfigError(SiteDeployerError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class ActionError(SiteDeployerError):
    """A pre- or post-deploy action failed"""

    def __init__(self, action: str, message: str):
        super().__init__(f"Action '{action}' failed: {message}", ErrorCode.ACTION_FAILED)
        self.action = action


class DeployError(SiteDeployerError):
    """Hosting deployment error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.DEPLOY_FAILED)
