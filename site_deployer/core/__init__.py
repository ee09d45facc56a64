"""Core functionality for site-deployer"""

from .branch_resolver import BranchVersionResolver, RemoteRefQuery
from .config_loader import ConfigLoader
from .plan_validator import PlanValidator, validate_plan
from .planner import DeploymentPlanner, PlanRule, PlanningContext, DEFAULT_RULES
from .target_registry import TargetTemplate, TARGET_TEMPLATES, build_target_registry

__all__ = [
    "BranchVersionResolver",
    "RemoteRefQuery",
    "ConfigLoader",
    "PlanValidator",
    "validate_plan",
    "DeploymentPlanner",
    "PlanRule",
    "PlanningContext",
    "DEFAULT_RULES",
    "TargetTemplate",
    "TARGET_TEMPLATES",
    "build_target_registry",
]
