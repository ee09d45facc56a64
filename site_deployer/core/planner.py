# site_deployer/core/planner.py
"""Branch classification policy producing deployment plans"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional

from .branch_resolver import BranchVersionResolver
from ..api.exceptions import PolicyAmbiguityError, ResolutionError
from ..constants import (
    TARGET_NEXT,
    TARGET_RC,
    TARGET_STABLE,
    TARGET_ARCHIVE,
    TARGET_STABLE_AS_RC,
)
from ..models.config import DeployConfig
from ..models.facts import RepoFacts
from ..models.target import DeploymentPlan, TargetDescriptor, list_target_names
from ..utils.version_utils import VersionKey, compute_major_version

logger = logging.getLogger(__name__)


class PlanningContext:
    """Facts a single planning pass decides on

    Remote lookups are lazy: a fork or pull request build is skipped
    before the remote is ever queried.
    """

    def __init__(self,
                 facts: RepoFacts,
                 config: DeployConfig,
                 resolver: BranchVersionResolver,
                 registry: Mapping[str, TargetDescriptor]):
        self.facts = facts
        self.config = config
        self.resolver = resolver
        self.registry = registry
        self._latest_commit: Optional[str] = None
        self._most_recent_minor: Optional[str] = None
        self._most_recent_minor_resolved = False
        self._most_recent_minor_for_major: Optional[str] = None
        self._most_recent_minor_for_major_resolved = False

    @property
    def current_branch(self) -> str:
        return self.facts.current_branch

    @property
    def stable_branch(self) -> str:
        return self.facts.stable_branch

    @property
    def latest_commit(self) -> str:
        """Tip of the current branch on the remote"""
        if self._latest_commit is None:
            self._latest_commit = self.resolver.latest_commit(self.current_branch)
        return self._latest_commit

    @property
    def most_recent_minor_branch(self) -> Optional[str]:
        """Most recent minor branch across all majors"""
        if not self._most_recent_minor_resolved:
            self._most_recent_minor = self.resolver.most_recent_minor_branch()
            self._most_recent_minor_resolved = True
        return self._most_recent_minor

    @property
    def rc_branch(self) -> Optional[str]:
        """Active release-candidate branch, if any

        The most recent minor branch is only an RC while it has not been
        promoted to stable.
        """
        branch = self.most_recent_minor_branch
        return branch if branch != self.stable_branch else None

    @property
    def current_version(self) -> Optional[VersionKey]:
        return VersionKey.from_branch(self.current_branch)

    @property
    def current_major(self) -> Optional[int]:
        version = self.current_version
        return version.major if version else None

    @property
    def stable_major(self) -> int:
        try:
            return compute_major_version(self.stable_branch)
        except ValueError as e:
            raise ResolutionError(str(e), self.stable_branch)

    @property
    def most_recent_minor_for_major(self) -> Optional[str]:
        """Most recent minor branch sharing the current branch's major"""
        if not self._most_recent_minor_for_major_resolved:
            self._most_recent_minor_for_major = self.resolver.most_recent_minor_branch(
                self.current_major
            )
            self._most_recent_minor_for_major_resolved = True
        return self._most_recent_minor_for_major

    def target(self, name: str, rule: str) -> TargetDescriptor:
        """
        Look up a registry target selected by a rule

        Raises:
            PolicyAmbiguityError: If the registry has no such target
        """
        if name not in self.registry:
            raise PolicyAmbiguityError(
                f"Rule '{rule}' selected target '{name}', which is not in the target "
                f"registry ({', '.join(self.registry) or '-'})",
                rule
            )
        return self.registry[name]


@dataclass(frozen=True)
class PlanRule:
    """One entry of the ordered decision list

    ``selects_target`` marks rules that pick a deploy target by branch name;
    at most one of those may apply in strict mode.
    """
    name: str
    applies: Callable[[PlanningContext], bool]
    build: Callable[[PlanningContext], DeploymentPlan]
    selects_target: bool = False


def _skip(reason: str) -> DeploymentPlan:
    return (TargetDescriptor.skipped(reason),)


def _build_stable(ctx: PlanningContext) -> DeploymentPlan:
    stable = ctx.target(TARGET_STABLE, 'stable')
    if ctx.rc_branch is not None:
        return (stable,)

    # No active RC: also point the RC site at stable so it does not keep
    # serving an outdated pre-release build
    return (stable, ctx.target(TARGET_STABLE_AS_RC, 'stable'))


DEFAULT_RULES: List[PlanRule] = [
    PlanRule(
        'canonical-repository',
        lambda ctx: ctx.facts.repo_slug != ctx.config.repository,
        lambda ctx: _skip(f"Skipping deploy because this is not {ctx.config.repository}."),
    ),
    PlanRule(
        'pull-request',
        lambda ctx: ctx.facts.is_pull_request,
        lambda ctx: _skip("Skipping deploy because this is a PR build."),
    ),
    PlanRule(
        'stale-commit',
        lambda ctx: ctx.facts.current_commit != ctx.latest_commit,
        lambda ctx: _skip(
            f"Skipping deploy because {ctx.facts.current_commit} is not the latest commit "
            f"({ctx.latest_commit})."
        ),
    ),
    PlanRule(
        'trunk',
        lambda ctx: ctx.current_branch == ctx.config.trunk_branch,
        lambda ctx: (ctx.target(TARGET_NEXT, 'trunk'),),
        selects_target=True,
    ),
    PlanRule(
        'release-candidate',
        lambda ctx: ctx.rc_branch is not None and ctx.current_branch == ctx.rc_branch,
        lambda ctx: (ctx.target(TARGET_RC, 'release-candidate'),),
        selects_target=True,
    ),
    PlanRule(
        'stable',
        lambda ctx: ctx.current_branch == ctx.stable_branch,
        _build_stable,
        selects_target=True,
    ),

    # Anything left may only be deployed as `archive`
    PlanRule(
        'version-branch',
        lambda ctx: ctx.current_version is None,
        lambda ctx: _skip(
            f'Skipping deploy of branch "{ctx.current_branch}" to Firebase.\n'
            'It is neither the trunk, RC or stable branch, nor a version branch.'
        ),
    ),
    PlanRule(
        'most-recent-minor',
        lambda ctx: ctx.current_branch != ctx.most_recent_minor_for_major,
        lambda ctx: _skip(
            f'Skipping deploy of branch "{ctx.current_branch}" to Firebase.\n'
            'There is a more recent branch with the same major version: '
            f'"{ctx.most_recent_minor_for_major}"'
        ),
    ),
    PlanRule(
        'older-than-stable',
        lambda ctx: ctx.current_major >= ctx.stable_major,
        lambda ctx: _skip(
            f'Skipping deploy of branch "{ctx.current_branch}" to Firebase.\n'
            'This branch has an equal or higher major version than the stable branch '
            f'("{ctx.stable_branch}") and is not the most recent minor branch.'
        ),
    ),
    PlanRule(
        'archive',
        lambda ctx: True,
        lambda ctx: (ctx.target(TARGET_ARCHIVE, 'archive'),),
    ),
]


class DeploymentPlanner:
    """Apply the branch classification policy

    Rules are evaluated in order and the first one that applies decides
    the plan.
    """

    def __init__(self,
                 config: DeployConfig,
                 registry: Mapping[str, TargetDescriptor],
                 rules: Optional[List[PlanRule]] = None):
        """
        Initialize planner

        Args:
            config: Deployment configuration
            registry: Target registry (see ``build_target_registry``)
            rules: Ordered decision list (defaults to ``DEFAULT_RULES``)
        """
        self.config = config
        self.registry = registry
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def context(self, facts: RepoFacts, resolver: BranchVersionResolver) -> PlanningContext:
        return PlanningContext(facts, self.config, resolver, self.registry)

    def match_rule(self, ctx: PlanningContext) -> PlanRule:
        """
        Find the first rule that applies

        Raises:
            PolicyAmbiguityError: In strict mode, if more than one
                target-selecting rule applies
        """
        for index, rule in enumerate(self.rules):
            if not rule.applies(ctx):
                continue

            if self.config.strict and rule.selects_target:
                self._check_exclusive(ctx, rule, self.rules[index + 1:])

            return rule

        raise PolicyAmbiguityError(
            f"No deployment rule applies to branch '{ctx.current_branch}'"
        )

    def _check_exclusive(self, ctx: PlanningContext, matched: PlanRule,
                         remaining: List[PlanRule]) -> None:
        overlapping = [rule.name for rule in remaining if rule.selects_target and rule.applies(ctx)]
        if overlapping:
            raise PolicyAmbiguityError(
                f"Branch '{ctx.current_branch}' matches rule '{matched.name}' and also "
                f"{', '.join(repr(name) for name in overlapping)}",
                matched.name
            )

    def plan(self, facts: RepoFacts, resolver: BranchVersionResolver) -> DeploymentPlan:
        """
        Compute the deployment plan for a run

        Args:
            facts: Repository facts
            resolver: Branch resolver for remote lookups

        Returns:
            Ordered tuple of target descriptors

        Raises:
            ResolutionError: If a required remote lookup fails
            PolicyAmbiguityError: If the policy cannot pick a single outcome
        """
        ctx = self.context(facts, resolver)
        rule = self.match_rule(ctx)
        plan = tuple(rule.build(ctx))

        logger.info(
            f"Rule '{rule.name}' matched branch '{facts.current_branch}': "
            f"{list_target_names(plan)}"
        )
        return plan
