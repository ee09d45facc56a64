# site_deployer/services/deploy_service.py
"""Deployment orchestration: plan, validate, then deploy each target"""

import logging
import subprocess
from pathlib import Path
from typing import Callable, Optional

from ..actions.base import ActionContext, ActionRegistry
from ..actions.builtin import default_action_registry
from ..api.exceptions import ActionError, DeployError
from ..constants import TARGET_STABLE
from ..core.branch_resolver import BranchVersionResolver
from ..core.plan_validator import PlanValidator
from ..core.planner import DeploymentPlanner
from ..core.target_registry import build_target_registry
from ..models.config import DeployConfig
from ..models.facts import RepoFacts
from ..models.result import DeployResult, ValidationResult
from ..models.target import DeploymentPlan, TargetDescriptor, list_target_names
from ..utils.command_utils import CommandRunner
from ..utils.version_utils import VersionKey

logger = logging.getLogger(__name__)

# Called with (index, total, target) before each target is handled
TargetCallback = Callable[[int, int, TargetDescriptor], None]


class DeployService:
    """Compute, validate and execute the deployment plan for one run"""

    def __init__(self,
                 facts: RepoFacts,
                 config: Optional[DeployConfig] = None,
                 resolver: Optional[BranchVersionResolver] = None,
                 actions: Optional[ActionRegistry] = None,
                 runner: Optional[CommandRunner] = None,
                 work_dir: Optional[Path] = None):
        """Initialize deploy service

        Args:
            facts: Repository facts for this run
            config: Deployment configuration (defaults if not given)
            resolver: Branch resolver (queries ``config.remote`` if not given)
            actions: Action registry (built-in actions if not given)
            runner: Command runner for yarn/firebase
            work_dir: Directory the app is built and deployed from
        """
        self.facts = facts
        self.config = config or DeployConfig()
        self.resolver = resolver or BranchVersionResolver(remote=self.config.remote)
        self.actions = actions or default_action_registry(
            self.config.get_site(TARGET_STABLE).deployed_url
        )
        self.work_dir = Path(work_dir) if work_dir else Path.cwd()
        self.runner = runner or CommandRunner(self.work_dir, secrets=[facts.firebase_token])
        self.validator = PlanValidator()

    def compute_plan(self) -> DeploymentPlan:
        """Compute the deployment plan

        Raises:
            ResolutionError: If a remote lookup fails
            PolicyAmbiguityError: If the policy is ambiguous
        """
        version = VersionKey.from_branch(self.facts.current_branch)
        registry = build_target_registry(
            self.config,
            version.major if version else None,
            self.actions
        )
        planner = DeploymentPlanner(self.config, registry)
        return planner.plan(self.facts, self.resolver)

    def validate(self, plan: DeploymentPlan) -> ValidationResult:
        """Validate a plan

        Raises:
            ValidationError: On the first violated invariant
        """
        return self.validator.validate(plan)

    def run(self,
            plan: Optional[DeploymentPlan] = None,
            dry_run: bool = False,
            on_target: Optional[TargetCallback] = None) -> DeployResult:
        """Deploy every target of a plan

        The plan is validated before any action runs; a ValidationError
        propagates and nothing is deployed.

        Args:
            plan: Plan to execute (computed if not given)
            dry_run: Only report what would be deployed
            on_target: Callback invoked before each target

        Returns:
            DeployResult
        """
        if plan is None:
            plan = self.compute_plan()

        self.validate(plan)
        result = DeployResult(success=True, dry_run=dry_run)

        logger.info(f"Deployments ({len(plan)}): {list_target_names(plan)}")

        # Fail before any pre-deploy action has side effects
        needs_token = any(not target.is_skipped for target in plan)
        if needs_token and not dry_run and not self.facts.firebase_token:
            logger.error("Firebase token is not set")
            result.success = False
            result.error = "Firebase token is not set"
            return result.complete()

        for index, target in enumerate(plan):
            if on_target:
                on_target(index, len(plan), target)

            if target.is_skipped:
                logger.info(target.reason)
                result.skipped_reason = target.reason
                continue

            if dry_run:
                continue

            try:
                self.deploy_target(target)
            except (ActionError, DeployError) as e:
                logger.error(f"Deployment of '{target.name}' failed: {e}")
                result.success = False
                result.error = str(e)
                return result.complete()

            result.deployed_targets.append(target.name)

        return result.complete()

    def deploy_target(self, target: TargetDescriptor) -> None:
        """Run pre-deploy actions, the hosting deploy and post-deploy actions

        Raises:
            ActionError: If an action fails
            DeployError: If the Firebase CLI fails
        """
        context = ActionContext(
            facts=self.facts,
            target=target,
            work_dir=self.work_dir,
            runner=self.runner,
        )

        logger.info(f"Running pre-deploy actions for '{target.name}'")
        for action in target.pre_actions:
            action.run(context)

        logger.info(f"Deploying '{target.name}' to Firebase hosting ({target.site_id})")
        self.firebase_deploy(target)

        logger.info(f"Running post-deploy actions for '{target.name}'")
        for action in target.post_actions:
            action.run(context)

    def firebase_deploy(self, target: TargetDescriptor) -> None:
        """Deploy the built app to the target's Firebase site

        Raises:
            DeployError: If any Firebase CLI command fails
        """
        if not self.facts.firebase_token:
            raise DeployError("Firebase token is not set")

        hosting = self.config.firebase.hosting_target
        commands = [
            ['use', target.project_id],
            ['target:clear', 'hosting', hosting],
            ['target:apply', 'hosting', hosting, target.site_id],
            ['deploy', '--only', f'hosting:{hosting}',
             '--message', f'Commit: {self.facts.current_commit}', '--non-interactive'],
        ]

        for command in commands:
            try:
                self.runner.yarn('firebase', *command, '--token', self.facts.firebase_token)
            except (subprocess.CalledProcessError, FileNotFoundError) as e:
                raise DeployError(
                    f"Firebase command 'firebase {command[0]}' failed for target "
                    f"'{target.name}': {self.runner.mask(str(e))}"
                )
