# site_deployer/core/plan_validator.py
"""Structural validation of deployment plans"""

from typing import List, Sequence

from ..api.exceptions import ValidationError
from ..constants import Invariant
from ..models.result import ValidationResult
from ..models.target import TargetDescriptor, TargetKind, list_target_names

REQUIRED_FIELDS_SKIPPED = ['name', 'kind', 'reason']
REQUIRED_FIELDS_DEPLOYED = [
    'name', 'kind', 'deploy_env', 'project_id', 'site_id', 'deployed_url',
    'pre_actions', 'post_actions',
]


class PlanValidator:
    """Check deployment plan invariants before anything is deployed

    The first violated invariant is raised as a ValidationError.
    """

    def validate(self, plan: Sequence[TargetDescriptor]) -> ValidationResult:
        """
        Validate a deployment plan

        Args:
            plan: Ordered target descriptors

        Returns:
            ValidationResult describing the accepted plan

        Raises:
            ValidationError: On the first violated invariant
        """
        plan = list(plan)
        result = ValidationResult()

        self._check_known_kinds(plan)
        self._check_required_fields(plan)
        result.add_success(f"{len(plan)} deploy target(s) well-formed")

        skipped = [t for t in plan if t.kind_value == TargetKind.SKIPPED.value]
        if skipped:
            if len(plan) > 1:
                raise ValidationError(
                    f"Expected a single skipped deploy target, but found {len(plan)} targets "
                    f"in total: {list_target_names(plan)}",
                    Invariant.EXCLUSIVE_SKIP,
                    [t.display_name for t in plan]
                )
            result.add_info(f"Deployment skipped: {skipped[0].reason}")
            return result

        primary = self._check_primary(plan)
        result.add_success(f"Primary target: {primary.name}")

        self._check_secondaries(plan, primary)
        secondaries = [t for t in plan if t.kind_value == TargetKind.SECONDARY.value]
        if secondaries:
            result.add_success(
                f"Secondary targets match deploy env '{primary.deploy_env}': "
                f"{list_target_names(secondaries)}"
            )

        return result

    def _check_known_kinds(self, plan: List[TargetDescriptor]) -> None:
        known = TargetKind.values()
        unknown = [t for t in plan if t.kind_value not in known]

        if unknown:
            raise ValidationError(
                f"Expected all deploy targets to have a type of {' or '.join(known)}, but "
                f"found {len(unknown)} targets with an unknown type: " +
                ', '.join(f"{t.display_name} (type: {t.kind_value})" for t in unknown),
                Invariant.KNOWN_KIND,
                [t.display_name for t in unknown]
            )

    def _check_required_fields(self, plan: List[TargetDescriptor]) -> None:
        for target in plan:
            required = (REQUIRED_FIELDS_SKIPPED if target.kind_value == TargetKind.SKIPPED.value
                        else REQUIRED_FIELDS_DEPLOYED)
            missing = [name for name in required if getattr(target, name) is None]

            if missing:
                raise ValidationError(
                    f"Expected deploy target '{target.display_name}' to have all required "
                    f"properties, but it is missing '{', '.join(missing)}'.",
                    Invariant.REQUIRED_FIELDS,
                    [target.display_name]
                )

    def _check_primary(self, plan: List[TargetDescriptor]) -> TargetDescriptor:
        primaries = [t for t in plan if t.kind_value == TargetKind.PRIMARY.value]

        if len(primaries) != 1:
            raise ValidationError(
                f"Expected exactly one primary deploy target, but found {len(primaries)}: "
                f"{list_target_names(primaries)}",
                Invariant.SINGLE_PRIMARY,
                [t.display_name for t in primaries]
            )

        primary = primaries[0]
        index = plan.index(primary)
        if index != 0:
            raise ValidationError(
                f"Expected the primary target ({primary.display_name}) to be the first item "
                f"in the deploy target list, but it was found at index {index} (0-based): "
                f"{list_target_names(plan)}",
                Invariant.PRIMARY_FIRST,
                [primary.display_name]
            )

        return primary

    def _check_secondaries(self, plan: List[TargetDescriptor],
                           primary: TargetDescriptor) -> None:
        mismatched = [
            t for t in plan
            if t.kind_value == TargetKind.SECONDARY.value and t.deploy_env != primary.deploy_env
        ]

        if mismatched:
            raise ValidationError(
                "Expected all secondary deploy targets to match the primary target's "
                f"deploy env ({primary.deploy_env}), but {len(mismatched)} targets do not: " +
                ', '.join(f"{t.display_name} (deploy env: {t.deploy_env})" for t in mismatched),
                Invariant.SECONDARY_ENV,
                [t.display_name for t in mismatched]
            )


def validate_plan(plan: Sequence[TargetDescriptor]) -> ValidationResult:
    """Validate a plan with the default validator"""
    return PlanValidator().validate(plan)
