# site_deployer/core/target_registry.py
"""Static registry of deploy targets"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from ..actions.base import ActionRegistry
from ..constants import (
    TARGET_NEXT,
    TARGET_RC,
    TARGET_STABLE,
    TARGET_ARCHIVE,
    TARGET_STABLE_AS_RC,
    ACTION_BUILD,
    ACTION_CHECK_PAYLOAD_SIZE,
    ACTION_TEST_PWA_SCORE,
    ACTION_REMOVE_SERVICE_WORKER,
    ACTION_REDIRECT_TO_STABLE,
    ACTION_VERIFY_NO_ACTIVE_RC,
)
from ..models.config import DeployConfig
from ..models.target import TargetDescriptor, TargetKind


@dataclass(frozen=True)
class TargetTemplate:
    """Site-independent part of a deploy target"""
    name: str
    kind: TargetKind
    deploy_env: str
    pre_actions: Tuple[str, ...]
    post_actions: Tuple[str, ...]


PRIMARY_PRE_ACTIONS = (ACTION_BUILD, ACTION_CHECK_PAYLOAD_SIZE)
PRIMARY_POST_ACTIONS = (ACTION_TEST_PWA_SCORE,)

TARGET_TEMPLATES: Tuple[TargetTemplate, ...] = (
    # Primary targets build the app. Unless deployment is skipped, exactly
    # one is used per run and it comes first.
    TargetTemplate(TARGET_NEXT, TargetKind.PRIMARY, 'next',
                   PRIMARY_PRE_ACTIONS, PRIMARY_POST_ACTIONS),
    TargetTemplate(TARGET_RC, TargetKind.PRIMARY, 'rc',
                   PRIMARY_PRE_ACTIONS, PRIMARY_POST_ACTIONS),
    TargetTemplate(TARGET_STABLE, TargetKind.PRIMARY, 'stable',
                   PRIMARY_PRE_ACTIONS, PRIMARY_POST_ACTIONS),
    TargetTemplate(TARGET_ARCHIVE, TargetKind.PRIMARY, 'archive',
                   PRIMARY_PRE_ACTIONS, PRIMARY_POST_ACTIONS),

    # Secondary targets republish the primary's build to another site and
    # must share its deploy env. This one points the RC site at stable
    # while there is no active RC.
    TargetTemplate(TARGET_STABLE_AS_RC, TargetKind.SECONDARY, 'stable',
                   (ACTION_REMOVE_SERVICE_WORKER, ACTION_REDIRECT_TO_STABLE),
                   (ACTION_VERIFY_NO_ACTIVE_RC,)),
)


def build_target_registry(config: DeployConfig,
                          major_version: Optional[int],
                          actions: ActionRegistry) -> Mapping[str, TargetDescriptor]:
    """
    Build the read-only target registry for one run

    Args:
        config: Deployment configuration (sites and URLs)
        major_version: Major version of the current branch, used by the
            ``stable`` and ``archive`` site templates
        actions: Registry the template action names are resolved against

    Returns:
        Mapping of target name to TargetDescriptor

    Raises:
        KeyError: If a template names an unregistered action
    """
    registry = {}

    for template in TARGET_TEMPLATES:
        site = config.get_site(template.name, major_version)
        registry[template.name] = TargetDescriptor(
            name=template.name,
            kind=template.kind,
            deploy_env=template.deploy_env,
            project_id=config.firebase.project_id,
            site_id=site.site_id,
            deployed_url=site.deployed_url,
            pre_actions=actions.resolve(list(template.pre_actions)),
            post_actions=actions.resolve(list(template.post_actions)),
        )

    return MappingProxyType(registry)
