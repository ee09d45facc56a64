"""Deployment target data models"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from ..actions.base import Action
from ..constants import TARGET_SKIPPED


class TargetKind(str, Enum):
    """Deployment target kinds"""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    SKIPPED = "skipped"

    @classmethod
    def values(cls) -> Tuple[str, ...]:
        return tuple(kind.value for kind in cls)


@dataclass(frozen=True)
class TargetDescriptor:
    """One entry of a deployment plan

    Primary targets build the artifact; secondary targets republish the
    primary's artifact to another site; a skipped target only carries the
    reason nothing is deployed.
    """

    name: Optional[str]
    kind: Union[TargetKind, str, None]
    reason: Optional[str] = None

    # Hosting coordinates (primary/secondary only)
    deploy_env: Optional[str] = None
    project_id: Optional[str] = None
    site_id: Optional[str] = None
    deployed_url: Optional[str] = None
    pre_actions: Optional[Tuple[Action, ...]] = None
    post_actions: Optional[Tuple[Action, ...]] = None

    @classmethod
    def skipped(cls, reason: str) -> 'TargetDescriptor':
        """Create the single descriptor of a skipped plan"""
        return cls(name=TARGET_SKIPPED, kind=TargetKind.SKIPPED, reason=reason)

    @property
    def is_skipped(self) -> bool:
        return self.kind == TargetKind.SKIPPED

    @property
    def kind_value(self) -> Optional[str]:
        """Get kind as a plain string"""
        if isinstance(self.kind, TargetKind):
            return self.kind.value
        return self.kind

    @property
    def display_name(self) -> str:
        return self.name or "<no name>"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (actions by name)"""
        data: Dict[str, Any] = {
            "name": self.name,
            "kind": self.kind_value,
        }

        if self.is_skipped:
            data["reason"] = self.reason
            return data

        data.update({
            "deploy_env": self.deploy_env,
            "project_id": self.project_id,
            "site_id": self.site_id,
            "deployed_url": self.deployed_url,
            "pre_actions": serialize_actions(self.pre_actions),
            "post_actions": serialize_actions(self.post_actions),
        })
        return data


DeploymentPlan = Tuple[TargetDescriptor, ...]


def serialize_actions(actions: Optional[Sequence[Action]]) -> str:
    """Join action names for display"""
    return ', '.join(action.name for action in actions or ())


def list_target_names(plan: Sequence[TargetDescriptor]) -> str:
    """
    Join target names for display

    Args:
        plan: Deployment plan or any list of descriptors

    Returns:
        Comma separated names, or ``-`` for an empty list
    """
    return ', '.join(target.display_name for target in plan) or '-'
