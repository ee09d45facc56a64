"""Configuration data models"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..constants import (
    CONFIG_VERSION,
    DEFAULT_REPO_SLUG,
    DEFAULT_REMOTE_URL,
    DEFAULT_TRUNK_BRANCH,
    DEFAULT_FIREBASE_PROJECT,
    DEFAULT_HOSTING_TARGET,
    DEFAULT_TARGET_SITES,
    REGISTRY_TARGETS,
)


@dataclass
class TargetSiteConfig:
    """Hosting coordinates for one deploy target

    ``site_id`` and ``deployed_url`` may contain a ``{major}`` placeholder,
    filled with the current branch's major version.
    """

    site_id: str
    deployed_url: str

    def render(self, major: Optional[int]) -> 'TargetSiteConfig':
        """Fill in the ``{major}`` placeholder"""
        major_str = "" if major is None else str(major)
        return TargetSiteConfig(
            site_id=self.site_id.format(major=major_str),
            deployed_url=self.deployed_url.format(major=major_str),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "site_id": self.site_id,
            "deployed_url": self.deployed_url
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TargetSiteConfig':
        """Create from dictionary"""
        return cls(site_id=data["site_id"], deployed_url=data["deployed_url"])


def _default_sites() -> Dict[str, TargetSiteConfig]:
    return {
        name: TargetSiteConfig.from_dict(site)
        for name, site in DEFAULT_TARGET_SITES.items()
    }


@dataclass
class FirebaseConfig:
    """Firebase hosting configuration"""

    project_id: str = DEFAULT_FIREBASE_PROJECT
    hosting_target: str = DEFAULT_HOSTING_TARGET

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "project_id": self.project_id,
            "hosting_target": self.hosting_target
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FirebaseConfig':
        """Create from dictionary"""
        return cls(**data)


@dataclass
class DeployConfig:
    """Deployment policy configuration

    This represents the configuration stored in .site-deployer.yaml
    """

    version: str = CONFIG_VERSION
    repository: str = DEFAULT_REPO_SLUG
    remote: str = DEFAULT_REMOTE_URL
    trunk_branch: str = DEFAULT_TRUNK_BRANCH
    strict: bool = False
    firebase: FirebaseConfig = field(default_factory=FirebaseConfig)
    targets: Dict[str, TargetSiteConfig] = field(default_factory=_default_sites)

    def __post_init__(self):
        """Validate configuration"""
        unknown = sorted(set(self.targets) - set(REGISTRY_TARGETS))
        if unknown:
            raise ValueError(
                f"Unknown deploy targets: {', '.join(unknown)} "
                f"(expected one of {', '.join(REGISTRY_TARGETS)})"
            )

        if '/' not in self.repository:
            raise ValueError(f"Repository must be 'owner/name', got '{self.repository}'")

        # Targets left out of the file keep their defaults
        merged = _default_sites()
        merged.update(self.targets)
        self.targets = merged

        for name, site in self.targets.items():
            try:
                site.render(0)
            except (KeyError, IndexError, ValueError) as e:
                raise ValueError(
                    f"Invalid site template for target '{name}' "
                    f"(only {{major}} is supported): {e!r}"
                )

    def get_site(self, target: str, major: Optional[int] = None) -> TargetSiteConfig:
        """
        Get rendered hosting coordinates for a target

        Args:
            target: Target name
            major: Major version used in site/url templates

        Returns:
            TargetSiteConfig with placeholders filled in
        """
        return self.targets[target].render(major)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "version": self.version,
            "repository": self.repository,
            "remote": self.remote,
            "trunk_branch": self.trunk_branch,
            "strict": self.strict,
            "firebase": self.firebase.to_dict(),
            "targets": {name: site.to_dict() for name, site in self.targets.items()}
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeployConfig':
        """Create from dictionary"""
        data = data or {}
        targets = {
            name: TargetSiteConfig.from_dict(site)
            for name, site in (data.get("targets") or {}).items()
        }

        return cls(
            version=str(data.get("version", CONFIG_VERSION)),
            repository=data.get("repository", DEFAULT_REPO_SLUG),
            remote=data.get("remote", DEFAULT_REMOTE_URL),
            trunk_branch=data.get("trunk_branch", DEFAULT_TRUNK_BRANCH),
            strict=bool(data.get("strict", False)),
            firebase=FirebaseConfig.from_dict(data.get("firebase") or {}),
            targets=targets
        )
