"""Repository facts resolved once per run"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..constants import (
    ENV_BRANCH,
    ENV_COMMIT,
    ENV_STABLE_BRANCH,
    ENV_PULL_REQUEST,
    ENV_REPO_OWNER,
    ENV_REPO_NAME,
    ENV_FIREBASE_TOKEN,
    ENV_MIN_PWA_SCORE,
    SECRET_MASK,
)


@dataclass(frozen=True)
class RepoFacts:
    """Source-control state the deployment policy decides on"""

    current_branch: str
    current_commit: str
    stable_branch: str
    is_pull_request: bool = False
    repo_owner: str = ""
    repo_name: str = ""

    # Only forwarded to deploy actions
    firebase_token: Optional[str] = None
    min_pwa_score: Optional[str] = None

    @property
    def repo_slug(self) -> str:
        """Get ``owner/name`` repository identifier"""
        return f"{self.repo_owner}/{self.repo_name}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> 'RepoFacts':
        """
        Create from CI environment variables

        A build counts as a pull request unless ``CI_PULL_REQUEST`` is the
        literal string ``false``.

        Args:
            environ: Environment mapping (usually ``os.environ``)

        Returns:
            RepoFacts instance
        """
        return cls(
            current_branch=environ.get(ENV_BRANCH, ""),
            current_commit=environ.get(ENV_COMMIT, ""),
            stable_branch=environ.get(ENV_STABLE_BRANCH, ""),
            is_pull_request=environ.get(ENV_PULL_REQUEST) != 'false',
            repo_owner=environ.get(ENV_REPO_OWNER, ""),
            repo_name=environ.get(ENV_REPO_NAME, ""),
            firebase_token=environ.get(ENV_FIREBASE_TOKEN),
            min_pwa_score=environ.get(ENV_MIN_PWA_SCORE),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with the token masked"""
        return {
            "current_branch": self.current_branch,
            "current_commit": self.current_commit,
            "stable_branch": self.stable_branch,
            "is_pull_request": self.is_pull_request,
            "repository": self.repo_slug,
            "firebase_token": SECRET_MASK if self.firebase_token else None,
            "min_pwa_score": self.min_pwa_score,
        }

    def __repr__(self) -> str:
        token = SECRET_MASK if self.firebase_token else None
        return (
            f"RepoFacts(current_branch={self.current_branch!r}, "
            f"current_commit={self.current_commit!r}, "
            f"stable_branch={self.stable_branch!r}, "
            f"is_pull_request={self.is_pull_request!r}, "
            f"repo_slug={self.repo_slug!r}, firebase_token={token!r})"
        )
