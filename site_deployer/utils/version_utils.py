"""Version branch utilities"""

from typing import Iterable, NamedTuple, Optional

from ..constants import MINOR_BRANCH_PATTERN


class VersionKey(NamedTuple):
    """Sortable (major, minor) pair parsed from a ``<major>.<minor>.x`` branch"""
    major: int
    minor: int

    @classmethod
    def from_branch(cls, branch_name: str) -> Optional['VersionKey']:
        """
        Parse a version branch name

        Args:
            branch_name: Branch name such as ``12.4.x``

        Returns:
            VersionKey or None if the name is not a minor version branch
        """
        match = MINOR_BRANCH_PATTERN.fullmatch(branch_name or "")
        if not match:
            return None
        return cls(int(match.group('major')), int(match.group('minor')))

    def to_branch(self) -> str:
        """Get the branch name for this version"""
        return f"{self.major}.{self.minor}.x"


def is_minor_branch(branch_name: str) -> bool:
    """Check if branch name has the ``<number>.<number>.x`` format"""
    return VersionKey.from_branch(branch_name) is not None


def compute_major_version(branch_name: str) -> int:
    """
    Extract the major version from a branch name

    Args:
        branch_name: Branch name (e.g. ``12.4.x``)

    Returns:
        Major version number

    Raises:
        ValueError: If the branch name does not start with a number
    """
    head = branch_name.split('.', 1)[0]
    if not head.isdigit():
        raise ValueError(f"Branch '{branch_name}' has no numeric major version")
    return int(head)


def get_most_recent_branch(branch_names: Iterable[str]) -> Optional[str]:
    """
    Get the branch with the highest (major, minor) version

    Names that are not minor version branches are ignored.

    Args:
        branch_names: Candidate branch names

    Returns:
        Branch name or None if no candidate is a version branch
    """
    candidates = []
    for name in branch_names:
        key = VersionKey.from_branch(name)
        if key is not None:
            candidates.append((key, name))

    if not candidates:
        return None

    return max(candidates)[1]
