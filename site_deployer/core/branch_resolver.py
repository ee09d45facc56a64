# site_deployer/core/branch_resolver.py
"""Branch and version resolution against the remote repository"""

import logging
import threading
from typing import Callable, Dict, List, Optional

from ..api.exceptions import ResolutionError
from ..constants import (
    COMMIT_ID_LENGTH,
    DEFAULT_REMOTE_URL,
    MINOR_BRANCH_GLOB,
    REMOTE_REF_PREFIX,
)
from ..utils.git_utils import ls_remote, parse_ref_line, branch_from_ref
from ..utils.version_utils import get_most_recent_branch

logger = logging.getLogger(__name__)

# (pattern, remote) -> ref lines, each "<commit> <ref>"
RemoteRefQuery = Callable[[str, str], List[str]]


class BranchVersionResolver:
    """Resolve latest commits and most recent minor branches

    Remote refs are memoized by the literal query for the lifetime of the
    resolver, so every decision within one run sees the same snapshot of
    the remote even if branches move while the run is in progress.
    """

    def __init__(self,
                 query: RemoteRefQuery = ls_remote,
                 remote: str = DEFAULT_REMOTE_URL):
        """
        Initialize resolver

        Args:
            query: Callable listing remote refs for a pattern
            remote: Remote URL the refs are read from
        """
        self.query = query
        self.remote = remote
        self._cache: Dict[str, List[str]] = {}
        self._lock = threading.Lock()

    def _cache_key(self, pattern: str) -> str:
        return f"git ls-remote {self.remote} {pattern}"

    def get_remote_refs(self, pattern: str, retrieve_from_cache: bool = True) -> List[str]:
        """
        Get remote ref lines for a pattern

        The result is cached regardless of ``retrieve_from_cache``, so a
        bypass refreshes the cached snapshot for later calls.

        Args:
            pattern: Ref name or glob
            retrieve_from_cache: Return the cached result if there is one

        Returns:
            Ref lines (may be empty)
        """
        key = self._cache_key(pattern)

        with self._lock:
            if retrieve_from_cache and key in self._cache:
                logger.debug(f"Remote refs cache hit: {key}")
                return list(self._cache[key])

            lines = [line.strip() for line in self.query(pattern, self.remote) if line.strip()]
            self._cache[key] = lines
            return list(lines)

    def latest_commit(self, branch_name: str, retrieve_from_cache: bool = True) -> str:
        """
        Get the commit at the tip of a remote branch

        Args:
            branch_name: Branch name (e.g. ``master``)
            retrieve_from_cache: Use the cached snapshot if available

        Returns:
            40-character commit id

        Raises:
            ResolutionError: If the branch does not exist on the remote or
                resolves to more than one ref
        """
        lines = self.get_remote_refs(branch_name, retrieve_from_cache)
        if not lines:
            raise ResolutionError(
                f"Branch '{branch_name}' does not exist on {self.remote}", branch_name
            )

        # `git ls-remote` matches ref suffixes, so tags or other namespaces
        # with the same name may show up too
        wanted = {branch_name, f"{REMOTE_REF_PREFIX}{branch_name}"}
        commits = [commit for commit, ref in map(parse_ref_line, lines) if ref in wanted]

        if not commits:
            raise ResolutionError(
                f"No branch ref named '{branch_name}' on {self.remote} "
                f"(found: {', '.join(ref for _, ref in map(parse_ref_line, lines))})",
                branch_name
            )
        if len(commits) > 1:
            raise ResolutionError(
                f"Branch '{branch_name}' resolved to {len(commits)} refs on {self.remote}",
                branch_name
            )

        return commits[0][:COMMIT_ID_LENGTH]

    def list_minor_branches(self, major: Optional[int] = None,
                            retrieve_from_cache: bool = True) -> List[str]:
        """
        List remote branch names matching ``<major>.*.x``

        Args:
            major: Restrict to one major version (any major if None)
            retrieve_from_cache: Use the cached snapshot if available

        Returns:
            Branch names in remote order, not yet filtered for the strict
            ``<number>.<number>.x`` format
        """
        pattern = MINOR_BRANCH_GLOB.format(major='*' if major is None else major)
        branches = []

        for line in self.get_remote_refs(pattern, retrieve_from_cache):
            _, ref = parse_ref_line(line)
            branch = branch_from_ref(ref)
            if branch:
                branches.append(branch)

        return branches

    def most_recent_minor_branch(self, major: Optional[int] = None,
                                 retrieve_from_cache: bool = True) -> Optional[str]:
        """
        Get the branch with the highest version

        Args:
            major: Restrict to one major version (any major if None)
            retrieve_from_cache: Use the cached snapshot if available

        Returns:
            Branch name (e.g. ``12.4.x``) or None if there is no version branch
        """
        branch = get_most_recent_branch(self.list_minor_branches(major, retrieve_from_cache))
        logger.debug(f"Most recent minor branch (major: {major if major is not None else 'any'}): {branch}")
        return branch

    def clear_cache(self) -> None:
        """Drop all cached remote refs"""
        with self._lock:
            self._cache.clear()
