# site_deployer/utils/__init__.py
"""Utility functions for site-deployer"""

from .command_utils import CommandRunner
from .git_utils import ls_remote, parse_ref_line, branch_from_ref
from .version_utils import (
    VersionKey,
    is_minor_branch,
    compute_major_version,
    get_most_recent_branch,
)

__all__ = [
    # Command utilities
    "CommandRunner",

    # Git utilities
    "ls_remote",
    "parse_ref_line",
    "branch_from_ref",

    # Version utilities
    "VersionKey",
    "is_minor_branch",
    "compute_major_version",
    "get_most_recent_branch",
]
