"""Git operation utilities"""

import logging
import subprocess
from typing import List, Optional, Tuple

from ..api.exceptions import ResolutionError
from ..constants import REMOTE_REF_PREFIX

logger = logging.getLogger(__name__)


def ls_remote(pattern: str, remote: str) -> List[str]:
    """
    List remote refs matching a pattern

    Args:
        pattern: Ref name or glob (e.g. ``refs/heads/*.*.x``)
        remote: Remote URL or name

    Returns:
        Ref lines in the form ``<commit>\\t<ref>``, empty if nothing matched

    Raises:
        ResolutionError: If git cannot be run or the remote is unreachable
    """
    logger.debug(f"git ls-remote {remote} {pattern}")
    try:
        result = subprocess.run(
            ['git', 'ls-remote', remote, pattern],
            capture_output=True,
            text=True,
            check=True
        )
    except FileNotFoundError:
        raise ResolutionError("git executable not found", pattern)
    except subprocess.CalledProcessError as e:
        raise ResolutionError(
            f"Failed to list refs '{pattern}' on {remote}: {e.stderr.strip()}",
            pattern
        )

    return [line for line in result.stdout.strip().split('\n') if line.strip()]


def parse_ref_line(line: str) -> Tuple[str, str]:
    """
    Split a ref line into commit and ref name

    Args:
        line: Line such as ``<sha> refs/heads/12.4.x``

    Returns:
        Tuple of (commit, ref)
    """
    parts = line.split()
    if len(parts) != 2:
        raise ResolutionError(f"Malformed ref line: '{line}'")
    return parts[0], parts[1]


def branch_from_ref(ref: str) -> Optional[str]:
    """
    Get branch name from a ``refs/heads/...`` ref

    Args:
        ref: Full ref name

    Returns:
        Branch name or None for non-branch refs
    """
    if not ref.startswith(REMOTE_REF_PREFIX):
        return None
    return ref[len(REMOTE_REF_PREFIX):]
