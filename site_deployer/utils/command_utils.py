"""Shell command execution utilities"""

import logging
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional

from ..constants import SECRET_MASK

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run external commands with secrets masked in log output"""

    def __init__(self, cwd: Optional[Path] = None, secrets: Iterable[str] = ()):
        """
        Initialize command runner

        Args:
            cwd: Working directory for commands
            secrets: Values that must never appear in log output
        """
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.secrets = [s for s in secrets if s]

    def mask(self, text: str) -> str:
        """Replace secret values in text"""
        for secret in self.secrets:
            text = text.replace(secret, SECRET_MASK)
        return text

    def run(self, args: List[str], capture: bool = False) -> str:
        """
        Run a command and fail on non-zero exit

        Args:
            args: Command and arguments
            capture: Capture and return stdout instead of streaming it

        Returns:
            Captured stdout (empty string when not capturing)

        Raises:
            subprocess.CalledProcessError: If the command fails
        """
        logger.info(self.mask(' '.join(args)))
        result = subprocess.run(
            args,
            cwd=self.cwd,
            capture_output=capture,
            text=True,
            check=True
        )
        return result.stdout.strip() if capture else ""

    def yarn(self, *args: str) -> str:
        """Run a yarn script silently so secret env variables are not echoed"""
        return self.run(['yarn', '--silent', *args])
