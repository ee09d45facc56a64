# site_deployer/cli/commands/__init__.py
"""CLI commands"""

from . import plan
from . import deploy
from . import branches

__all__ = [
    "plan",
    "deploy",
    "branches",
]
