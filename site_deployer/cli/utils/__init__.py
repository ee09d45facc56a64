"""CLI utility functions"""

from .output import (
    console,
    format_facts,
    format_target,
    format_plan,
    format_deploy_result,
    format_json,
)

__all__ = [
    "console",
    "format_facts",
    "format_target",
    "format_plan",
    "format_deploy_result",
    "format_json",
]
