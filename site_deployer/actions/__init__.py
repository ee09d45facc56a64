"""Deploy actions run around the hosting deploy"""

from .base import Action, ActionContext, ActionRegistry
from .builtin import (
    BuildAction,
    CheckPayloadSizeAction,
    CheckPwaScoreAction,
    RemoveServiceWorkerAction,
    RedirectToStableAction,
    VerifyNoActiveRcAction,
    default_action_registry,
)

__all__ = [
    "Action",
    "ActionContext",
    "ActionRegistry",
    "BuildAction",
    "CheckPayloadSizeAction",
    "CheckPwaScoreAction",
    "RemoveServiceWorkerAction",
    "RedirectToStableAction",
    "VerifyNoActiveRcAction",
    "default_action_registry",
]
