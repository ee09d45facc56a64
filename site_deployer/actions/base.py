# site_deployer/actions/base.py
"""Deploy action base classes and registry"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from ..utils.command_utils import CommandRunner


@dataclass
class ActionContext:
    """Context passed to deploy actions

    ``facts`` is the run's RepoFacts and ``target`` the TargetDescriptor
    being deployed. Actions read them but never change them.
    """
    facts: Any
    target: Any
    work_dir: Path
    runner: CommandRunner

    @property
    def deployed_url(self) -> str:
        return self.target.deployed_url

    @property
    def deploy_env(self) -> str:
        return self.target.deploy_env


class Action(ABC):
    """Side-effecting step run before or after a hosting deploy"""

    name: str = ""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize action

        Args:
            config: Action-specific configuration
        """
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def run(self, context: ActionContext) -> None:
        """
        Run the action

        Args:
            context: Action context

        Raises:
            ActionError: If the action fails
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"


class ActionRegistry:
    """Named actions referenced by the target registry"""

    def __init__(self, actions: Optional[List[Action]] = None):
        self._actions: Dict[str, Action] = {}
        for action in actions or []:
            self.register(action)

    def register(self, action: Action) -> None:
        """Register an action under its name"""
        if not action.name:
            raise ValueError(f"Action {action!r} has no name")
        self._actions[action.name] = action

    def get(self, name: str) -> Action:
        """
        Get action by name

        Raises:
            KeyError: If no action is registered under the name
        """
        if name not in self._actions:
            raise KeyError(f"Unknown action: {name}")
        return self._actions[name]

    def resolve(self, names: List[str]) -> tuple:
        """Get actions for a list of names, keeping order"""
        return tuple(self.get(name) for name in names)

    def names(self) -> List[str]:
        return list(self._actions)

    def __contains__(self, name: str) -> bool:
        return name in self._actions

    def __iter__(self) -> Iterator[Action]:
        return iter(self._actions.values())
