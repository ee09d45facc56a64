"""Shared fixtures for site-deployer tests"""

from fnmatch import fnmatchcase
from typing import Dict, List

import pytest

from site_deployer.actions.base import Action, ActionRegistry
from site_deployer.constants import REGISTRY_TARGETS
from site_deployer.core.branch_resolver import BranchVersionResolver
from site_deployer.core.target_registry import TARGET_TEMPLATES, build_target_registry
from site_deployer.models import DeployConfig, RepoFacts
from site_deployer.utils.command_utils import CommandRunner


def sha_for(branch: str) -> str:
    """Deterministic fake commit id for a branch"""
    return (branch.encode().hex() * 40)[:40]


class FakeRemote:
    """In-memory stand-in for `git ls-remote`"""

    def __init__(self, branches: Dict[str, str]):
        self.branches = dict(branches)
        self.calls: List[str] = []

    def query(self, pattern: str, remote: str) -> List[str]:
        self.calls.append(pattern)
        lines = []
        for branch, commit in self.branches.items():
            ref = f"refs/heads/{branch}"
            if '*' in pattern:
                matched = fnmatchcase(ref, pattern)
            else:
                matched = ref == pattern or ref.endswith('/' + pattern)
            if matched:
                lines.append(f"{commit}\t{ref}")
        return lines


class RecordingAction(Action):
    """Action that records the contexts it was run with"""

    def __init__(self, name: str, log: List[str]):
        super().__init__()
        self.name = name
        self.log = log

    def run(self, context):
        self.log.append(f"{self.name}:{context.target.name}")


class RecordingRunner(CommandRunner):
    """Command runner that records commands instead of running them"""

    def __init__(self, secrets=()):
        super().__init__(secrets=secrets)
        self.commands: List[List[str]] = []

    def run(self, args, capture=False):
        self.commands.append(list(args))
        return ""


def make_facts(current_branch="master", current_commit=None, stable_branch="12.2.x",
               **overrides) -> RepoFacts:
    values = dict(
        current_branch=current_branch,
        current_commit=current_commit or sha_for(current_branch),
        stable_branch=stable_branch,
        is_pull_request=False,
        repo_owner="angular",
        repo_name="angular",
        firebase_token="secret-token",
        min_pwa_score="95",
    )
    values.update(overrides)
    return RepoFacts(**values)


@pytest.fixture
def remote_branches():
    """Branches on the fake remote (stable 12.2.x, no active RC)"""
    names = ["master", "10.0.x", "10.2.x", "11.0.x", "11.2.x", "12.0.x", "12.1.x", "12.2.x",
             "feature-x"]
    return {name: sha_for(name) for name in names}


@pytest.fixture
def fake_remote(remote_branches):
    return FakeRemote(remote_branches)


@pytest.fixture
def resolver(fake_remote):
    return BranchVersionResolver(query=fake_remote.query, remote="https://example.com/repo.git")


@pytest.fixture
def config():
    return DeployConfig()


@pytest.fixture
def action_log():
    return []


@pytest.fixture
def action_registry(action_log):
    names = set()
    for template in TARGET_TEMPLATES:
        names.update(template.pre_actions)
        names.update(template.post_actions)
    return ActionRegistry([RecordingAction(name, action_log) for name in sorted(names)])


@pytest.fixture
def registry_for(config, action_registry):
    """Build a target registry for a major version"""
    def build(major=None):
        return build_target_registry(config, major, action_registry)
    return build


@pytest.fixture
def runner():
    return RecordingRunner(secrets=["secret-token"])


@pytest.fixture
def registry_targets():
    return list(REGISTRY_TARGETS)
