"""Tests for git and command utilities"""

import subprocess

import pytest

from site_deployer.api.exceptions import ResolutionError
from site_deployer.utils import git_utils
from site_deployer.utils.command_utils import CommandRunner
from site_deployer.utils.git_utils import branch_from_ref, ls_remote, parse_ref_line


class TestLsRemote:

    def test_returns_non_empty_lines(self, monkeypatch):
        calls = []

        def run(args, **kwargs):
            calls.append(args)
            return subprocess.CompletedProcess(args, 0, stdout=f"{'a' * 40}\trefs/heads/master\n\n", stderr="")

        monkeypatch.setattr(git_utils.subprocess, "run", run)

        assert ls_remote("master", "origin") == [f"{'a' * 40}\trefs/heads/master"]
        assert calls == [['git', 'ls-remote', 'origin', 'master']]

    def test_failure_is_a_resolution_error(self, monkeypatch):
        def run(args, **kwargs):
            raise subprocess.CalledProcessError(128, args, stderr="fatal: repository not found\n")

        monkeypatch.setattr(git_utils.subprocess, "run", run)

        with pytest.raises(ResolutionError, match="repository not found") as exc_info:
            ls_remote("master", "https://example.com/missing.git")

        assert exc_info.value.ref == "master"

    def test_missing_git(self, monkeypatch):
        def run(args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(git_utils.subprocess, "run", run)

        with pytest.raises(ResolutionError, match="git executable not found"):
            ls_remote("master", "origin")


def test_parse_ref_line():
    assert parse_ref_line(f"{'b' * 40}\trefs/heads/12.2.x") == ('b' * 40, "refs/heads/12.2.x")

    with pytest.raises(ResolutionError, match="Malformed ref line"):
        parse_ref_line("garbage")


@pytest.mark.parametrize("ref, expected", [
    ("refs/heads/12.2.x", "12.2.x"),
    ("refs/heads/feature/nested", "feature/nested"),
    ("refs/tags/12.2.x", None),
])
def test_branch_from_ref(ref, expected):
    assert branch_from_ref(ref) == expected


def test_runner_masks_secrets():
    runner = CommandRunner(secrets=["s3cr3t", None, ""])

    assert runner.mask("firebase use --token s3cr3t") == "firebase use --token ***"
    assert runner.secrets == ["s3cr3t"]
