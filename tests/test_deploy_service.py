"""Tests for DeployService"""

import subprocess

import pytest

from site_deployer.actions.base import Action
from site_deployer.api.exceptions import ActionError, ValidationError
from site_deployer.models import TargetDescriptor
from site_deployer.services import DeployService

from conftest import RecordingRunner, make_facts, sha_for


class FailingAction(Action):

    def __init__(self, name):
        super().__init__()
        self.name = name

    def run(self, context):
        raise ActionError(self.name, "payload too large")


class FailingRunner(RecordingRunner):

    def run(self, args, capture=False):
        self.commands.append(list(args))
        raise subprocess.CalledProcessError(1, list(args))


@pytest.fixture
def service_for(config, resolver, action_registry, runner, tmp_path):
    def build(facts, **overrides):
        options = dict(
            config=config,
            resolver=resolver,
            actions=action_registry,
            runner=runner,
            work_dir=tmp_path,
        )
        options.update(overrides)
        return DeployService(facts, **options)
    return build


def firebase_commands(site_id, commit):
    token = ['--token', 'secret-token']
    return [
        ['yarn', '--silent', 'firebase', 'use', 'angular-io', *token],
        ['yarn', '--silent', 'firebase', 'target:clear', 'hosting', 'aio', *token],
        ['yarn', '--silent', 'firebase', 'target:apply', 'hosting', 'aio', site_id, *token],
        ['yarn', '--silent', 'firebase', 'deploy', '--only', 'hosting:aio',
         '--message', f'Commit: {commit}', '--non-interactive', *token],
    ]


def test_compute_plan_uses_current_major(service_for):
    plan = service_for(make_facts("11.2.x")).compute_plan()

    assert [target.name for target in plan] == ["archive"]
    assert plan[0].site_id == "v11-angular-io-site"


def test_deploys_primary_then_secondary(service_for, action_log, runner):
    facts = make_facts("12.2.x")

    result = service_for(facts).run()

    assert result.success
    assert result.deployed_targets == ["stable", "stable-redeployed-as-rc"]
    assert action_log == [
        "build:stable",
        "check-payload-size:stable",
        "test-pwa-score:stable",
        "remove-service-worker:stable-redeployed-as-rc",
        "redirect-to-stable:stable-redeployed-as-rc",
        "verify-no-active-rc:stable-redeployed-as-rc",
    ]
    assert runner.commands == (
        firebase_commands("v12-angular-io-site", sha_for("12.2.x")) +
        firebase_commands("rc-angular-io-site", sha_for("12.2.x"))
    )


def test_dry_run_executes_nothing(service_for, action_log, runner):
    seen = []

    result = service_for(make_facts("master")).run(
        dry_run=True,
        on_target=lambda index, total, target: seen.append((index, total, target.name))
    )

    assert result.success
    assert result.dry_run
    assert result.deployed_targets == []
    assert seen == [(0, 1, "next")]
    assert action_log == []
    assert runner.commands == []


def test_skipped_plan_deploys_nothing(service_for, action_log, runner, fake_remote):
    result = service_for(make_facts(is_pull_request=True)).run()

    assert result.success
    assert result.skipped
    assert "PR build" in result.skipped_reason
    assert action_log == []
    assert runner.commands == []
    assert fake_remote.calls == []


def test_invalid_plan_is_rejected_before_any_action(service_for, registry_for, action_log, runner):
    plan = (registry_for(12)["stable"], TargetDescriptor.skipped("oops"))

    with pytest.raises(ValidationError):
        service_for(make_facts("12.2.x")).run(plan)

    assert action_log == []
    assert runner.commands == []


def test_failing_action_stops_the_run(service_for, action_registry, action_log, runner):
    action_registry.register(FailingAction("check-payload-size"))

    result = service_for(make_facts("12.2.x")).run()

    assert not result.success
    assert "Action 'check-payload-size' failed: payload too large" in result.error
    assert result.deployed_targets == []
    assert action_log == ["build:stable"]
    assert runner.commands == []


def test_missing_token_fails_before_any_action(service_for, action_log, runner):
    result = service_for(make_facts("master", firebase_token=None)).run()

    assert not result.success
    assert result.error == "Firebase token is not set"
    assert action_log == []
    assert runner.commands == []


def test_missing_token_is_fine_for_dry_run_and_skipped_plans(service_for):
    assert service_for(make_facts("master", firebase_token=None)).run(dry_run=True).success

    result = service_for(make_facts(is_pull_request=True, firebase_token=None)).run()

    assert result.success
    assert result.skipped


def test_firebase_failure_masks_token(service_for):
    runner = FailingRunner(secrets=["secret-token"])

    result = service_for(make_facts("master"), runner=runner).run()

    assert not result.success
    assert "firebase use" in result.error
    assert "secret-token" not in result.error
    assert len(runner.commands) == 1
