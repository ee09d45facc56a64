"""Tests for the deployment planner"""

import pytest

from site_deployer.api.exceptions import PolicyAmbiguityError, ResolutionError
from site_deployer.core.branch_resolver import BranchVersionResolver
from site_deployer.core.planner import DEFAULT_RULES, DeploymentPlanner, PlanningContext
from site_deployer.models import DeployConfig, TargetKind
from site_deployer.utils.version_utils import VersionKey

from conftest import FakeRemote, make_facts, sha_for


@pytest.fixture
def plan_for(config, resolver, registry_for):
    """Plan a run for the given facts against the fake remote"""
    def plan(facts, planner_config=None, branch_resolver=None):
        version = VersionKey.from_branch(facts.current_branch)
        registry = registry_for(version.major if version else None)
        planner = DeploymentPlanner(planner_config or config, registry)
        return planner.plan(facts, branch_resolver or resolver)
    return plan


def names(plan):
    return [target.name for target in plan]


def test_rules_are_evaluated_in_fixed_order():
    assert [rule.name for rule in DEFAULT_RULES] == [
        'canonical-repository',
        'pull-request',
        'stale-commit',
        'trunk',
        'release-candidate',
        'stable',
        'version-branch',
        'most-recent-minor',
        'older-than-stable',
        'archive',
    ]


class TestSkipRules:

    def test_fork_is_skipped_without_querying_remote(self, plan_for, fake_remote):
        plan = plan_for(make_facts(repo_owner="someone"))

        assert len(plan) == 1
        assert plan[0].kind == TargetKind.SKIPPED
        assert plan[0].reason == "Skipping deploy because this is not angular/angular."
        assert fake_remote.calls == []

    def test_pull_request_is_skipped(self, plan_for, fake_remote):
        plan = plan_for(make_facts(is_pull_request=True))

        assert names(plan) == ["skipped"]
        assert "PR build" in plan[0].reason
        assert fake_remote.calls == []

    def test_stale_commit_is_skipped(self, plan_for):
        plan = plan_for(make_facts("master", current_commit="0" * 40))

        assert names(plan) == ["skipped"]
        assert plan[0].reason == (
            f"Skipping deploy because {'0' * 40} is not the latest commit ({sha_for('master')})."
        )

    def test_stale_check_precedes_branch_classification(self, plan_for):
        plan = plan_for(make_facts("12.2.x", current_commit="0" * 40))

        assert names(plan) == ["skipped"]

    def test_missing_branch_on_remote_is_an_error(self, plan_for):
        with pytest.raises(ResolutionError):
            plan_for(make_facts("gone"))

    def test_canonical_repository_is_configurable(self, plan_for):
        config = DeployConfig(repository="someone/docs")
        plan = plan_for(make_facts("master", repo_owner="someone", repo_name="docs"),
                        planner_config=config)

        assert names(plan) == ["next"]


class TestTrunk:

    def test_master_deploys_next(self, plan_for):
        plan = plan_for(make_facts("master"))

        assert names(plan) == ["next"]
        assert plan[0].deploy_env == "next"
        assert plan[0].site_id == "next-angular-io-site"
        assert plan[0].deployed_url == "https://next.angular.io/"

    @pytest.mark.parametrize("stable_branch", ["12.2.x", "11.2.x", "master"])
    def test_master_deploys_next_regardless_of_stable(self, plan_for, stable_branch):
        assert names(plan_for(make_facts("master", stable_branch=stable_branch))) == ["next"]

    def test_strict_mode_rejects_trunk_that_is_also_stable(self, plan_for):
        config = DeployConfig(strict=True)

        with pytest.raises(PolicyAmbiguityError) as exc_info:
            plan_for(make_facts("master", stable_branch="master"), planner_config=config)

        assert exc_info.value.rule == "trunk"
        assert "'stable'" in str(exc_info.value)


class TestReleaseCandidate:

    @pytest.fixture
    def rc_resolver(self, remote_branches):
        remote_branches["13.0.x"] = sha_for("13.0.x")
        return BranchVersionResolver(query=FakeRemote(remote_branches).query)

    def test_rc_branch_deploys_rc(self, plan_for, rc_resolver):
        plan = plan_for(make_facts("13.0.x"), branch_resolver=rc_resolver)

        assert names(plan) == ["rc"]
        assert plan[0].site_id == "rc-angular-io-site"

    def test_stable_with_active_rc_deploys_stable_only(self, plan_for, rc_resolver):
        plan = plan_for(make_facts("12.2.x"), branch_resolver=rc_resolver)

        assert names(plan) == ["stable"]
        assert plan[0].site_id == "v12-angular-io-site"
        assert plan[0].deployed_url == "https://angular.io/"

    def test_higher_major_than_stable_that_is_not_rc_is_skipped(self, plan_for, remote_branches):
        remote_branches["13.0.x"] = sha_for("13.0.x")
        remote_branches["14.0.x"] = sha_for("14.0.x")
        resolver = BranchVersionResolver(query=FakeRemote(remote_branches).query)

        plan = plan_for(make_facts("13.0.x"), branch_resolver=resolver)

        assert names(plan) == ["skipped"]
        assert "equal or higher major version" in plan[0].reason


class TestStable:

    def test_no_active_rc_also_redeploys_stable_to_rc_site(self, plan_for):
        plan = plan_for(make_facts("12.2.x"))

        assert names(plan) == ["stable", "stable-redeployed-as-rc"]
        stable, redeployed = plan
        assert stable.kind == TargetKind.PRIMARY
        assert redeployed.kind == TargetKind.SECONDARY
        assert redeployed.deploy_env == stable.deploy_env == "stable"
        assert redeployed.site_id == "rc-angular-io-site"
        assert [action.name for action in redeployed.pre_actions] == [
            "remove-service-worker", "redirect-to-stable"
        ]


class TestArchive:

    def test_most_recent_minor_of_older_major_is_archived(self, plan_for):
        plan = plan_for(make_facts("11.2.x"))

        assert names(plan) == ["archive"]
        assert plan[0].deploy_env == "archive"
        assert plan[0].site_id == "v11-angular-io-site"
        assert plan[0].deployed_url == "https://v11.angular.io/"

    def test_superseded_minor_is_skipped(self, plan_for):
        plan = plan_for(make_facts("11.0.x"))

        assert names(plan) == ["skipped"]
        assert 'more recent branch with the same major version: "11.2.x"' in plan[0].reason

    def test_superseded_minor_within_stable_major_is_skipped(self, plan_for):
        plan = plan_for(make_facts("12.1.x"))

        assert names(plan) == ["skipped"]
        assert '"12.2.x"' in plan[0].reason

    def test_superseded_by_double_digit_minor(self, plan_for):
        branches = {name: sha_for(name) for name in ["master", "2.3.x", "2.4.x", "2.10.x", "3.0.x"]}
        resolver = BranchVersionResolver(query=FakeRemote(branches).query)

        plan = plan_for(make_facts("2.4.x", stable_branch="3.0.x"), branch_resolver=resolver)
        assert names(plan) == ["skipped"]

        plan = plan_for(make_facts("2.10.x", stable_branch="3.0.x"), branch_resolver=resolver)
        assert names(plan) == ["archive"]

    def test_older_minor_with_newer_sibling_is_skipped(self, plan_for):
        branches = {name: sha_for(name) for name in ["2.3.x", "2.4.x", "3.0.x"]}
        resolver = BranchVersionResolver(query=FakeRemote(branches).query)

        plan = plan_for(make_facts("2.3.x", stable_branch="3.0.x"), branch_resolver=resolver)

        assert names(plan) == ["skipped"]

    def test_non_version_branch_is_skipped(self, plan_for):
        plan = plan_for(make_facts("feature-x"))

        assert names(plan) == ["skipped"]
        assert "nor a version branch" in plan[0].reason


class TestRegistryErrors:

    def test_missing_registry_target_raises(self, config, resolver, registry_for):
        registry = dict(registry_for(12))
        del registry["stable-redeployed-as-rc"]
        planner = DeploymentPlanner(config, registry)

        with pytest.raises(PolicyAmbiguityError) as exc_info:
            planner.plan(make_facts("12.2.x"), resolver)

        assert exc_info.value.rule == "stable"
        assert "stable-redeployed-as-rc" in str(exc_info.value)

    def test_no_rule_applies(self, config, resolver, registry_for):
        planner = DeploymentPlanner(config, registry_for(), rules=[])

        with pytest.raises(PolicyAmbiguityError, match="No deployment rule"):
            planner.plan(make_facts("master"), resolver)


def test_planning_context_rc_branch(config, resolver, registry_for):
    ctx = PlanningContext(make_facts("11.2.x"), config, resolver, registry_for(11))

    assert ctx.most_recent_minor_branch == "12.2.x"
    assert ctx.rc_branch is None
    assert ctx.most_recent_minor_for_major == "11.2.x"
    assert ctx.current_major == 11
    assert ctx.stable_major == 12


def test_rules_can_be_evaluated_individually(config, resolver, registry_for):
    ctx = PlanningContext(make_facts("11.2.x"), config, resolver, registry_for(11))
    applies = {rule.name: rule.applies(ctx) for rule in DEFAULT_RULES}

    assert applies == {
        'canonical-repository': False,
        'pull-request': False,
        'stale-commit': False,
        'trunk': False,
        'release-candidate': False,
        'stable': False,
        'version-branch': False,
        'most-recent-minor': False,
        'older-than-stable': False,
        'archive': True,
    }


def test_malformed_stable_branch_is_a_resolution_error(plan_for):
    with pytest.raises(ResolutionError):
        plan_for(make_facts("11.2.x", stable_branch="release"))
