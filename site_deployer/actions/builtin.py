# site_deployer/actions/builtin.py
"""Built-in deploy actions"""

import re
import shutil
import subprocess
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import requests

from .base import Action, ActionContext, ActionRegistry
from ..api.exceptions import ActionError
from ..constants import (
    ACTION_BUILD,
    ACTION_CHECK_PAYLOAD_SIZE,
    ACTION_TEST_PWA_SCORE,
    ACTION_REMOVE_SERVICE_WORKER,
    ACTION_REDIRECT_TO_STABLE,
    ACTION_VERIFY_NO_ACTIVE_RC,
    DIST_DIR,
    EXTRA_FILES_DIR,
    FIREBASE_CONFIG_FILE,
    SERVICE_WORKER_MANIFEST,
    SERVICE_WORKER_BACKUP_SUFFIX,
    REDIRECT_RULE_TEMPLATE,
    HTTP_TIMEOUT,
    DEFAULT_TARGET_SITES,
    TARGET_STABLE,
)


class CommandAction(Action):
    """Action that shells out and reports failures as ActionError"""

    def _yarn(self, context: ActionContext, *args: str) -> None:
        try:
            context.runner.yarn(*args)
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            raise ActionError(self.name, context.runner.mask(str(e)))


class BuildAction(CommandAction):
    """Build the app for the target's deploy env"""

    name = ACTION_BUILD

    def run(self, context: ActionContext) -> None:
        self.logger.info(f"Building app (configuration: {context.deploy_env})")
        self._yarn(context, 'build', f'--configuration={context.deploy_env}', '--progress=false')

        # Mode-specific files
        extra_files = context.work_dir / EXTRA_FILES_DIR / context.deploy_env
        if extra_files.is_dir():
            shutil.copytree(extra_files, context.work_dir / DIST_DIR, dirs_exist_ok=True)

        # The opensearch URL must end with `/`
        url = context.deployed_url
        if not url.endswith('/'):
            url += '/'
        self._yarn(context, 'set-opensearch-url', url)


class CheckPayloadSizeAction(CommandAction):
    """Check payload size and upload the numbers"""

    name = ACTION_CHECK_PAYLOAD_SIZE

    def run(self, context: ActionContext) -> None:
        self._yarn(context, 'payload-size')


class CheckPwaScoreAction(CommandAction):
    """Run PWA-score tests against the deployed site"""

    name = ACTION_TEST_PWA_SCORE

    def run(self, context: ActionContext) -> None:
        min_score = context.facts.min_pwa_score
        if min_score is None:
            raise ActionError(self.name, "minimum PWA score is not set")
        self._yarn(context, 'test-pwa-score', context.deployed_url, str(min_score))


class RemoveServiceWorkerAction(Action):
    """Rename the service worker manifest so the worker unregisters itself"""

    name = ACTION_REMOVE_SERVICE_WORKER

    def run(self, context: ActionContext) -> None:
        manifest = context.work_dir / DIST_DIR / SERVICE_WORKER_MANIFEST
        if not manifest.exists():
            raise ActionError(self.name, f"{manifest} does not exist")

        backup = manifest.with_name(manifest.name + SERVICE_WORKER_BACKUP_SUFFIX)
        manifest.rename(backup)
        self.logger.info(f"Renamed {manifest} to {backup.name}")


class RedirectToStableAction(Action):
    """Redirect all non-file requests to the stable site"""

    name = ACTION_REDIRECT_TO_STABLE

    def __init__(self, config: Dict[str, Any] = None):
        super().__init__(config)
        stable_url = self.config.get('stable_url', DEFAULT_TARGET_SITES[TARGET_STABLE]['deployed_url'])
        self.stable_origin = stable_url.rstrip('/')

    @property
    def redirect_rule(self) -> str:
        return REDIRECT_RULE_TEMPLATE.format(origin=self.stable_origin)

    def run(self, context: ActionContext) -> None:
        config_file = context.work_dir / FIREBASE_CONFIG_FILE
        if not config_file.exists():
            raise ActionError(self.name, f"{config_file} does not exist")

        content = config_file.read_text()
        updated, count = re.subn(
            r'([ \t]*)"redirects": \[',
            lambda m: f'{m.group(0)}\n{m.group(1)}  {self.redirect_rule},',
            content
        )
        if count == 0:
            raise ActionError(self.name, f'no "redirects" section in {config_file}')

        config_file.write_text(updated)
        self.logger.info(f"Added redirect rule to {config_file}")


class VerifyNoActiveRcAction(Action):
    """Check that the RC site has no service worker and redirects to stable"""

    name = ACTION_VERIFY_NO_ACTIVE_RC

    def __init__(self, config: Dict[str, Any] = None):
        super().__init__(config)
        stable_url = self.config.get('stable_url', DEFAULT_TARGET_SITES[TARGET_STABLE]['deployed_url'])
        self.stable_origin = stable_url.rstrip('/')

    def _get(self, url: str) -> requests.Response:
        try:
            return requests.get(url, allow_redirects=False, timeout=HTTP_TIMEOUT)
        except requests.exceptions.RequestException as e:
            raise ActionError(self.name, f"Request to '{url}' failed: {e}")

    def run(self, context: ActionContext) -> None:
        deployed_origin = context.deployed_url.rstrip('/')

        # `ngsw.json` must be gone
        ngsw_url = f"{deployed_origin}/{SERVICE_WORKER_MANIFEST}"
        status = self._get(ngsw_url).status_code
        if status != 404:
            raise ActionError(
                self.name,
                f"Expected '{ngsw_url}' to return a status code of '404', but it returned '{status}'."
            )

        # `foo/bar` must be redirected to the same path on the stable site
        foo_bar_url = f"{deployed_origin}/foo/bar?baz=qux"
        expected_location = f"{self.stable_origin}{_path_and_query(foo_bar_url)}"
        response = self._get(foo_bar_url)
        location: Optional[str] = response.headers.get('location')

        if response.status_code != 302:
            raise ActionError(
                self.name,
                f"Expected '{foo_bar_url}' to return a status code of '302', "
                f"but it returned '{response.status_code}'."
            )
        if location != expected_location:
            actual = 'not redirected' if location is None else f"redirected to '{location}'"
            raise ActionError(
                self.name,
                f"Expected '{foo_bar_url}' to be redirected to '{expected_location}', but it was {actual}."
            )


def _path_and_query(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.path}?{parts.query}" if parts.query else parts.path


def default_action_registry(stable_url: Optional[str] = None) -> ActionRegistry:
    """
    Create registry with all built-in actions

    Args:
        stable_url: Public URL of the stable site, used by redirect actions

    Returns:
        ActionRegistry instance
    """
    redirect_config = {'stable_url': stable_url} if stable_url else {}
    return ActionRegistry([
        BuildAction(),
        CheckPayloadSizeAction(),
        CheckPwaScoreAction(),
        RemoveServiceWorkerAction(),
        RedirectToStableAction(redirect_config),
        VerifyNoActiveRcAction(redirect_config),
    ])
