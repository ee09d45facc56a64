# site_deployer/cli/main.py
"""Main CLI entry point for site-deployer"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ..constants import APP_NAME, LOG_FORMAT, ENV_LOG_LEVEL
from ..core import BranchVersionResolver, ConfigLoader
from ..models import DeployConfig, RepoFacts

# Import all commands
from .commands import (
    plan,
    deploy,
    branches,
)

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.getLevelName(os.environ.get(ENV_LOG_LEVEL, 'WARNING').upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ],
        force=True
    )

    logging.getLogger("urllib3").setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy configuration loading

    Configuration, repository facts and the branch resolver are only
    created when a command first needs them, and then shared for the rest
    of the run.
    """

    def __init__(self, config_path: Optional[Path] = None, project_root: Optional[Path] = None):
        self.config_path = config_path
        self.project_root = project_root or Path.cwd()
        self.verbose: bool = False
        self.debug: bool = False
        self._config: Optional[DeployConfig] = None
        self._facts: Optional[RepoFacts] = None
        self._resolver: Optional[BranchVersionResolver] = None

    @property
    def config(self) -> DeployConfig:
        """Get deployment configuration (lazy loading)

        Raises:
            ConfigError: If the configuration cannot be loaded
        """
        if self._config is None:
            self._config = ConfigLoader(self.project_root).load(self.config_path)
        return self._config

    @property
    def facts(self) -> RepoFacts:
        """Get repository facts from the CI environment"""
        if self._facts is None:
            self._facts = RepoFacts.from_env(os.environ)
        return self._facts

    @property
    def resolver(self) -> BranchVersionResolver:
        """Get branch resolver for the configured remote"""
        if self._resolver is None:
            self._resolver = BranchVersionResolver(remote=self.config.remote)
        return self._resolver


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Configuration file (default: .site-deployer.yaml)')
@click.option('--project-root', type=click.Path(file_okay=False, path_type=Path),
              help='Directory the app is built and deployed from')
@click.pass_context
def cli(ctx, verbose, debug, quiet, config_path, project_root):
    """Site Deployer - Decide where a docs build goes and deploy it

    Classifies the current branch (trunk, release candidate, stable or
    archive) against the version branches on the remote, validates the
    resulting deployment plan and deploys it to Firebase hosting.

    Repository state is read from the CI_* environment variables.
    """
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context(config_path=config_path, project_root=project_root)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug


# Register commands
cli.add_command(plan.plan)
cli.add_command(deploy.deploy)
cli.add_command(branches.branches)


def main():
    """Main entry point for the CLI application"""
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
