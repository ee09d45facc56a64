"""Branches command implementation"""

import sys

import click
from rich import box
from rich.console import Console
from rich.table import Table

from ...api.exceptions import SiteDeployerError

console = Console()


@click.command()
@click.option('--major', type=int, help='Only consider branches of this major version')
@click.option('--branch', help='Also show the latest commit of this branch')
@click.pass_context
def branches(ctx, major, branch):
    """Show version branch information from the remote

    Examples:

        # Most recent minor branch overall
        site-deployer branches

        # Most recent minor branch of major 11 and the tip of master
        site-deployer branches --major 11 --branch master
    """
    resolver = ctx.obj.resolver

    try:
        table = Table(title=f"Remote: {resolver.remote}", box=box.ROUNDED)
        table.add_column("Query", style="cyan")
        table.add_column("Result", style="green")

        table.add_row("Most recent minor branch", resolver.most_recent_minor_branch() or "-")

        if major is not None:
            table.add_row(
                f"Most recent minor branch (v{major})",
                resolver.most_recent_minor_branch(major) or "-"
            )

        if branch:
            table.add_row(f"Latest commit on {branch}", resolver.latest_commit(branch))

        console.print(table)

    except SiteDeployerError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
