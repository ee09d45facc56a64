# site_deployer/cli/utils/output.py
"""Output formatting utilities"""

import json
from typing import Any, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ...constants import EMOJI_SUCCESS, EMOJI_ERROR
from ...models import DeployResult, RepoFacts, TargetDescriptor, serialize_actions

console = Console()

KIND_STYLES = {
    "primary": "green",
    "secondary": "cyan",
    "skipped": "yellow",
}


def format_facts(facts: RepoFacts) -> None:
    """Display repository facts (token masked)"""
    table = Table(title="Repository", box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Repository", facts.repo_slug)
    table.add_row("Git branch", facts.current_branch or "-")
    table.add_row("Git commit", facts.current_commit or "-")
    table.add_row("Stable branch", facts.stable_branch or "-")
    table.add_row("Pull request", "yes" if facts.is_pull_request else "no")

    console.print(table)


def format_target(target: TargetDescriptor, index: int, total: int,
                  current_commit: Optional[str] = None) -> None:
    """Display one deployment of a plan"""
    title = f"Deployment {index + 1} of {total}: {target.display_name}"

    if target.is_skipped:
        console.print(Panel(target.reason or "", title=title, border_style="yellow"))
        return

    lines = [
        f"[bold]Build/deploy mode   :[/bold] {target.deploy_env}",
        f"[bold]Firebase project    :[/bold] {target.project_id}",
        f"[bold]Firebase site       :[/bold] {target.site_id}",
        f"[bold]Pre-deploy actions  :[/bold] {serialize_actions(target.pre_actions)}",
        f"[bold]Post-deploy actions :[/bold] {serialize_actions(target.post_actions)}",
        f"[bold]Deployment URLs     :[/bold] {target.deployed_url}",
        f"                      https://{target.site_id}.web.app/",
    ]
    if current_commit:
        lines.insert(0, f"[bold]Git commit          :[/bold] {current_commit}")

    style = KIND_STYLES.get(target.kind_value, "white")
    console.print(Panel("\n".join(lines), title=title, border_style=style))


def format_plan(plan: Sequence[TargetDescriptor], title: str = "Deployment Plan") -> None:
    """Display a deployment plan as a table"""
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("#", style="dim")
    table.add_column("Target", style="bold")
    table.add_column("Kind")
    table.add_column("Mode")
    table.add_column("Site")
    table.add_column("URL / Reason")

    for index, target in enumerate(plan):
        style = KIND_STYLES.get(target.kind_value, "white")
        kind = f"[{style}]{target.kind_value}[/{style}]"

        if target.is_skipped:
            table.add_row(str(index + 1), target.display_name, kind, "-", "-", target.reason or "")
        else:
            table.add_row(
                str(index + 1),
                target.display_name,
                kind,
                target.deploy_env or "-",
                target.site_id or "-",
                target.deployed_url or "-"
            )

    console.print(table)


def format_deploy_result(result: DeployResult) -> None:
    """Format and display deploy result"""
    if not result.success:
        lines = [f"[red]{EMOJI_ERROR} Deploy failed:[/red] {result.error}"]
        if result.deployed_targets:
            lines.append("")
            lines.append(f"[yellow]Already deployed: {', '.join(result.deployed_targets)}[/yellow]")
        console.print(Panel("\n".join(lines), title="Deploy Error", border_style="red"))
        return

    if result.skipped:
        console.print(Panel(
            f"[yellow]Nothing deployed.[/yellow]\n{result.skipped_reason}",
            title="Deploy Skipped",
            border_style="yellow"
        ))
        return

    if result.dry_run:
        message = "[cyan]Dry run: no deploy actions were executed.[/cyan]"
    else:
        message = (
            f"[green]{EMOJI_SUCCESS}[/green] Deployment completed successfully!\n\n"
            f"[bold]Targets:[/bold] {', '.join(result.deployed_targets)}\n"
            f"[bold]Duration:[/bold] {result.duration:.1f}s"
        )
    console.print(Panel(message, title="Deploy Result", border_style="green"))


def format_json(data: Any, title: Optional[str] = None) -> None:
    """Format and display JSON data with syntax highlighting"""
    json_str = json.dumps(data, indent=2, default=str)
    syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)

    if title:
        console.print(Panel(syntax, title=title, border_style="blue"))
    else:
        console.print(syntax)
