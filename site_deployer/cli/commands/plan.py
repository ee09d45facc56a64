"""Plan command implementation"""

import sys

import click
from rich.console import Console

from ..utils.output import format_facts, format_plan, format_json
from ...api.exceptions import SiteDeployerError, ValidationError
from ...services import DeployService

console = Console()


@click.command()
@click.option('--json', 'as_json', is_flag=True, help='Print the plan as JSON')
@click.pass_context
def plan(ctx, as_json):
    """Show where the current build would be deployed

    Computes the deployment plan for the branch and commit in the CI
    environment and checks it for consistency. Nothing is built or
    deployed.

    Examples:

        # Show the plan for the current CI build
        site-deployer plan

        # Machine-readable output
        site-deployer plan --json
    """
    try:
        service = DeployService(
            ctx.obj.facts,
            config=ctx.obj.config,
            resolver=ctx.obj.resolver,
            work_dir=ctx.obj.project_root
        )
        deployment_plan = service.compute_plan()
        validation = service.validate(deployment_plan)

        if as_json:
            format_json([target.to_dict() for target in deployment_plan])
        else:
            format_facts(ctx.obj.facts)
            format_plan(deployment_plan)

        if ctx.obj.verbose and not as_json:
            console.print(str(validation))

    except ValidationError as e:
        console.print(f"[red]Invalid deployment plan ({e.invariant}):[/red] {e}")
        sys.exit(1)
    except SiteDeployerError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
