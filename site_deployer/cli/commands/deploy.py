"""Deploy command implementation"""

import sys

import click
from rich.console import Console

from ..utils.output import format_facts, format_target, format_deploy_result
from ...api.exceptions import SiteDeployerError, ValidationError
from ...models import list_target_names
from ...services import DeployService

console = Console()


@click.command()
@click.option('--dry-run', is_flag=True, help='Compute and validate the plan without deploying')
@click.pass_context
def deploy(ctx, dry_run):
    """Build and deploy the app to the targets of the plan

    For every target of the (validated) plan, runs the pre-deploy actions,
    deploys to the target's Firebase hosting site and runs the post-deploy
    actions. A skipped plan deploys nothing.

    Examples:

        # Deploy from CI
        site-deployer deploy

        # Show what would be deployed
        site-deployer deploy --dry-run
    """
    try:
        service = DeployService(
            ctx.obj.facts,
            config=ctx.obj.config,
            resolver=ctx.obj.resolver,
            work_dir=ctx.obj.project_root
        )
        deployment_plan = service.compute_plan()
        service.validate(deployment_plan)

        format_facts(ctx.obj.facts)
        console.print(
            f"Deployments ({len(deployment_plan)}): {list_target_names(deployment_plan)}"
        )

        def show_target(index, total, target):
            format_target(target, index, total, ctx.obj.facts.current_commit)

        result = service.run(deployment_plan, dry_run=dry_run, on_target=show_target)
        format_deploy_result(result)

        if not result.success:
            sys.exit(1)

    except ValidationError as e:
        console.print(f"[red]Invalid deployment plan ({e.invariant}):[/red] {e}")
        sys.exit(1)
    except SiteDeployerError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
