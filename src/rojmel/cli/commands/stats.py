"""Project statistics command."""

import click
from rojmel.cli.error_handling import handle_domain_error
from rojmel.cli.formatting import format_money
from rojmel.cli.resolution import resolve_project_or_exit
from rojmel.domain.category import CategoryService
from rojmel.domain.project import ProjectService
from rojmel.domain.report import DEFAULT_SUBCATEGORY_LIMIT, ReportService


@click.command("stats")
@click.option("--monthly", is_flag=True, help="Include the month-by-month breakdown")
@click.option("--subcategories", is_flag=True, help="Include the top sub-categories by spend")
@click.option(
    "--limit",
    type=int,
    default=DEFAULT_SUBCATEGORY_LIMIT,
    show_default=True,
    help="Number of sub-categories to show",
)
@click.pass_context
def stats(ctx, monthly: bool, subcategories: bool, limit: int):
    """Show budget usage and spending for the project.

    Examples:
        rojmel stats
        rojmel stats --monthly --subcategories
    """
    db = ctx.obj["db"]
    project_id = resolve_project_or_exit(ctx)
    project = ProjectService(db).get_project(project_id)
    service = ReportService(db)

    def money(amount) -> str:
        return format_money(amount, project.currency)

    try:
        project_stats = service.project_stats(project_id)
        outstanding = service.outstanding_summary(project_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Project: {project.name}")
    click.echo("-" * 60)
    click.echo(f"Spent:     {money(project_stats.total_spent)}")
    click.echo(f"Received:  {money(project_stats.total_received)}")
    click.echo(f"Budget:    {money(project_stats.budget)}")
    click.echo(f"Remaining: {money(project_stats.remaining)}")
    click.echo(f"Used:      {project_stats.percent_used}%")
    click.echo(f"You owe:     {money(outstanding.we_owe)}")
    click.echo(f"Owed to you: {money(outstanding.owed_to_us)}")

    if project_stats.category_wise:
        names = {c.key: c.name for c in CategoryService(db).list_categories(project_id)}
        click.echo("\nBy category:")
        ranked = sorted(project_stats.category_wise.items(), key=lambda item: item[1], reverse=True)
        for key, total in ranked:
            click.echo(f"  {names.get(key, key):24s} {money(total):>16s}")

    if monthly:
        click.echo("\nMonthly:")
        click.echo(f"  {'Month':8s} {'Spent':>16s} {'Received':>16s} {'Net':>16s}")
        for row in service.monthly_breakdown(project_id):
            net = row.received - row.spent
            click.echo(f"  {row.month:8s} {money(row.spent):>16s} {money(row.received):>16s} {money(net):>16s}")

    if subcategories:
        click.echo("\nTop sub-categories:")
        for row in service.subcategory_breakdown(project_id, limit=limit):
            label = f"{row.category or '-'} > {row.sub_category}"
            click.echo(f"  {label:32s} {money(row.total):>16s}")


def register_commands(cli):
    """Register stats command with main CLI."""
    cli.add_command(stats)
