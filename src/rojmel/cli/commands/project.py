"""Project management commands."""

import json

import click
from rojmel.cli.error_handling import handle_domain_error
from rojmel.cli.formatting import format_money
from rojmel.cli.resolution import resolve_project_or_exit
from rojmel.domain.backup import BackupService
from rojmel.domain.project import DEFAULT_BUDGET, DEFAULT_CURRENCY, DEFAULT_DATE_FORMAT, ProjectService
from rojmel.utils.amount_parser import parse_amount


def _parse_budget_or_exit(ctx, budget: str):
    try:
        return parse_amount(budget)
    except ValueError as e:
        click.echo(f"Error: Invalid budget: {e}", err=True)
        ctx.exit(1)


@click.group()
def project_group():
    """Manage projects and their settings."""
    pass


@project_group.command("create")
@click.argument("name", metavar="PROJECT_NAME")
@click.option("--budget", default=str(DEFAULT_BUDGET), show_default=True, help="Project budget")
@click.option("--currency", default=DEFAULT_CURRENCY, show_default=True, help="Currency symbol")
@click.option("--date-format", default=DEFAULT_DATE_FORMAT, show_default=True, help="Display date format")
@click.pass_context
def create_project(ctx, name: str, budget: str, currency: str, date_format: str):
    """Create a new project with the default categories.

    Examples:
        rojmel project create "Site A"
        rojmel project create "Villa" --budget 4500000
    """
    service = ProjectService(ctx.obj["db"])
    budget_amount = _parse_budget_or_exit(ctx, budget)

    try:
        project_id = service.create_project(
            name=name, budget=budget_amount, currency=currency, date_format=date_format
        )
        click.echo(f"Created project '{name}' (ID: {project_id})")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@project_group.command("list")
@click.pass_context
def list_projects(ctx):
    """List all projects."""
    service = ProjectService(ctx.obj["db"])

    projects = service.list_projects()
    if not projects:
        click.echo("No projects found.")
        return

    click.echo("\nProjects:")
    click.echo("-" * 60)
    for proj in projects:
        click.echo(
            f"ID: {proj.id:3d} | {proj.name:20s} | Budget: {format_money(proj.budget, proj.currency)}"
        )


@project_group.command("show")
@click.argument("project", metavar="PROJECT", required=False)
@click.pass_context
def show_project(ctx, project: str | None):
    """Show project settings.

    PROJECT can be a project name or ID; defaults to the active project.
    """
    project_id = resolve_project_or_exit(ctx, project)
    proj = ProjectService(ctx.obj["db"]).get_project(project_id)

    click.echo(f"Project: {proj.name} (ID: {proj.id})")
    click.echo(f"  Budget: {format_money(proj.budget, proj.currency)}")
    click.echo(f"  Currency: {proj.currency}")
    click.echo(f"  Date format: {proj.date_format}")


@project_group.command("settings")
@click.argument("project", metavar="PROJECT", required=False)
@click.option("--name", help="New project name")
@click.option("--budget", help="New budget")
@click.option("--currency", help="New currency symbol")
@click.option("--date-format", help="New display date format")
@click.pass_context
def update_settings(
    ctx,
    project: str | None,
    name: str | None,
    budget: str | None,
    currency: str | None,
    date_format: str | None,
):
    """Update project settings.

    Examples:
        rojmel project settings "Site A" --budget 3000000
        rojmel --project "Site A" project settings --currency "Rs"
    """
    project_id = resolve_project_or_exit(ctx, project)
    service = ProjectService(ctx.obj["db"])
    budget_amount = _parse_budget_or_exit(ctx, budget) if budget is not None else None

    try:
        proj = service.update_settings(
            project_id,
            name=name,
            budget=budget_amount,
            currency=currency,
            date_format=date_format,
        )
        click.echo(f"Updated project '{proj.name}'")
        click.echo(f"  Budget: {format_money(proj.budget, proj.currency)}")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@project_group.command("delete")
@click.argument("project", metavar="PROJECT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_project(ctx, project: str, yes: bool):
    """Delete a project with all its parties, entries and categories."""
    project_id = resolve_project_or_exit(ctx, project)
    service = ProjectService(ctx.obj["db"])
    proj = service.get_project(project_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete project '{proj.name}' and all its data?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_project(project_id)
        click.echo(f"Deleted project '{proj.name}'")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@project_group.command("export")
@click.argument("project", metavar="PROJECT", required=False)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    help="File to write the JSON backup to (default: standard output)",
)
@click.pass_context
def export_project(ctx, project: str | None, output: str | None):
    """Write a JSON backup of a project.

    Examples:
        rojmel project export "Site A" -o site_a_backup.json
    """
    project_id = resolve_project_or_exit(ctx, project)
    try:
        data = BackupService(ctx.obj["db"]).export_project(project_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output is None:
        click.echo(text)
        return

    with open(output, "w", encoding="utf-8") as f:
        f.write(text + "\n")
    click.echo(
        f"Exported {len(data['parties'])} parties and {len(data['transactions'])} "
        f"transactions to {output}"
    )


@project_group.command("import")
@click.argument("backup", metavar="BACKUP_FILE", type=click.File("r", encoding="utf-8"))
@click.argument("project", metavar="PROJECT", required=False)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def import_project(ctx, backup, project: str | None, yes: bool):
    """Replace a project's data with a JSON backup.

    Categories, parties and transactions of the project are replaced and
    every party balance is recomputed. The project keeps its name.

    Examples:
        rojmel project import site_a_backup.json "Site A" --yes
    """
    project_id = resolve_project_or_exit(ctx, project)
    proj = ProjectService(ctx.obj["db"]).get_project(project_id)

    try:
        data = json.load(backup)
    except json.JSONDecodeError as e:
        click.echo(f"Error: Invalid backup file: {e}", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"This replaces all parties and transactions of '{proj.name}'. Continue?"
    ):
        click.echo("Import cancelled.")
        return

    try:
        counts = BackupService(ctx.obj["db"]).import_project(project_id, data)
        click.echo(
            f"Imported {counts['parties']} parties and {counts['transactions']} "
            f"transactions into '{proj.name}'"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group, name="project")
