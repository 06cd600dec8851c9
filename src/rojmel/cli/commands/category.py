"""Category commands."""

import click
from rojmel.cli.resolution import resolve_project_or_exit
from rojmel.domain.category import CategoryService


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List categories with their sub-categories."""
    project_id = resolve_project_or_exit(ctx)
    categories = CategoryService(ctx.obj["db"]).list_categories(project_id)

    if not categories:
        click.echo("No categories found.")
        return

    for cat in categories:
        icon = f"{cat.icon} " if cat.icon else ""
        click.echo(f"{icon}{cat.name} [{cat.key}]")
        if cat.subcategories:
            click.echo(f"  {', '.join(cat.subcategories)}")


@category_group.command("create")
@click.argument("key")
@click.option("--name", help="Display name (defaults to the key)")
@click.option("--icon", help="Icon shown next to the name")
@click.option("--sub", "subcategories", multiple=True, help="Sub-category (repeatable)")
@click.pass_context
def create_category(ctx, key: str, name: str | None, icon: str | None, subcategories: tuple[str, ...]):
    """Create a category.

    Examples:
        rojmel category create finishing --name "Finishing" --sub Polish --sub Glass
    """
    project_id = resolve_project_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])

    try:
        service.create_category(
            project_id, key=key, name=name, icon=icon, subcategories=subcategories
        )
        click.echo(f"Created category '{key.strip().lower()}'")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@category_group.command("add-sub")
@click.argument("key")
@click.argument("name")
@click.pass_context
def add_subcategory(ctx, key: str, name: str):
    """Add a sub-category to category KEY."""
    project_id = resolve_project_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])

    try:
        cat = service.add_subcategory(project_id, key, name)
        click.echo(f"{cat.name}: {', '.join(cat.subcategories)}")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
