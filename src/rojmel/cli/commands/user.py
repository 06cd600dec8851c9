"""User administration commands."""

import click
from rojmel.cli.error_handling import handle_domain_error
from rojmel.cli.resolution import resolve_project_or_exit, resolve_user_or_exit
from rojmel.domain.entities import ProjectRole, UserRole
from rojmel.domain.user import DEFAULT_ASSIGNMENT_ROLE, UserService

USER_ROLES = tuple(r.value for r in UserRole)
PROJECT_ROLES = tuple(r.value for r in ProjectRole)


@click.group()
def user_group():
    """Manage users and their project access."""
    pass


@user_group.command("create")
@click.argument("username")
@click.option("--name", required=True, help="Display name")
@click.option("--email", help="Email address")
@click.option(
    "--role",
    type=click.Choice(USER_ROLES),
    help="Application role (default: superadmin for the first user, user afterwards)",
)
@click.pass_context
def create_user(ctx, username: str, name: str, email: str | None, role: str | None):
    """Create a user.

    Examples:
        rojmel user create anita --name "Anita Shah"
        rojmel user create ravi --name "Ravi" --email ravi@example.com
    """
    service = UserService(ctx.obj["db"])
    try:
        user_id = service.create_user(username=username, name=name, email=email, role=role)
        user = service.get_user(user_id)
        click.echo(f"Created user '{user.username}' (ID: {user_id}, role: {user.role})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List all users."""
    users = UserService(ctx.obj["db"]).list_users()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\nUsers:")
    click.echo("-" * 70)
    for user in users:
        status = "" if user.is_active else " (inactive)"
        click.echo(
            f"ID: {user.id:3d} | {user.username:15s} | {user.name:20s} | {user.role}{status}"
        )


@user_group.command("update")
@click.argument("user", metavar="USER")
@click.option("--name", help="New display name")
@click.option("--email", help="New email address, or empty string to clear")
@click.option("--role", type=click.Choice(USER_ROLES), help="New application role")
@click.option("--active/--inactive", "is_active", default=None, help="Enable or disable the user")
@click.pass_context
def update_user(
    ctx,
    user: str,
    name: str | None,
    email: str | None,
    role: str | None,
    is_active: bool | None,
):
    """Update a user.

    USER can be a username or ID.
    """
    user_id = resolve_user_or_exit(ctx, user)
    try:
        updated = UserService(ctx.obj["db"]).update_user(
            user_id, name=name, email=email, role=role, is_active=is_active
        )
        click.echo(f"Updated user '{updated.username}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@user_group.command("delete")
@click.argument("user", metavar="USER")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_user(ctx, user: str, yes: bool):
    """Delete a user and their project assignments."""
    user_id = resolve_user_or_exit(ctx, user)
    service = UserService(ctx.obj["db"])
    username = service.get_user(user_id).username

    if not yes and not click.confirm(f"Are you sure you want to delete user '{username}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_user(user_id)
        click.echo(f"Deleted user '{username}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@user_group.command("assign")
@click.argument("user", metavar="USER")
@click.argument("project", metavar="PROJECT", required=False)
@click.option(
    "--role",
    type=click.Choice(PROJECT_ROLES),
    default=DEFAULT_ASSIGNMENT_ROLE,
    show_default=True,
    help="Role on the project",
)
@click.pass_context
def assign_project(ctx, user: str, project: str | None, role: str):
    """Give a user access to a project.

    PROJECT can be a project name or ID; defaults to the active project.
    Assigning again changes the role.
    """
    user_id = resolve_user_or_exit(ctx, user)
    project_id = resolve_project_or_exit(ctx, project)
    try:
        UserService(ctx.obj["db"]).assign_project(user_id, project_id, role=role)
        click.echo(f"Assigned project {project_id} to '{user}' as {role}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@user_group.command("unassign")
@click.argument("user", metavar="USER")
@click.argument("project", metavar="PROJECT", required=False)
@click.pass_context
def unassign_project(ctx, user: str, project: str | None):
    """Remove a user's access to a project."""
    user_id = resolve_user_or_exit(ctx, user)
    project_id = resolve_project_or_exit(ctx, project)
    try:
        UserService(ctx.obj["db"]).unassign_project(user_id, project_id)
        click.echo(f"Removed project {project_id} from '{user}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@user_group.command("projects")
@click.argument("user", metavar="USER")
@click.pass_context
def list_user_projects(ctx, user: str):
    """List the projects a user is assigned to."""
    user_id = resolve_user_or_exit(ctx, user)
    assignments = UserService(ctx.obj["db"]).list_user_projects(user_id)
    if not assignments:
        click.echo("No projects assigned.")
        return

    for assignment in assignments:
        click.echo(f"ID: {assignment.project.id:3d} | {assignment.project.name:20s} | {assignment.role}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
