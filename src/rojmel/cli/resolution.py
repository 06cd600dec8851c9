"""CLI helpers for resolving projects, parties and users."""

from __future__ import annotations

import click
from rojmel.domain.party import PartyService
from rojmel.domain.project import ProjectService
from rojmel.domain.user import UserService
from rojmel.utils.party_resolver import resolve_party
from rojmel.utils.project_resolver import resolve_project
from rojmel.utils.user_resolver import resolve_user


def resolve_project_or_exit(ctx: click.Context, project: str | int | None = None) -> int:
    """Resolve the project to work on, or exit with a CLI error.

    Uses ``project`` when given, else the root ``--project`` option
    (or ROJMEL_PROJECT). If neither is set and exactly one project exists,
    that project is used.
    """
    project_service = ProjectService(ctx.obj["db"])
    project = project if project is not None else ctx.obj.get("project")

    if project is None:
        projects = project_service.list_projects()
        if len(projects) == 1:
            return projects[0].id
        if not projects:
            click.echo("Error: No projects found. Create one with 'rojmel project create NAME'.", err=True)
        else:
            click.echo("Error: Several projects exist; choose one with --project or ROJMEL_PROJECT.", err=True)
        ctx.exit(1)

    try:
        return resolve_project(project_service, project)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_party_or_exit(ctx: click.Context, project_id: int, party: str | int) -> int:
    """Resolve party name or ID within a project, or exit with a CLI error."""
    try:
        return resolve_party(PartyService(ctx.obj["db"]), project_id, party)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_user_or_exit(ctx: click.Context, user: str | int) -> int:
    """Resolve username or ID, or exit with a CLI error."""
    try:
        return resolve_user(UserService(ctx.obj["db"]), user)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
