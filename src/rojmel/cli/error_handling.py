"""CLI error handling helpers."""

import logging

import click

from rojmel.domain.errors import DependencyError, DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print ``Error: <message>`` to stderr and exit with status 1.

    Blocked deletes get a hint on how to proceed.
    """
    logger.warning("%s rejected: %s", ctx.command_path, error)
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, DependencyError):
        click.echo("Delete or reassign its transactions first.", err=True)
    ctx.exit(1)
