"""Main CLI entry point."""

import logging

import click
from rojmel.database.factories import create_sqlite_database

# Import and register all commands at module level
from rojmel.cli.commands import (
    project,
    category,
    party,
    add,
    transaction,
    ledger,
    stats,
    attachment,
    user,
)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides ROJMEL_DB_PATH environment variable)",
    envvar="ROJMEL_DB_PATH",
)
@click.option(
    "--project",
    help="Project name or ID to work on (overrides ROJMEL_PROJECT environment variable)",
    envvar="ROJMEL_PROJECT",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="ROJMEL_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, project: str | None, log_level: str):
    """Rojmel - Construction expense ledger.

    Record purchases, payments and other entries against a construction
    project, keep running balances for every supplier and contractor, and
    print party and company ledgers.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["project"] = project
        ctx.call_on_close(db.disconnect)


# Register all commands
project.register_commands(cli)
category.register_commands(cli)
party.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
ledger.register_commands(cli)
stats.register_commands(cli)
attachment.register_commands(cli)
user.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
