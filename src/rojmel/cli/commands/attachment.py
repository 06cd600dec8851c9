"""Receipt attachment commands."""

from pathlib import Path

import click
from rojmel.cli.error_handling import handle_domain_error
from rojmel.domain.attachment import AttachmentService


@click.group()
def attachment_group():
    """Attach receipt images to transactions."""
    pass


@attachment_group.command("add")
@click.argument("transaction_id", type=int)
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def add_attachment(ctx, transaction_id: int, file_path: Path):
    """Attach FILE_PATH to a transaction, replacing any existing attachment."""
    service = AttachmentService(ctx.obj["db"])

    try:
        service.attach(transaction_id, file_path.read_bytes())
        click.echo(f"Attached '{file_path.name}' to transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@attachment_group.command("show")
@click.argument("transaction_id", type=int)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write the attachment to this file",
)
@click.pass_context
def show_attachment(ctx, transaction_id: int, output: Path | None):
    """Show or export the attachment of a transaction."""
    service = AttachmentService(ctx.obj["db"])

    try:
        data = service.get(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if data is None:
        click.echo(f"Transaction {transaction_id} has no attachment.")
        return
    if output is None:
        click.echo(f"Transaction {transaction_id} has an attachment of {len(data)} bytes.")
        return
    output.write_bytes(data)
    click.echo(f"Wrote {len(data)} bytes to {output}")


@attachment_group.command("remove")
@click.argument("transaction_id", type=int)
@click.pass_context
def remove_attachment(ctx, transaction_id: int):
    """Remove the attachment of a transaction."""
    service = AttachmentService(ctx.obj["db"])

    try:
        service.remove(transaction_id)
        click.echo(f"Removed attachment from transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register attachment commands with main CLI."""
    cli.add_command(attachment_group, name="attachment")
