"""Party management commands."""

import click
from rojmel.cli.error_handling import handle_domain_error
from rojmel.cli.formatting import describe_balance, format_money
from rojmel.cli.resolution import resolve_party_or_exit, resolve_project_or_exit
from rojmel.domain.entities import PartyType
from rojmel.domain.party import BALANCE_FILTERS, PartyService
from rojmel.domain.project import ProjectService
from rojmel.utils.amount_parser import parse_amount

PARTY_TYPES = tuple(t.value for t in PartyType)


def _parse_opening_or_exit(ctx, opening_balance: str):
    try:
        return parse_amount(opening_balance)
    except ValueError as e:
        click.echo(f"Error: Invalid opening balance: {e}", err=True)
        ctx.exit(1)


def _currency(ctx, project_id: int) -> str:
    return ProjectService(ctx.obj["db"]).get_project(project_id).currency


@click.group()
def party_group():
    """Manage suppliers, contractors and other parties."""
    pass


@party_group.command("create")
@click.argument("name", metavar="PARTY_NAME")
@click.option("--type", "party_type", type=click.Choice(PARTY_TYPES), default="supplier", show_default=True)
@click.option("--phone", help="Phone number")
@click.option("--address", help="Address")
@click.option(
    "--opening-balance",
    default="0",
    help="Balance before any entry (positive: they owe you, negative: you owe them)",
)
@click.pass_context
def create_party(
    ctx, name: str, party_type: str, phone: str | None, address: str | None, opening_balance: str
):
    """Create a new party.

    Examples:
        rojmel party create "Ramesh Cement" --phone 9876543210
        rojmel party create "Suresh" --type labor --opening-balance -5000
    """
    project_id = resolve_project_or_exit(ctx)
    service = PartyService(ctx.obj["db"])
    opening = _parse_opening_or_exit(ctx, opening_balance)

    try:
        party_id = service.create_party(
            project_id=project_id,
            name=name,
            type=party_type,
            phone=phone,
            address=address,
            opening_balance=opening,
        )
        click.echo(f"Created party '{name.strip()}' (ID: {party_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@party_group.command("list")
@click.option(
    "--filter",
    "balance_filter",
    type=click.Choice(("all",) + BALANCE_FILTERS + PARTY_TYPES),
    default="all",
    show_default=True,
    help="owing: you owe them, owed: they owe you, settled, or a party type",
)
@click.pass_context
def list_parties(ctx, balance_filter: str):
    """List parties with their current balances."""
    project_id = resolve_project_or_exit(ctx)
    service = PartyService(ctx.obj["db"])
    currency = _currency(ctx, project_id)

    parties = service.list_parties(project_id, filter=balance_filter)
    if not parties:
        click.echo("No parties found.")
        return

    click.echo("\nParties:")
    click.echo("-" * 80)
    for p in parties:
        click.echo(
            f"ID: {p.id:3d} | {p.name:24s} | {p.type:10s} | {describe_balance(p.current_balance, currency)}"
        )

    summary = service.outstanding_summary(project_id)
    click.echo("-" * 80)
    click.echo(f"You owe: {format_money(summary.we_owe, currency)}")
    click.echo(f"Owed to you: {format_money(summary.owed_to_us, currency)}")


@party_group.command("show")
@click.argument("party", metavar="PARTY")
@click.pass_context
def show_party(ctx, party: str):
    """Show party details.

    PARTY can be a party name or ID.
    """
    project_id = resolve_project_or_exit(ctx)
    party_id = resolve_party_or_exit(ctx, project_id, party)
    service = PartyService(ctx.obj["db"])
    currency = _currency(ctx, project_id)
    p = service.get_party(party_id)

    click.echo(f"Party: {p.name} (ID: {p.id})")
    click.echo(f"  Type: {p.type}")
    if p.phone:
        click.echo(f"  Phone: {p.phone}")
    if p.address:
        click.echo(f"  Address: {p.address}")
    click.echo(f"  Opening balance: {format_money(p.opening_balance, currency)}")
    click.echo(f"  Current balance: {describe_balance(p.current_balance, currency)}")
    click.echo(f"  Transactions: {ctx.obj['db'].get_party_transaction_count(party_id)}")


@party_group.command("update")
@click.argument("party", metavar="PARTY")
@click.option("--name", help="New name")
@click.option("--type", "party_type", type=click.Choice(PARTY_TYPES), help="New party type")
@click.option("--phone", help="New phone number")
@click.option("--address", help="New address")
@click.option("--opening-balance", help="New opening balance (current balance is recomputed)")
@click.pass_context
def update_party(
    ctx,
    party: str,
    name: str | None,
    party_type: str | None,
    phone: str | None,
    address: str | None,
    opening_balance: str | None,
):
    """Update a party.

    Updates only the fields that are provided.

    Examples:
        rojmel party update "Ramesh Cement" --phone 9123456780
        rojmel party update 3 --opening-balance -12000
    """
    project_id = resolve_project_or_exit(ctx)
    party_id = resolve_party_or_exit(ctx, project_id, party)
    service = PartyService(ctx.obj["db"])
    opening = _parse_opening_or_exit(ctx, opening_balance) if opening_balance is not None else None

    try:
        service.update_party(
            party_id,
            name=name,
            type=party_type,
            phone=phone,
            address=address,
            opening_balance=opening,
        )
        p = service.get_party(party_id)
        click.echo(f"Updated party '{p.name}'")
        click.echo(f"  Current balance: {describe_balance(p.current_balance, _currency(ctx, project_id))}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@party_group.command("delete")
@click.argument("party", metavar="PARTY")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_party(ctx, party: str, yes: bool):
    """Delete a party.

    The party can only be deleted if it has no transactions. Use
    'transaction delete' or 'transaction update --party' first.
    """
    project_id = resolve_project_or_exit(ctx)
    party_id = resolve_party_or_exit(ctx, project_id, party)
    service = PartyService(ctx.obj["db"])
    p = service.get_party(party_id)

    if ctx.obj["db"].get_party_transaction_count(party_id) == 0 and not yes:
        if not click.confirm(f"Are you sure you want to delete party '{p.name}' (ID: {party_id})?"):
            click.echo("Deletion cancelled.")
            return

    try:
        service.delete_party(party_id)
        click.echo(f"Deleted party '{p.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@party_group.command("sync")
@click.argument("party", metavar="PARTY", required=False)
@click.pass_context
def sync_party(ctx, party: str | None):
    """Recompute stored balances from the entries.

    Without PARTY every party of the project is resynced.
    """
    project_id = resolve_project_or_exit(ctx)
    service = PartyService(ctx.obj["db"])
    currency = _currency(ctx, project_id)

    try:
        if party is not None:
            party_id = resolve_party_or_exit(ctx, project_id, party)
            balances = {party_id: service.sync_balance(party_id)}
        else:
            balances = service.balances.sync_project(project_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    for party_id, balance in balances.items():
        click.echo(f"{service.get_party(party_id).name}: {describe_balance(balance, currency)}")
    click.echo(f"Synced {len(balances)} part{'y' if len(balances) == 1 else 'ies'}")


def register_commands(cli):
    """Register party commands with main CLI."""
    cli.add_command(party_group, name="party")
