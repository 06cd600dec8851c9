"""Transaction management commands."""

import click
from rojmel.cli.date_filters import period_flags_from, period_options, resolve_cli_date_range
from rojmel.cli.error_handling import handle_domain_error
from rojmel.cli.formatting import format_date, format_money
from rojmel.cli.resolution import resolve_party_or_exit, resolve_project_or_exit
from rojmel.domain.classifier import entry_kind
from rojmel.domain.entities import EntryKind
from rojmel.domain.party import PartyService
from rojmel.domain.project import ProjectService
from rojmel.domain.transaction import TransactionService
from rojmel.utils.amount_parser import parse_amount
from rojmel.utils.date_parser import parse_date

ENTRY_KINDS = tuple(k.value for k in EntryKind)


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@period_options
@click.option("--party", help="Party name or ID")
@click.option("--category", help="Category key")
@click.option("--kind", type=click.Choice(ENTRY_KINDS), help="Only purchases, payments, income or expenses")
@click.option("--search", "-s", help="Text to find in description, party name or voucher number")
@click.option("--verbose", "-v", is_flag=True, help="Show all columns including reference and notes")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    party: str | None,
    category: str | None,
    kind: str | None,
    search: str | None,
    verbose: bool,
    **period_params,
):
    """View transactions with optional filters, newest first."""
    db = ctx.obj["db"]
    project_id = resolve_project_or_exit(ctx)
    party_id = resolve_party_or_exit(ctx, project_id, party) if party is not None else None
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(period_params),
    )

    transactions = TransactionService(db).list_transactions(
        project_id=project_id,
        start_date=start,
        end_date=end,
        party_id=party_id,
        category=category,
        kind=kind,
        search=search,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    project = ProjectService(db).get_project(project_id)
    party_names = {p.id: p.name for p in PartyService(db).list_parties(project_id)}

    for txn in transactions:
        amount = txn.purchase_amount or txn.credit or txn.debit
        line = (
            f"{txn.id:4d} | {format_date(txn.date, project.date_format)} | "
            f"{(txn.voucher_no or ''):14s} | {entry_kind(txn).value:8s} | "
            f"{party_names.get(txn.party_id, ''):20s} | "
            f"{format_money(amount, project.currency):>16s} | {txn.description or ''}"
        )
        if verbose:
            details = [
                f"category={txn.category or ''}",
                f"sub={txn.sub_category or ''}",
                f"mode={txn.payment_mode or ''}",
                f"ref={txn.reference or ''}",
                f"notes={txn.notes or ''}",
            ]
            if txn.has_attachment:
                details.append("attachment")
            line += " | " + " ".join(details)
        click.echo(line)

    click.echo(f"\n{len(transactions)} transaction(s)")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--date", "date_str", help="Entry date (YYYY-MM-DD, DD-MM-YYYY or relative)")
@click.option("--party", help="Party name or ID, or empty string to detach")
@click.option("--purchase-amount", help="Purchase amount (owed to the party)")
@click.option("--credit", help="Amount paid out")
@click.option("--debit", help="Amount received")
@click.option("--voucher", help="Voucher number")
@click.option("--description", help="Description")
@click.option("--category", help="Category key")
@click.option("--sub-category", help="Sub-category")
@click.option("--mode", "payment_mode", help="Payment mode")
@click.option("--reference", help="Reference number")
@click.option("--notes", help="Notes")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    date_str: str | None,
    party: str | None,
    purchase_amount: str | None,
    credit: str | None,
    debit: str | None,
    voucher: str | None,
    description: str | None,
    category: str | None,
    sub_category: str | None,
    payment_mode: str | None,
    reference: str | None,
    notes: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Party balances affected by
    the change are recomputed. Use --party "" to detach the entry.

    Examples:
        rojmel transaction update 12 --purchase-amount 26000
        rojmel transaction update 12 --party "Suresh Steel"
    """
    service = TransactionService(ctx.obj["db"])
    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    # Parse date if provided
    txn_date = None
    if date_str is not None:
        try:
            txn_date = parse_date(date_str)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    # Parse amounts if provided
    amounts = {}
    for name, value in (("purchase_amount", purchase_amount), ("credit", credit), ("debit", debit)):
        if value is None:
            continue
        try:
            amounts[name] = parse_amount(value)
        except ValueError as e:
            click.echo(f"Error: Invalid {name.replace('_', ' ')}: {e}", err=True)
            ctx.exit(1)

    party_id = None
    clear_party = party == ""
    if party:
        party_id = resolve_party_or_exit(ctx, txn.project_id, party)

    try:
        service.update_transaction(
            transaction_id,
            date=txn_date,
            party_id=party_id,
            clear_party=clear_party,
            voucher_no=voucher,
            description=description,
            category=category,
            sub_category=sub_category,
            payment_mode=payment_mode,
            reference=reference,
            notes=notes,
            **amounts,
        )
        click.echo(f"Updated transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction and recompute its party's balance."""
    service = TransactionService(ctx.obj["db"])
    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
