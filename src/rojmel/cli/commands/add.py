"""Entry form commands: purchase, payment and generic income/expense."""

import click
from rojmel.cli.error_handling import handle_domain_error
from rojmel.cli.formatting import describe_balance, format_money
from rojmel.cli.resolution import resolve_party_or_exit, resolve_project_or_exit
from rojmel.domain.party import PartyService
from rojmel.domain.project import ProjectService
from rojmel.domain.transaction import DEFAULT_PURCHASE_CATEGORY, TransactionService
from rojmel.utils.amount_parser import parse_amount
from rojmel.utils.date_parser import parse_date

PAYMENT_MODES = ("cash", "upi", "bank", "cheque")


def _entry_options(command):
    """Options shared by every entry form."""
    for decorator in reversed(
        (
            click.option("--amount", required=True, help="Amount (e.g., 25000 or '₹25,000')"),
            click.option(
                "--date",
                "date_str",
                default="today",
                show_default=True,
                help="Entry date (YYYY-MM-DD, DD-MM-YYYY or relative like 'yesterday')",
            ),
            click.option("--voucher", help="Voucher number (generated if not provided)"),
            click.option("--description", help="Description"),
            click.option("--reference", help="Bill or reference number"),
            click.option("--notes", help="Notes"),
        )
    ):
        command = decorator(command)
    return command


def _parse_form_or_exit(ctx, amount: str, date_str: str):
    try:
        entry_date = parse_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)
    try:
        entry_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)
    return entry_amount, entry_date


def _echo_recorded(ctx, transaction_id: int, project_id: int, party_id: int | None) -> None:
    db = ctx.obj["db"]
    txn = TransactionService(db).get_transaction(transaction_id)
    currency = ProjectService(db).get_project(project_id).currency

    click.echo(f"Created transaction {transaction_id} ({txn.voucher_no})")
    click.echo(f"  Date: {txn.date}")
    amount = txn.purchase_amount or txn.credit or txn.debit
    click.echo(f"  Amount: {format_money(amount, currency)}")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    if party_id is not None:
        party = PartyService(db).get_party(party_id)
        click.echo(f"  Party: {party.name}, balance {describe_balance(party.current_balance, currency)}")


@click.command("purchase")
@click.argument("party", metavar="PARTY")
@_entry_options
@click.option("--category", default=DEFAULT_PURCHASE_CATEGORY, show_default=True, help="Category key")
@click.option("--sub-category", help="Sub-category (e.g., Cement)")
@click.pass_context
def add_purchase(
    ctx,
    party: str,
    amount: str,
    date_str: str,
    voucher: str | None,
    description: str | None,
    reference: str | None,
    notes: str | None,
    category: str,
    sub_category: str | None,
):
    """Record a credit purchase from PARTY (you now owe them more).

    Examples:
        rojmel purchase "Ramesh Cement" --amount 25000 --sub-category Cement
        rojmel purchase 3 --amount 4800 --date 05-01-2024 --reference BILL-17
    """
    project_id = resolve_project_or_exit(ctx)
    party_id = resolve_party_or_exit(ctx, project_id, party)
    entry_amount, entry_date = _parse_form_or_exit(ctx, amount, date_str)

    try:
        transaction_id = TransactionService(ctx.obj["db"]).record_purchase(
            project_id=project_id,
            party_id=party_id,
            amount=entry_amount,
            date=entry_date,
            category=category,
            sub_category=sub_category,
            voucher_no=voucher,
            description=description,
            reference=reference,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    _echo_recorded(ctx, transaction_id, project_id, party_id)


@click.command("payment")
@click.argument("party", metavar="PARTY")
@_entry_options
@click.option("--mode", "payment_mode", type=click.Choice(PAYMENT_MODES), default="cash", show_default=True)
@click.pass_context
def add_payment(
    ctx,
    party: str,
    amount: str,
    date_str: str,
    voucher: str | None,
    description: str | None,
    reference: str | None,
    notes: str | None,
    payment_mode: str,
):
    """Record a payment made to PARTY (you now owe them less).

    Examples:
        rojmel payment "Ramesh Cement" --amount 10000 --mode upi
    """
    project_id = resolve_project_or_exit(ctx)
    party_id = resolve_party_or_exit(ctx, project_id, party)
    entry_amount, entry_date = _parse_form_or_exit(ctx, amount, date_str)

    try:
        transaction_id = TransactionService(ctx.obj["db"]).record_payment(
            project_id=project_id,
            party_id=party_id,
            amount=entry_amount,
            date=entry_date,
            payment_mode=payment_mode,
            voucher_no=voucher,
            description=description,
            reference=reference,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    _echo_recorded(ctx, transaction_id, project_id, party_id)


@click.command("entry")
@click.argument("kind", type=click.Choice(("income", "expense")))
@_entry_options
@click.option("--party", help="Optional party name or ID")
@click.option("--category", help="Category key (e.g., labor, income)")
@click.option("--sub-category", help="Sub-category")
@click.option("--mode", "payment_mode", type=click.Choice(PAYMENT_MODES), help="Payment mode")
@click.pass_context
def add_entry(
    ctx,
    kind: str,
    amount: str,
    date_str: str,
    voucher: str | None,
    description: str | None,
    reference: str | None,
    notes: str | None,
    party: str | None,
    category: str | None,
    sub_category: str | None,
    payment_mode: str | None,
):
    """Record a generic income or expense entry.

    Income is money received (for example funds from a bank loan), expense
    is money paid out directly.

    Examples:
        rojmel entry income --amount 500000 --category income --sub-category "Bank Loan"
        rojmel entry expense --amount 350 --category misc --sub-category Food/Tea
    """
    project_id = resolve_project_or_exit(ctx)
    party_id = resolve_party_or_exit(ctx, project_id, party) if party is not None else None
    entry_amount, entry_date = _parse_form_or_exit(ctx, amount, date_str)

    try:
        transaction_id = TransactionService(ctx.obj["db"]).record_entry(
            project_id=project_id,
            kind=kind,
            amount=entry_amount,
            date=entry_date,
            party_id=party_id,
            category=category,
            sub_category=sub_category,
            payment_mode=payment_mode,
            voucher_no=voucher,
            description=description,
            reference=reference,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    _echo_recorded(ctx, transaction_id, project_id, party_id)


def register_commands(cli):
    """Register entry form commands with main CLI."""
    cli.add_command(add_purchase)
    cli.add_command(add_payment)
    cli.add_command(add_entry)
