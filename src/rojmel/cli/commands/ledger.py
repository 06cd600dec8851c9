"""Ledger statement commands."""

import click
from rojmel.cli.date_filters import period_flags_from, period_options, resolve_cli_date_range
from rojmel.cli.error_handling import handle_domain_error
from rojmel.cli.formatting import describe_balance, format_date, format_money
from rojmel.cli.resolution import resolve_party_or_exit, resolve_project_or_exit
from rojmel.domain.entities import EntryFilter, LedgerStatement, Project
from rojmel.domain.project import ProjectService
from rojmel.domain.statement import LedgerService

RULE = "-" * 100


def _echo_statement(statement: LedgerStatement, project: Project) -> None:
    """Print statement lines and totals in bank-statement layout."""
    def money(amount) -> str:
        return format_money(amount, project.currency)

    if statement.start_date or statement.end_date:
        click.echo(f"Period: {statement.start_date or '...'} to {statement.end_date or '...'}")
    click.echo(RULE)
    click.echo(
        f"{'Date':10s} | {'Voucher':14s} | {'Description':26s} | "
        f"{'Debit':>13s} | {'Credit':>13s} | {'Balance':>14s}"
    )
    click.echo(RULE)
    click.echo(
        f"{'':10s} | {'':14s} | {'Opening balance':26s} | "
        f"{'':>13s} | {'':>13s} | {money(statement.opening_balance):>14s}"
    )

    for line in statement.lines:
        txn = line.transaction
        description = (txn.description or txn.category or "")[:26]
        debit = money(line.debit) if line.debit else ""
        credit = money(line.credit) if line.credit else ""
        click.echo(
            f"{format_date(txn.date, project.date_format):10s} | {(txn.voucher_no or ''):14s} | "
            f"{description:26s} | {debit:>13s} | {credit:>13s} | {money(line.balance):>14s}"
        )

    click.echo(RULE)
    click.echo(f"Total debit:  {money(statement.total_debit)}")
    click.echo(f"Total credit: {money(statement.total_credit)}")


@click.group()
def ledger_group():
    """Print party and company ledgers."""
    pass


@ledger_group.command("party")
@click.argument("party", metavar="PARTY")
@period_options
@click.pass_context
def party_ledger(ctx, party: str, start_date: str | None, end_date: str | None, **period_params):
    """Show the running-balance ledger of PARTY.

    Debit is a purchase on credit (you owe them more), credit is a payment
    to them. The balance starts at the party's opening balance.

    Examples:
        rojmel ledger party "Ramesh Cement"
        rojmel ledger party 3 --this-month
    """
    db = ctx.obj["db"]
    project_id = resolve_project_or_exit(ctx)
    party_id = resolve_party_or_exit(ctx, project_id, party)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(period_params),
    )

    try:
        statement = LedgerService(db).party_ledger(party_id, start_date=start, end_date=end)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    project = ProjectService(db).get_project(project_id)
    click.echo(f"Ledger: {statement.party.name} ({statement.party.type})")
    _echo_statement(statement, project)
    click.echo(f"Closing balance: {describe_balance(statement.closing_balance, project.currency)}")


@ledger_group.command("company")
@period_options
@click.option(
    "--filter",
    "entry_filter",
    type=click.Choice(tuple(f.value for f in EntryFilter)),
    default=EntryFilter.ALL.value,
    show_default=True,
    help="Limit to purchases or payments",
)
@click.pass_context
def company_ledger(ctx, start_date: str | None, end_date: str | None, entry_filter: str, **period_params):
    """Show the project-wide cash-flow ledger.

    Debit is money out (purchases, payments, expenses), credit is money in.

    Examples:
        rojmel ledger company
        rojmel ledger company --filter payments --last-month
    """
    db = ctx.obj["db"]
    project_id = resolve_project_or_exit(ctx)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(period_params),
    )

    try:
        statement = LedgerService(db).company_ledger(
            project_id, start_date=start, end_date=end, entry_filter=entry_filter
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    project = ProjectService(db).get_project(project_id)
    click.echo(f"Company ledger: {project.name} ({statement.entry_filter.value})")
    _echo_statement(statement, project)
    click.echo(f"Net balance: {format_money(statement.net_balance, project.currency)}")


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group, name="ledger")
