"""Ledger statement views (party ledger and company ledger)."""

import logging
from datetime import date
from typing import Optional

from rojmel.database.base import Database
from rojmel.domain.entities import (
    EntryFilter,
    LedgerStatement,
    Perspective,
    Transaction,
    TransactionType,
)
from rojmel.domain.errors import NotFoundError, ValidationError, party_not_found, project_not_found
from rojmel.domain.ledger import build_statement
from rojmel.utils.amount_parser import ZERO
from rojmel.utils.date_parser import safe_date

logger = logging.getLogger(__name__)

_FILTER_TYPES = {
    EntryFilter.PURCHASES: TransactionType.PURCHASE.value,
    EntryFilter.PAYMENTS: TransactionType.PAYMENT.value,
}


def filter_entries(
    transactions: list[Transaction],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    entry_filter: EntryFilter = EntryFilter.ALL,
) -> list[Transaction]:
    """Apply date range and entry type filters before folding."""
    wanted_type = _FILTER_TYPES.get(entry_filter)
    selected = []
    for txn in transactions:
        if wanted_type is not None and txn.type != wanted_type:
            continue
        day = safe_date(txn.date)
        if start_date is not None and day < start_date:
            continue
        if end_date is not None and day > end_date:
            continue
        selected.append(txn)
    return selected


class LedgerService:
    """Builds bank-statement style ledgers from stored entries."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def party_ledger(
        self,
        party_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> LedgerStatement:
        """Build a party's ledger from the party-balance perspective.

        The running balance starts at the party's opening balance even when
        a date range excludes earlier entries.

        Args:
            party_id: Party ID
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date

        Returns:
            LedgerStatement with one line per entry in range

        Raises:
            NotFoundError: If the party does not exist
        """
        party = self.db.get_party(party_id)
        if party is None:
            raise NotFoundError(party_not_found(party_id))

        transactions = filter_entries(
            self.db.list_transactions(party_id=party_id), start_date=start_date, end_date=end_date
        )
        statement = build_statement(
            transactions,
            party.opening_balance,
            Perspective.PARTY,
            party=party,
            start_date=start_date,
            end_date=end_date,
        )
        logger.debug(
            "Party %s ledger: %d line(s), closing %s",
            party_id,
            len(statement.lines),
            statement.closing_balance,
        )
        return statement

    def company_ledger(
        self,
        project_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        entry_filter: EntryFilter | str = EntryFilter.ALL,
    ) -> LedgerStatement:
        """Build the project-wide cash-flow ledger.

        Starts at zero; purchases and payments are money out, income is
        money in.

        Args:
            project_id: Project ID
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            entry_filter: all, purchases or payments

        Returns:
            LedgerStatement for the filtered entries

        Raises:
            NotFoundError: If the project does not exist
            ValidationError: If the entry filter is unknown
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))
        try:
            entry_filter = EntryFilter(entry_filter)
        except ValueError:
            raise ValidationError(
                f"Invalid entry filter '{entry_filter}'. Expected one of: all, purchases, payments"
            )

        transactions = filter_entries(
            self.db.list_transactions(project_id=project_id),
            start_date=start_date,
            end_date=end_date,
            entry_filter=entry_filter,
        )
        return build_statement(
            transactions,
            ZERO,
            Perspective.COMPANY,
            start_date=start_date,
            end_date=end_date,
            entry_filter=entry_filter,
        )
