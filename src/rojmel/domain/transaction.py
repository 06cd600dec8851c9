"""Transaction domain service.

Entries are written and the affected party balances are resynced inside
one unit of work, so a stored ``current_balance`` never reflects a write
that was rolled back (or misses one that was committed).
"""

import logging
from typing import Optional
from datetime import date
from decimal import Decimal

from rojmel.database.base import Database
from rojmel.domain.balance import BalanceSynchronizer
from rojmel.domain.classifier import entry_kind
from rojmel.domain.entities import EntryKind, Transaction as TransactionEntity, TransactionType
from rojmel.domain.errors import (
    NotFoundError,
    ValidationError,
    non_finite_amount,
    non_positive_amount,
    party_not_found,
    party_outside_project,
    project_not_found,
    transaction_not_found,
)
from rojmel.utils.amount_parser import ZERO, is_finite_amount
from rojmel.utils.voucher import generate_voucher_no

logger = logging.getLogger(__name__)

AMOUNT_FIELDS = ("purchase_amount", "credit", "debit")
DETAIL_FIELDS = (
    "voucher_no",
    "description",
    "category",
    "sub_category",
    "payment_mode",
    "reference",
    "notes",
)

PAYMENT_CATEGORY = "payment"
DEFAULT_PURCHASE_CATEGORY = "materials"


def _require_positive(amount: Decimal) -> Decimal:
    if not is_finite_amount(amount):
        raise ValidationError(non_finite_amount("Amount", amount))
    if amount <= ZERO:
        raise ValidationError(non_positive_amount(amount))
    return amount


def _check_amount(name: str, amount: Decimal) -> Decimal:
    if not is_finite_amount(amount):
        raise ValidationError(non_finite_amount(name, amount))
    if amount < ZERO:
        raise ValidationError(f"{name} cannot be negative, got {amount}")
    return amount


def _matches(txn: TransactionEntity, needle: str, party_names: dict[int, str]) -> bool:
    haystack = (txn.description, party_names.get(txn.party_id), txn.voucher_no)
    return any(needle in text.lower() for text in haystack if text)


class TransactionService:
    """Service for recording and maintaining ledger entries."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db
        self.balances = BalanceSynchronizer(db)

    def _require_transaction(self, transaction_id: int) -> TransactionEntity:
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def _check_party(self, project_id: int, party_id: int) -> None:
        party = self.db.get_party(party_id)
        if party is None:
            raise NotFoundError(party_not_found(party_id))
        if party.project_id != project_id:
            raise ValidationError(party_outside_project(party_id, project_id))

    def create_transaction(
        self,
        project_id: int,
        date: date,
        party_id: Optional[int] = None,
        type: Optional[str] = None,
        purchase_amount: Decimal = ZERO,
        credit: Decimal = ZERO,
        debit: Decimal = ZERO,
        **details,
    ) -> int:
        """Create a ledger entry and resync its party.

        Args:
            project_id: Owning project
            date: Entry date
            party_id: Optional party reference
            type: "purchase", "payment" or None for a generic entry
            purchase_amount: Amount now owed to the party
            credit: Amount paid out
            debit: Amount received
            **details: voucher_no, description, category, sub_category,
                payment_mode, reference, notes

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If project or party does not exist
            ValidationError: For unknown fields, negative amounts or a party
                from another project
        """
        unknown = set(details) - set(DETAIL_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown transaction field(s): {', '.join(sorted(unknown))}")
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))
        if type is not None:
            try:
                type = TransactionType(type).value
            except ValueError:
                raise ValidationError(f"Invalid transaction type '{type}'")
        for name, amount in zip(AMOUNT_FIELDS, (purchase_amount, credit, debit)):
            _check_amount(name, amount)
        if party_id is not None:
            self._check_party(project_id, party_id)

        if not details.get("voucher_no"):
            details["voucher_no"] = generate_voucher_no(date)

        with self.db.unit_of_work():
            transaction_id = self.db.create_transaction(
                project_id=project_id,
                date=date,
                party_id=party_id,
                type=type,
                purchase_amount=purchase_amount,
                credit=credit,
                debit=debit,
                **details,
            )
            if party_id is not None:
                self.balances.sync(party_id)

        logger.info(
            "Recorded transaction %s (%s) in project %s", transaction_id, type or "entry", project_id
        )
        return transaction_id

    def record_purchase(
        self,
        project_id: int,
        party_id: int,
        amount: Decimal,
        date: date,
        category: Optional[str] = DEFAULT_PURCHASE_CATEGORY,
        **details,
    ) -> int:
        """Record a credit purchase from a party (raises what we owe them)."""
        return self.create_transaction(
            project_id=project_id,
            date=date,
            party_id=party_id,
            type=TransactionType.PURCHASE.value,
            purchase_amount=_require_positive(amount),
            category=category,
            **details,
        )

    def record_payment(
        self,
        project_id: int,
        party_id: int,
        amount: Decimal,
        date: date,
        payment_mode: Optional[str] = "cash",
        **details,
    ) -> int:
        """Record a payment made to a party (settles what we owe them)."""
        return self.create_transaction(
            project_id=project_id,
            date=date,
            party_id=party_id,
            type=TransactionType.PAYMENT.value,
            credit=_require_positive(amount),
            category=PAYMENT_CATEGORY,
            payment_mode=payment_mode,
            **details,
        )

    def record_entry(
        self,
        project_id: int,
        kind: EntryKind | str,
        amount: Decimal,
        date: date,
        party_id: Optional[int] = None,
        **details,
    ) -> int:
        """Record a generic income or expense entry.

        Income populates ``debit`` (cash received), expense populates
        ``credit`` (cash paid out). The entry carries no explicit type.
        """
        try:
            kind = EntryKind(kind)
        except ValueError:
            raise ValidationError(f"Invalid entry kind '{kind}'")
        if kind not in (EntryKind.INCOME, EntryKind.EXPENSE):
            raise ValidationError(f"Entry kind must be income or expense, got '{kind.value}'")
        amount = _require_positive(amount)
        amounts = {"debit": amount} if kind == EntryKind.INCOME else {"credit": amount}
        return self.create_transaction(
            project_id=project_id, date=date, party_id=party_id, type=None, **amounts, **details
        )

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID, or None if not found."""
        return self.db.get_transaction(transaction_id)

    def update_transaction(
        self,
        transaction_id: int,
        date: Optional[date] = None,
        party_id: Optional[int] = None,
        clear_party: bool = False,
        purchase_amount: Optional[Decimal] = None,
        credit: Optional[Decimal] = None,
        debit: Optional[Decimal] = None,
        **details,
    ) -> None:
        """Update transaction fields and resync affected parties.

        Only provided fields change. Both the previous and the new party
        are resynced when the party association changes.

        Args:
            transaction_id: Transaction to update
            date: Optional new date
            party_id: Optional new party
            clear_party: If True, detach the entry from its party
            purchase_amount: Optional new purchase amount
            credit: Optional new paid-out amount
            debit: Optional new received amount
            **details: Optional new detail fields (see DETAIL_FIELDS)

        Raises:
            NotFoundError: If the transaction or new party does not exist
            ValidationError: On conflicting or invalid values
        """
        txn = self._require_transaction(transaction_id)

        unknown = set(details) - set(DETAIL_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown transaction field(s): {', '.join(sorted(unknown))}")
        if clear_party and party_id is not None:
            raise ValidationError("Cannot set both party_id and clear_party")

        fields = {name: value for name, value in details.items() if value is not None}
        if date is not None:
            fields["date"] = date
        for name, amount in zip(AMOUNT_FIELDS, (purchase_amount, credit, debit)):
            if amount is not None:
                fields[name] = _check_amount(name, amount)
        if clear_party:
            fields["party_id"] = None
        elif party_id is not None:
            self._check_party(txn.project_id, party_id)
            fields["party_id"] = party_id

        if not fields:
            return

        affected = [txn.party_id, fields.get("party_id", txn.party_id)]
        with self.db.unit_of_work():
            self.db.update_transaction(transaction_id, **fields)
            self.balances.sync_many(affected)

        logger.info("Updated transaction %s (%s)", transaction_id, ", ".join(sorted(fields)))

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and resync the party it referenced.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        txn = self._require_transaction(transaction_id)
        # Capture the reference before the row disappears
        party_id = txn.party_id

        with self.db.unit_of_work():
            self.db.delete_transaction(transaction_id)
            if party_id is not None:
                self.balances.sync(party_id)

        logger.info("Deleted transaction %s", transaction_id)

    def list_transactions(
        self,
        project_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        party_id: Optional[int] = None,
        category: Optional[str] = None,
        kind: Optional[EntryKind | str] = None,
        search: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters, newest first.

        Args:
            project_id: Project ID
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            party_id: Optional party filter
            category: Optional category filter
            kind: Optional effective kind (purchase, payment, income, expense)
            search: Optional text matched case-insensitively against the
                description, party name and voucher number

        Returns:
            List of transaction entities
        """
        transactions = self.db.list_transactions(
            project_id=project_id,
            party_id=party_id,
            start_date=start_date,
            end_date=end_date,
            category=category,
        )
        if kind is not None:
            kind = EntryKind(kind)
            transactions = [t for t in transactions if entry_kind(t) == kind]
        needle = (search or "").strip().lower()
        if needle:
            party_names = {p.id: p.name for p in self.db.list_parties(project_id)}
            transactions = [t for t in transactions if _matches(t, needle, party_names)]
        return transactions
