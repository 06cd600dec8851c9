"""Classification of ledger entries into debit and credit magnitudes.

The same entry means different things depending on who is looking at it.
From a party's point of view a purchase is money we now owe them and a
payment settles that debt; income does not concern the party at all. From
the company's cash-flow point of view both purchases and payments are
money leaving the project and income is money coming in.

Every function here is pure and tolerant: amounts that are missing or not
numeric count as zero.
"""

from decimal import Decimal
from typing import Callable, NamedTuple

from rojmel.domain.entities import EntryKind, Perspective, Transaction, TransactionType
from rojmel.utils.amount_parser import ZERO, coerce_amount


class LedgerEffect(NamedTuple):
    """Non-negative debit and credit magnitudes of one entry."""

    debit: Decimal
    credit: Decimal

    def apply(self, balance: Decimal) -> Decimal:
        """Return the balance after this effect."""
        return balance - self.debit + self.credit


def _amounts(txn: Transaction) -> tuple[Decimal, Decimal, Decimal]:
    return (
        coerce_amount(getattr(txn, "purchase_amount", None)),
        coerce_amount(getattr(txn, "credit", None)),
        coerce_amount(getattr(txn, "debit", None)),
    )


def party_effect(txn: Transaction) -> LedgerEffect:
    """Classify an entry from the party-balance perspective.

    Debit is the purchase amount (raises what we owe the party), credit is
    the amount paid to the party.
    """
    purchase, credit, _ = _amounts(txn)
    return LedgerEffect(debit=purchase, credit=credit)


def company_effect(txn: Transaction) -> LedgerEffect:
    """Classify an entry from the company cash-flow perspective.

    Debit is the purchase amount, or the paid-out credit when there is no
    purchase amount. Credit is the received (income) amount.
    """
    purchase, credit, received = _amounts(txn)
    return LedgerEffect(debit=purchase or credit, credit=received)


_CLASSIFIERS: dict[Perspective, Callable[[Transaction], LedgerEffect]] = {
    Perspective.PARTY: party_effect,
    Perspective.COMPANY: company_effect,
}


def classifier_for(perspective: Perspective | str) -> Callable[[Transaction], LedgerEffect]:
    """Return the classification function for a perspective."""
    return _CLASSIFIERS[Perspective(perspective)]


def entry_kind(txn: Transaction) -> EntryKind:
    """Return the effective kind of an entry.

    Purchase and payment entries carry an explicit type. Generic entries
    are income when they received money and expense otherwise.
    """
    if txn.type == TransactionType.PURCHASE.value:
        return EntryKind.PURCHASE
    if txn.type == TransactionType.PAYMENT.value:
        return EntryKind.PAYMENT
    if coerce_amount(txn.debit) > ZERO:
        return EntryKind.INCOME
    return EntryKind.EXPENSE
