"""Running-balance recurrence over ledger entries.

All ledger figures in the application (party balances, party statements,
the company cash-flow statement) come out of the same left-to-right fold:

    balance[i] = balance[i-1] - debit(t[i]) + credit(t[i])

starting from an opening balance. Nothing here keeps state between calls;
each call re-derives its result from the entries it is given.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Iterator, Sequence

from rojmel.domain.classifier import classifier_for
from rojmel.domain.entities import (
    LedgerLine,
    LedgerStatement,
    LedgerTotals,
    Perspective,
    Transaction,
)
from rojmel.utils.amount_parser import ZERO, coerce_amount
from rojmel.utils.date_parser import safe_date

_OLDEST = datetime.min


def chronological_key(txn: Transaction) -> tuple:
    """Sort key: date, then creation time, then id (all ascending)."""
    created_at = getattr(txn, "created_at", None)
    if not isinstance(created_at, datetime):
        created_at = _OLDEST
    # Naive and aware datetimes cannot be compared; drop tzinfo for ordering
    created_at = created_at.replace(tzinfo=None)
    txn_id = getattr(txn, "id", None)
    return (safe_date(txn.date), created_at, txn_id if isinstance(txn_id, int) else 0)


def sort_chronologically(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Return entries ordered oldest first."""
    return sorted(transactions, key=chronological_key)


def iter_running_balance(
    transactions: Iterable[Transaction],
    opening_balance=ZERO,
    perspective: Perspective = Perspective.PARTY,
) -> Iterator[LedgerLine]:
    """Yield one ledger line per entry with its running balance.

    Entries are sorted before folding, so callers may pass them in any
    order. The generator is finite and can be recreated at will.

    Args:
        transactions: Entries to fold
        opening_balance: Balance before the first entry
        perspective: Classification to apply to each entry

    Yields:
        LedgerLine for each entry, oldest first
    """
    classify = classifier_for(perspective)
    balance = coerce_amount(opening_balance)
    for txn in sort_chronologically(transactions):
        effect = classify(txn)
        balance = effect.apply(balance)
        yield LedgerLine(transaction=txn, debit=effect.debit, credit=effect.credit, balance=balance)


def compute_totals(
    transactions: Iterable[Transaction],
    opening_balance=ZERO,
    perspective: Perspective = Perspective.PARTY,
) -> LedgerTotals:
    """Sum debits and credits without materialising ledger lines.

    Summation is order independent, so no sort is needed here.
    """
    classify = classifier_for(perspective)
    opening = coerce_amount(opening_balance)
    total_debit = ZERO
    total_credit = ZERO
    count = 0
    for txn in transactions:
        effect = classify(txn)
        total_debit += effect.debit
        total_credit += effect.credit
        count += 1

    return LedgerTotals(
        opening_balance=opening,
        total_debit=total_debit,
        total_credit=total_credit,
        closing_balance=opening - total_debit + total_credit,
        count=count,
    )


def build_statement(
    transactions: Sequence[Transaction],
    opening_balance=ZERO,
    perspective: Perspective = Perspective.PARTY,
    **context,
) -> LedgerStatement:
    """Fold entries into a full statement with lines and totals.

    Extra keyword arguments (party, start_date, end_date, entry_filter) are
    carried onto the statement for presentation.
    """
    opening = coerce_amount(opening_balance)
    lines = tuple(iter_running_balance(transactions, opening, perspective))
    total_debit = sum((line.debit for line in lines), ZERO)
    total_credit = sum((line.credit for line in lines), ZERO)
    closing: Decimal = lines[-1].balance if lines else opening

    return LedgerStatement(
        perspective=Perspective(perspective),
        opening_balance=opening,
        lines=lines,
        total_debit=total_debit,
        total_credit=total_credit,
        closing_balance=closing,
        **context,
    )


def final_balance(
    transactions: Iterable[Transaction],
    opening_balance=ZERO,
    perspective: Perspective = Perspective.PARTY,
) -> Decimal:
    """Return only the closing balance of a fold."""
    return compute_totals(transactions, opening_balance, perspective).closing_balance
