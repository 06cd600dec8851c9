"""Builders for in-memory ledger entries used by the pure tests."""

from datetime import date, datetime
from decimal import Decimal

from rojmel.domain.entities import Transaction

_DEFAULTS = dict(
    project_id=1,
    voucher_no=None,
    party_id=1,
    description=None,
    category=None,
    sub_category=None,
    type=None,
    purchase_amount=Decimal("0"),
    credit=Decimal("0"),
    debit=Decimal("0"),
    payment_mode=None,
    reference=None,
    notes=None,
    has_attachment=False,
)


def make_txn(id: int, on, created_at: datetime | None = None, **fields) -> Transaction:
    """Build a Transaction entity with zero amounts unless overridden."""
    values = dict(_DEFAULTS)
    values.update(fields)
    return Transaction(
        id=id,
        date=on,
        created_at=created_at or datetime(2024, 1, 1, 9, 0, 0),
        **values,
    )


def purchase(id: int, on: date, amount, **fields) -> Transaction:
    return make_txn(id, on, type="purchase", purchase_amount=amount, **fields)


def payment(id: int, on: date, amount, **fields) -> Transaction:
    return make_txn(id, on, type="payment", credit=amount, **fields)
