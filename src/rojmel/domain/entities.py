"""Domain model entities for rojmel.

These are pure data classes representing bookkeeping concepts, independent
of the database schema. Services and ledger computations only ever see
these, never ORM rows.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class PartyType(str, Enum):
    """Kind of counter-party."""

    SUPPLIER = "supplier"
    CONTRACTOR = "contractor"
    LABOR = "labor"
    OTHER = "other"


class TransactionType(str, Enum):
    """Explicit entry type recorded by the purchase and payment forms.

    Generic income/expense entries carry no type at all.
    """

    PURCHASE = "purchase"
    PAYMENT = "payment"


class EntryKind(str, Enum):
    """Effective kind of an entry, including the inferred generic kinds."""

    PURCHASE = "purchase"
    PAYMENT = "payment"
    INCOME = "income"
    EXPENSE = "expense"


class Perspective(str, Enum):
    """Sign convention used to classify an entry."""

    PARTY = "party"
    COMPANY = "company"


class EntryFilter(str, Enum):
    """Entry type filter for the company ledger."""

    ALL = "all"
    PURCHASES = "purchases"
    PAYMENTS = "payments"


class UserRole(str, Enum):
    """Application-wide role of a user."""

    SUPERADMIN = "superadmin"
    USER = "user"


class ProjectRole(str, Enum):
    """Role of a user on one assigned project."""

    VIEWER = "viewer"
    EDITOR = "editor"


@dataclass(frozen=True)
class Project:
    """Project domain entity (tenant boundary) with its settings."""

    id: int
    name: str
    budget: Decimal
    currency: str
    date_format: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category with its ordered sub-categories."""

    id: int
    project_id: int
    key: str
    name: str
    icon: Optional[str]
    subcategories: tuple[str, ...] = ()


@dataclass(frozen=True)
class Party:
    """Counter-party domain entity.

    Balances follow one sign convention: positive means the party owes the
    project, negative means the project owes the party. ``current_balance``
    is a cached value derived from ``opening_balance`` and the party's
    transactions.
    """

    id: int
    project_id: int
    name: str
    type: str
    phone: Optional[str]
    address: Optional[str]
    opening_balance: Decimal
    current_balance: Decimal
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Ledger entry domain entity."""

    id: int
    project_id: int
    date: date
    voucher_no: Optional[str]
    party_id: Optional[int]
    description: Optional[str]
    category: Optional[str]
    sub_category: Optional[str]
    type: Optional[str]
    purchase_amount: Decimal
    credit: Decimal
    debit: Decimal
    payment_mode: Optional[str]
    reference: Optional[str]
    notes: Optional[str]
    has_attachment: bool
    created_at: datetime


@dataclass(frozen=True)
class User:
    """Person who can be given access to projects."""

    id: int
    username: str
    name: str
    email: Optional[str]
    role: str
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class ProjectAssignment:
    """A project a user has been assigned to, with the user's role on it."""

    user_id: int
    project: Project
    role: str
    assigned_at: datetime


@dataclass(frozen=True)
class LedgerLine:
    """One row of a ledger statement."""

    transaction: Transaction
    debit: Decimal
    credit: Decimal
    balance: Decimal


@dataclass(frozen=True)
class LedgerTotals:
    """Aggregates of a fold without the per-entry lines."""

    opening_balance: Decimal
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: Decimal
    count: int


@dataclass(frozen=True)
class LedgerStatement:
    """Bank-statement style view of a sequence of entries."""

    perspective: Perspective
    opening_balance: Decimal
    lines: tuple[LedgerLine, ...]
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: Decimal
    party: Optional[Party] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    entry_filter: EntryFilter = EntryFilter.ALL

    @property
    def net_balance(self) -> Decimal:
        """Net movement of the statement (credits minus debits)."""
        return self.total_credit - self.total_debit


@dataclass(frozen=True)
class ProjectStats:
    """Budget and spending figures for a project."""

    total_spent: Decimal
    total_received: Decimal
    budget: Decimal
    remaining: Decimal
    percent_used: int
    category_wise: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class MonthlyTotals:
    """Spent and received amounts for one calendar month."""

    month: str
    spent: Decimal
    received: Decimal


@dataclass(frozen=True)
class SubcategoryTotal:
    """Spend for one (category, sub-category) pair."""

    category: Optional[str]
    sub_category: str
    total: Decimal


@dataclass(frozen=True)
class OutstandingSummary:
    """Totals of what the project owes and is owed across parties."""

    we_owe: Decimal
    owed_to_us: Decimal
    settled_count: int
