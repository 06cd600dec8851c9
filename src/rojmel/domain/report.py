"""Project report domain service."""

from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from rojmel.database.base import Database
from rojmel.domain.entities import (
    MonthlyTotals,
    OutstandingSummary,
    ProjectStats,
    SubcategoryTotal,
)
from rojmel.domain.errors import NotFoundError, project_not_found
from rojmel.domain.party import PartyService
from rojmel.utils.amount_parser import ZERO, coerce_amount
from rojmel.utils.date_parser import month_key

INCOME_CATEGORY = "income"
DEFAULT_SUBCATEGORY_LIMIT = 10


def percent_of(part: Decimal, whole: Decimal) -> int:
    """Return ``part`` as a whole-number percentage of ``whole``.

    Halves round up; a zero (or negative) whole gives 0.
    """
    if whole <= ZERO:
        return 0
    return int((part * 100 / whole).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class ReportService:
    """Service for project-level spending reports."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def _transactions(self, project_id: int):
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))
        return self.db.list_transactions(project_id=project_id)

    def project_stats(self, project_id: int) -> ProjectStats:
        """Budget usage and category-wise spend for a project.

        Spent is the sum of ``credit`` (cash out) and received the sum of
        ``debit`` (cash in) over every entry of the project.

        Args:
            project_id: Project ID

        Returns:
            ProjectStats

        Raises:
            NotFoundError: If the project does not exist
        """
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))
        transactions = self.db.list_transactions(project_id=project_id)

        total_spent = ZERO
        total_received = ZERO
        category_wise: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for txn in transactions:
            credit = coerce_amount(txn.credit)
            total_spent += credit
            total_received += coerce_amount(txn.debit)
            if txn.category and txn.category != INCOME_CATEGORY:
                category_wise[txn.category] += credit

        budget = coerce_amount(project.budget)
        return ProjectStats(
            total_spent=total_spent,
            total_received=total_received,
            budget=budget,
            remaining=budget - total_spent,
            percent_used=percent_of(total_spent, budget),
            category_wise=dict(category_wise),
        )

    def monthly_breakdown(self, project_id: int) -> list[MonthlyTotals]:
        """Spent and received per calendar month, oldest month first."""
        spent: dict[str, Decimal] = defaultdict(lambda: ZERO)
        received: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for txn in self._transactions(project_id):
            key = month_key(txn.date)
            spent[key] += coerce_amount(txn.credit)
            received[key] += coerce_amount(txn.debit)

        return [
            MonthlyTotals(month=key, spent=spent[key], received=received[key])
            for key in sorted(set(spent) | set(received))
        ]

    def subcategory_breakdown(
        self, project_id: int, limit: Optional[int] = DEFAULT_SUBCATEGORY_LIMIT
    ) -> list[SubcategoryTotal]:
        """Spend per (category, sub-category), largest first.

        Only entries with a sub-category and a positive ``credit`` count.

        Args:
            project_id: Project ID
            limit: Maximum rows to return, None for all

        Returns:
            List of SubcategoryTotal
        """
        totals: dict[tuple, Decimal] = defaultdict(lambda: ZERO)
        for txn in self._transactions(project_id):
            credit = coerce_amount(txn.credit)
            if txn.sub_category and credit > ZERO:
                totals[(txn.category, txn.sub_category)] += credit

        rows = [
            SubcategoryTotal(category=category, sub_category=sub_category, total=total)
            for (category, sub_category), total in totals.items()
        ]
        rows.sort(key=lambda row: row.total, reverse=True)
        return rows if limit is None else rows[:limit]

    def outstanding_summary(self, project_id: int) -> OutstandingSummary:
        """What the project owes and is owed across its parties."""
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))
        return PartyService(self.db).outstanding_summary(project_id)
