"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so the ledger code never depends
on ORM rows. Money columns are normalised to Decimal on the way out.
"""

from decimal import Decimal

from rojmel.domain import entities as domain
from rojmel.database.models import (
    Project as ORMProject,
    Category as ORMCategory,
    Party as ORMParty,
    Transaction as ORMTransaction,
    User as ORMUser,
    UserProject as ORMUserProject,
)


def _money(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    return domain.Project(
        id=orm_project.id,
        name=orm_project.name,
        budget=_money(orm_project.budget),
        currency=orm_project.currency,
        date_format=orm_project.date_format,
        created_at=orm_project.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        project_id=orm_category.project_id,
        key=orm_category.key,
        name=orm_category.name,
        icon=orm_category.icon,
        subcategories=tuple(orm_category.subcategories or ()),
    )


def party_to_domain(orm_party: ORMParty) -> domain.Party:
    """Convert SQLAlchemy Party model to domain Party entity."""
    return domain.Party(
        id=orm_party.id,
        project_id=orm_party.project_id,
        name=orm_party.name,
        type=orm_party.type,
        phone=orm_party.phone,
        address=orm_party.address,
        opening_balance=_money(orm_party.opening_balance),
        current_balance=_money(orm_party.current_balance),
        created_at=orm_party.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        project_id=orm_transaction.project_id,
        date=orm_transaction.date,
        voucher_no=orm_transaction.voucher_no,
        party_id=orm_transaction.party_id,
        description=orm_transaction.description,
        category=orm_transaction.category,
        sub_category=orm_transaction.sub_category,
        type=orm_transaction.type,
        purchase_amount=_money(orm_transaction.purchase_amount),
        credit=_money(orm_transaction.credit),
        debit=_money(orm_transaction.debit),
        payment_mode=orm_transaction.payment_mode,
        reference=orm_transaction.reference,
        notes=orm_transaction.notes,
        has_attachment=bool(orm_transaction.has_attachment),
        created_at=orm_transaction.created_at,
    )


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        username=orm_user.username,
        name=orm_user.name,
        email=orm_user.email,
        role=orm_user.role,
        is_active=bool(orm_user.is_active),
        created_at=orm_user.created_at,
    )


def assignment_to_domain(orm_assignment: ORMUserProject) -> domain.ProjectAssignment:
    """Convert a UserProject row to a ProjectAssignment with its project."""
    return domain.ProjectAssignment(
        user_id=orm_assignment.user_id,
        project=project_to_domain(orm_assignment.project),
        role=orm_assignment.role,
        assigned_at=orm_assignment.assigned_at,
    )
