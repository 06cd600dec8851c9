"""Shared pytest fixtures for rojmel tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest

from rojmel.database.factories import create_sqlite_database
from rojmel.domain.backup import BackupService
from rojmel.domain.category import CategoryService
from rojmel.domain.party import PartyService
from rojmel.domain.project import ProjectService
from rojmel.domain.report import ReportService
from rojmel.domain.statement import LedgerService
from rojmel.domain.transaction import TransactionService
from rojmel.domain.user import UserService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def project_service(temp_db):
    """Create a ProjectService with a temporary database."""
    return ProjectService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def party_service(temp_db):
    """Create a PartyService with a temporary database."""
    return PartyService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def user_service(temp_db):
    """Create a UserService with a temporary database."""
    return UserService(temp_db)


@pytest.fixture
def backup_service(temp_db):
    """Create a BackupService with a temporary database."""
    return BackupService(temp_db)


@pytest.fixture
def sample_project(project_service):
    """Create a sample project for testing."""
    project_id = project_service.create_project(name="Site A", budget=Decimal("1000000"))
    return project_service.get_project(project_id)


@pytest.fixture
def sample_party(party_service, sample_project):
    """Create a sample supplier with a zero opening balance."""
    party_id = party_service.create_party(project_id=sample_project.id, name="Ramesh Cement")
    return party_service.get_party(party_id)


@pytest.fixture
def sample_entries(transaction_service, sample_project, sample_party):
    """Record a purchase, a payment and an unrelated income entry.

    Returns a dict of transaction IDs keyed by kind.
    """
    purchase_id = transaction_service.record_purchase(
        project_id=sample_project.id,
        party_id=sample_party.id,
        amount=Decimal("1000"),
        date=date(2024, 1, 5),
        sub_category="Cement",
    )
    payment_id = transaction_service.record_payment(
        project_id=sample_project.id,
        party_id=sample_party.id,
        amount=Decimal("400"),
        date=date(2024, 1, 10),
    )
    income_id = transaction_service.record_entry(
        project_id=sample_project.id,
        kind="income",
        amount=Decimal("5000"),
        date=date(2024, 2, 1),
        category="income",
        sub_category="Bank Loan",
    )
    return {"purchase": purchase_id, "payment": payment_id, "income": income_id}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
