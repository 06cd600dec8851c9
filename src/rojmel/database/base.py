"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain services
from rojmel.domain.entities import (
    Project,
    ProjectAssignment,
    Category,
    Party,
    Transaction,
    User,
)


class Database(ABC):
    """Abstract database interface for rojmel."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Group several writes into one atomic commit.

        Writes made inside the block become visible together when the
        outermost block exits normally; an exception rolls all of them back.
        Blocks may be nested.
        """
        pass

    # Project operations
    @abstractmethod
    def create_project(
        self, name: str, budget: Decimal, currency: str, date_format: str
    ) -> int:
        """Create a project. Returns project ID."""
        pass

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def get_project_by_name(self, name: str) -> Optional[Project]:
        """Get project by name."""
        pass

    @abstractmethod
    def list_projects(self) -> list[Project]:
        """List all projects, newest first."""
        pass

    @abstractmethod
    def update_project(self, project_id: int, **fields) -> None:
        """Update project settings (name, budget, currency, date_format)."""
        pass

    @abstractmethod
    def delete_project(self, project_id: int) -> None:
        """Delete a project and everything it owns."""
        pass

    @abstractmethod
    def clear_project_data(self, project_id: int) -> None:
        """Delete the categories, parties and transactions of a project.

        The project row, its settings and its user assignments are kept.
        """
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        project_id: int,
        key: str,
        name: str,
        icon: Optional[str] = None,
        subcategories: tuple[str, ...] = (),
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, project_id: int, key: str) -> Optional[Category]:
        """Get category by project and key."""
        pass

    @abstractmethod
    def list_categories(self, project_id: int) -> list[Category]:
        """List categories of a project in creation order."""
        pass

    @abstractmethod
    def update_category_subcategories(self, category_id: int, subcategories: tuple[str, ...]) -> None:
        """Replace the sub-category list of a category."""
        pass

    # Party operations
    @abstractmethod
    def create_party(
        self,
        project_id: int,
        name: str,
        type: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        opening_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a party with current balance equal to its opening balance."""
        pass

    @abstractmethod
    def get_party(self, party_id: int) -> Optional[Party]:
        """Get party by ID."""
        pass

    @abstractmethod
    def list_parties(self, project_id: int) -> list[Party]:
        """List parties of a project ordered by name."""
        pass

    @abstractmethod
    def update_party(self, party_id: int, **fields) -> None:
        """Update authored party fields (name, type, phone, address, opening_balance)."""
        pass

    @abstractmethod
    def update_party_balance(self, party_id: int, current_balance: Decimal) -> None:
        """Persist a recomputed current balance."""
        pass

    @abstractmethod
    def delete_party(self, party_id: int) -> None:
        """Delete a party."""
        pass

    @abstractmethod
    def get_party_transaction_count(self, party_id: int) -> int:
        """Count transactions referencing a party."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(self, project_id: int, date: date, **fields) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, **fields) -> None:
        """Update the given transaction fields (None values are written as is)."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        project_id: Optional[int] = None,
        party_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[str] = None,
        type: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first.

        Args:
            project_id: Optional project filter
            party_id: Optional party filter
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            category: Optional category filter
            type: Optional explicit type filter (purchase, payment)
        """
        pass

    # Attachment operations
    @abstractmethod
    def save_attachment(self, transaction_id: int, data: bytes) -> None:
        """Store an attachment, replacing any existing one, and flag the transaction."""
        pass

    @abstractmethod
    def get_attachment(self, transaction_id: int) -> Optional[bytes]:
        """Get attachment bytes for a transaction."""
        pass

    @abstractmethod
    def delete_attachment(self, transaction_id: int) -> None:
        """Delete the attachment of a transaction and clear its flag."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, username: str, name: str, email: Optional[str], role: str) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email address."""
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        """List all users ordered by username."""
        pass

    @abstractmethod
    def update_user(self, user_id: int, **fields) -> None:
        """Update user fields (name, email, role, is_active)."""
        pass

    @abstractmethod
    def delete_user(self, user_id: int) -> None:
        """Delete a user and their project assignments."""
        pass

    @abstractmethod
    def assign_project(self, user_id: int, project_id: int, role: str) -> None:
        """Assign a project to a user, replacing the role of an existing assignment."""
        pass

    @abstractmethod
    def unassign_project(self, user_id: int, project_id: int) -> bool:
        """Remove an assignment. Returns False if there was none."""
        pass

    @abstractmethod
    def list_user_projects(self, user_id: int) -> list[ProjectAssignment]:
        """List a user's project assignments ordered by project name."""
        pass
