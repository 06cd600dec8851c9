"""Project domain service."""

import logging
from decimal import Decimal
from typing import Optional

from rojmel.database.base import Database
from rojmel.domain.entities import Project as ProjectEntity
from rojmel.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_project_name,
    non_finite_amount,
    project_not_found,
)
from rojmel.utils.amount_parser import is_finite_amount

logger = logging.getLogger(__name__)

DEFAULT_BUDGET = Decimal("2500000")
DEFAULT_CURRENCY = "₹"
DEFAULT_DATE_FORMAT = "dd-MM-yyyy"

# (key, name, icon, sub-categories) seeded into every new project
DEFAULT_CATEGORIES = (
    (
        "materials",
        "Materials",
        "🧱",
        ("Cement", "Sand", "Bricks", "Steel", "Wood", "Plumbing", "Electrical", "Tiles", "Paint", "Hardware"),
    ),
    (
        "labor",
        "Labor",
        "👷",
        ("Mason", "Helper", "Carpenter", "Plumber", "Electrician", "Painter", "Other"),
    ),
    ("contractor", "Contractor", "🏗️", ("Main Contractor", "Sub-Contractor", "Architect", "Engineer")),
    ("transport", "Transport", "🚚", ("Delivery", "Equipment Rental")),
    ("misc", "Miscellaneous", "📋", ("Permits", "Utilities", "Security", "Food/Tea")),
    ("income", "Income/Funds", "💰", ("Self", "Bank Loan", "Family", "Other")),
)


def check_budget(budget: Decimal) -> Decimal:
    """Return the budget if it is a finite, non-negative amount."""
    if not is_finite_amount(budget):
        raise ValidationError(non_finite_amount("Budget", budget))
    if budget < 0:
        raise ValidationError(f"Budget cannot be negative, got {budget}")
    return budget


class ProjectService:
    """Service for managing projects and their settings."""

    def __init__(self, db: Database):
        """Initialize project service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_project(self, project_id: int) -> ProjectEntity:
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))
        return project

    def create_project(
        self,
        name: str,
        budget: Decimal = DEFAULT_BUDGET,
        currency: str = DEFAULT_CURRENCY,
        date_format: str = DEFAULT_DATE_FORMAT,
    ) -> int:
        """Create a project and seed its default categories.

        Args:
            name: Unique project name
            budget: Project budget
            currency: Currency symbol used for display
            date_format: Preferred display date format

        Returns:
            Project ID

        Raises:
            ValidationError: If the name is empty or the budget negative
            ConflictError: If a project with the name already exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Project name is required")
        check_budget(budget)
        if self.db.get_project_by_name(name) is not None:
            raise ConflictError(duplicate_project_name(name))

        with self.db.unit_of_work():
            project_id = self.db.create_project(
                name=name, budget=budget, currency=currency, date_format=date_format
            )
            for key, category_name, icon, subcategories in DEFAULT_CATEGORIES:
                self.db.create_category(
                    project_id=project_id,
                    key=key,
                    name=category_name,
                    icon=icon,
                    subcategories=subcategories,
                )

        logger.info("Created project %s '%s'", project_id, name)
        return project_id

    def get_project(self, project_id: int) -> Optional[ProjectEntity]:
        """Get project by ID, or None if not found."""
        return self.db.get_project(project_id)

    def get_project_by_name(self, name: str) -> Optional[ProjectEntity]:
        """Get project by exact name, or None if not found."""
        return self.db.get_project_by_name(name)

    def list_projects(self) -> list[ProjectEntity]:
        """List all projects, newest first."""
        return self.db.list_projects()

    def update_settings(
        self,
        project_id: int,
        name: Optional[str] = None,
        budget: Optional[Decimal] = None,
        currency: Optional[str] = None,
        date_format: Optional[str] = None,
    ) -> ProjectEntity:
        """Update project settings.

        Only the provided values change.

        Returns:
            The updated project

        Raises:
            NotFoundError: If the project does not exist
            ConflictError: If the new name is taken
            ValidationError: If the budget is negative or the name empty
        """
        self._require_project(project_id)

        fields: dict = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Project name is required")
            existing = self.db.get_project_by_name(name)
            if existing is not None and existing.id != project_id:
                raise ConflictError(duplicate_project_name(name))
            fields["name"] = name
        if budget is not None:
            fields["budget"] = check_budget(budget)
        if currency is not None:
            fields["currency"] = currency
        if date_format is not None:
            fields["date_format"] = date_format

        if fields:
            self.db.update_project(project_id, **fields)
            logger.info("Updated project %s settings (%s)", project_id, ", ".join(sorted(fields)))
        return self._require_project(project_id)

    def delete_project(self, project_id: int) -> None:
        """Delete a project with all its parties, entries and categories.

        Raises:
            NotFoundError: If the project does not exist
        """
        project = self._require_project(project_id)
        self.db.delete_project(project_id)
        logger.info("Deleted project %s '%s'", project_id, project.name)
