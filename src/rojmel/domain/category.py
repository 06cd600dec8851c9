"""Category domain service."""

import logging
from typing import Optional

from rojmel.database.base import Database
from rojmel.domain.entities import Category as CategoryEntity
from rojmel.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_not_found,
    project_not_found,
)

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for managing per-project categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_categories(self, project_id: int) -> list[CategoryEntity]:
        """List categories of a project in creation order."""
        return self.db.list_categories(project_id)

    def get_category(self, project_id: int, key: str) -> Optional[CategoryEntity]:
        """Get category by key, or None if not found."""
        return self.db.get_category(project_id, key)

    def create_category(
        self,
        project_id: int,
        key: str,
        name: Optional[str] = None,
        icon: Optional[str] = None,
        subcategories: tuple[str, ...] = (),
    ) -> int:
        """Create a category.

        Args:
            project_id: Owning project
            key: Short identifier stored on transactions (e.g. "materials")
            name: Display name, defaults to the capitalized key
            icon: Optional icon
            subcategories: Initial ordered sub-categories

        Returns:
            Category ID

        Raises:
            NotFoundError: If the project does not exist
            ConflictError: If the key is already used in the project
            ValidationError: If the key is empty
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))
        key = (key or "").strip().lower()
        if not key:
            raise ValidationError("Category key is required")
        if self.db.get_category(project_id, key) is not None:
            raise ConflictError(f"Category '{key}' already exists in project {project_id}")

        category_id = self.db.create_category(
            project_id=project_id,
            key=key,
            name=name or key.capitalize(),
            icon=icon,
            subcategories=tuple(s.strip() for s in subcategories if s.strip()),
        )
        logger.info("Created category '%s' in project %s", key, project_id)
        return category_id

    def add_subcategory(self, project_id: int, key: str, name: str) -> CategoryEntity:
        """Append a sub-category to a category.

        Adding a name that is already present is a no-op.

        Returns:
            The updated category

        Raises:
            NotFoundError: If the category does not exist
            ValidationError: If the name is empty
        """
        category = self.db.get_category(project_id, key)
        if category is None:
            raise NotFoundError(category_not_found(key))
        name = (name or "").strip()
        if not name:
            raise ValidationError("Sub-category name is required")
        if name in category.subcategories:
            return category

        self.db.update_category_subcategories(category.id, category.subcategories + (name,))
        return self.db.get_category(project_id, key)
