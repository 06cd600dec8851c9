"""Tests for project service and project commands."""

from datetime import date
from decimal import Decimal

import pytest

from rojmel.cli.main import cli
from rojmel.domain.errors import ConflictError, NotFoundError, ValidationError
from rojmel.domain.project import DEFAULT_CATEGORIES


class TestProjectService:
    """Tests for ProjectService."""

    def test_create_project_defaults(self, project_service):
        project_id = project_service.create_project(name="Villa")

        project = project_service.get_project(project_id)
        assert project.name == "Villa"
        assert project.budget == Decimal("2500000")
        assert project.currency == "₹"
        assert project.date_format == "dd-MM-yyyy"

    def test_create_project_seeds_categories(self, project_service, category_service):
        project_id = project_service.create_project(name="Villa")

        categories = category_service.list_categories(project_id)
        assert [c.key for c in categories] == [key for key, *_ in DEFAULT_CATEGORIES]
        materials = category_service.get_category(project_id, "materials")
        assert materials.name == "Materials"
        assert materials.subcategories[:3] == ("Cement", "Sand", "Bricks")

    def test_create_project_duplicate_name(self, project_service, sample_project):
        with pytest.raises(ConflictError):
            project_service.create_project(name=sample_project.name)

    def test_create_project_negative_budget(self, project_service):
        with pytest.raises(ValidationError):
            project_service.create_project(name="Villa", budget=Decimal("-1"))

    @pytest.mark.parametrize("budget", [Decimal("NaN"), Decimal("Infinity")])
    def test_create_project_non_finite_budget(self, project_service, budget):
        with pytest.raises(ValidationError, match="Budget must be a finite number"):
            project_service.create_project(name="Villa", budget=budget)

        assert project_service.list_projects() == []

    def test_update_settings_non_finite_budget(self, project_service, sample_project):
        with pytest.raises(ValidationError, match="finite number"):
            project_service.update_settings(sample_project.id, budget=Decimal("NaN"))

        assert project_service.get_project(sample_project.id).budget == Decimal("1000000")

    def test_list_projects_newest_first(self, project_service):
        first = project_service.create_project(name="One")
        second = project_service.create_project(name="Two")

        assert [p.id for p in project_service.list_projects()] == [second, first]

    def test_update_settings(self, project_service, sample_project):
        project = project_service.update_settings(
            sample_project.id, budget=Decimal("3000000"), currency="Rs "
        )

        assert project.budget == Decimal("3000000")
        assert project.currency == "Rs "
        assert project.name == sample_project.name

    def test_update_settings_rename_conflict(self, project_service, sample_project):
        project_service.create_project(name="Site B")

        with pytest.raises(ConflictError):
            project_service.update_settings(sample_project.id, name="Site B")

    def test_update_settings_missing_project(self, project_service):
        with pytest.raises(NotFoundError):
            project_service.update_settings(999, budget=Decimal("1"))

    def test_delete_project_cascades(
        self, temp_db, project_service, party_service, sample_project, sample_party, sample_entries
    ):
        project_service.delete_project(sample_project.id)

        assert project_service.get_project(sample_project.id) is None
        assert party_service.get_party(sample_party.id) is None
        assert temp_db.list_transactions(project_id=sample_project.id) == []
        assert temp_db.list_categories(sample_project.id) == []


class TestCategoryService:
    """Tests for CategoryService."""

    def test_create_category(self, category_service, sample_project):
        category_service.create_category(
            sample_project.id, key=" Finishing ", subcategories=("Polish", " ", "Glass")
        )

        category = category_service.get_category(sample_project.id, "finishing")
        assert category.name == "Finishing"
        assert category.subcategories == ("Polish", "Glass")

    def test_create_category_duplicate_key(self, category_service, sample_project):
        with pytest.raises(ConflictError):
            category_service.create_category(sample_project.id, key="materials")

    def test_add_subcategory(self, category_service, sample_project):
        category = category_service.add_subcategory(sample_project.id, "transport", "Crane")

        assert category.subcategories == ("Delivery", "Equipment Rental", "Crane")

    def test_add_existing_subcategory_is_noop(self, category_service, sample_project):
        category = category_service.add_subcategory(sample_project.id, "transport", "Delivery")

        assert category.subcategories == ("Delivery", "Equipment Rental")

    def test_add_subcategory_unknown_category(self, category_service, sample_project):
        with pytest.raises(NotFoundError, match="Category 'payment' not found"):
            category_service.add_subcategory(sample_project.id, "payment", "UPI")


class TestProjectCommands:
    """Tests for project and category commands."""

    def test_project_create(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "project", "create", "Villa", "--budget", "45,00,000"]
        )

        assert result.exit_code == 0
        assert "Created project 'Villa'" in result.output

    def test_project_create_duplicate(self, cli_runner, temp_db, sample_project):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "project", "create", "Site A"]
        )

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_project_list_empty(self, cli_runner, temp_db):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "project", "list"])

        assert result.exit_code == 0
        assert "No projects found" in result.output

    def test_project_show_uses_only_project(self, cli_runner, temp_db, sample_project):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "project", "show"])

        assert result.exit_code == 0
        assert "Project: Site A" in result.output
        assert "Budget: ₹10,00,000.00" in result.output

    def test_project_settings_budget(self, cli_runner, temp_db, sample_project):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "project", "settings", "Site A", "--budget", "1500000"],
        )

        assert result.exit_code == 0
        assert "Budget: ₹15,00,000.00" in result.output

    def test_project_delete(self, cli_runner, temp_db, project_service, sample_project):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "project", "delete", "Site A", "--yes"]
        )

        assert result.exit_code == 0
        temp_db.disconnect()
        assert project_service.list_projects() == []

    def test_no_project_yet(self, cli_runner, temp_db):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "party", "list"])

        assert result.exit_code == 1
        assert "No projects found" in result.output

    def test_category_list(self, cli_runner, temp_db, sample_project):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "category", "list"])

        assert result.exit_code == 0
        assert "Materials [materials]" in result.output
        assert "Mason, Helper" in result.output

    def test_category_add_sub(self, cli_runner, temp_db, sample_project):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "category", "add-sub", "misc", "Water"]
        )

        assert result.exit_code == 0
        assert "Miscellaneous: Permits, Utilities, Security, Food/Tea, Water" in result.output
