"""Tests for project backup, restore and the export/import commands."""

import json
from datetime import date
from decimal import Decimal

import pytest

from rojmel.cli.main import cli
from rojmel.domain.backup import BACKUP_VERSION
from rojmel.domain.errors import NotFoundError, ValidationError


@pytest.fixture
def backup(backup_service, sample_project, sample_entries):
    return backup_service.export_project(sample_project.id)


class TestExport:
    """Tests for BackupService.export_project."""

    def test_export_contents(self, backup, sample_party, sample_entries):
        assert backup["version"] == BACKUP_VERSION
        assert backup["project"] == "Site A"
        assert Decimal(backup["settings"]["budget"]) == Decimal("1000000")
        assert backup["settings"]["currency"] == "₹"
        assert [p["name"] for p in backup["parties"]] == ["Ramesh Cement"]
        assert [t["id"] for t in backup["transactions"]] == sorted(sample_entries.values())

        purchase = backup["transactions"][0]
        assert purchase["date"] == "2024-01-05"
        assert purchase["party_id"] == sample_party.id
        assert purchase["type"] == "purchase"
        assert Decimal(purchase["purchase_amount"]) == Decimal("1000")
        assert purchase["sub_category"] == "Cement"

    def test_export_is_json_serializable(self, backup):
        assert json.loads(json.dumps(backup))["project"] == "Site A"

    def test_export_includes_categories(self, backup):
        materials = next(c for c in backup["categories"] if c["key"] == "materials")
        assert "Cement" in materials["subcategories"]

    def test_export_missing_project(self, backup_service):
        with pytest.raises(NotFoundError):
            backup_service.export_project(99)


class TestImport:
    """Tests for BackupService.import_project."""

    def test_restore_into_new_project(
        self, backup, backup_service, project_service, party_service, transaction_service
    ):
        villa = project_service.create_project(name="Villa", budget=Decimal("2000000"))

        counts = backup_service.import_project(villa, backup)

        assert counts == {"categories": len(backup["categories"]), "parties": 1, "transactions": 3}
        parties = party_service.list_parties(villa)
        assert [p.name for p in parties] == ["Ramesh Cement"]
        assert parties[0].current_balance == Decimal("-600")
        entries = transaction_service.list_transactions(project_id=villa)
        assert len(entries) == 3
        assert {t.party_id for t in entries if t.party_id is not None} == {parties[0].id}
        project = project_service.get_project(villa)
        assert project.name == "Villa"
        assert project.budget == Decimal("1000000")

    def test_restore_replaces_existing_data(
        self, backup, backup_service, sample_project, party_service, transaction_service
    ):
        party_service.create_party(project_id=sample_project.id, name="Late Supplier")
        transaction_service.record_entry(
            project_id=sample_project.id,
            kind="expense",
            amount=Decimal("50"),
            date=date(2024, 3, 1),
            category="misc",
        )

        backup_service.import_project(sample_project.id, backup)

        assert [p.name for p in party_service.list_parties(sample_project.id)] == ["Ramesh Cement"]
        assert len(transaction_service.list_transactions(project_id=sample_project.id)) == 3

    def test_restore_recomputes_balances(self, backup, backup_service, sample_project, party_service):
        backup["parties"][0]["opening_balance"] = "100"

        backup_service.import_project(sample_project.id, backup)

        party = party_service.list_parties(sample_project.id)[0]
        assert party.opening_balance == Decimal("100")
        assert party.current_balance == Decimal("-500")

    def test_restore_keeps_created_at(self, backup, backup_service, project_service, transaction_service):
        villa = project_service.create_project(name="Villa")

        backup_service.import_project(villa, backup)

        restored = sorted(
            transaction_service.list_transactions(project_id=villa), key=lambda t: t.id
        )
        assert [t.created_at.isoformat() for t in restored] == [
            t["created_at"] for t in backup["transactions"]
        ]

    @pytest.mark.parametrize(
        "section,field,value",
        [
            ("transactions", "credit", "abc"),
            ("transactions", "credit", "NaN"),
            ("transactions", "debit", "-5"),
            ("transactions", "date", "yesterday"),
            ("transactions", "type", "refund"),
            ("transactions", "party_id", 999),
            ("parties", "opening_balance", "Infinity"),
            ("parties", "name", ""),
        ],
    )
    def test_invalid_backup_leaves_data_untouched(
        self, backup, backup_service, sample_project, party_service, transaction_service, section, field, value
    ):
        backup[section][0][field] = value

        with pytest.raises(ValidationError):
            backup_service.import_project(sample_project.id, backup)

        assert len(transaction_service.list_transactions(project_id=sample_project.id)) == 3
        assert party_service.list_parties(sample_project.id)[0].current_balance == Decimal("-600")

    def test_unsupported_version(self, backup, backup_service, sample_project):
        backup["version"] = BACKUP_VERSION + 1

        with pytest.raises(ValidationError, match="Unsupported backup version"):
            backup_service.import_project(sample_project.id, backup)

    def test_non_finite_budget(self, backup, backup_service, sample_project):
        backup["settings"]["budget"] = "NaN"

        with pytest.raises(ValidationError):
            backup_service.import_project(sample_project.id, backup)

    def test_duplicate_party_names(self, backup, backup_service, sample_project):
        backup["parties"].append(dict(backup["parties"][0], id=12345))

        with pytest.raises(ValidationError, match="distinct names"):
            backup_service.import_project(sample_project.id, backup)

    def test_not_an_object(self, backup_service, sample_project):
        with pytest.raises(ValidationError):
            backup_service.import_project(sample_project.id, ["not", "a", "backup"])

    def test_missing_project(self, backup, backup_service):
        with pytest.raises(NotFoundError):
            backup_service.import_project(99, backup)


class TestBackupCommands:
    """Tests for project export and import commands."""

    def test_export_and_import(
        self, cli_runner, temp_db, tmp_path, sample_entries, project_service, party_service
    ):
        backup_file = tmp_path / "site_a.json"
        villa = project_service.create_project(name="Villa")

        export = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "project", "export", "Site A", "-o", str(backup_file)]
        )
        restore = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "project", "import", str(backup_file), "Villa", "--yes"]
        )

        assert export.exit_code == 0
        assert "Exported 1 parties and 3 transactions" in export.output
        assert json.loads(backup_file.read_text(encoding="utf-8"))["project"] == "Site A"
        assert restore.exit_code == 0
        assert "Imported 1 parties and 3 transactions into 'Villa'" in restore.output
        temp_db.disconnect()
        assert party_service.list_parties(villa)[0].current_balance == Decimal("-600")

    def test_import_invalid_json(self, cli_runner, temp_db, tmp_path, sample_project):
        backup_file = tmp_path / "broken.json"
        backup_file.write_text("{not json", encoding="utf-8")

        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "project", "import", str(backup_file), "--yes"]
        )

        assert result.exit_code == 1
        assert "Invalid backup file" in result.output

    def test_import_invalid_backup(self, cli_runner, temp_db, tmp_path, sample_project):
        backup_file = tmp_path / "old.json"
        backup_file.write_text(json.dumps({"version": 99}), encoding="utf-8")

        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "project", "import", str(backup_file), "--yes"]
        )

        assert result.exit_code == 1
        assert "Unsupported backup version" in result.output

    def test_import_cancelled(self, cli_runner, temp_db, tmp_path, sample_entries, transaction_service):
        backup_file = tmp_path / "empty.json"
        backup_file.write_text(json.dumps({"version": BACKUP_VERSION}), encoding="utf-8")

        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "project", "import", str(backup_file)],
            input="n\n",
        )

        assert result.exit_code == 0
        assert "Import cancelled." in result.output
