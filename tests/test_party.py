"""Tests for party service and party commands."""

from datetime import date
from decimal import Decimal

import pytest

from rojmel.cli.main import cli
from rojmel.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError


class TestPartyService:
    """Tests for PartyService."""

    def test_create_party_defaults(self, party_service, sample_project):
        party_id = party_service.create_party(project_id=sample_project.id, name="  Ramesh  ")

        party = party_service.get_party(party_id)
        assert party.name == "Ramesh"
        assert party.type == "supplier"
        assert party.opening_balance == Decimal("0")
        assert party.current_balance == Decimal("0")

    def test_create_party_opening_balance_sets_current(self, party_service, sample_project):
        party_id = party_service.create_party(
            project_id=sample_project.id, name="Mason", type="labor", opening_balance=Decimal("-700")
        )

        party = party_service.get_party(party_id)
        assert party.type == "labor"
        assert party.current_balance == Decimal("-700")

    def test_create_party_duplicate_name(self, party_service, sample_project, sample_party):
        with pytest.raises(ConflictError):
            party_service.create_party(project_id=sample_project.id, name=sample_party.name)

    def test_same_name_allowed_in_other_project(self, party_service, project_service, sample_party):
        other_id = project_service.create_project(name="Site B")

        party_id = party_service.create_party(project_id=other_id, name=sample_party.name)

        assert party_id != sample_party.id

    def test_create_party_invalid_type(self, party_service, sample_project):
        with pytest.raises(ValidationError, match="Invalid party type"):
            party_service.create_party(project_id=sample_project.id, name="X", type="bank")

    def test_create_party_empty_name(self, party_service, sample_project):
        with pytest.raises(ValidationError):
            party_service.create_party(project_id=sample_project.id, name="   ")

    def test_create_party_missing_project(self, party_service):
        with pytest.raises(NotFoundError):
            party_service.create_party(project_id=42, name="Nobody")

    def test_list_parties_filters(self, party_service, sample_project):
        owing = party_service.create_party(
            project_id=sample_project.id, name="A", opening_balance=Decimal("-5")
        )
        owed = party_service.create_party(
            project_id=sample_project.id, name="B", type="contractor", opening_balance=Decimal("5")
        )
        settled = party_service.create_party(project_id=sample_project.id, name="C")

        assert [p.id for p in party_service.list_parties(sample_project.id)] == [owing, owed, settled]
        assert [p.id for p in party_service.list_parties(sample_project.id, "owing")] == [owing]
        assert [p.id for p in party_service.list_parties(sample_project.id, "owed")] == [owed]
        assert [p.id for p in party_service.list_parties(sample_project.id, "settled")] == [settled]
        assert [p.id for p in party_service.list_parties(sample_project.id, "contractor")] == [owed]

    def test_update_party_fields(self, party_service, sample_party):
        party_service.update_party(sample_party.id, phone="9876543210", type="contractor")

        party = party_service.get_party(sample_party.id)
        assert party.phone == "9876543210"
        assert party.type == "contractor"
        assert party.name == sample_party.name

    def test_update_party_rename_conflict(self, party_service, sample_project, sample_party):
        party_service.create_party(project_id=sample_project.id, name="Suresh")

        with pytest.raises(ConflictError):
            party_service.update_party(sample_party.id, name="Suresh")

    def test_update_opening_balance_resyncs(self, party_service, sample_party, sample_entries):
        party_service.update_party(sample_party.id, opening_balance=Decimal("1000"))

        assert party_service.get_party(sample_party.id).current_balance == Decimal("400")

    def test_delete_party_without_transactions(self, party_service, sample_party):
        party_service.delete_party(sample_party.id)

        assert party_service.get_party(sample_party.id) is None

    def test_delete_party_with_transactions_is_rejected(
        self, party_service, transaction_service, sample_project, sample_party
    ):
        transaction_service.record_purchase(
            project_id=sample_project.id,
            party_id=sample_party.id,
            amount=Decimal("100"),
            date=date(2024, 1, 1),
        )

        with pytest.raises(DependencyError, match="it has 1 transaction\\."):
            party_service.delete_party(sample_party.id)

        assert party_service.get_party(sample_party.id) is not None

    def test_delete_party_counts_inside_unit_of_work(self, temp_db, party_service, sample_party, monkeypatch):
        depths = []
        count = temp_db.get_party_transaction_count

        def counting(party_id):
            depths.append(temp_db._uow_depth)
            return count(party_id)

        monkeypatch.setattr(temp_db, "get_party_transaction_count", counting)
        party_service.delete_party(sample_party.id)

        assert depths == [1]
        assert party_service.get_party(sample_party.id) is None

    @pytest.mark.parametrize("bad", [Decimal("NaN"), Decimal("Infinity"), None])
    def test_create_party_rejects_non_finite_opening_balance(self, party_service, sample_project, bad):
        with pytest.raises(ValidationError, match="Opening balance must be a finite number"):
            party_service.create_party(project_id=sample_project.id, name="X", opening_balance=bad)

        assert party_service.list_parties(sample_project.id) == []

    def test_update_party_rejects_non_finite_opening_balance(self, party_service, sample_party):
        with pytest.raises(ValidationError, match="finite number"):
            party_service.update_party(sample_party.id, opening_balance=Decimal("-Infinity"))

        assert party_service.get_party(sample_party.id).opening_balance == Decimal("0")

    def test_outstanding_summary(self, party_service, sample_project):
        party_service.create_party(project_id=sample_project.id, name="A", opening_balance=Decimal("-300"))
        party_service.create_party(project_id=sample_project.id, name="B", opening_balance=Decimal("-200"))
        party_service.create_party(project_id=sample_project.id, name="C", opening_balance=Decimal("75"))
        party_service.create_party(project_id=sample_project.id, name="D")

        summary = party_service.outstanding_summary(sample_project.id)

        assert summary.we_owe == Decimal("500")
        assert summary.owed_to_us == Decimal("75")
        assert summary.settled_count == 1


class TestPartyCommands:
    """Tests for party commands."""

    def test_party_create(self, cli_runner, temp_db, sample_project):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "party", "create", "Suresh", "--type", "labor"],
        )

        assert result.exit_code == 0
        assert "Created party 'Suresh'" in result.output

    def test_party_create_duplicate(self, cli_runner, temp_db, sample_party):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "party", "create", sample_party.name]
        )

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_party_list_empty(self, cli_runner, temp_db, sample_project):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "party", "list"])

        assert result.exit_code == 0
        assert "No parties found" in result.output

    def test_party_list_shows_balances(self, cli_runner, temp_db, sample_party, sample_entries):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "party", "list"])

        assert result.exit_code == 0
        assert "Ramesh Cement" in result.output
        assert "₹600.00 (you owe)" in result.output

    def test_party_show_by_name_case_insensitive(self, cli_runner, temp_db, sample_party):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "party", "show", "ramesh cement"]
        )

        assert result.exit_code == 0
        assert f"Party: Ramesh Cement (ID: {sample_party.id})" in result.output

    def test_party_show_unknown(self, cli_runner, temp_db, sample_project):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "party", "show", "Nobody"])

        assert result.exit_code == 1
        assert "Party 'Nobody' not found" in result.output

    def test_party_delete_with_transactions(self, cli_runner, temp_db, sample_party, sample_entries):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "party", "delete", "Ramesh Cement", "--yes"]
        )

        assert result.exit_code == 1
        assert "Cannot delete party 'Ramesh Cement': it has 2 transactions" in result.output

    def test_party_delete_confirmed(self, cli_runner, temp_db, sample_party, party_service):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "party", "delete", str(sample_party.id)],
            input="y\n",
        )

        assert result.exit_code == 0
        assert "Deleted party 'Ramesh Cement'" in result.output
        temp_db.disconnect()
        assert party_service.get_party(sample_party.id) is None

    def test_party_update_opening_balance(self, cli_runner, temp_db, sample_party, sample_entries):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "party",
                "update",
                "Ramesh Cement",
                "--opening-balance",
                "600",
            ],
        )

        assert result.exit_code == 0
        assert "₹0.00 (settled)" in result.output

    def test_party_sync_all(self, cli_runner, temp_db, sample_party, sample_entries):
        temp_db.update_party_balance(sample_party.id, Decimal("99"))

        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "party", "sync"])

        assert result.exit_code == 0
        assert "Ramesh Cement: ₹600.00 (you owe)" in result.output
        assert "Synced 1 party" in result.output
