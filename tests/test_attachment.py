"""Tests for receipt attachments."""

import pytest

from rojmel.cli.main import cli
from rojmel.domain.attachment import AttachmentService
from rojmel.domain.errors import NotFoundError, ValidationError


@pytest.fixture
def attachment_service(temp_db):
    return AttachmentService(temp_db)


def test_attach_sets_flag(attachment_service, transaction_service, sample_entries):
    txn_id = sample_entries["purchase"]

    attachment_service.attach(txn_id, b"\x89PNG receipt")

    assert attachment_service.get(txn_id) == b"\x89PNG receipt"
    assert transaction_service.get_transaction(txn_id).has_attachment is True


def test_attach_replaces_existing(attachment_service, sample_entries):
    txn_id = sample_entries["purchase"]
    attachment_service.attach(txn_id, b"first")

    attachment_service.attach(txn_id, b"second")

    assert attachment_service.get(txn_id) == b"second"


def test_remove_clears_flag(attachment_service, transaction_service, sample_entries):
    txn_id = sample_entries["payment"]
    attachment_service.attach(txn_id, b"slip")

    attachment_service.remove(txn_id)

    assert attachment_service.get(txn_id) is None
    assert transaction_service.get_transaction(txn_id).has_attachment is False


def test_get_without_attachment(attachment_service, sample_entries):
    assert attachment_service.get(sample_entries["income"]) is None


def test_attach_empty_data(attachment_service, sample_entries):
    with pytest.raises(ValidationError):
        attachment_service.attach(sample_entries["purchase"], b"")


def test_attach_unknown_transaction(attachment_service):
    with pytest.raises(NotFoundError):
        attachment_service.attach(999, b"data")


def test_deleting_transaction_removes_attachment(temp_db, attachment_service, transaction_service, sample_entries):
    txn_id = sample_entries["purchase"]
    attachment_service.attach(txn_id, b"slip")

    transaction_service.delete_transaction(txn_id)

    assert temp_db.get_attachment(txn_id) is None


def test_attachment_commands(cli_runner, temp_db, sample_entries, tmp_path):
    txn_id = str(sample_entries["purchase"])
    receipt = tmp_path / "bill.jpg"
    receipt.write_bytes(b"jpeg bytes")
    exported = tmp_path / "out.jpg"

    added = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "attachment", "add", txn_id, str(receipt)])
    shown = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "attachment", "show", txn_id, "-o", str(exported)]
    )
    removed = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "attachment", "remove", txn_id])
    empty = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "attachment", "show", txn_id])

    assert added.exit_code == 0
    assert "Attached 'bill.jpg'" in added.output
    assert shown.exit_code == 0
    assert exported.read_bytes() == b"jpeg bytes"
    assert removed.exit_code == 0
    assert "has no attachment" in empty.output


def test_attachment_show_unknown_transaction(cli_runner, temp_db, sample_project):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "attachment", "show", "999"])

    assert result.exit_code == 1
    assert "Transaction 999 not found" in result.output
