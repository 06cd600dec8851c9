"""Project backup and restore.

A backup is a JSON-compatible dict holding a project's settings,
categories, parties and transactions. Money is written as decimal strings
and dates in ISO format so that a restore reproduces the exact values.
Receipt attachments are not part of a backup.
"""

import logging
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation

from rojmel.database.base import Database
from rojmel.domain.balance import BalanceSynchronizer
from rojmel.domain.entities import TransactionType
from rojmel.domain.errors import NotFoundError, ValidationError, project_not_found
from rojmel.domain.party import normalize_party_type
from rojmel.domain.project import check_budget
from rojmel.utils.amount_parser import ZERO

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1

SETTING_KEYS = ("budget", "currency", "date_format")
DETAIL_KEYS = ("voucher_no", "description", "category", "sub_category", "payment_mode", "reference", "notes")


def _decimal(value, what: str) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {what}: {value!r}")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid {what}: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"Invalid {what}: {value!r}")
    return amount


def _date(value, what: str) -> date:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {what}: {value!r}")


def _records(data: dict, key: str) -> list[dict]:
    records = data.get(key, [])
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ValidationError(f"Backup section '{key}' must be a list of objects")
    return records


def _parse_party(record: dict) -> dict:
    name = str(record.get("name") or "").strip()
    if not name:
        raise ValidationError("Backup party without a name")
    return {
        "name": name,
        "type": normalize_party_type(record.get("type")),
        "phone": record.get("phone"),
        "address": record.get("address"),
        "opening_balance": _decimal(record.get("opening_balance"), f"opening balance of '{name}'"),
    }


def _parse_transaction(record: dict, party_ids: set) -> dict:
    label = f"transaction {record.get('id', '?')}"
    entry_type = record.get("type")
    if entry_type is not None:
        try:
            entry_type = TransactionType(entry_type).value
        except ValueError:
            raise ValidationError(f"Invalid type of {label}: {entry_type!r}")

    party_ref = record.get("party_id")
    if party_ref is not None and party_ref not in party_ids:
        raise ValidationError(f"{label} refers to unknown party {party_ref!r}")

    fields = {
        "date": _date(record.get("date"), f"date of {label}"),
        "party_ref": party_ref,
        "type": entry_type,
    }
    for key in ("purchase_amount", "credit", "debit"):
        amount = _decimal(record.get(key), f"{key} of {label}")
        if amount < ZERO:
            raise ValidationError(f"{key} of {label} cannot be negative")
        fields[key] = amount
    for key in DETAIL_KEYS:
        fields[key] = record.get(key)
    if record.get("created_at"):
        try:
            fields["created_at"] = datetime.fromisoformat(record["created_at"])
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid created_at of {label}: {record['created_at']!r}")
    return fields


class BackupService:
    """Exports a project to a dict and restores it from one."""

    def __init__(self, db: Database):
        """Initialize backup service.

        Args:
            db: Database instance
        """
        self.db = db
        self.balances = BalanceSynchronizer(db)

    def export_project(self, project_id: int) -> dict:
        """Export a project's settings and data.

        Raises:
            NotFoundError: If the project does not exist
        """
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))

        transactions = sorted(self.db.list_transactions(project_id=project_id), key=lambda t: t.id)
        return {
            "version": BACKUP_VERSION,
            "exported_at": datetime.now(UTC).isoformat(),
            "project": project.name,
            "settings": {
                "budget": str(project.budget),
                "currency": project.currency,
                "date_format": project.date_format,
            },
            "categories": [
                {
                    "key": c.key,
                    "name": c.name,
                    "icon": c.icon,
                    "subcategories": list(c.subcategories),
                }
                for c in self.db.list_categories(project_id)
            ],
            "parties": [
                {
                    "id": p.id,
                    "name": p.name,
                    "type": p.type,
                    "phone": p.phone,
                    "address": p.address,
                    "opening_balance": str(p.opening_balance),
                }
                for p in self.db.list_parties(project_id)
            ],
            "transactions": [
                {
                    "id": t.id,
                    "date": t.date.isoformat(),
                    "party_id": t.party_id,
                    "type": t.type,
                    "purchase_amount": str(t.purchase_amount),
                    "credit": str(t.credit),
                    "debit": str(t.debit),
                    **{key: getattr(t, key) for key in DETAIL_KEYS},
                    "created_at": t.created_at.isoformat() if t.created_at else None,
                }
                for t in transactions
            ],
        }

    def import_project(self, project_id: int, data: dict) -> dict[str, int]:
        """Replace a project's data with a backup.

        The whole backup is validated before anything is written. Categories,
        parties and transactions of the project are then replaced, settings
        present in the backup are applied (the project keeps its name) and
        every party balance is recomputed, all in one unit of work.

        Args:
            project_id: Project to restore into
            data: Backup as produced by ``export_project``

        Returns:
            Counts of restored categories, parties and transactions

        Raises:
            NotFoundError: If the project does not exist
            ValidationError: If the backup is malformed
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))
        if not isinstance(data, dict):
            raise ValidationError("Backup must be a JSON object")
        if data.get("version", BACKUP_VERSION) != BACKUP_VERSION:
            raise ValidationError(f"Unsupported backup version {data.get('version')!r}")

        settings = data.get("settings") or {}
        if not isinstance(settings, dict):
            raise ValidationError("Backup section 'settings' must be an object")
        setting_fields = {key: settings[key] for key in SETTING_KEYS if settings.get(key) is not None}
        if "budget" in setting_fields:
            setting_fields["budget"] = check_budget(_decimal(setting_fields["budget"], "budget"))

        categories = []
        for record in _records(data, "categories"):
            key = str(record.get("key") or "").strip().lower()
            if not key:
                raise ValidationError("Backup category without a key")
            subcategories = record.get("subcategories") or []
            if not isinstance(subcategories, list):
                raise ValidationError(f"Sub-categories of '{key}' must be a list")
            categories.append(
                {
                    "key": key,
                    "name": record.get("name") or key.capitalize(),
                    "icon": record.get("icon"),
                    "subcategories": tuple(str(s) for s in subcategories),
                }
            )
        if len({c["key"] for c in categories}) != len(categories):
            raise ValidationError("Backup categories must have distinct keys")

        party_records = _records(data, "parties")
        parties = {record.get("id"): _parse_party(record) for record in party_records}
        if len(parties) != len(party_records):
            raise ValidationError("Backup parties must have distinct ids")
        if len({p["name"] for p in parties.values()}) != len(parties):
            raise ValidationError("Backup parties must have distinct names")
        transactions = [_parse_transaction(r, set(parties)) for r in _records(data, "transactions")]

        with self.db.unit_of_work():
            self.db.clear_project_data(project_id)
            if setting_fields:
                self.db.update_project(project_id, **setting_fields)
            for category in categories:
                self.db.create_category(project_id=project_id, **category)

            new_ids = {
                old_id: self.db.create_party(project_id=project_id, **party)
                for old_id, party in parties.items()
            }
            for fields in transactions:
                party_ref = fields.pop("party_ref")
                self.db.create_transaction(
                    project_id=project_id,
                    party_id=new_ids[party_ref] if party_ref is not None else None,
                    **fields,
                )
            self.balances.sync_project(project_id)

        counts = {
            "categories": len(categories),
            "parties": len(parties),
            "transactions": len(transactions),
        }
        logger.info(
            "Restored project %s: %d categories, %d parties, %d transactions",
            project_id,
            counts["categories"],
            counts["parties"],
            counts["transactions"],
        )
        return counts
