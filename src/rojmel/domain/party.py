"""Party domain service."""

import logging
from decimal import Decimal
from typing import Optional

from rojmel.database.base import Database
from rojmel.domain.balance import BalanceSynchronizer
from rojmel.domain.entities import OutstandingSummary, Party as PartyEntity, PartyType
from rojmel.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    duplicate_party_name,
    invalid_party_type,
    non_finite_amount,
    party_delete_blocked,
    party_not_found,
    project_not_found,
)
from rojmel.utils.amount_parser import ZERO, is_finite_amount

logger = logging.getLogger(__name__)

BALANCE_FILTERS = ("owing", "owed", "settled")


def _check_opening_balance(opening_balance: Decimal) -> Decimal:
    if not is_finite_amount(opening_balance):
        raise ValidationError(non_finite_amount("Opening balance", opening_balance))
    return opening_balance


def normalize_party_type(value: Optional[str]) -> str:
    """Validate a party type, defaulting to supplier."""
    if value is None or value == "":
        return PartyType.SUPPLIER.value
    try:
        return PartyType(value.strip().lower()).value
    except ValueError:
        raise ValidationError(invalid_party_type(value))


class PartyService:
    """Service for managing parties."""

    def __init__(self, db: Database):
        """Initialize party service.

        Args:
            db: Database instance
        """
        self.db = db
        self.balances = BalanceSynchronizer(db)

    def _require_party(self, party_id: int) -> PartyEntity:
        party = self.db.get_party(party_id)
        if party is None:
            raise NotFoundError(party_not_found(party_id))
        return party

    def _check_name_free(self, project_id: int, name: str, exclude_id: Optional[int] = None) -> None:
        for party in self.db.list_parties(project_id):
            if party.id != exclude_id and party.name == name:
                raise ConflictError(duplicate_party_name(name, project_id))

    def create_party(
        self,
        project_id: int,
        name: str,
        type: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        opening_balance: Decimal = ZERO,
    ) -> int:
        """Create a new party.

        Args:
            project_id: Owning project
            name: Display name, unique within the project
            type: supplier, contractor, labor or other (default supplier)
            phone: Optional phone number
            address: Optional address
            opening_balance: Signed balance before any recorded entry

        Returns:
            Party ID

        Raises:
            NotFoundError: If the project does not exist
            ConflictError: If the name is already used in the project
            ValidationError: If the name is empty, the type unknown or the
                opening balance not a finite number
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))
        name = (name or "").strip()
        if not name:
            raise ValidationError("Party name is required")
        party_type = normalize_party_type(type)
        _check_opening_balance(opening_balance)
        self._check_name_free(project_id, name)

        party_id = self.db.create_party(
            project_id=project_id,
            name=name,
            type=party_type,
            phone=phone,
            address=address,
            opening_balance=opening_balance,
        )
        logger.info("Created party %s '%s' in project %s", party_id, name, project_id)
        return party_id

    def get_party(self, party_id: int) -> Optional[PartyEntity]:
        """Get party by ID, or None if not found."""
        return self.db.get_party(party_id)

    def list_parties(self, project_id: int, filter: Optional[str] = None) -> list[PartyEntity]:
        """List parties of a project.

        Args:
            project_id: Project ID
            filter: Optional "owing" (we owe them), "owed" (they owe us),
                "settled", or a party type

        Returns:
            Parties ordered by name
        """
        parties = self.db.list_parties(project_id)
        if filter is None or filter == "all":
            return parties
        if filter == "owing":
            return [p for p in parties if p.current_balance < ZERO]
        if filter == "owed":
            return [p for p in parties if p.current_balance > ZERO]
        if filter == "settled":
            return [p for p in parties if p.current_balance == ZERO]
        party_type = normalize_party_type(filter)
        return [p for p in parties if p.type == party_type]

    def update_party(
        self,
        party_id: int,
        name: Optional[str] = None,
        type: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        opening_balance: Optional[Decimal] = None,
    ) -> None:
        """Update party details.

        Only the provided fields change. Changing the opening balance
        resyncs the current balance in the same unit of work.

        Raises:
            NotFoundError: If the party does not exist
            ConflictError: If the new name is taken
            ValidationError: If the new type or opening balance is invalid
        """
        party = self._require_party(party_id)

        fields: dict = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Party name is required")
            self._check_name_free(party.project_id, name, exclude_id=party_id)
            fields["name"] = name
        if type is not None:
            fields["type"] = normalize_party_type(type)
        if phone is not None:
            fields["phone"] = phone
        if address is not None:
            fields["address"] = address
        if opening_balance is not None:
            fields["opening_balance"] = _check_opening_balance(opening_balance)

        if not fields:
            return

        with self.db.unit_of_work():
            self.db.update_party(party_id, **fields)
            if "opening_balance" in fields:
                self.balances.sync(party_id)

    def sync_balance(self, party_id: int) -> Decimal:
        """Recompute and store the party's current balance."""
        with self.db.unit_of_work():
            return self.balances.sync(party_id)

    def delete_party(self, party_id: int) -> None:
        """Delete a party.

        Raises:
            NotFoundError: If the party does not exist
            DependencyError: If the party still has transactions
        """
        party = self._require_party(party_id)

        # Count and delete together so no entry can be orphaned in between
        with self.db.unit_of_work():
            transaction_count = self.db.get_party_transaction_count(party_id)
            if transaction_count > 0:
                logger.warning(
                    "Refusing to delete party %s with %d transaction(s)", party_id, transaction_count
                )
                raise DependencyError(party_delete_blocked(party.name, transaction_count))
            self.db.delete_party(party_id)
        logger.info("Deleted party %s '%s'", party_id, party.name)

    def outstanding_summary(self, project_id: int) -> OutstandingSummary:
        """Totals of what the project owes and is owed across its parties."""
        parties = self.db.list_parties(project_id)
        we_owe = sum((p.current_balance for p in parties if p.current_balance < ZERO), ZERO)
        owed_to_us = sum((p.current_balance for p in parties if p.current_balance > ZERO), ZERO)
        settled = sum(1 for p in parties if p.current_balance == ZERO)
        return OutstandingSummary(we_owe=abs(we_owe), owed_to_us=owed_to_us, settled_count=settled)
