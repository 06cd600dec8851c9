"""Party balance synchronization.

A party's ``current_balance`` is a cache. It is never adjusted by deltas;
every mutation that can affect it calls ``BalanceSynchronizer.sync`` which
re-derives the value from the opening balance and the party's complete
transaction history.
"""

import logging
from decimal import Decimal

from rojmel.database.base import Database
from rojmel.domain.entities import Perspective
from rojmel.domain.errors import NotFoundError, party_not_found
from rojmel.domain.ledger import compute_totals

logger = logging.getLogger(__name__)


class BalanceSynchronizer:
    """Recomputes and stores party balances."""

    def __init__(self, db: Database):
        self.db = db

    def compute(self, party_id: int) -> Decimal:
        """Compute a party's balance from scratch without storing it.

        Raises:
            NotFoundError: If the party does not exist
        """
        party = self.db.get_party(party_id)
        if party is None:
            raise NotFoundError(party_not_found(party_id))

        transactions = self.db.list_transactions(party_id=party_id)
        totals = compute_totals(transactions, party.opening_balance, Perspective.PARTY)
        return totals.closing_balance

    def sync(self, party_id: int) -> Decimal:
        """Recompute a party's current balance and persist it.

        Args:
            party_id: Party to synchronize

        Returns:
            The stored current balance

        Raises:
            NotFoundError: If the party does not exist
        """
        balance = self.compute(party_id)
        self.db.update_party_balance(party_id, balance)
        logger.debug("Synced party %s balance to %s", party_id, balance)
        return balance

    def sync_many(self, party_ids) -> dict[int, Decimal]:
        """Sync each distinct, non-empty party id once."""
        results: dict[int, Decimal] = {}
        for party_id in party_ids:
            if party_id is None or party_id in results:
                continue
            results[party_id] = self.sync(party_id)
        return results

    def sync_project(self, project_id: int) -> dict[int, Decimal]:
        """Resync every party of a project (repair tool)."""
        with self.db.unit_of_work():
            return self.sync_many(p.id for p in self.db.list_parties(project_id))
