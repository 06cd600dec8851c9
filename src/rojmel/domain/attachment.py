"""Receipt attachment domain service."""

import logging
from typing import Optional

from rojmel.database.base import Database
from rojmel.domain.errors import NotFoundError, ValidationError, transaction_not_found

logger = logging.getLogger(__name__)


class AttachmentService:
    """Stores one receipt image per transaction."""

    def __init__(self, db: Database):
        self.db = db

    def _require_transaction(self, transaction_id: int) -> None:
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))

    def attach(self, transaction_id: int, data: bytes) -> None:
        """Attach data to a transaction, replacing any existing attachment.

        Raises:
            NotFoundError: If the transaction does not exist
            ValidationError: If the data is empty
        """
        self._require_transaction(transaction_id)
        if not data:
            raise ValidationError("Attachment is empty")
        self.db.save_attachment(transaction_id, data)
        logger.info("Attached %d byte(s) to transaction %s", len(data), transaction_id)

    def get(self, transaction_id: int) -> Optional[bytes]:
        """Return the attachment bytes, or None if there is none."""
        self._require_transaction(transaction_id)
        return self.db.get_attachment(transaction_id)

    def remove(self, transaction_id: int) -> None:
        """Delete the attachment and clear the transaction's flag."""
        self._require_transaction(transaction_id)
        self.db.delete_attachment(transaction_id)
        logger.info("Removed attachment from transaction %s", transaction_id)
