"""Shipment ledger."""

import logging
from dataclasses import dataclass
from typing import Protocol

from merch_redemption.domain.shipments import ShipmentRecord
from merch_redemption.errors import PersistenceError

_logger = logging.getLogger(__name__)


class ShipmentRepository(Protocol):
    """Persistence interface for shipment records."""

    def upsert_shipment(self, record: ShipmentRecord) -> None:
        """Insert or replace the shipping fields keyed by session reference."""

    def update_burn_tx_signature(self, session_reference: str, signature: str) -> int:
        """Set the settlement signature and return the number of rows touched."""


@dataclass
class ShipmentLedger:
    """Idempotent shipment persistence decoupled from settlement."""

    repository: ShipmentRepository

    def upsert_shipment(self, record: ShipmentRecord) -> None:
        """Persist shipping details; the settlement signature is left untouched."""
        self.repository.upsert_shipment(record)

    def update_signature(self, session_reference: str, signature: str) -> None:
        """Record the broadcast signature; unknown references are ignored."""
        try:
            updated = self.repository.update_burn_tx_signature(
                session_reference, signature
            )
        except PersistenceError:
            _logger.exception(
                "Failed to record burn signature",
                extra={"session_reference": session_reference},
            )
            return
        if not updated:
            _logger.warning(
                "No shipment found for session reference %s", session_reference
            )
