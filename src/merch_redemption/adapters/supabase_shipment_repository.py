"""Supabase-backed shipment repository."""

from dataclasses import dataclass

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from merch_redemption.domain.shipments import ShipmentRecord
from merch_redemption.errors import PersistenceError
from merch_redemption.services.shipments import ShipmentRepository

_TABLE = "bp_merch_shipments"


@dataclass
class SupabaseShipmentRepository(ShipmentRepository):
    """Supabase implementation for the shipment ledger."""

    client: Client

    def upsert_shipment(self, record: ShipmentRecord) -> None:
        """Upsert the shipping columns on session_reference conflicts."""
        # burn_tx_signature is omitted so a merge never clears it.
        payload = {
            "session_reference": record.session_reference,
            "name": record.name,
            "country": record.country,
            "address": record.address,
            "wallet_address": record.wallet_address,
            "t_shirt": record.t_shirt,
            "t_shirt_size": record.t_shirt_size,
            "contact": record.contact,
            "burn_tx_reference": record.burn_tx_reference,
        }
        try:
            self.client.table(_TABLE).upsert(
                payload, on_conflict="session_reference"
            ).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise PersistenceError() from exc

    def update_burn_tx_signature(self, session_reference: str, signature: str) -> int:
        """Set burn_tx_signature for an existing row only."""
        try:
            response = (
                self.client.table(_TABLE)
                .update({"burn_tx_signature": signature})
                .eq("session_reference", session_reference)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise PersistenceError() from exc
        return len(response.data or [])
