"""Domain models for shipment records."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ShipmentRecord:
    """Shipping details for one redemption attempt."""

    session_reference: str
    name: str
    country: str
    address: str
    wallet_address: str
    t_shirt: str
    t_shirt_size: str
    contact: str | None = None
    burn_tx_reference: str | None = None
    burn_tx_signature: str | None = None
