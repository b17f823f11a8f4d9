"""Domain models for merch redemption."""

from dataclasses import dataclass
from decimal import Decimal

DEFAULT_PRIZE_NAMES = (
    "OG SOL BROTHERS TEE",
    "DONALD TRUMP TEE",
    "FTX THE MOVIE",
    "JUNK MAIL TEE",
    "LA BIKER TEE",
)

SHIRT_SIZES = (
    ("Small", "s"),
    ("Medium", "m"),
    ("Large", "l"),
    ("X-Large", "xl"),
)


@dataclass(frozen=True)
class DeliveryFee:
    """Fixed shipping charge paid in an SPL token."""

    amount: Decimal
    currency: str
    mint: str
    decimals: int
    payee: str

    @property
    def base_units(self) -> int:
        """Fee amount in the token's smallest unit."""
        return int(self.amount.scaleb(self.decimals))


@dataclass(frozen=True)
class RedemptionConfig:
    """Static redemption parameters shared by every component."""

    collection_address: str
    prize_names: tuple[str, ...]
    delivery_fee: DeliveryFee
    icon_url: str
    route_prefix: str = ""
    title: str = "Redeem your Superbasedd T-Shirt"

    def href(self, path: str, session_reference: str | None) -> str:
        """Build a protocol link carrying the session reference."""
        return f"{self.route_prefix}{path}?sessionReference={session_reference}"


@dataclass(frozen=True)
class RedeemableAsset:
    """An on-chain collectible as seen by the asset index."""

    address: str
    name: str
    owner: str
    update_authority: str | None
    collection: str | None
    uri: str = ""
