"""Redemption state machine driving the five protocol steps."""

import asyncio
import logging
from dataclasses import dataclass

from solders.pubkey import Pubkey

from merch_redemption.domain.actions import (
    ActionLinks,
    ActionMenu,
    ActionParameter,
    CompletedAction,
    LinkedAction,
    SelectOption,
    TransactionProposal,
)
from merch_redemption.domain.redemption import SHIRT_SIZES, RedemptionConfig
from merch_redemption.domain.shipments import ShipmentRecord
from merch_redemption.errors import (
    ClientInputError,
    CompositionError,
    IneligibleError,
    PersistenceError,
)
from merch_redemption.services.composer import TransactionComposer
from merch_redemption.services.eligibility import (
    EligibilityService,
    find_asset_by_name,
    unique_names,
)
from merch_redemption.services.references import generate_reference, new_reference_key
from merch_redemption.services.shipments import ShipmentLedger
from merch_redemption.services.tasks import TaskScheduler

_logger = logging.getLogger(__name__)

NO_SHIRTS = "No T-Shirts to redeem"
INSUFFICIENT_FUNDS = "Insufficient funds to pay shipping fee"
NOT_AVAILABLE = "Redeem not available"
TRY_AGAIN_LATER = "Redeem not available, please try again later"
SIGNATURE_REQUIRED = "Transaction signature is required"

QUOTE_PATH = "/quote"
ELIGIBILITY_PATH = "/check-redeem-eligibility"
FORM_PATH = "/fill-shipment-form"
REDEEM_PATH = "/redeem"
COMPLETED_PATH = "/completed"

_FORM_FIELDS = ("name", "country", "address", "email", "nft_name", "size")


@dataclass(frozen=True)
class RedeemForm:
    """Shipping form submitted with the redeem step; fields may be missing."""

    name: str | None = None
    country: str | None = None
    address: str | None = None
    email: str | None = None
    nft_name: str | None = None
    size: str | None = None

    def is_complete(self) -> bool:
        return all(getattr(self, field_name) for field_name in _FORM_FIELDS)


@dataclass
class RedemptionService:
    """Stateless handlers for quote, eligibility, form, redeem and completed."""

    config: RedemptionConfig
    eligibility: EligibilityService
    composer: TransactionComposer
    ledger: ShipmentLedger
    scheduler: TaskScheduler

    def quote(self) -> ActionMenu:
        """Return the entry metadata with a freshly minted session reference."""
        session_reference = str(new_reference_key())
        return ActionMenu(
            title=self.config.title,
            icon=self.config.icon_url,
            description=self._fee_description(),
            label=self.config.title,
            links=ActionLinks(
                actions=[
                    LinkedAction(
                        href=self.config.href(ELIGIBILITY_PATH, session_reference),
                        label="Check eligibility",
                    )
                ]
            ),
        )

    async def check_eligibility(
        self, account: str, session_reference: str | None
    ) -> TransactionProposal:
        """Gate on assets and fee, then propose a reference-only transaction."""
        _logger.info("Eligibility check for session reference %s", session_reference)
        owner = parse_address(account, "Invalid account")
        assets = await self.eligibility.find_redeemable_assets(owner)
        if not assets:
            raise IneligibleError(NO_SHIRTS)
        if not await self.eligibility.is_fee_affordable(owner):
            raise IneligibleError(INSUFFICIENT_FUNDS)

        # Advisory commitment signal; never verified by later steps.
        reference = generate_reference()
        transaction = await self.composer.compose([reference.instruction], owner)
        return TransactionProposal.from_transaction(
            transaction,
            reference=str(reference.reference),
            next_href=self.config.href(FORM_PATH, session_reference),
        )

    async def fill_shipment_form(
        self, account: str, session_reference: str | None
    ) -> ActionMenu:
        """Return the shipping form built from the owner's current assets."""
        owner = parse_address(account, "Invalid account")
        assets = await self.eligibility.find_redeemable_assets(owner)
        if not assets:
            return ActionMenu(
                title=self.config.title,
                icon=self.config.icon_url,
                description=NO_SHIRTS,
                label="Not available",
                disabled=True,
            )
        affordable = await self.eligibility.is_fee_affordable(owner)
        return ActionMenu(
            title=self.config.title,
            icon=self.config.icon_url,
            description=self._fee_description(),
            label=self.config.title,
            disabled=not affordable,
            links=ActionLinks(
                actions=[
                    LinkedAction(
                        href=self.config.href(REDEEM_PATH, session_reference),
                        label="Redeem" if affordable else "Insufficient funds",
                        parameters=_form_parameters(unique_names(assets)),
                    )
                ]
            ),
        )

    async def redeem(
        self, account: str, session_reference: str | None, form: RedeemForm | None
    ) -> TransactionProposal:
        """Persist the shipment and propose the burn-and-pay transaction."""
        if not session_reference:
            _logger.error("Missing sessionReference")
            raise ClientInputError(NOT_AVAILABLE)
        reference_key = parse_address(session_reference, NOT_AVAILABLE)
        owner = parse_address(account, "Invalid account")
        if not await self.eligibility.is_fee_affordable(owner):
            raise IneligibleError(INSUFFICIENT_FUNDS)
        _logger.info(
            "Redeem requested for session reference %s: %s", session_reference, form
        )

        assets = await self.eligibility.find_redeemable_assets(owner)
        if form is None or not form.is_complete():
            _logger.error("Invalid redeem data: %s", form)
            raise ClientInputError(NOT_AVAILABLE)
        asset = find_asset_by_name(assets, form.nft_name)
        if asset is None:
            _logger.error(
                "Invalid NFT name: %s, available names: %s",
                form.nft_name,
                ", ".join(item.name for item in assets),
            )
            raise ClientInputError(NOT_AVAILABLE)

        reference = generate_reference(reference_key)
        try:
            transaction = await self.composer.compose_burn_and_pay(
                asset, owner, reference
            )
            await asyncio.to_thread(
                self.ledger.upsert_shipment,
                ShipmentRecord(
                    session_reference=session_reference,
                    name=form.name,
                    country=form.country,
                    address=form.address,
                    wallet_address=account,
                    t_shirt=form.nft_name,
                    t_shirt_size=form.size,
                    contact=form.email,
                    burn_tx_reference=str(reference.reference),
                ),
            )
        except (CompositionError, PersistenceError):
            _logger.exception("Failed to prepare redeem transaction")
            raise ClientInputError(TRY_AGAIN_LATER) from None

        return TransactionProposal.from_transaction(
            transaction,
            reference=str(reference.reference),
            next_href=self.config.href(COMPLETED_PATH, session_reference),
        )

    def completed(
        self, session_reference: str | None, signature: str | None
    ) -> CompletedAction:
        """Acknowledge completion and defer the settlement signature update."""
        if not session_reference:
            _logger.error("Missing sessionReference")
            raise ClientInputError(NOT_AVAILABLE)
        if not signature:
            _logger.error("Missing signature")
            raise ClientInputError(SIGNATURE_REQUIRED)
        self.scheduler.submit(
            f"record burn signature for {session_reference}",
            self.ledger.update_signature,
            session_reference,
            signature,
        )
        return CompletedAction(
            title=self.config.title,
            icon=self.config.icon_url,
            description=f"{self.config.title} via this blink",
            label="Completed",
        )

    def _fee_description(self) -> str:
        fee = self.config.delivery_fee
        return (
            f"{self.config.title} via this blink. The shipping fee is "
            f"{fee.amount} {fee.currency}, please make sure you have enough funds "
            "in your wallet."
        )


def parse_address(value: str | None, message: str) -> Pubkey:
    """Parse a base58 address, treating anything malformed as client input."""
    try:
        return Pubkey.from_string(value or "")
    except ValueError:
        raise ClientInputError(message) from None


def _form_parameters(shirt_names: list[str]) -> list[ActionParameter]:
    return [
        ActionParameter(name="name", label="Name"),
        ActionParameter(name="country", label="Country"),
        ActionParameter(name="address", label="Address", type="textarea"),
        ActionParameter(name="email", label="Email", type="email"),
        ActionParameter(
            name="nftName",
            label="T-Shirt",
            type="select",
            options=[
                SelectOption(label=name, value=name, selected=False)
                for name in shirt_names
            ],
        ),
        ActionParameter(
            name="size",
            label="Size",
            type="select",
            options=[
                SelectOption(label=label, value=value) for label, value in SHIRT_SIZES
            ],
        ),
    ]
