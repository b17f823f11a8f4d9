"""Eligibility rules for merch redemption."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from solders.pubkey import Pubkey

from merch_redemption.adapters.mpl_core import AssetIndex
from merch_redemption.domain.redemption import RedeemableAsset, RedemptionConfig
from merch_redemption.services.balances import BalanceResolver

_logger = logging.getLogger(__name__)


@dataclass
class EligibilityService:
    """Decides which assets an owner can redeem and whether the fee is covered."""

    asset_index: AssetIndex
    balance_resolver: BalanceResolver
    config: RedemptionConfig

    async def find_redeemable_assets(self, owner: Pubkey) -> list[RedeemableAsset]:
        """Return owned assets in the merch collection with a prize name."""
        assets = await self.asset_index.fetch_assets_by_owner(str(owner))
        redeemable = [
            asset
            for asset in assets
            if asset.update_authority == self.config.collection_address
            and asset.name in self.config.prize_names
        ]
        # Index order is not stable across RPC nodes; address order is.
        return sorted(redeemable, key=lambda asset: asset.address)

    async def is_fee_affordable(self, owner: Pubkey) -> bool:
        """Return true when the owner holds at least the delivery fee."""
        fee = self.config.delivery_fee
        amount = await self.balance_resolver.resolve_balance(
            owner, Pubkey.from_string(fee.mint)
        )
        balance = Decimal(amount).scaleb(-fee.decimals)
        _logger.info("Fee balance for %s: %s %s", owner, balance, fee.currency)
        return balance >= fee.amount


def unique_names(assets: list[RedeemableAsset]) -> list[str]:
    """Return asset names in first-seen order without duplicates."""
    return list(dict.fromkeys(asset.name for asset in assets))


def find_asset_by_name(
    assets: list[RedeemableAsset], name: str
) -> RedeemableAsset | None:
    """Return the first asset carrying `name`, if any."""
    return next((asset for asset in assets if asset.name == name), None)
