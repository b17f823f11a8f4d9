"""Balance and token account resolution."""

from dataclasses import dataclass

from solders.pubkey import Pubkey

from merch_redemption.adapters.solana_rpc_client import SolanaRpcClient
from merch_redemption.adapters.spl_token import (
    decode_token_amount,
    derive_ata,
    is_token_account,
)
from merch_redemption.domain.balances import (
    AccountMissing,
    BalanceFound,
    BalanceResult,
)


@dataclass
class BalanceResolver:
    """Reads current native and token balances; never caches."""

    rpc: SolanaRpcClient

    async def lookup_balance(
        self, owner: Pubkey, currency_mint: Pubkey | None = None
    ) -> BalanceResult:
        """Return the owner's balance, distinguishing a missing token account."""
        if currency_mint is None:
            lamports = await self.rpc.get_balance(str(owner))
            return BalanceFound(address=str(owner), amount=lamports)
        return await self.lookup_token_account(owner, currency_mint)

    async def lookup_token_account(
        self, owner: Pubkey, currency_mint: Pubkey
    ) -> BalanceResult:
        """Resolve the associated token account of `owner` for `currency_mint`."""
        address = str(derive_ata(owner, currency_mint))
        account_info = await self.rpc.get_account_info(address)
        # An account held by another program is treated as never created.
        if not is_token_account(account_info):
            return AccountMissing(address=address)
        return BalanceFound(address=address, amount=decode_token_amount(account_info))

    async def resolve_balance(
        self, owner: Pubkey, currency_mint: Pubkey | None = None
    ) -> int:
        """Return the spendable balance in base units; missing accounts hold 0."""
        result = await self.lookup_balance(owner, currency_mint)
        return result.amount
