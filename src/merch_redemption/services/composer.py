"""Unsigned transaction composition."""

from dataclasses import dataclass

from solders.hash import Hash
from solders.instruction import Instruction
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from merch_redemption.adapters.mpl_core import build_burn_ix
from merch_redemption.adapters.solana_rpc_client import FINALIZED, SolanaRpcClient
from merch_redemption.adapters.spl_token import build_spl_transfer_ix
from merch_redemption.domain.balances import AccountMissing
from merch_redemption.domain.redemption import RedeemableAsset, RedemptionConfig
from merch_redemption.errors import CompositionError
from merch_redemption.services.balances import BalanceResolver
from merch_redemption.services.references import ProposalReference


@dataclass
class TransactionComposer:
    """Builds unsigned versioned transactions for the client to sign."""

    rpc: SolanaRpcClient
    balance_resolver: BalanceResolver
    config: RedemptionConfig

    async def compose(
        self, instructions: list[Instruction], fee_payer: Pubkey
    ) -> VersionedTransaction:
        """Compile instructions against a fresh finalized blockhash."""
        blockhash = await self.rpc.get_latest_blockhash(FINALIZED)
        message = MessageV0.try_compile(
            fee_payer, instructions, [], Hash.from_string(blockhash)
        )
        signatures = [Signature.default()] * message.header.num_required_signatures
        return VersionedTransaction.populate(message, signatures)

    async def build_fee_transfer_ix(self, payer: Pubkey) -> Instruction:
        """Transfer the delivery fee between the payer and payee token accounts."""
        fee = self.config.delivery_fee
        mint = Pubkey.from_string(fee.mint)
        payee = Pubkey.from_string(fee.payee)
        payer_account = await self.balance_resolver.lookup_token_account(payer, mint)
        if isinstance(payer_account, AccountMissing):
            raise CompositionError(
                f"Payer wallet {payer} has no associated token account for {mint}"
            )
        payee_account = await self.balance_resolver.lookup_token_account(payee, mint)
        if isinstance(payee_account, AccountMissing):
            raise CompositionError(
                f"Payee wallet {payee} has no associated token account for {mint}"
            )
        return build_spl_transfer_ix(
            Pubkey.from_string(payer_account.address),
            Pubkey.from_string(payee_account.address),
            payer,
            fee.base_units,
        )

    async def compose_burn_and_pay(
        self,
        asset: RedeemableAsset,
        payer: Pubkey,
        reference: ProposalReference,
    ) -> VersionedTransaction:
        """Burn the asset, pay the delivery fee and mark the reference, in order."""
        collection = Pubkey.from_string(asset.collection) if asset.collection else None
        burn_ix = build_burn_ix(Pubkey.from_string(asset.address), collection, payer)
        fee_ix = await self.build_fee_transfer_ix(payer)
        return await self.compose([burn_ix, fee_ix, reference.instruction], payer)
