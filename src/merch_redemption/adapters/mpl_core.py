"""Metaplex Core asset index and burn instruction builder."""

import base64
import io
import logging
from dataclasses import dataclass
from typing import Protocol

from borsh_construct import CStruct, String, U8
from construct import ConstructError
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from merch_redemption.adapters.solana_rpc_client import SolanaRpcClient, account_data
from merch_redemption.domain.redemption import RedeemableAsset

MPL_CORE_PROGRAM_ID = Pubkey.from_string("CoREENxT6tW1HoK8ypY1SxRMZTcVPm7R94rH4PZNhX7d")

ASSET_V1_KEY = 1
_BURN_V1 = 12
_OWNER_OFFSET = 1

_UPDATE_AUTHORITY_NONE = 0
_UPDATE_AUTHORITY_COLLECTION = 2

_AssetHeaderLayout = CStruct(
    "key" / U8,
    "owner" / U8[32],
    "update_authority_kind" / U8,
)
_AddressLayout = U8[32]
_AssetTextLayout = CStruct(
    "name" / String,
    "uri" / String,
)

_logger = logging.getLogger(__name__)


class AssetIndex(Protocol):
    """Read access to collectibles held by an owner."""

    async def fetch_assets_by_owner(self, owner: str) -> list[RedeemableAsset]:
        """Return every asset currently owned by `owner`."""


@dataclass
class MplCoreAssetIndex(AssetIndex):
    """Asset index backed by getProgramAccounts on the Core program."""

    rpc: SolanaRpcClient

    async def fetch_assets_by_owner(self, owner: str) -> list[RedeemableAsset]:
        """List AssetV1 accounts whose owner field equals `owner`."""
        accounts = await self.rpc.get_program_accounts(
            str(MPL_CORE_PROGRAM_ID),
            filters=[
                {
                    "memcmp": {
                        "offset": 0,
                        "bytes": base64.b64encode(bytes([ASSET_V1_KEY])).decode(),
                        "encoding": "base64",
                    }
                },
                {"memcmp": {"offset": _OWNER_OFFSET, "bytes": owner}},
            ],
        )
        assets = []
        for entry in accounts:
            asset = decode_asset(str(entry["pubkey"]), account_data(entry["account"]))
            if asset is None:
                _logger.warning("Skipping undecodable asset %s", entry["pubkey"])
                continue
            assets.append(asset)
        return assets


def decode_asset(address: str, data: bytes) -> RedeemableAsset | None:
    """Decode the base AssetV1 fields, ignoring any trailing plugin data."""
    stream = io.BytesIO(data)
    try:
        header = _AssetHeaderLayout.parse_stream(stream)
        if header.key != ASSET_V1_KEY:
            return None
        update_authority = None
        if header.update_authority_kind != _UPDATE_AUTHORITY_NONE:
            raw_address = bytes(_AddressLayout.parse_stream(stream))
            update_authority = str(Pubkey.from_bytes(raw_address))
        text = _AssetTextLayout.parse_stream(stream)
    except (ConstructError, ValueError):
        return None
    return RedeemableAsset(
        address=address,
        name=text.name,
        owner=str(Pubkey.from_bytes(bytes(header.owner))),
        update_authority=update_authority,
        collection=(
            update_authority
            if header.update_authority_kind == _UPDATE_AUTHORITY_COLLECTION
            else None
        ),
        uri=text.uri,
    )


def build_burn_ix(
    asset: Pubkey, collection: Pubkey | None, payer: Pubkey
) -> Instruction:
    """Build a BurnV1 instruction with the payer acting as authority."""
    # Omitted optional accounts are passed as the program id.
    placeholder = AccountMeta(
        pubkey=MPL_CORE_PROGRAM_ID, is_signer=False, is_writable=False
    )
    accounts = [
        AccountMeta(pubkey=asset, is_signer=False, is_writable=True),
        (
            AccountMeta(pubkey=collection, is_signer=False, is_writable=True)
            if collection is not None
            else placeholder
        ),
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        placeholder,
        placeholder,
        placeholder,
    ]
    # Discriminator followed by an absent compression proof.
    data = bytes([_BURN_V1, 0])
    return Instruction(program_id=MPL_CORE_PROGRAM_ID, data=data, accounts=accounts)
