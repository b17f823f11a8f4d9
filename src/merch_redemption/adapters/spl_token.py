"""SPL Token program helpers."""

from borsh_construct import CStruct, U8, U64
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from merch_redemption.adapters.solana_rpc_client import account_data

TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
ASSOCIATED_TOKEN_PROGRAM_ID = Pubkey.from_string(
    "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"
)

_TRANSFER = 3

# Only the leading fields of the 165-byte token account are decoded.
TokenAccountLayout = CStruct(
    "mint" / U8[32],
    "owner" / U8[32],
    "amount" / U64,
)


def derive_ata(owner: Pubkey, mint: Pubkey) -> Pubkey:
    """Derive the associated token account of `owner` for `mint`."""
    return Pubkey.find_program_address(
        [bytes(owner), bytes(TOKEN_PROGRAM_ID), bytes(mint)],
        ASSOCIATED_TOKEN_PROGRAM_ID,
    )[0]


def is_token_account(account_info: dict[str, object] | None) -> bool:
    """Return true when the RPC account info is owned by the token program."""
    return account_info is not None and account_info.get("owner") == str(
        TOKEN_PROGRAM_ID
    )


def decode_token_amount(account_info: dict[str, object]) -> int:
    """Decode the raw amount held by a token account."""
    parsed = TokenAccountLayout.parse(account_data(account_info))
    return int(parsed.amount)


def build_spl_transfer_ix(
    source: Pubkey, dest: Pubkey, owner: Pubkey, amount: int
) -> Instruction:
    """Build a token Transfer instruction signed by `owner`."""
    data = bytes([_TRANSFER]) + amount.to_bytes(8, "little")
    metas = [
        AccountMeta(pubkey=source, is_signer=False, is_writable=True),
        AccountMeta(pubkey=dest, is_signer=False, is_writable=True),
        AccountMeta(pubkey=owner, is_signer=True, is_writable=False),
    ]
    return Instruction(program_id=TOKEN_PROGRAM_ID, data=data, accounts=metas)
