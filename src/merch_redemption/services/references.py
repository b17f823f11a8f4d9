"""Correlation references embedded in proposed transactions."""

from dataclasses import dataclass

from solders.instruction import AccountMeta, Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey

# Memo v1 logs its data without requiring the listed accounts to sign.
MEMO_V1_PROGRAM_ID = Pubkey.from_string("Memo1UhkJRfHyvLMcVucJwxXeuD728EqVDDwQDxFMNo")


@dataclass(frozen=True)
class ProposalReference:
    """A reference key and the marker instruction carrying it."""

    reference: Pubkey
    instruction: Instruction


def new_reference_key() -> Pubkey:
    """Mint a fresh, globally unique address-shaped token."""
    return Keypair().pubkey()


def generate_reference(reference: Pubkey | None = None) -> ProposalReference:
    """Build a read-only, non-signing marker for `reference` (fresh if omitted)."""
    key = reference if reference is not None else new_reference_key()
    instruction = Instruction(
        program_id=MEMO_V1_PROGRAM_ID,
        data=str(key).encode(),
        accounts=[AccountMeta(pubkey=key, is_signer=False, is_writable=False)],
    )
    return ProposalReference(reference=key, instruction=instruction)
