"""
Instruction builders.

Pure functions from validated input to a ``solders`` Instruction. Encoder
failures are re-raised as InstructionBuildException carrying the
encoder's message.
"""

import logging

from borsh_construct import CStruct, Option, U8
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import TransferParams as SystemTransferParams
from solders.system_program import transfer as system_transfer
from solders.sysvar import RENT
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID
from spl.token.instructions import MintToParams, TransferParams, mint_to, transfer

from soltool.exceptions import InstructionBuildException
from soltool.validation import (
    CreateMintInput,
    MintToInput,
    SolTransferInput,
    TokenTransferInput,
)

logger = logging.getLogger(__name__)

INITIALIZE_MINT_TAG = 0

# Absent freeze authority packs as a lone 0 tag, so the payload is 35 bytes.
InitializeMintLayout = CStruct(
    "instruction" / U8,
    "decimals" / U8,
    "mint_authority" / U8[32],
    "freeze_authority" / Option(U8[32]),
)


def _check_token_program(program_id: Pubkey) -> None:
    if program_id != TOKEN_PROGRAM_ID:
        raise ValueError("Incorrect program id for instruction")


def associated_token_address(wallet: Pubkey, mint: Pubkey) -> Pubkey:
    """Derive the associated token account holding ``mint`` for ``wallet``."""
    address, _ = Pubkey.find_program_address(
        [bytes(wallet), bytes(TOKEN_PROGRAM_ID), bytes(mint)],
        ASSOCIATED_TOKEN_PROGRAM_ID,
    )
    return address


def build_initialize_mint(
    params: CreateMintInput, program_id: Pubkey = TOKEN_PROGRAM_ID
) -> Instruction:
    """
    Token program InitializeMint.

    Accounts: mint (writable), rent sysvar. No freeze authority.
    """
    try:
        _check_token_program(program_id)
        data = InitializeMintLayout.build(
            {
                "instruction": INITIALIZE_MINT_TAG,
                "decimals": params.decimals,
                "mint_authority": list(bytes(params.mint_authority)),
                "freeze_authority": None,
            }
        )
    except Exception as e:
        raise InstructionBuildException(f"Failed to build instruction: {e}")

    accounts = [
        AccountMeta(pubkey=params.mint, is_signer=False, is_writable=True),
        AccountMeta(pubkey=RENT, is_signer=False, is_writable=False),
    ]
    return Instruction(program_id=program_id, data=data, accounts=accounts)


def build_mint_to(
    params: MintToInput, program_id: Pubkey = TOKEN_PROGRAM_ID
) -> Instruction:
    """Token program MintTo with a single (non-multisig) authority."""
    try:
        _check_token_program(program_id)
        return mint_to(
            MintToParams(
                program_id=program_id,
                mint=params.mint,
                dest=params.destination,
                mint_authority=params.authority,
                amount=params.amount,
                signers=[],
            )
        )
    except Exception as e:
        raise InstructionBuildException(f"Failed to build mint instruction: {e}")


def build_sol_transfer(params: SolTransferInput) -> Instruction:
    """System program transfer of ``lamports`` from sender to recipient."""
    try:
        return system_transfer(
            SystemTransferParams(
                from_pubkey=params.sender,
                to_pubkey=params.recipient,
                lamports=params.lamports,
            )
        )
    except Exception as e:
        raise InstructionBuildException(f"Failed to build instruction: {e}")


def build_token_transfer(
    params: TokenTransferInput, program_id: Pubkey = TOKEN_PROGRAM_ID
) -> Instruction:
    """
    Token program Transfer between the owner's and the destination
    wallet's associated token accounts.

    Accounts: source ATA (writable), destination ATA (writable),
    owner (signer).
    """
    source = associated_token_address(params.owner, params.mint)
    dest = associated_token_address(params.destination, params.mint)
    logger.debug("Derived token accounts source=%s dest=%s", source, dest)

    try:
        _check_token_program(program_id)
        return transfer(
            TransferParams(
                program_id=program_id,
                source=source,
                dest=dest,
                owner=params.owner,
                amount=params.amount,
                signers=[],
            )
        )
    except Exception as e:
        raise InstructionBuildException(f"Failed to build transfer instruction: {e}")
