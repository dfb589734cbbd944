import pytest
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.sysvar import RENT
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import get_associated_token_address

from soltool.exceptions import InstructionBuildException
from soltool.instructions import (
    associated_token_address,
    build_initialize_mint,
    build_mint_to,
    build_sol_transfer,
    build_token_transfer,
)
from soltool.utils import generate_keypair
from soltool.validation import (
    CreateMintInput,
    MintToInput,
    SolTransferInput,
    TokenTransferInput,
)


def new_pubkey() -> Pubkey:
    return generate_keypair().pubkey


def roles(ix):
    return [(meta.pubkey, meta.is_signer, meta.is_writable) for meta in ix.accounts]


def test_initialize_mint_layout():
    mint, authority = new_pubkey(), new_pubkey()
    ix = build_initialize_mint(CreateMintInput(mint=mint, mint_authority=authority, decimals=6))

    assert ix.program_id == TOKEN_PROGRAM_ID
    assert roles(ix) == [(mint, False, True), (RENT, False, False)]
    assert bytes(ix.data) == b"\x00" + b"\x06" + bytes(authority) + b"\x00"


def test_initialize_mint_decimals_pass_through():
    params = CreateMintInput(mint=new_pubkey(), mint_authority=new_pubkey(), decimals=255)
    assert bytes(build_initialize_mint(params).data)[1] == 255


def test_initialize_mint_wrong_program():
    params = CreateMintInput(mint=new_pubkey(), mint_authority=new_pubkey(), decimals=6)
    with pytest.raises(InstructionBuildException) as exc_info:
        build_initialize_mint(params, program_id=new_pubkey())
    assert exc_info.value.message.startswith("Failed to build instruction:")


def test_mint_to_layout():
    mint, dest, authority = new_pubkey(), new_pubkey(), new_pubkey()
    ix = build_mint_to(MintToInput(mint=mint, destination=dest, authority=authority, amount=2**64 - 1))

    assert ix.program_id == TOKEN_PROGRAM_ID
    assert roles(ix) == [(mint, False, True), (dest, False, True), (authority, True, False)]
    assert bytes(ix.data) == b"\x07" + b"\xff" * 8


def test_mint_to_wrong_program():
    params = MintToInput(mint=new_pubkey(), destination=new_pubkey(), authority=new_pubkey(), amount=1)
    with pytest.raises(InstructionBuildException) as exc_info:
        build_mint_to(params, program_id=SYSTEM_PROGRAM_ID)
    assert exc_info.value.message.startswith("Failed to build mint instruction:")


def test_sol_transfer_layout():
    sender, recipient = new_pubkey(), new_pubkey()
    ix = build_sol_transfer(SolTransferInput(sender=sender, recipient=recipient, lamports=1_000_000_000))

    assert ix.program_id == SYSTEM_PROGRAM_ID
    assert roles(ix) == [(sender, True, True), (recipient, False, True)]
    assert bytes(ix.data) == (2).to_bytes(4, "little") + (1_000_000_000).to_bytes(8, "little")


def test_associated_token_address_matches_spl():
    wallet, mint = new_pubkey(), new_pubkey()
    assert associated_token_address(wallet, mint) == get_associated_token_address(wallet, mint)


def test_token_transfer_layout():
    owner, dest, mint = new_pubkey(), new_pubkey(), new_pubkey()
    ix = build_token_transfer(TokenTransferInput(destination=dest, mint=mint, owner=owner, amount=500))

    assert ix.program_id == TOKEN_PROGRAM_ID
    assert roles(ix) == [
        (get_associated_token_address(owner, mint), False, True),
        (get_associated_token_address(dest, mint), False, True),
        (owner, True, False),
    ]
    assert bytes(ix.data) == b"\x03" + (500).to_bytes(8, "little")


def test_token_transfer_wrong_program():
    params = TokenTransferInput(destination=new_pubkey(), mint=new_pubkey(), owner=new_pubkey(), amount=1)
    with pytest.raises(InstructionBuildException) as exc_info:
        build_token_transfer(params, program_id=SYSTEM_PROGRAM_ID)
    assert exc_info.value.message.startswith("Failed to build transfer instruction:")


def test_builders_are_deterministic():
    owner, dest, mint = new_pubkey(), new_pubkey(), new_pubkey()
    params = TokenTransferInput(destination=dest, mint=mint, owner=owner, amount=7)
    assert build_token_transfer(params) == build_token_transfer(params)

    create = CreateMintInput(mint=mint, mint_authority=owner, decimals=0)
    assert build_initialize_mint(create) == build_initialize_mint(create)
