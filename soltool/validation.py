"""
Request validation.

Each ``validate_*`` function checks one operation's request in a fixed
order and stops at the first failure:

1. required fields present and non-blank
2. addresses, secrets and signatures decode to the right byte length,
   and message text encodes as UTF-8
3. numeric fields are integers that fit their fixed-width type
4. transfer amounts are non-zero
5. transfer parties are distinct

The result is a typed input for the instruction builders or the
signer, so nothing downstream parses request text again.
"""

from dataclasses import dataclass
from typing import Any

from solders.pubkey import Pubkey

from soltool.exceptions import (
    AmountMustBePositiveException,
    InvalidMessageException,
    MissingFieldException,
    SameAddressException,
    ValueOutOfRangeException,
)
from soltool.models import (
    MintTokenRequest,
    SendSolRequest,
    SendTokenRequest,
    SignMessageRequest,
    TokenCreateRequest,
    VerifyMessageRequest,
)
from soltool.utils import KeyPair, decode_address, decode_secret, decode_signature

U8_MAX = 2**8 - 1
U64_MAX = 2**64 - 1


@dataclass(frozen=True)
class CreateMintInput:
    mint: Pubkey
    mint_authority: Pubkey
    decimals: int


@dataclass(frozen=True)
class MintToInput:
    mint: Pubkey
    destination: Pubkey
    authority: Pubkey
    amount: int


@dataclass(frozen=True)
class SignInput:
    message: str
    payload: bytes
    keypair: KeyPair


@dataclass(frozen=True)
class VerifyInput:
    message: str
    payload: bytes
    signature: bytes
    pubkey: Pubkey


@dataclass(frozen=True)
class SolTransferInput:
    sender: Pubkey
    recipient: Pubkey
    lamports: int


@dataclass(frozen=True)
class TokenTransferInput:
    destination: Pubkey
    mint: Pubkey
    owner: Pubkey
    amount: int


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def require_fields(**fields: Any) -> None:
    """Raise if any field is None or whitespace-only text."""
    missing = [name for name, value in fields.items() if _is_blank(value)]
    if missing:
        raise MissingFieldException("Missing required fields", {"fields": missing})


def require_range(value: Any, name: str, maximum: int) -> int:
    # bool is an int subclass; JSON true/false is not a number here.
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= maximum:
        raise ValueOutOfRangeException(
            f"Invalid {name}: must be an integer between 0 and {maximum}",
            {"field": name, "value": value},
        )
    return value


def encode_message(message: str) -> bytes:
    try:
        return message.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidMessageException("Invalid message encoding", {"reason": "not valid UTF-8 text"})


def require_positive(amount: int) -> int:
    if amount == 0:
        raise AmountMustBePositiveException("Amount must be greater than 0")
    return amount


def require_distinct(first: Pubkey, second: Pubkey, message: str) -> None:
    if first == second:
        raise SameAddressException(message, {"address": str(first)})


def validate_create_mint(req: TokenCreateRequest) -> CreateMintInput:
    require_fields(mintAuthority=req.mint_authority, mint=req.mint, decimals=req.decimals)

    mint = decode_address(req.mint, "Invalid mint pubkey")
    mint_authority = decode_address(req.mint_authority, "Invalid mint_authority pubkey")
    decimals = require_range(req.decimals, "decimals", U8_MAX)

    return CreateMintInput(mint=mint, mint_authority=mint_authority, decimals=decimals)


def validate_mint_to(req: MintTokenRequest) -> MintToInput:
    require_fields(
        mint=req.mint,
        destination=req.destination,
        authority=req.authority,
        amount=req.amount,
    )

    mint = decode_address(req.mint, "Invalid mint pubkey")
    destination = decode_address(req.destination, "Invalid destination pubkey")
    authority = decode_address(req.authority, "Invalid authority pubkey")
    amount = require_range(req.amount, "amount", U64_MAX)

    return MintToInput(mint=mint, destination=destination, authority=authority, amount=amount)


def validate_sign(req: SignMessageRequest) -> SignInput:
    require_fields(message=req.message, secret=req.secret)
    keypair = decode_secret(req.secret)
    payload = encode_message(req.message)

    return SignInput(message=req.message, payload=payload, keypair=keypair)


def validate_verify(req: VerifyMessageRequest) -> VerifyInput:
    require_fields(message=req.message, signature=req.signature, pubkey=req.pubkey)

    pubkey = decode_address(req.pubkey, "Invalid public key")
    signature = decode_signature(req.signature)
    payload = encode_message(req.message)

    return VerifyInput(message=req.message, payload=payload, signature=signature, pubkey=pubkey)


def validate_send_sol(req: SendSolRequest) -> SolTransferInput:
    require_fields(**{"from": req.from_, "to": req.to, "lamports": req.lamports})

    sender = decode_address(req.from_, "Invalid sender pubkey")
    recipient = decode_address(req.to, "Invalid recipient pubkey")
    lamports = require_positive(require_range(req.lamports, "lamports", U64_MAX))
    require_distinct(sender, recipient, "Sender and recipient cannot be the same")

    return SolTransferInput(sender=sender, recipient=recipient, lamports=lamports)


def validate_send_token(req: SendTokenRequest) -> TokenTransferInput:
    require_fields(
        destination=req.destination,
        mint=req.mint,
        owner=req.owner,
        amount=req.amount,
    )

    mint = decode_address(req.mint, "Invalid mint pubkey")
    owner = decode_address(req.owner, "Invalid owner pubkey")
    destination = decode_address(req.destination, "Invalid destination pubkey")
    amount = require_positive(require_range(req.amount, "amount", U64_MAX))
    require_distinct(owner, destination, "Owner and destination cannot be the same")

    return TokenTransferInput(destination=destination, mint=mint, owner=owner, amount=amount)
