from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


# ================================================================
# Requests
#
# Every field defaults to None so a missing field reaches the validator
# and is reported in the envelope instead of as a framework error.
# Numeric fields are untyped here for the same reason; the validator
# rejects anything but a plain integer.
# ================================================================


class TokenCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mint_authority: Optional[str] = Field(default=None, alias="mintAuthority")
    mint: Optional[str] = None
    decimals: Optional[Any] = None          # u8


class MintTokenRequest(BaseModel):
    mint: Optional[str] = None
    destination: Optional[str] = None       # token account receiving the supply
    authority: Optional[str] = None
    amount: Optional[Any] = None            # u64


class SignMessageRequest(BaseModel):
    message: Optional[str] = None
    secret: Optional[str] = None            # base58, 64 bytes


class VerifyMessageRequest(BaseModel):
    message: Optional[str] = None
    signature: Optional[str] = None         # base64, 64 bytes
    pubkey: Optional[str] = None            # base58, 32 bytes


class SendSolRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    lamports: Optional[Any] = None          # u64, > 0


class SendTokenRequest(BaseModel):
    destination: Optional[str] = None       # destination wallet, not its token account
    mint: Optional[str] = None
    owner: Optional[str] = None             # source wallet
    amount: Optional[Any] = None            # u64, > 0


# ================================================================
# Response payloads
# ================================================================


class KeypairResponse(BaseModel):
    pubkey: str
    secret: str


class AccountMetaResponse(BaseModel):
    pubkey: str
    is_signer: bool
    is_writable: bool


class TokenAccountMetaResponse(BaseModel):
    pubkey: str
    isSigner: bool
    isWritable: bool


class InstructionResponse(BaseModel):
    program_id: str
    accounts: List[AccountMetaResponse]
    instruction_data: str                   # base64


class SendSolResponse(BaseModel):
    program_id: str
    accounts: List[str]
    instruction_data: str


class SendTokenResponse(BaseModel):
    program_id: str
    accounts: List[TokenAccountMetaResponse]
    instruction_data: str


class SignMessageResponse(BaseModel):
    signature: str                          # base64
    public_key: str
    message: str


class VerifyMessageResponse(BaseModel):
    valid: bool
    message: str
    pubkey: str


# ================================================================
# Envelope
# ================================================================


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
