"""
Response assembly.

Every outcome leaves the service as one of two envelopes:

    {"success": true, "data": {...}}
    {"success": false, "error": "<message>"}

Both are sent with HTTP 200; callers branch on ``success``.
"""

import base64
import logging
from typing import List

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from solders.instruction import Instruction

from soltool.exceptions import SolToolException
from soltool.models import (
    AccountMetaResponse,
    ApiResponse,
    ErrorResponse,
    InstructionResponse,
    SendSolResponse,
    SendTokenResponse,
    TokenAccountMetaResponse,
)
from soltool.utils import encode_address

logger = logging.getLogger(__name__)

ENVELOPE_STATUS = status.HTTP_200_OK


def success(data) -> ApiResponse:
    return ApiResponse(success=True, data=data)


def failure(message: str) -> JSONResponse:
    body = ErrorResponse(error=message)
    return JSONResponse(status_code=ENVELOPE_STATUS, content=jsonable_encoder(body))


def _instruction_data(ix: Instruction) -> str:
    return base64.b64encode(bytes(ix.data)).decode("utf-8")


def instruction_response(ix: Instruction) -> InstructionResponse:
    accounts = [
        AccountMetaResponse(
            pubkey=encode_address(meta.pubkey),
            is_signer=meta.is_signer,
            is_writable=meta.is_writable,
        )
        for meta in ix.accounts
    ]
    return InstructionResponse(
        program_id=encode_address(ix.program_id),
        accounts=accounts,
        instruction_data=_instruction_data(ix),
    )


def sol_transfer_response(ix: Instruction) -> SendSolResponse:
    accounts: List[str] = [encode_address(meta.pubkey) for meta in ix.accounts]
    return SendSolResponse(
        program_id=encode_address(ix.program_id),
        accounts=accounts,
        instruction_data=_instruction_data(ix),
    )


def token_transfer_response(ix: Instruction) -> SendTokenResponse:
    accounts = [
        TokenAccountMetaResponse(
            pubkey=encode_address(meta.pubkey),
            isSigner=meta.is_signer,
            isWritable=meta.is_writable,
        )
        for meta in ix.accounts
    ]
    return SendTokenResponse(
        program_id=encode_address(ix.program_id),
        accounts=accounts,
        instruction_data=_instruction_data(ix),
    )


async def soltool_exception_handler(request: Request, exc: SolToolException) -> JSONResponse:
    logger.info(
        "Rejected %s: %s %s",
        request.url.path,
        type(exc).__name__,
        exc.message,
    )
    return failure(exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON or a wrongly typed field."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request body: {first.get('msg', 'invalid value')}"
        if loc:
            message = f"{message} ({loc})"
    else:
        message = "Invalid request body"
    logger.info("Rejected %s: %s", request.url.path, message)
    return failure(message)
