import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from soltool.config import get_settings
from soltool.exceptions import SolToolException
from soltool.instructions import (
    build_initialize_mint,
    build_mint_to,
    build_sol_transfer,
    build_token_transfer,
)
from soltool.models import (
    ApiResponse,
    InstructionResponse,
    KeypairResponse,
    MintTokenRequest,
    SendSolRequest,
    SendSolResponse,
    SendTokenRequest,
    SendTokenResponse,
    SignMessageRequest,
    SignMessageResponse,
    TokenCreateRequest,
    VerifyMessageRequest,
    VerifyMessageResponse,
)
from soltool.responses import (
    instruction_response,
    request_validation_handler,
    sol_transfer_response,
    soltool_exception_handler,
    success,
    token_transfer_response,
)
from soltool.utils import (
    encode_address,
    encode_secret,
    encode_signature,
    generate_keypair,
    sign_message,
    verify_message,
)
from soltool.validation import (
    validate_create_mint,
    validate_mint_to,
    validate_send_sol,
    validate_send_token,
    validate_sign,
    validate_verify,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="soltool")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(SolToolException, soltool_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)


@app.get("/", response_class=PlainTextResponse)
async def check():
    return "Hello World"


@app.post("/keypair", response_model=ApiResponse[KeypairResponse])
async def create_keypair():
    """Generates a new Ed25519 keypair. Nothing is stored."""
    keypair = generate_keypair()
    logger.debug("Generated keypair %s", keypair.pubkey)

    return success(
        KeypairResponse(
            pubkey=encode_address(keypair.pubkey),
            secret=encode_secret(keypair),
        )
    )


@app.post("/token/create", response_model=ApiResponse[InstructionResponse])
async def create_token(req: TokenCreateRequest):
    """InitializeMint instruction for an existing mint account."""
    params = validate_create_mint(req)
    logger.debug("Create token: mint=%s decimals=%d", params.mint, params.decimals)

    ix = build_initialize_mint(params)
    return success(instruction_response(ix))


@app.post("/token/mint", response_model=ApiResponse[InstructionResponse])
async def mint_token(req: MintTokenRequest):
    params = validate_mint_to(req)
    logger.debug(
        "Mint token: mint=%s destination=%s amount=%d",
        params.mint,
        params.destination,
        params.amount,
    )

    ix = build_mint_to(params)
    return success(instruction_response(ix))


@app.post("/message/sign", response_model=ApiResponse[SignMessageResponse])
async def sign(req: SignMessageRequest):
    params = validate_sign(req)
    logger.debug("Sign message for %s", params.keypair.pubkey)

    signature = sign_message(params.payload, params.keypair)
    return success(
        SignMessageResponse(
            signature=encode_signature(signature),
            public_key=encode_address(params.keypair.pubkey),
            message=params.message,
        )
    )


@app.post("/message/verify", response_model=ApiResponse[VerifyMessageResponse])
async def verify(req: VerifyMessageRequest):
    """A signature that does not match is reported as valid=false, not an error."""
    params = validate_verify(req)

    is_valid = verify_message(params.payload, params.signature, params.pubkey)
    logger.debug("Verify message for %s: %s", params.pubkey, is_valid)

    return success(
        VerifyMessageResponse(
            valid=is_valid,
            message=params.message,
            pubkey=req.pubkey,
        )
    )


@app.post("/send/sol", response_model=ApiResponse[SendSolResponse])
async def send_sol(req: SendSolRequest):
    params = validate_send_sol(req)
    logger.debug(
        "Send SOL: %s -> %s lamports=%d",
        params.sender,
        params.recipient,
        params.lamports,
    )

    ix = build_sol_transfer(params)
    return success(sol_transfer_response(ix))


@app.post("/send/token", response_model=ApiResponse[SendTokenResponse])
async def send_token(req: SendTokenRequest):
    params = validate_send_token(req)
    logger.debug(
        "Send token: mint=%s %s -> %s amount=%d",
        params.mint,
        params.owner,
        params.destination,
        params.amount,
    )

    ix = build_token_transfer(params)
    return success(token_transfer_response(ix))


def run():
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Server running on http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    run()
