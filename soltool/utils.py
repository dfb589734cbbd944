import base64
import binascii
import logging
from dataclasses import dataclass

import base58
import nacl.signing
from nacl.exceptions import BadSignatureError, CryptoError
from solders.pubkey import Pubkey

from soltool.exceptions import (
    InvalidAddressException,
    InvalidSecretException,
    InvalidSignatureFormatException,
)

logger = logging.getLogger(__name__)

PUBKEY_LENGTH = 32
SECRET_LENGTH = 64
SIGNATURE_LENGTH = 64


@dataclass(frozen=True)
class KeyPair:
    """Ed25519 seed plus the public key derived from it."""

    seed: bytes
    pubkey: Pubkey

    @classmethod
    def from_seed(cls, seed: bytes) -> "KeyPair":
        verify_key = nacl.signing.SigningKey(seed).verify_key
        return cls(seed=seed, pubkey=Pubkey.from_bytes(verify_key.encode()))

    def to_bytes(self) -> bytes:
        """64-byte wallet form: seed followed by public key."""
        return self.seed + bytes(self.pubkey)


def decode_address(text: str, error: str = "Invalid public key") -> Pubkey:
    """
    Decode a base-58 address into a 32-byte public key.

    ``error`` is the message carried by the raised exception so callers
    can name the role of the address (sender, mint, ...).
    """
    if text != text.strip():
        raise InvalidAddressException(error, {"reason": "surrounding whitespace"})
    try:
        raw = base58.b58decode(text)
    except ValueError:
        raise InvalidAddressException(error, {"reason": "not base58"})
    if len(raw) != PUBKEY_LENGTH:
        raise InvalidAddressException(error, {"reason": f"decoded to {len(raw)} bytes"})
    return Pubkey.from_bytes(raw)


def encode_address(pubkey: Pubkey) -> str:
    return base58.b58encode(bytes(pubkey)).decode("utf-8")


def decode_secret(text: str) -> KeyPair:
    """
    Decode a base-58 64-byte secret (seed + public key).

    The public half must be the one the seed derives; a mismatched pair
    would sign with a key other than the one it advertises.
    """
    if text != text.strip():
        raise InvalidSecretException("Invalid secret key", {"reason": "surrounding whitespace"})
    try:
        raw = base58.b58decode(text)
    except ValueError:
        raise InvalidSecretException("Invalid secret key", {"reason": "not base58"})
    if len(raw) != SECRET_LENGTH:
        raise InvalidSecretException(
            "Invalid secret key", {"reason": f"decoded to {len(raw)} bytes"}
        )

    keypair = KeyPair.from_seed(raw[:PUBKEY_LENGTH])
    if bytes(keypair.pubkey) != raw[PUBKEY_LENGTH:]:
        raise InvalidSecretException(
            "Failed to construct keypair", {"reason": "public half does not match seed"}
        )
    return keypair


def encode_secret(keypair: KeyPair) -> str:
    return base58.b58encode(keypair.to_bytes()).decode("utf-8")


def decode_signature(text: str) -> bytes:
    """Decode a base-64 signature, which must be exactly 64 bytes."""
    try:
        raw = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidSignatureFormatException(
            "Invalid signature format", {"reason": "not base64"}
        )
    if len(raw) != SIGNATURE_LENGTH:
        raise InvalidSignatureFormatException(
            "Invalid signature format", {"reason": f"decoded to {len(raw)} bytes"}
        )
    return raw


def encode_signature(signature: bytes) -> str:
    return base64.b64encode(signature).decode("utf-8")


def generate_keypair() -> KeyPair:
    """Fresh keypair from the OS entropy source."""
    signing_key = nacl.signing.SigningKey.generate()
    return KeyPair(
        seed=signing_key.encode(),
        pubkey=Pubkey.from_bytes(signing_key.verify_key.encode()),
    )


def sign_message(message: bytes, keypair: KeyPair) -> bytes:
    """Detached Ed25519 signature over ``message``."""
    signing_key = nacl.signing.SigningKey(keypair.seed)
    return signing_key.sign(message).signature


def verify_message(message: bytes, signature: bytes, pubkey: Pubkey) -> bool:
    """
    Check a detached Ed25519 signature.

    Any cryptographic mismatch, including a public key that is not a
    valid curve point, is reported as False.
    """
    try:
        verify_key = nacl.signing.VerifyKey(bytes(pubkey))
        verify_key.verify(message, signature)
        return True
    except (BadSignatureError, CryptoError, ValueError) as e:
        logger.debug("Signature verification failed: %s", e)
        return False
