"""
Request-level exceptions.

Every failure a caller can trigger is one of these. They are rendered
into the error envelope by the handlers registered in ``soltool.main``.
"""

from typing import Optional


class SolToolException(Exception):
    """Base exception for request validation and instruction building."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class MissingFieldException(SolToolException):
    """A required field is absent or blank."""


class InvalidAddressException(SolToolException):
    """Text is not a base-58 encoded 32-byte public key."""


class InvalidSecretException(SolToolException):
    """Text is not a usable base-58 encoded 64-byte keypair."""


class InvalidSignatureFormatException(SolToolException):
    """Text is not a base-64 encoded 64-byte signature."""


class ValueOutOfRangeException(SolToolException):
    """Numeric field does not fit its fixed-width type."""


class AmountMustBePositiveException(SolToolException):
    """Transfer amount is zero."""


class SameAddressException(SolToolException):
    """Both parties of a transfer are the same account."""


class InstructionBuildException(SolToolException):
    """Underlying instruction encoder rejected its input."""


class InvalidMessageException(SolToolException):
    """Message text cannot be encoded as UTF-8."""
