"""Exception types raised by cipherkit.

Every error is raised to the immediate caller. Nothing inside the package
retries or swallows these, and wrapped library exceptions are chained so
the original cause stays visible.
"""

from enum import Enum


class CipherkitError(Exception):
    """Base class for all cipherkit errors."""


class InvalidKeyLengthError(CipherkitError, ValueError):
    """Key length is not allowed for the requested algorithm."""

    def __init__(self, algorithm: str, requirement: str):
        self.algorithm = algorithm
        self.requirement = requirement
        super().__init__(f"invalid key length: must be {requirement} for {algorithm}")


class CipherInitError(CipherkitError):
    """The underlying cipher (or AEAD) object could not be constructed."""


class RandomSourceError(CipherkitError):
    """The random source failed or returned fewer bytes than requested."""


class ShortCiphertextError(CipherkitError, ValueError):
    """Ciphertext is shorter than the IV, nonce or block it must contain."""


class NotBlockAlignedError(CipherkitError, ValueError):
    """Data for a block mode is not a multiple of the block size."""


class InvalidPaddingError(CipherkitError, ValueError):
    """Unpadding found an inconsistent padding count or padding bytes."""


class AuthenticationError(CipherkitError):
    """AEAD tag verification failed."""


class UnsupportedModeError(CipherkitError, ValueError):
    """The algorithm has no implementation of the requested mode."""


class InvalidIVLengthError(CipherkitError, ValueError):
    """An explicit IV or nonce has the wrong length for the mode."""


class InvalidEncodingError(CipherkitError, ValueError):
    """Hex input could not be decoded."""


class LegacyModeDisabledError(CipherkitError):
    """Legacy key-as-IV helpers were disabled through configuration."""


class SignatureEncodeError(CipherkitError, ValueError):
    """An (r, s) pair cannot be represented by the short-form DER codec."""


class DERErrorKind(str, Enum):
    TOO_SHORT = "too_short"
    SEQUENCE_TAG = "sequence_tag"
    SEQUENCE_LENGTH = "sequence_length"
    R_TAG = "r_tag"
    R_LENGTH = "r_length"
    S_TAG = "s_tag"
    S_LENGTH = "s_length"


class DERDecodeError(CipherkitError, ValueError):
    """A DER signature could not be decoded.

    ``kind`` tells which part of the structure was malformed.
    """

    def __init__(self, kind: DERErrorKind, message: str):
        self.kind = kind
        super().__init__(message)


__all__ = [
    "CipherkitError",
    "InvalidKeyLengthError",
    "CipherInitError",
    "RandomSourceError",
    "ShortCiphertextError",
    "NotBlockAlignedError",
    "InvalidPaddingError",
    "AuthenticationError",
    "UnsupportedModeError",
    "InvalidIVLengthError",
    "InvalidEncodingError",
    "LegacyModeDisabledError",
    "SignatureEncodeError",
    "DERErrorKind",
    "DERDecodeError",
]
