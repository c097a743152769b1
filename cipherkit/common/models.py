"""Pydantic models for the values cipherkit passes around.

These are small value objects: the split form of a ciphertext buffer and
an ECDSA signature as its two integer components. Both are immutable.
"""

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from ..crypto.sign import decode_signature, encode_signature
from .errors import ShortCiphertextError


class Model(BaseModel):
    """Base class for all cipherkit models."""
    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
        validate_default=True,
    )


class CiphertextEnvelope(Model):
    """IV (or nonce), payload and optional AEAD tag.

    The wire form is the plain concatenation ``iv ‖ payload ‖ tag``; either
    of ``iv`` and ``tag`` may be empty.
    """
    iv: bytes = b""
    payload: bytes = b""
    tag: bytes = b""

    def to_bytes(self) -> bytes:
        return self.iv + self.payload + self.tag

    @classmethod
    def split(cls, data: bytes, iv_size: int, tag_size: int = 0) -> "CiphertextEnvelope":
        if len(data) < iv_size + tag_size:
            raise ShortCiphertextError("ciphertext too short")
        end = len(data) - tag_size
        return cls(iv=data[:iv_size], payload=data[iv_size:end], tag=data[end:])


class ECDSASignature(Model):
    """ECDSA signature components."""
    r: int = Field(..., ge=0)
    s: int = Field(..., ge=0)

    def to_der(self) -> bytes:
        return encode_signature(self.r, self.s)

    @classmethod
    def from_der(cls, data: bytes) -> "ECDSASignature":
        r, s = decode_signature(data)
        return cls(r=r, s=s)
