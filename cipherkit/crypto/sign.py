"""ECDSA signatures and their DER (r, s) encoding.

This module provides:
- encode_signature(): (r, s) -> DER SEQUENCE of two INTEGERs
- decode_signature(): DER bytes -> (r, s)
- ecdsa_sign() / ecdsa_verify(): sign and verify returning/accepting (r, s)
- sign_message() / verify_signature(): the same, with DER bytes on the wire
- curve_name() / is_valid_curve(): NIST curve helpers

The DER codec is deliberately narrow. It handles exactly
``30 LEN 02 LEN_r r 02 LEN_s s`` with single-byte (short form) lengths,
so each structure must stay under 128 bytes. That covers P-224, P-256
and P-384 signatures; P-521 signatures need long-form lengths and are
rejected by encode_signature().

Zero is written as an empty INTEGER (``02 00``) and read back as zero.
"""

from typing import Optional, Tuple, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from ..common.errors import DERDecodeError, DERErrorKind, SignatureEncodeError
from ..common.utils import int_to_bytes

SEQUENCE_TAG = 0x30
INTEGER_TAG = 0x02
MAX_SHORT_LENGTH = 0x7F

_CURVE_NAMES = {
    "secp224r1": "P-224",
    "secp256r1": "P-256",
    "secp384r1": "P-384",
    "secp521r1": "P-521",
}


def _integer_tlv(value: Optional[int], label: str) -> bytes:
    if value is None:
        raise SignatureEncodeError("signature components cannot be None")
    if value < 0:
        raise SignatureEncodeError(f"signature component {label} must be non-negative")
    body = int_to_bytes(value)
    # A set high bit would read back as negative.
    if body and body[0] & 0x80:
        body = b"\x00" + body
    if len(body) > MAX_SHORT_LENGTH:
        raise SignatureEncodeError(f"signature component {label} is too large for short-form DER")
    return bytes([INTEGER_TAG, len(body)]) + body


def encode_signature(r: Optional[int], s: Optional[int]) -> bytes:
    """Encode (r, s) as a DER SEQUENCE of two INTEGERs."""
    content = _integer_tlv(r, "r") + _integer_tlv(s, "s")
    if len(content) > MAX_SHORT_LENGTH:
        raise SignatureEncodeError("signature is too large for short-form DER")
    return bytes([SEQUENCE_TAG, len(content)]) + content


def _read_integer(data: bytes, label: str, tag_kind: DERErrorKind, length_kind: DERErrorKind) -> Tuple[int, bytes]:
    if len(data) < 2 or data[0] != INTEGER_TAG:
        raise DERDecodeError(tag_kind, f"invalid DER signature: missing INTEGER tag for {label}")
    n = data[1]
    if len(data) < n + 2:
        raise DERDecodeError(length_kind, f"invalid DER signature: incorrect {label} length")
    return int.from_bytes(data[2:2 + n], "big"), data[2 + n:]


def decode_signature(data: bytes) -> Tuple[int, int]:
    """Decode a DER signature into (r, s).

    Raises DERDecodeError; its ``kind`` names the part that was malformed.
    Bytes after the declared SEQUENCE are ignored.
    """
    if len(data) < 6:
        raise DERDecodeError(DERErrorKind.TOO_SHORT, "signature data too short")
    if data[0] != SEQUENCE_TAG:
        raise DERDecodeError(DERErrorKind.SEQUENCE_TAG, "invalid DER signature: missing SEQUENCE tag")
    seq_len = data[1]
    if len(data) < seq_len + 2:
        raise DERDecodeError(DERErrorKind.SEQUENCE_LENGTH, "invalid DER signature: incorrect sequence length")

    body = bytes(data[2:2 + seq_len])
    r, body = _read_integer(body, "r", DERErrorKind.R_TAG, DERErrorKind.R_LENGTH)
    s, _ = _read_integer(body, "s", DERErrorKind.S_TAG, DERErrorKind.S_LENGTH)
    return r, s


def ecdsa_sign(
    private_key: ec.EllipticCurvePrivateKey,
    data: Union[str, bytes],
    algorithm: Optional[hashes.HashAlgorithm] = None,
) -> Tuple[int, int]:
    """Sign `data` with ECDSA (SHA-256 by default) and return (r, s)."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    der = private_key.sign(data, ec.ECDSA(algorithm or hashes.SHA256()))
    return decode_dss_signature(der)


def ecdsa_verify(
    public_key: ec.EllipticCurvePublicKey,
    data: Union[str, bytes],
    r: int,
    s: int,
    algorithm: Optional[hashes.HashAlgorithm] = None,
) -> bool:
    """Verify an (r, s) ECDSA signature. Returns False on mismatch."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    if r is None or s is None or r <= 0 or s <= 0:
        return False
    try:
        public_key.verify(encode_dss_signature(r, s), data, ec.ECDSA(algorithm or hashes.SHA256()))
        return True
    except InvalidSignature:
        return False


def sign_message(
    private_key: ec.EllipticCurvePrivateKey,
    data: Union[str, bytes],
    algorithm: Optional[hashes.HashAlgorithm] = None,
) -> bytes:
    """Sign `data` and return the signature in this module's DER form."""
    r, s = ecdsa_sign(private_key, data, algorithm)
    return encode_signature(r, s)


def verify_signature(
    public_key: ec.EllipticCurvePublicKey,
    data: Union[str, bytes],
    signature: bytes,
    algorithm: Optional[hashes.HashAlgorithm] = None,
) -> bool:
    """Verify a DER signature from sign_message(). Malformed DER gives False."""
    try:
        r, s = decode_signature(signature)
    except DERDecodeError:
        return False
    return ecdsa_verify(public_key, data, r, s, algorithm)


def curve_name(curve: ec.EllipticCurve) -> str:
    return _CURVE_NAMES.get(curve.name, "Unknown")


def is_valid_curve(curve: ec.EllipticCurve) -> bool:
    return curve.name in _CURVE_NAMES


__all__ = [
    "encode_signature",
    "decode_signature",
    "ecdsa_sign",
    "ecdsa_verify",
    "sign_message",
    "verify_signature",
    "curve_name",
    "is_valid_curve",
]
