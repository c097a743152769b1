"""Blowfish helpers (ECB, CBC, CFB, OFB).

The key policy accepts 1 to 56 bytes. The ``cryptography`` Blowfish
primitive needs at least 4, so shorter keys are repeated before use. The
key schedule cycles through the key bytes, which makes a key and any
whole repetition of it the same cipher.
"""

from typing import Optional, Union

from cryptography.hazmat.decrepit.ciphers.algorithms import Blowfish

from ..common.utils import RandomSource
from .modes import CipherModeExecutor, CipherSpec, Mode, legacy_executor
from .padding import PaddingScheme

BLOCK_SIZE = 8
MIN_PRIMITIVE_KEY_SIZE = 4


def _blowfish(key: bytes) -> Blowfish:
    if 0 < len(key) < MIN_PRIMITIVE_KEY_SIZE:
        # ceil(4 / len) copies keeps the length a multiple of len(key).
        key = key * -(-MIN_PRIMITIVE_KEY_SIZE // len(key))
    return Blowfish(key)


BLOWFISH_SPEC = CipherSpec(
    name="Blowfish",
    block_size=BLOCK_SIZE,
    modes=frozenset({Mode.ECB, Mode.CBC, Mode.CFB, Mode.OFB}),
    cipher_factory=_blowfish,
)


def blowfish_executor(mode: Union[Mode, str], padding: Optional[PaddingScheme] = None, **kwargs) -> CipherModeExecutor:
    return CipherModeExecutor(BLOWFISH_SPEC, mode, padding, **kwargs)


def blowfish_encrypt(
    key: bytes,
    plaintext: bytes,
    mode: Union[Mode, str] = Mode.CBC,
    padding: Optional[PaddingScheme] = None,
    random_source: Optional[RandomSource] = None,
) -> bytes:
    """Encrypt with Blowfish. CBC/CFB/OFB output is IV (8 bytes) ‖ ciphertext."""
    return blowfish_executor(mode, padding, random_source=random_source).encrypt(key, plaintext)


def blowfish_decrypt(
    key: bytes,
    ciphertext: bytes,
    mode: Union[Mode, str] = Mode.CBC,
    padding: Optional[PaddingScheme] = None,
) -> bytes:
    return blowfish_executor(mode, padding).decrypt(key, ciphertext)


def blowfish_encrypt_ecb_hex_legacy(key: bytes, plaintext: bytes, padding: Optional[PaddingScheme] = None) -> bytes:
    """Deprecated: Blowfish-CBC with the (zero-extended) key as IV, hex output."""
    return legacy_executor(BLOWFISH_SPEC, padding).encrypt(key, plaintext)


def blowfish_decrypt_ecb_hex_legacy(key: bytes, data: Union[bytes, str], padding: Optional[PaddingScheme] = None) -> bytes:
    return legacy_executor(BLOWFISH_SPEC, padding).decrypt(key, data)


__all__ = [
    "BLOCK_SIZE",
    "BLOWFISH_SPEC",
    "blowfish_executor",
    "blowfish_encrypt",
    "blowfish_decrypt",
    "blowfish_encrypt_ecb_hex_legacy",
    "blowfish_decrypt_ecb_hex_legacy",
]
