"""DES and Triple-DES helpers (ECB, CBC, CFB, OFB).

DES keys are 8 bytes, 3DES keys 24 bytes. Both use an 8-byte block and
PKCS#7 padding by default for ECB/CBC.

DES is provided for compatibility with existing data only; it should not
protect anything new. Single DES is run as Triple-DES with K1 = K2 = K3,
which is how ``cryptography`` exposes it.
"""

from typing import Optional, Union

from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES

from ..common.utils import RandomSource
from .modes import CipherModeExecutor, CipherSpec, Mode, legacy_executor
from .padding import PaddingScheme

BLOCK_SIZE = 8

_DES_MODES = frozenset({Mode.ECB, Mode.CBC, Mode.CFB, Mode.OFB})

DES_SPEC = CipherSpec(name="DES", block_size=BLOCK_SIZE, modes=_DES_MODES, cipher_factory=TripleDES)
TRIPLE_DES_SPEC = CipherSpec(name="3DES", block_size=BLOCK_SIZE, modes=_DES_MODES, cipher_factory=TripleDES)


def des_executor(mode: Union[Mode, str], padding: Optional[PaddingScheme] = None, **kwargs) -> CipherModeExecutor:
    return CipherModeExecutor(DES_SPEC, mode, padding, **kwargs)


def triple_des_executor(mode: Union[Mode, str], padding: Optional[PaddingScheme] = None, **kwargs) -> CipherModeExecutor:
    return CipherModeExecutor(TRIPLE_DES_SPEC, mode, padding, **kwargs)


def des_encrypt(
    key: bytes,
    plaintext: bytes,
    mode: Union[Mode, str] = Mode.CBC,
    padding: Optional[PaddingScheme] = None,
    random_source: Optional[RandomSource] = None,
) -> bytes:
    """Encrypt with DES. CBC/CFB/OFB output is IV (8 bytes) ‖ ciphertext."""
    return des_executor(mode, padding, random_source=random_source).encrypt(key, plaintext)


def des_decrypt(
    key: bytes,
    ciphertext: bytes,
    mode: Union[Mode, str] = Mode.CBC,
    padding: Optional[PaddingScheme] = None,
) -> bytes:
    return des_executor(mode, padding).decrypt(key, ciphertext)


def triple_des_encrypt(
    key: bytes,
    plaintext: bytes,
    mode: Union[Mode, str] = Mode.CBC,
    padding: Optional[PaddingScheme] = None,
    random_source: Optional[RandomSource] = None,
) -> bytes:
    """Encrypt with 3DES (24-byte key). CBC/CFB/OFB output is IV ‖ ciphertext."""
    return triple_des_executor(mode, padding, random_source=random_source).encrypt(key, plaintext)


def triple_des_decrypt(
    key: bytes,
    ciphertext: bytes,
    mode: Union[Mode, str] = Mode.CBC,
    padding: Optional[PaddingScheme] = None,
) -> bytes:
    return triple_des_executor(mode, padding).decrypt(key, ciphertext)


def des_encrypt_ecb_hex_legacy(key: bytes, plaintext: bytes, padding: Optional[PaddingScheme] = None) -> bytes:
    """Deprecated: DES-CBC with the key as IV, hex output."""
    return legacy_executor(DES_SPEC, padding).encrypt(key, plaintext)


def des_decrypt_ecb_hex_legacy(key: bytes, data: Union[bytes, str], padding: Optional[PaddingScheme] = None) -> bytes:
    return legacy_executor(DES_SPEC, padding).decrypt(key, data)


def triple_des_encrypt_ecb_hex_legacy(key: bytes, plaintext: bytes, padding: Optional[PaddingScheme] = None) -> bytes:
    """Deprecated: 3DES-CBC with key[:8] as IV, hex output."""
    return legacy_executor(TRIPLE_DES_SPEC, padding).encrypt(key, plaintext)


def triple_des_decrypt_ecb_hex_legacy(key: bytes, data: Union[bytes, str], padding: Optional[PaddingScheme] = None) -> bytes:
    return legacy_executor(TRIPLE_DES_SPEC, padding).decrypt(key, data)


__all__ = [
    "BLOCK_SIZE",
    "DES_SPEC",
    "TRIPLE_DES_SPEC",
    "des_executor",
    "triple_des_executor",
    "des_encrypt",
    "des_decrypt",
    "triple_des_encrypt",
    "triple_des_decrypt",
    "des_encrypt_ecb_hex_legacy",
    "des_decrypt_ecb_hex_legacy",
    "triple_des_encrypt_ecb_hex_legacy",
    "triple_des_decrypt_ecb_hex_legacy",
]
