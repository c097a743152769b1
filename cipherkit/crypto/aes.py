"""AES helpers over the shared cipher-mode pipeline.

This module provides:
- encrypt_aes_gcm / decrypt_aes_gcm: nonce ‖ ciphertext ‖ tag (recommended)
- encrypt_aes_cbc / cfb / ctr / ofb and decrypt_*: IV ‖ ciphertext
- encrypt_aes_ecb / decrypt_aes_ecb: bare ciphertext
- encrypt_aes_hex / decrypt_aes_hex: any non-AEAD mode, lowercase hex output
- encrypt_aes_ecb_hex_legacy / decrypt_aes_ecb_hex_legacy: deprecated

Keys may be 16, 24 or 32 bytes (AES-128/192/256).

IMPORTANT: ECB leaks plaintext structure, and the *_legacy helpers are CBC
with the key reused as the IV. Keep them for reading old data only.
"""

from typing import Optional, Union

from cryptography.hazmat.primitives.ciphers import algorithms
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..common.utils import RandomSource
from .modes import CipherModeExecutor, CipherSpec, Mode, legacy_executor
from .padding import PaddingScheme


BLOCK_SIZE = 16

AES_SPEC = CipherSpec(
	name="AES",
	block_size=BLOCK_SIZE,
	modes=frozenset({Mode.ECB, Mode.CBC, Mode.CFB, Mode.CTR, Mode.OFB, Mode.GCM}),
	cipher_factory=algorithms.AES,
	aead_factory=AESGCM,
)


def aes_executor(mode: Union[Mode, str], padding: Optional[PaddingScheme] = None, **kwargs) -> CipherModeExecutor:
	"""Build an AES executor for `mode`; kwargs go to CipherModeExecutor."""
	return CipherModeExecutor(AES_SPEC, mode, padding, **kwargs)


def encrypt_aes_gcm(
	key: bytes,
	plaintext: bytes,
	associated_data: Optional[bytes] = None,
	random_source: Optional[RandomSource] = None,
) -> bytes:
	"""Encrypt with AES-GCM. Returns nonce (12 bytes) ‖ ciphertext ‖ tag (16 bytes)."""
	return aes_executor(Mode.GCM, random_source=random_source).encrypt(key, plaintext, associated_data)


def decrypt_aes_gcm(key: bytes, ciphertext: bytes, associated_data: Optional[bytes] = None) -> bytes:
	"""Decrypt AES-GCM output. Raises AuthenticationError if the tag does not verify."""
	return aes_executor(Mode.GCM).decrypt(key, ciphertext, associated_data)


def encrypt_aes_cbc(
	key: bytes,
	plaintext: bytes,
	padding: Optional[PaddingScheme] = None,
	random_source: Optional[RandomSource] = None,
) -> bytes:
	"""Encrypt with AES-CBC (PKCS#7 by default). Returns IV ‖ ciphertext."""
	return aes_executor(Mode.CBC, padding, random_source=random_source).encrypt(key, plaintext)


def decrypt_aes_cbc(key: bytes, ciphertext: bytes, padding: Optional[PaddingScheme] = None) -> bytes:
	return aes_executor(Mode.CBC, padding).decrypt(key, ciphertext)


def encrypt_aes_cfb(
	key: bytes,
	plaintext: bytes,
	padding: Optional[PaddingScheme] = None,
	random_source: Optional[RandomSource] = None,
) -> bytes:
	return aes_executor(Mode.CFB, padding, random_source=random_source).encrypt(key, plaintext)


def decrypt_aes_cfb(key: bytes, ciphertext: bytes, padding: Optional[PaddingScheme] = None) -> bytes:
	return aes_executor(Mode.CFB, padding).decrypt(key, ciphertext)


def encrypt_aes_ctr(
	key: bytes,
	plaintext: bytes,
	padding: Optional[PaddingScheme] = None,
	random_source: Optional[RandomSource] = None,
) -> bytes:
	return aes_executor(Mode.CTR, padding, random_source=random_source).encrypt(key, plaintext)


def decrypt_aes_ctr(key: bytes, ciphertext: bytes, padding: Optional[PaddingScheme] = None) -> bytes:
	return aes_executor(Mode.CTR, padding).decrypt(key, ciphertext)


def encrypt_aes_ofb(
	key: bytes,
	plaintext: bytes,
	padding: Optional[PaddingScheme] = None,
	random_source: Optional[RandomSource] = None,
) -> bytes:
	return aes_executor(Mode.OFB, padding, random_source=random_source).encrypt(key, plaintext)


def decrypt_aes_ofb(key: bytes, ciphertext: bytes, padding: Optional[PaddingScheme] = None) -> bytes:
	return aes_executor(Mode.OFB, padding).decrypt(key, ciphertext)


def encrypt_aes_ecb(key: bytes, plaintext: bytes, padding: Optional[PaddingScheme] = None) -> bytes:
	"""Encrypt `plaintext` using AES-ECB (PKCS#7 by default). Returns raw ciphertext bytes."""
	return aes_executor(Mode.ECB, padding).encrypt(key, plaintext)


def decrypt_aes_ecb(key: bytes, ciphertext: bytes, padding: Optional[PaddingScheme] = None) -> bytes:
	"""Decrypt raw AES-ECB `ciphertext` and remove the padding."""
	return aes_executor(Mode.ECB, padding).decrypt(key, ciphertext)


def encrypt_aes_hex(
	key: bytes,
	plaintext: bytes,
	mode: Union[Mode, str] = Mode.CBC,
	padding: Optional[PaddingScheme] = None,
	random_source: Optional[RandomSource] = None,
) -> bytes:
	"""Encrypt and return lowercase hex (ASCII bytes) of the usual output for `mode`."""
	return aes_executor(mode, padding, random_source=random_source, encoding="hex").encrypt(key, plaintext)


def decrypt_aes_hex(
	key: bytes,
	data: Union[bytes, str],
	mode: Union[Mode, str] = Mode.CBC,
	padding: Optional[PaddingScheme] = None,
) -> bytes:
	"""Decode hex ciphertext and decrypt, returning plaintext bytes."""
	return aes_executor(mode, padding, encoding="hex").decrypt(key, data)


def encrypt_aes_ecb_hex_legacy(key: bytes, plaintext: bytes, padding: Optional[PaddingScheme] = None) -> bytes:
	"""Deprecated: CBC with IV = key[:16], hex output, no IV in the output."""
	return legacy_executor(AES_SPEC, padding).encrypt(key, plaintext)


def decrypt_aes_ecb_hex_legacy(key: bytes, data: Union[bytes, str], padding: Optional[PaddingScheme] = None) -> bytes:
	"""Deprecated counterpart of encrypt_aes_ecb_hex_legacy."""
	return legacy_executor(AES_SPEC, padding).decrypt(key, data)


__all__ = [
	"BLOCK_SIZE",
	"AES_SPEC",
	"aes_executor",
	"encrypt_aes_gcm",
	"decrypt_aes_gcm",
	"encrypt_aes_cbc",
	"decrypt_aes_cbc",
	"encrypt_aes_cfb",
	"decrypt_aes_cfb",
	"encrypt_aes_ctr",
	"decrypt_aes_ctr",
	"encrypt_aes_ofb",
	"decrypt_aes_ofb",
	"encrypt_aes_ecb",
	"decrypt_aes_ecb",
	"encrypt_aes_hex",
	"decrypt_aes_hex",
	"encrypt_aes_ecb_hex_legacy",
	"decrypt_aes_ecb_hex_legacy",
]
