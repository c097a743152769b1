"""ChaCha20 stream cipher and ChaCha20-Poly1305 AEAD.

- chacha20_encrypt / chacha20_decrypt: nonce (12 bytes) ‖ ciphertext, no integrity
- chacha20_with_nonce: raw keystream XOR with a caller-supplied nonce
- chacha20_poly1305_encrypt / _decrypt: nonce ‖ ciphertext ‖ tag
- chacha20_poly1305_seal / _open: caller-supplied nonce, nonce not included

Both take 32-byte keys. The stream variant uses the IETF layout (96-bit
nonce, 32-bit block counter starting at zero).
"""

from typing import Optional

from cryptography.hazmat.primitives.ciphers import algorithms
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from ..common.utils import RandomSource
from .modes import CipherModeExecutor, CipherSpec, Mode

KEY_SIZE = 32
NONCE_SIZE = 12


def _chacha20(key: bytes, nonce: bytes):
    # cryptography takes a 16-byte value: little-endian counter then nonce.
    return algorithms.ChaCha20(key, b"\x00\x00\x00\x00" + nonce)


CHACHA20_SPEC = CipherSpec(
    name="ChaCha20",
    block_size=1,
    modes=frozenset({Mode.STREAM}),
    stream_factory=_chacha20,
    nonce_size=NONCE_SIZE,
)

CHACHA20_POLY1305_SPEC = CipherSpec(
    name="ChaCha20-Poly1305",
    block_size=1,
    modes=frozenset({Mode.AEAD}),
    aead_factory=ChaCha20Poly1305,
    nonce_size=NONCE_SIZE,
)


def chacha20_encrypt(key: bytes, plaintext: bytes, random_source: Optional[RandomSource] = None) -> bytes:
    return CipherModeExecutor(CHACHA20_SPEC, Mode.STREAM, random_source=random_source).encrypt(key, plaintext)


def chacha20_decrypt(key: bytes, ciphertext: bytes) -> bytes:
    return CipherModeExecutor(CHACHA20_SPEC, Mode.STREAM).decrypt(key, ciphertext)


def chacha20_with_nonce(key: bytes, nonce: bytes, data: bytes) -> bytes:
    """XOR `data` with the keystream for (key, nonce). Encrypts and decrypts."""
    return CipherModeExecutor(CHACHA20_SPEC, Mode.STREAM).encrypt_with_iv(key, nonce, data)


def chacha20_poly1305_encrypt(
    key: bytes,
    plaintext: bytes,
    associated_data: Optional[bytes] = None,
    random_source: Optional[RandomSource] = None,
) -> bytes:
    executor = CipherModeExecutor(CHACHA20_POLY1305_SPEC, Mode.AEAD, random_source=random_source)
    return executor.encrypt(key, plaintext, associated_data)


def chacha20_poly1305_decrypt(key: bytes, ciphertext: bytes, associated_data: Optional[bytes] = None) -> bytes:
    return CipherModeExecutor(CHACHA20_POLY1305_SPEC, Mode.AEAD).decrypt(key, ciphertext, associated_data)


def chacha20_poly1305_seal(
    key: bytes,
    nonce: bytes,
    plaintext: bytes,
    associated_data: Optional[bytes] = None,
) -> bytes:
    """Seal with an explicit nonce. Returns ciphertext ‖ tag only.

    Never reuse a nonce with the same key.
    """
    return CipherModeExecutor(CHACHA20_POLY1305_SPEC, Mode.AEAD).encrypt_with_iv(key, nonce, plaintext, associated_data)


def chacha20_poly1305_open(
    key: bytes,
    nonce: bytes,
    ciphertext: bytes,
    associated_data: Optional[bytes] = None,
) -> bytes:
    return CipherModeExecutor(CHACHA20_POLY1305_SPEC, Mode.AEAD).decrypt_with_iv(key, nonce, ciphertext, associated_data)


__all__ = [
    "KEY_SIZE",
    "NONCE_SIZE",
    "CHACHA20_SPEC",
    "CHACHA20_POLY1305_SPEC",
    "chacha20_encrypt",
    "chacha20_decrypt",
    "chacha20_with_nonce",
    "chacha20_poly1305_encrypt",
    "chacha20_poly1305_decrypt",
    "chacha20_poly1305_seal",
    "chacha20_poly1305_open",
]
