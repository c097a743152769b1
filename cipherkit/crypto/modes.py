"""Generic cipher-mode pipeline shared by every algorithm module.

A CipherModeExecutor combines one algorithm (CipherSpec), one Mode and one
PaddingScheme:

    encrypt: check key -> build cipher -> pad -> IV/nonce -> mode -> envelope [-> hex]
    decrypt: check key -> [hex ->] length checks -> build cipher -> mode -> unpad

Output layout per mode:
- ECB: ciphertext only
- CBC/CFB/CTR/OFB: IV ‖ ciphertext (IV is one block of random bytes)
- GCM/AEAD: nonce ‖ ciphertext ‖ tag
- STREAM: nonce ‖ ciphertext
- CBC with key_as_iv=True (legacy): ciphertext only, IV derived from the key

The cipher factory and the random source are constructor arguments so tests
can substitute them. Each call is independent; executors hold no per-call
state and can be shared between threads.
"""

import logging
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, FrozenSet, Literal, Optional, Union

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives.ciphers import Cipher, modes

try:
    from cryptography.hazmat.decrepit.ciphers.modes import CFB, OFB
except ImportError:
    # Releases before the move to decrepit.
    CFB, OFB = modes.CFB, modes.OFB

from ..common.config import load_settings
from ..common.errors import (
    AuthenticationError,
    CipherInitError,
    InvalidIVLengthError,
    LegacyModeDisabledError,
    NotBlockAlignedError,
    ShortCiphertextError,
    UnsupportedModeError,
)
from ..common.models import CiphertextEnvelope
from ..common.utils import RandomSource, hexd, hexe, read_random
from .keys import check_key_length
from .padding import NO_PADDING, STRICT_PKCS7, ISO10126Padding, PKCS7Padding, PaddingScheme, get_padding

logger = logging.getLogger(__name__)

TAG_SIZE = 16

Encoding = Literal["raw", "hex"]


class Mode(str, Enum):
    ECB = "ECB"
    CBC = "CBC"
    CFB = "CFB"
    CTR = "CTR"
    OFB = "OFB"
    GCM = "GCM"
    AEAD = "AEAD"
    STREAM = "STREAM"


BLOCK_MODES = frozenset({Mode.ECB, Mode.CBC})
AEAD_MODES = frozenset({Mode.GCM, Mode.AEAD})

_MODE_CLASSES = {
    Mode.CBC: modes.CBC,
    Mode.CFB: CFB,
    Mode.CTR: modes.CTR,
    Mode.OFB: OFB,
}


@dataclass(frozen=True)
class CipherSpec:
    """Static description of one algorithm.

    cipher_factory(key) returns a ``cryptography`` block cipher algorithm,
    aead_factory(key) an AEAD object with encrypt/decrypt, and
    stream_factory(key, nonce) a stream cipher algorithm.
    """
    name: str
    block_size: int
    modes: FrozenSet[Mode]
    cipher_factory: Optional[Callable[[bytes], Any]] = None
    aead_factory: Optional[Callable[[bytes], Any]] = None
    stream_factory: Optional[Callable[[bytes, bytes], Any]] = None
    nonce_size: int = 12

    def factory_for(self, mode: Mode) -> Optional[Callable]:
        if mode in AEAD_MODES:
            return self.aead_factory
        if mode is Mode.STREAM:
            return self.stream_factory
        return self.cipher_factory


def default_padding(mode: Mode) -> PaddingScheme:
    """Padding used when the caller does not pick one.

    ECB and CBC need aligned input and use the configured default
    (PKCS#7 unless overridden); every other mode is unpadded.
    """
    if mode not in BLOCK_MODES:
        return NO_PADDING
    settings = load_settings()
    padding = get_padding(settings.default_padding)
    if settings.strict_padding and isinstance(padding, PKCS7Padding):
        return STRICT_PKCS7
    return padding


class CipherModeExecutor:
    def __init__(
        self,
        spec: CipherSpec,
        mode: Union[Mode, str],
        padding: Optional[PaddingScheme] = None,
        *,
        random_source: Optional[RandomSource] = None,
        cipher_factory: Optional[Callable] = None,
        encoding: Encoding = "raw",
        key_as_iv: bool = False,
    ):
        mode = Mode(mode.upper() if isinstance(mode, str) else mode)
        if mode not in spec.modes:
            raise UnsupportedModeError(f"{spec.name} does not support {mode.value} mode")
        if key_as_iv and mode is not Mode.CBC:
            raise UnsupportedModeError("key-as-IV is only defined for CBC")
        if encoding not in ("raw", "hex"):
            raise ValueError(f"unknown encoding: {encoding}")

        self.spec = spec
        self.mode = mode
        padding = padding if padding is not None else default_padding(mode)
        if isinstance(padding, ISO10126Padding) and padding.random_source is None and random_source is not None:
            # Filler bytes come from the same source as the IV.
            padding = ISO10126Padding(random_source)
        self.padding = padding
        self.random_source = random_source
        self.cipher_factory = cipher_factory or spec.factory_for(mode)
        self.encoding = encoding
        self.key_as_iv = key_as_iv

        if self.cipher_factory is None:
            raise UnsupportedModeError(f"{spec.name} has no factory for {mode.value} mode")

    def __repr__(self) -> str:
        return (
            f"CipherModeExecutor({self.spec.name}-{self.mode.value}, "
            f"padding={self.padding.name}, encoding={self.encoding})"
        )

    @property
    def iv_size(self) -> int:
        """Length of the IV/nonce stored in front of the ciphertext."""
        if self.mode is Mode.ECB or self.key_as_iv:
            return 0
        if self.mode in AEAD_MODES or self.mode is Mode.STREAM:
            return self.spec.nonce_size
        return self.spec.block_size

    @property
    def min_ciphertext_size(self) -> int:
        if self.mode in BLOCK_MODES:
            return max(self.iv_size, self.spec.block_size)
        return self.iv_size

    def encrypt(self, key: bytes, plaintext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        check_key_length(self.spec.name, key)
        cipher = self._new_cipher(key)
        padded = self.padding.pad(plaintext, self.spec.block_size)
        self._check_alignment(padded)

        if self.mode is Mode.ECB:
            iv = b""
        elif self.key_as_iv:
            iv = self._key_iv(key)
        else:
            iv = read_random(self.random_source, self.iv_size)

        sealed = self._seal(cipher, key, iv, padded, associated_data)
        if self.mode in AEAD_MODES:
            envelope = CiphertextEnvelope(iv=iv, payload=sealed[:-TAG_SIZE], tag=sealed[-TAG_SIZE:])
        elif self.key_as_iv:
            envelope = CiphertextEnvelope(payload=sealed)
        else:
            envelope = CiphertextEnvelope(iv=iv, payload=sealed)

        out = envelope.to_bytes()
        logger.debug("%s-%s: encrypted %d bytes into %d", self.spec.name, self.mode.value, len(plaintext), len(out))
        return hexe(out) if self.encoding == "hex" else out

    def decrypt(
        self,
        key: bytes,
        ciphertext: Union[bytes, str],
        associated_data: Optional[bytes] = None,
    ) -> bytes:
        check_key_length(self.spec.name, key)
        data = hexd(ciphertext) if self.encoding == "hex" else bytes(ciphertext)
        if len(data) < self.min_ciphertext_size:
            raise ShortCiphertextError("ciphertext too short")

        envelope = CiphertextEnvelope.split(data, self.iv_size)
        if self.mode in BLOCK_MODES and len(envelope.payload) % self.spec.block_size != 0:
            raise NotBlockAlignedError("ciphertext is not a multiple of the block size")

        cipher = self._new_cipher(key)
        iv = self._key_iv(key) if self.key_as_iv else envelope.iv
        padded = self._open(cipher, key, iv, envelope.payload, associated_data)
        plaintext = self.padding.unpad(padded)
        logger.debug("%s-%s: decrypted %d bytes", self.spec.name, self.mode.value, len(plaintext))
        return plaintext

    def encrypt_with_iv(
        self,
        key: bytes,
        iv: bytes,
        plaintext: bytes,
        associated_data: Optional[bytes] = None,
    ) -> bytes:
        """Encrypt with a caller-chosen IV/nonce; the IV is not included in the output."""
        check_key_length(self.spec.name, key)
        self._check_iv(iv)
        cipher = self._new_cipher(key)
        padded = self.padding.pad(plaintext, self.spec.block_size)
        self._check_alignment(padded)
        return self._seal(cipher, key, iv, padded, associated_data)

    def decrypt_with_iv(
        self,
        key: bytes,
        iv: bytes,
        ciphertext: bytes,
        associated_data: Optional[bytes] = None,
    ) -> bytes:
        check_key_length(self.spec.name, key)
        self._check_iv(iv)
        if self.mode in BLOCK_MODES and len(ciphertext) % self.spec.block_size != 0:
            raise NotBlockAlignedError("ciphertext is not a multiple of the block size")
        cipher = self._new_cipher(key)
        return self.padding.unpad(self._open(cipher, key, iv, ciphertext, associated_data))

    def _check_iv(self, iv: bytes) -> None:
        if self.mode is Mode.ECB or self.key_as_iv:
            raise UnsupportedModeError(f"{self.mode.value} mode does not take an explicit IV")
        if len(iv) != self.iv_size:
            kind = "nonce" if self.mode in AEAD_MODES or self.mode is Mode.STREAM else "IV"
            raise InvalidIVLengthError(
                f"invalid {kind} length: must be {self.iv_size} bytes for {self.spec.name}"
            )

    def _check_alignment(self, padded: bytes) -> None:
        if self.mode in BLOCK_MODES and len(padded) % self.spec.block_size != 0:
            raise NotBlockAlignedError(
                f"{self.padding.name} padding left {len(padded)} bytes, "
                f"not a multiple of the {self.spec.block_size}-byte block"
            )

    def _key_iv(self, key: bytes) -> bytes:
        # Short Blowfish keys are zero-extended to a full block.
        return bytes(key[: self.spec.block_size]).ljust(self.spec.block_size, b"\x00")

    def _new_cipher(self, key: bytes):
        """Build the algorithm (or AEAD) object; stream ciphers are built per nonce."""
        if self.mode is Mode.STREAM:
            return None
        try:
            return self.cipher_factory(bytes(key))
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise CipherInitError(f"cannot initialise {self.spec.name}: {exc}") from exc

    def _context(self, cipher, key: bytes, iv: bytes, encrypt: bool):
        try:
            if self.mode is Mode.STREAM:
                algorithm, mode = self.cipher_factory(bytes(key), iv), None
            elif self.mode is Mode.ECB:
                algorithm, mode = cipher, modes.ECB()
            else:
                algorithm, mode = cipher, _MODE_CLASSES[self.mode](iv)
            c = Cipher(algorithm, mode)
            return c.encryptor() if encrypt else c.decryptor()
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise CipherInitError(f"cannot initialise {self.spec.name}-{self.mode.value}: {exc}") from exc

    def _seal(self, cipher, key: bytes, iv: bytes, data: bytes, associated_data: Optional[bytes]) -> bytes:
        if self.mode in AEAD_MODES:
            return cipher.encrypt(iv, data, associated_data)
        ctx = self._context(cipher, key, iv, encrypt=True)
        return ctx.update(data) + ctx.finalize()

    def _open(self, cipher, key: bytes, iv: bytes, data: bytes, associated_data: Optional[bytes]) -> bytes:
        if self.mode in AEAD_MODES:
            try:
                return cipher.decrypt(iv, data, associated_data)
            except InvalidTag as exc:
                raise AuthenticationError(f"{self.spec.name}-{self.mode.value}: message authentication failed") from exc
        ctx = self._context(cipher, key, iv, encrypt=False)
        return ctx.update(data) + ctx.finalize()


def legacy_executor(
    spec: CipherSpec,
    padding: Optional[PaddingScheme] = None,
    *,
    cipher_factory: Optional[Callable] = None,
) -> CipherModeExecutor:
    """Executor for the deprecated hex "ECB" helpers.

    Despite the name these run CBC with the key itself as the IV and no IV
    in the output, so equal plaintexts always give equal ciphertexts. Kept
    only so existing ciphertexts stay readable.
    """
    if not load_settings().allow_legacy:
        raise LegacyModeDisabledError("legacy key-as-IV helpers are disabled (CIPHERKIT_ALLOW_LEGACY)")
    warnings.warn(
        f"{spec.name} legacy ECB hex helpers use the key as a fixed IV; "
        "use the CBC or GCM helpers instead",
        DeprecationWarning,
        stacklevel=3,
    )
    logger.warning("%s: legacy key-as-IV helper in use", spec.name)
    return CipherModeExecutor(
        spec,
        Mode.CBC,
        padding,
        cipher_factory=cipher_factory,
        encoding="hex",
        key_as_iv=True,
    )


__all__ = [
    "Mode",
    "BLOCK_MODES",
    "AEAD_MODES",
    "TAG_SIZE",
    "CipherSpec",
    "CipherModeExecutor",
    "default_padding",
    "legacy_executor",
]
