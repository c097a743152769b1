"""Block padding schemes.

This module provides the padding helpers used by the cipher modes:
- pkcs7_pad / pkcs7_unpad (PKCS#5 is byte-identical)
- strict_pkcs7_unpad (checks every padding byte)
- zero_pad / zero_unpad
- ansix923_pad / ansix923_unpad
- iso10126_pad / iso10126_unpad
- PaddingScheme objects wrapping them, and get_padding() to look one up by name

Every pad function appends k = block_size - len(data) % block_size bytes,
so already aligned input still gets a full block of padding.

PKCS#7 unpadding here only trusts the final count byte. Some older
ciphertexts depend on that, so it stays the default; use
StrictPKCS7Padding when the padding bytes must be verified.

Zero padding cannot be undone exactly when the data itself ends in 0x00.
"""

from typing import Dict, Optional

from ..common.errors import InvalidPaddingError
from ..common.utils import RandomSource, read_random


def _pad_length(data: bytes, block_size: int) -> int:
	if block_size < 1 or block_size > 255:
		raise ValueError("invalid block size")
	return block_size - (len(data) % block_size)


def _count_byte(data: bytes) -> int:
	"""Return the trailing count byte after checking it fits in `data`."""
	if not data:
		raise InvalidPaddingError("data is empty")
	pad_len = data[-1]
	if pad_len == 0 or pad_len > len(data):
		raise InvalidPaddingError("invalid padding")
	return pad_len


def pkcs7_pad(data: bytes, block_size: int) -> bytes:
	"""Apply PKCS#7 padding to `data` to make its length a multiple of block_size."""
	pad_len = _pad_length(data, block_size)
	return data + bytes([pad_len]) * pad_len


def pkcs7_unpad(data: bytes) -> bytes:
	"""Remove PKCS#7 padding using the last byte as the count."""
	return data[:-_count_byte(data)]


def strict_pkcs7_unpad(data: bytes) -> bytes:
	"""Remove PKCS#7 padding. Raises InvalidPaddingError unless every pad byte matches."""
	pad_len = _count_byte(data)
	if data[-pad_len:] != bytes([pad_len]) * pad_len:
		raise InvalidPaddingError("invalid padding data")
	return data[:-pad_len]


def zero_pad(data: bytes, block_size: int) -> bytes:
	return data + b"\x00" * _pad_length(data, block_size)


def zero_unpad(data: bytes) -> bytes:
	return data.rstrip(b"\x00")


def ansix923_pad(data: bytes, block_size: int) -> bytes:
	"""ANSI X9.23: zero bytes followed by a single count byte."""
	pad_len = _pad_length(data, block_size)
	return data + b"\x00" * (pad_len - 1) + bytes([pad_len])


def ansix923_unpad(data: bytes) -> bytes:
	pad_len = _count_byte(data)
	if any(data[-pad_len:-1]):
		raise InvalidPaddingError("invalid ANSI X9.23 padding")
	return data[:-pad_len]


def iso10126_pad(data: bytes, block_size: int, random_source: Optional[RandomSource] = None) -> bytes:
	"""ISO 10126: random filler bytes followed by a single count byte."""
	pad_len = _pad_length(data, block_size)
	return data + read_random(random_source, pad_len - 1) + bytes([pad_len])


def iso10126_unpad(data: bytes) -> bytes:
	return data[:-_count_byte(data)]


class PaddingScheme:
	"""A named pad/unpad pair. Subclasses hold no per-call state."""

	name = "none"

	def pad(self, data: bytes, block_size: int) -> bytes:
		return data

	def unpad(self, data: bytes) -> bytes:
		return data

	def __repr__(self) -> str:
		return f"{type(self).__name__}()"


class NoPadding(PaddingScheme):
	pass


class PKCS7Padding(PaddingScheme):
	name = "pkcs7"

	def pad(self, data: bytes, block_size: int) -> bytes:
		return pkcs7_pad(data, block_size)

	def unpad(self, data: bytes) -> bytes:
		return pkcs7_unpad(data)


class PKCS5Padding(PKCS7Padding):
	name = "pkcs5"


class StrictPKCS7Padding(PKCS7Padding):
	name = "strict-pkcs7"

	def unpad(self, data: bytes) -> bytes:
		return strict_pkcs7_unpad(data)


class ZeroPadding(PaddingScheme):
	name = "zero"

	def pad(self, data: bytes, block_size: int) -> bytes:
		return zero_pad(data, block_size)

	def unpad(self, data: bytes) -> bytes:
		return zero_unpad(data)


class ANSIX923Padding(PaddingScheme):
	name = "ansix923"

	def pad(self, data: bytes, block_size: int) -> bytes:
		return ansix923_pad(data, block_size)

	def unpad(self, data: bytes) -> bytes:
		return ansix923_unpad(data)


class ISO10126Padding(PaddingScheme):
	name = "iso10126"

	def __init__(self, random_source: Optional[RandomSource] = None):
		self.random_source = random_source

	def pad(self, data: bytes, block_size: int) -> bytes:
		return iso10126_pad(data, block_size, self.random_source)

	def unpad(self, data: bytes) -> bytes:
		return iso10126_unpad(data)


PKCS7 = PKCS7Padding()
PKCS5 = PKCS5Padding()
STRICT_PKCS7 = StrictPKCS7Padding()
ZERO = ZeroPadding()
ANSI_X923 = ANSIX923Padding()
ISO_10126 = ISO10126Padding()
NO_PADDING = NoPadding()

_REGISTRY: Dict[str, PaddingScheme] = {
	p.name: p for p in (PKCS7, PKCS5, STRICT_PKCS7, ZERO, ANSI_X923, ISO_10126, NO_PADDING)
}
_ALIASES = {
	"pkcs#7": "pkcs7",
	"pkcs#5": "pkcs5",
	"strict": "strict-pkcs7",
	"ansi-x9.23": "ansix923",
	"x923": "ansix923",
	"iso-10126": "iso10126",
	"noop": "none",
	"no-op": "none",
}


def get_padding(name: str) -> PaddingScheme:
	"""Look up a padding scheme by (case-insensitive) name."""
	key = name.strip().lower()
	key = _ALIASES.get(key, key)
	if key not in _REGISTRY:
		raise KeyError(f"Unknown padding: {name}")
	return _REGISTRY[key]


def padding_names():
	return sorted(_REGISTRY)


__all__ = [
	"pkcs7_pad",
	"pkcs7_unpad",
	"strict_pkcs7_unpad",
	"zero_pad",
	"zero_unpad",
	"ansix923_pad",
	"ansix923_unpad",
	"iso10126_pad",
	"iso10126_unpad",
	"PaddingScheme",
	"NoPadding",
	"PKCS7Padding",
	"PKCS5Padding",
	"StrictPKCS7Padding",
	"ZeroPadding",
	"ANSIX923Padding",
	"ISO10126Padding",
	"PKCS7",
	"PKCS5",
	"STRICT_PKCS7",
	"ZERO",
	"ANSI_X923",
	"ISO_10126",
	"NO_PADDING",
	"get_padding",
	"padding_names",
]
