"""Small helpers shared by the cipher and signature modules.

Provided:
- hexe(b: bytes) -> bytes: lowercase hex as ASCII bytes
- hexd(data) -> bytes: decode hex given as bytes or str
- read_random(source, n) -> bytes: call a random source and check its output
- int_to_bytes(n) -> bytes: minimal big-endian encoding (empty for zero)
"""

import os
from typing import Callable, Optional, Union

from .errors import InvalidEncodingError, RandomSourceError

RandomSource = Callable[[int], bytes]


def hexe(b: bytes) -> bytes:
	"""Hex-encode bytes and return lowercase ASCII bytes."""
	return b.hex().encode("ascii")


def hexd(data: Union[bytes, str]) -> bytes:
	"""Decode a hex string (bytes or str) into raw bytes."""
	try:
		if isinstance(data, (bytes, bytearray)):
			data = data.decode("ascii")
		return bytes.fromhex(data)
	except (UnicodeDecodeError, ValueError) as exc:
		raise InvalidEncodingError(f"invalid hex input: {exc}") from exc


def read_random(source: Optional[RandomSource], n: int) -> bytes:
	"""Read exactly `n` bytes from `source` (os.urandom when None)."""
	source = source or os.urandom
	try:
		buf = source(n)
	except Exception as exc:
		raise RandomSourceError(f"random source failed: {exc}") from exc
	if not isinstance(buf, (bytes, bytearray)) or len(buf) != n:
		got = len(buf) if isinstance(buf, (bytes, bytearray)) else type(buf).__name__
		raise RandomSourceError(f"random source returned {got}, expected {n} bytes")
	return bytes(buf)


def int_to_bytes(n: int) -> bytes:
	"""Minimal big-endian byte string for a non-negative int; zero gives b''."""
	return n.to_bytes((n.bit_length() + 7) // 8, "big")
