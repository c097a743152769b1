"""Key-length policy for every supported algorithm.

check_key_length() is called before any cipher object is built or any
random bytes are read, so a bad key fails fast with InvalidKeyLengthError.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from ..common.errors import InvalidKeyLengthError


@dataclass(frozen=True)
class KeyLengthRule:
    """Allowed key lengths in bytes: an explicit set or an inclusive range."""
    lengths: Tuple[int, ...] = ()
    min_length: int = 0
    max_length: int = 0

    def allows(self, n: int) -> bool:
        if self.lengths:
            return n in self.lengths
        return self.min_length <= n <= self.max_length

    def describe(self) -> str:
        if not self.lengths:
            return f"between {self.min_length} and {self.max_length} bytes"
        if len(self.lengths) == 1:
            return f"{self.lengths[0]} bytes"
        head = ", ".join(str(n) for n in self.lengths[:-1])
        return f"{head} or {self.lengths[-1]} bytes"


KEY_POLICY: Dict[str, KeyLengthRule] = {
    "AES": KeyLengthRule(lengths=(16, 24, 32)),
    "DES": KeyLengthRule(lengths=(8,)),
    "3DES": KeyLengthRule(lengths=(24,)),
    "Blowfish": KeyLengthRule(min_length=1, max_length=56),
    "ChaCha20": KeyLengthRule(lengths=(32,)),
    "ChaCha20-Poly1305": KeyLengthRule(lengths=(32,)),
}


def check_key_length(algorithm: str, key: bytes) -> None:
    """Raise InvalidKeyLengthError unless `key` fits the rule for `algorithm`."""
    if not isinstance(key, (bytes, bytearray)):
        raise TypeError("key must be bytes")
    if algorithm not in KEY_POLICY:
        raise KeyError(f"Unknown algorithm: {algorithm}")
    rule = KEY_POLICY[algorithm]
    if not rule.allows(len(key)):
        raise InvalidKeyLengthError(algorithm, rule.describe())
