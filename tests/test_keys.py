import pytest

from cipherkit.common.errors import InvalidKeyLengthError
from cipherkit.crypto.keys import KEY_POLICY, check_key_length


@pytest.mark.parametrize(
    "algorithm,good,bad",
    [
        ("AES", [16, 24, 32], [0, 8, 15, 17, 31, 33, 64]),
        ("DES", [8], [0, 7, 9, 16, 24]),
        ("3DES", [24], [8, 16, 23, 25]),
        ("Blowfish", [1, 4, 16, 56], [0, 57, 64]),
        ("ChaCha20", [32], [16, 31, 33]),
        ("ChaCha20-Poly1305", [32], [16, 24]),
    ],
)
def test_key_policy(algorithm, good, bad):
    for n in good:
        check_key_length(algorithm, b"k" * n)
    for n in bad:
        with pytest.raises(InvalidKeyLengthError):
            check_key_length(algorithm, b"k" * n)


@pytest.mark.parametrize(
    "algorithm,message",
    [
        ("DES", "invalid key length: must be 8 bytes for DES"),
        ("AES", "invalid key length: must be 16, 24 or 32 bytes for AES"),
        ("Blowfish", "invalid key length: must be between 1 and 56 bytes for Blowfish"),
        ("ChaCha20", "invalid key length: must be 32 bytes for ChaCha20"),
    ],
)
def test_error_message(algorithm, message):
    with pytest.raises(InvalidKeyLengthError) as exc:
        check_key_length(algorithm, b"")
    assert str(exc.value) == message
    assert exc.value.algorithm == algorithm


def test_error_is_value_error():
    with pytest.raises(ValueError):
        check_key_length("DES", b"short")


def test_key_must_be_bytes():
    with pytest.raises(TypeError):
        check_key_length("AES", "0" * 16)


def test_unknown_algorithm():
    with pytest.raises(KeyError):
        check_key_length("RC4", b"k" * 16)


def test_policy_covers_all_algorithms():
    assert set(KEY_POLICY) == {"AES", "DES", "3DES", "Blowfish", "ChaCha20", "ChaCha20-Poly1305"}
