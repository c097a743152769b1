import warnings
from concurrent.futures import ThreadPoolExecutor

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.utils import CryptographyDeprecationWarning

from cipherkit.common.errors import (
    AuthenticationError,
    CipherInitError,
    InvalidEncodingError,
    InvalidIVLengthError,
    InvalidKeyLengthError,
    InvalidPaddingError,
    NotBlockAlignedError,
    RandomSourceError,
    ShortCiphertextError,
    UnsupportedModeError,
)
from cipherkit.crypto.aes import AES_SPEC
from cipherkit.crypto.blowfish import BLOWFISH_SPEC
from cipherkit.crypto.chacha20 import CHACHA20_POLY1305_SPEC, CHACHA20_SPEC
from cipherkit.crypto.des import DES_SPEC, TRIPLE_DES_SPEC
from cipherkit.crypto.modes import _MODE_CLASSES, BLOCK_MODES, CipherModeExecutor, Mode
from cipherkit.crypto.padding import (
    ANSI_X923,
    ISO_10126,
    NO_PADDING,
    PKCS5,
    PKCS7,
    STRICT_PKCS7,
    ZERO,
    ISO10126Padding,
)

KEYS = {
    "AES": bytes(range(32)),
    "DES": bytes(range(8)),
    "3DES": bytes(range(24)),
    "Blowfish": bytes(range(16)),
    "ChaCha20": bytes(range(32)),
    "ChaCha20-Poly1305": bytes(range(32)),
}

PADDINGS = [PKCS7, PKCS5, STRICT_PKCS7, ZERO, ANSI_X923, ISO_10126, NO_PADDING]

GRID = [
    (spec, mode, padding)
    for spec in (AES_SPEC, DES_SPEC, TRIPLE_DES_SPEC, BLOWFISH_SPEC)
    for mode in sorted(spec.modes)
    for padding in PADDINGS
]

ALL_SPEC_MODES = [
    (spec, mode)
    for spec in (AES_SPEC, DES_SPEC, TRIPLE_DES_SPEC, BLOWFISH_SPEC, CHACHA20_SPEC, CHACHA20_POLY1305_SPEC)
    for mode in sorted(spec.modes)
]


def sample_plaintext(n: int) -> bytes:
    """n bytes with no zero byte, so zero padding round-trips too."""
    return bytes((i % 251) + 1 for i in range(n))


def _id(value):
    if hasattr(value, "block_size") and hasattr(value, "modes"):
        return value.name
    if isinstance(value, Mode):
        return value.value
    return getattr(value, "name", str(value))


@pytest.mark.parametrize("spec,mode,padding", GRID, ids=_id)
def test_roundtrip_grid(spec, mode, padding):
    executor = CipherModeExecutor(spec, mode, padding)
    key = KEYS[spec.name]
    bs = spec.block_size
    for n in (0, 1, bs - 1, bs, bs + 1, 10 * bs):
        # Unpadded block modes only accept whole, non-empty blocks.
        if padding is NO_PADDING and mode in BLOCK_MODES and (n % bs or n == 0):
            continue
        plaintext = sample_plaintext(n)
        ciphertext = executor.encrypt(key, plaintext)
        assert executor.decrypt(key, ciphertext) == plaintext, (spec.name, mode, padding.name, n)


@pytest.mark.parametrize("spec,mode", ALL_SPEC_MODES, ids=_id)
def test_roundtrip_default_padding(spec, mode):
    executor = CipherModeExecutor(spec, mode)
    key = KEYS[spec.name]
    for n in (0, 1, 15, 16, 17, 100):
        plaintext = sample_plaintext(n)
        assert executor.decrypt(key, executor.encrypt(key, plaintext)) == plaintext


def test_aes256_cbc_pkcs7_scenario(recording_random):
    key = bytes(32)
    executor = CipherModeExecutor(AES_SPEC, Mode.CBC, PKCS7, random_source=recording_random)

    out = executor.encrypt(key, b"test plaintext")

    assert len(out) == 32
    assert recording_random.calls == [16]
    iv, body = out[:16], out[16:]
    assert iv == recording_random(16)
    dec = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = dec.update(body) + dec.finalize()
    assert padded == b"test plaintext\x02\x02"
    assert executor.decrypt(key, out) == b"test plaintext"


@pytest.mark.parametrize("spec,mode", ALL_SPEC_MODES, ids=_id)
def test_wrong_key_length_touches_nothing(spec, mode, recording_random, make_factory):
    factory = make_factory(spec.factory_for(mode))
    executor = CipherModeExecutor(spec, mode, random_source=recording_random, cipher_factory=factory)

    with pytest.raises(InvalidKeyLengthError):
        executor.encrypt(b"k" * 57, b"data")
    with pytest.raises(InvalidKeyLengthError):
        executor.decrypt(b"k" * 57, b"\x00" * 64)

    assert recording_random.calls == []
    assert factory.calls == 0


@pytest.mark.parametrize("spec,mode", ALL_SPEC_MODES, ids=_id)
def test_short_ciphertext_before_any_crypto(spec, mode, make_factory):
    factory = make_factory(spec.factory_for(mode))
    executor = CipherModeExecutor(spec, mode, cipher_factory=factory)

    with pytest.raises(ShortCiphertextError):
        executor.decrypt(KEYS[spec.name], b"\x00" * (executor.min_ciphertext_size - 1))
    assert factory.calls == 0


def test_min_ciphertext_sizes():
    assert CipherModeExecutor(AES_SPEC, Mode.ECB).min_ciphertext_size == 16
    assert CipherModeExecutor(AES_SPEC, Mode.CBC).min_ciphertext_size == 16
    assert CipherModeExecutor(AES_SPEC, Mode.CTR).min_ciphertext_size == 16
    assert CipherModeExecutor(AES_SPEC, Mode.GCM).min_ciphertext_size == 12
    assert CipherModeExecutor(DES_SPEC, Mode.CBC).min_ciphertext_size == 8
    assert CipherModeExecutor(CHACHA20_SPEC, Mode.STREAM).min_ciphertext_size == 12


@pytest.mark.parametrize("mode,length", [(Mode.ECB, 17), (Mode.CBC, 16 + 5)])
def test_decrypt_not_block_aligned(mode, length):
    executor = CipherModeExecutor(AES_SPEC, mode)
    with pytest.raises(NotBlockAlignedError):
        executor.decrypt(KEYS["AES"], b"\x00" * length)


def test_encrypt_unpadded_block_mode_needs_aligned_input():
    executor = CipherModeExecutor(AES_SPEC, Mode.CBC, NO_PADDING)
    with pytest.raises(NotBlockAlignedError):
        executor.encrypt(KEYS["AES"], b"not sixteen")


def test_unpad_error_propagates():
    key = KEYS["AES"]
    raw = CipherModeExecutor(AES_SPEC, Mode.CBC, NO_PADDING).encrypt(key, b"A" * 15 + b"\x00")
    with pytest.raises(InvalidPaddingError):
        CipherModeExecutor(AES_SPEC, Mode.CBC, PKCS7).decrypt(key, raw)


def test_cipher_factory_failure(recording_random):
    def broken(key):
        raise ValueError("bad key schedule")

    executor = CipherModeExecutor(AES_SPEC, Mode.CBC, cipher_factory=broken, random_source=recording_random)
    with pytest.raises(CipherInitError) as exc:
        executor.encrypt(KEYS["AES"], b"data")
    assert isinstance(exc.value.__cause__, ValueError)
    assert recording_random.calls == []


@pytest.mark.parametrize("key", [b"a", b"ab", b"abc"])
@pytest.mark.parametrize("mode", [Mode.ECB, Mode.CBC, Mode.CFB, Mode.OFB])
def test_blowfish_short_keys_roundtrip(key, mode):
    executor = CipherModeExecutor(BLOWFISH_SPEC, mode)
    for plaintext in (b"", b"data", sample_plaintext(40)):
        assert executor.decrypt(key, executor.encrypt(key, plaintext)) == plaintext


def test_random_source_failure():
    def broken(n):
        raise OSError("entropy pool unavailable")

    executor = CipherModeExecutor(AES_SPEC, Mode.CBC, random_source=broken)
    with pytest.raises(RandomSourceError):
        executor.encrypt(KEYS["AES"], b"data")


def test_random_source_short_read():
    executor = CipherModeExecutor(AES_SPEC, Mode.CTR, random_source=lambda n: b"\x00" * (n - 1))
    with pytest.raises(RandomSourceError):
        executor.encrypt(KEYS["AES"], b"data")


def test_fresh_iv_per_call():
    executor = CipherModeExecutor(AES_SPEC, Mode.CBC)
    a = executor.encrypt(KEYS["AES"], b"same plaintext")
    b = executor.encrypt(KEYS["AES"], b"same plaintext")
    assert a[:16] != b[:16]
    assert a != b


def test_iso10126_filler_uses_executor_random_source(recording_random):
    key = KEYS["AES"]
    executor = CipherModeExecutor(AES_SPEC, Mode.ECB, ISO_10126, random_source=recording_random)

    a = executor.encrypt(key, b"abc")
    b = executor.encrypt(key, b"abc")

    assert a == b
    assert recording_random.calls == [12, 12]
    assert executor.decrypt(key, a) == b"abc"


def test_iso10126_filler_read_before_iv(recording_random):
    executor = CipherModeExecutor(AES_SPEC, Mode.CBC, ISO_10126, random_source=recording_random)
    executor.encrypt(KEYS["AES"], b"abc")
    assert recording_random.calls == [12, 16]


def test_iso10126_own_random_source_is_kept(recording_random, make_random):
    own = make_random(seed=11)
    padding = ISO10126Padding(random_source=own)
    executor = CipherModeExecutor(AES_SPEC, Mode.CBC, padding, random_source=recording_random)
    executor.encrypt(KEYS["AES"], b"abc")
    assert executor.padding is padding
    assert own.calls == [12]
    assert recording_random.calls == [16]


def test_ecb_output_has_no_iv_and_repeats_blocks():
    out = CipherModeExecutor(AES_SPEC, Mode.ECB, NO_PADDING).encrypt(KEYS["AES"], b"A" * 32)
    assert len(out) == 32
    assert out[:16] == out[16:]


def test_stream_modes_do_not_pad_by_default():
    for mode in (Mode.CFB, Mode.CTR, Mode.OFB):
        out = CipherModeExecutor(AES_SPEC, mode).encrypt(KEYS["AES"], b"12345")
        assert len(out) == 16 + 5


def test_gcm_layout_and_tamper_detection():
    executor = CipherModeExecutor(AES_SPEC, Mode.GCM)
    key = KEYS["AES"]
    out = executor.encrypt(key, b"attack at dawn", b"header")
    assert len(out) == 12 + 14 + 16

    assert executor.decrypt(key, out, b"header") == b"attack at dawn"
    tampered = out[:-1] + bytes([out[-1] ^ 1])
    with pytest.raises(AuthenticationError):
        executor.decrypt(key, tampered, b"header")
    with pytest.raises(AuthenticationError):
        executor.decrypt(key, out, b"other header")


def test_hex_encoding(recording_random):
    executor = CipherModeExecutor(AES_SPEC, Mode.CBC, random_source=recording_random, encoding="hex")
    out = executor.encrypt(KEYS["AES"], b"hello")

    assert isinstance(out, bytes)
    assert len(out) == 64
    assert set(out) <= set(b"0123456789abcdef")
    assert out[:32] == recording_random(16).hex().encode()
    assert executor.decrypt(KEYS["AES"], out) == b"hello"
    assert executor.decrypt(KEYS["AES"], out.decode("ascii")) == b"hello"


@pytest.mark.parametrize("data", ["zz" * 16, "abc", b"\xff\xfe"])
def test_hex_decode_errors(data):
    executor = CipherModeExecutor(AES_SPEC, Mode.CBC, encoding="hex")
    with pytest.raises(InvalidEncodingError):
        executor.decrypt(KEYS["AES"], data)


def test_unsupported_modes():
    with pytest.raises(UnsupportedModeError):
        CipherModeExecutor(DES_SPEC, Mode.CTR)
    with pytest.raises(UnsupportedModeError):
        CipherModeExecutor(BLOWFISH_SPEC, Mode.GCM)
    with pytest.raises(UnsupportedModeError):
        CipherModeExecutor(AES_SPEC, Mode.GCM, key_as_iv=True)
    with pytest.raises(ValueError):
        CipherModeExecutor(AES_SPEC, "XTS")
    with pytest.raises(ValueError):
        CipherModeExecutor(AES_SPEC, Mode.CBC, encoding="base64")


def test_mode_accepts_lowercase_string():
    assert CipherModeExecutor(AES_SPEC, "cbc").mode is Mode.CBC


def test_explicit_iv_matches_random_iv_output(recording_random):
    key = KEYS["AES"]
    executor = CipherModeExecutor(AES_SPEC, Mode.CBC, random_source=recording_random)
    out = executor.encrypt(key, b"explicit iv")
    iv, body = out[:16], out[16:]

    assert executor.encrypt_with_iv(key, iv, b"explicit iv") == body
    assert executor.decrypt_with_iv(key, iv, body) == b"explicit iv"


def test_explicit_iv_validation():
    key = KEYS["AES"]
    with pytest.raises(InvalidIVLengthError):
        CipherModeExecutor(AES_SPEC, Mode.CBC).encrypt_with_iv(key, b"\x00" * 8, b"data")
    with pytest.raises(UnsupportedModeError):
        CipherModeExecutor(AES_SPEC, Mode.ECB).encrypt_with_iv(key, b"", b"data")


def test_default_padding_follows_settings(monkeypatch):
    from cipherkit.common.config import load_settings

    assert CipherModeExecutor(AES_SPEC, Mode.CBC).padding is PKCS7
    assert CipherModeExecutor(AES_SPEC, Mode.CFB).padding is NO_PADDING

    monkeypatch.setenv("CIPHERKIT_STRICT_PADDING", "true")
    load_settings.cache_clear()
    assert CipherModeExecutor(AES_SPEC, Mode.ECB).padding is STRICT_PKCS7

    monkeypatch.setenv("CIPHERKIT_DEFAULT_PADDING", "ansix923")
    load_settings.cache_clear()
    assert CipherModeExecutor(AES_SPEC, Mode.CBC).padding is ANSI_X923


def test_executor_is_safe_to_share_between_threads():
    executor = CipherModeExecutor(AES_SPEC, Mode.CBC)
    key = KEYS["AES"]

    def roundtrip(i):
        pt = sample_plaintext(i)
        return executor.decrypt(key, executor.encrypt(key, pt)) == pt

    with ThreadPoolExecutor(max_workers=8) as pool:
        assert all(pool.map(roundtrip, range(64)))


@pytest.mark.parametrize("mode", [Mode.CFB, Mode.OFB])
def test_cfb_ofb_raise_no_deprecation_warning(mode):
    executor = CipherModeExecutor(AES_SPEC, mode)
    with warnings.catch_warnings():
        warnings.simplefilter("error", CryptographyDeprecationWarning)
        assert executor.decrypt(KEYS["AES"], executor.encrypt(KEYS["AES"], b"feedback")) == b"feedback"


def test_cfb_ofb_classes_come_from_decrepit_when_available():
    decrepit = pytest.importorskip("cryptography.hazmat.decrepit.ciphers.modes")
    assert _MODE_CLASSES[Mode.CFB] is decrepit.CFB
    assert _MODE_CLASSES[Mode.OFB] is decrepit.OFB
