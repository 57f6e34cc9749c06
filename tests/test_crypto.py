"""
Key derivation, AEAD wrapper and password generation tests
"""
import hashlib
import string

import pytest

from pwstore.core.crypto import (
    KEY_SIZE,
    XCHACHA_NONCE_SIZE,
    XCHACHA_TAG_SIZE,
    AuthenticationError,
    XChaCha20Cipher,
    derive_key,
    generate_password,
)
from pwstore.core.crypto.passgen import SYMBOLS
from pwstore.core.memory import secure_zero


class TestDeriveKey:

    def test_deterministic(self):
        assert derive_key("correct-horse") == derive_key("correct-horse")

    def test_length(self):
        assert len(derive_key("x")) == KEY_SIZE == 32
        assert len(derive_key("")) == 32

    def test_different_passwords(self):
        assert derive_key("correct-horse") != derive_key("correct-horsf")

    def test_is_truncated_blake2b(self):
        expected = hashlib.blake2b("pässword".encode("utf-8")).digest()[:32]
        assert derive_key("pässword") == expected


class TestXChaCha20Cipher:

    @pytest.fixture
    def cipher(self):
        return XChaCha20Cipher()

    @pytest.fixture
    def key(self):
        return derive_key("k")

    def test_round_trip(self, cipher, key):
        result = cipher.encrypt(b"attack at dawn", key)

        assert len(result.nonce) == XCHACHA_NONCE_SIZE == 24
        assert len(result.ciphertext) == len(b"attack at dawn") + XCHACHA_TAG_SIZE
        assert cipher.decrypt(result.ciphertext, result.nonce, key) == b"attack at dawn"

    def test_fresh_nonce_each_time(self, cipher, key):
        first = cipher.encrypt(b"same", key)
        second = cipher.encrypt(b"same", key)

        assert first.nonce != second.nonce
        assert first.ciphertext != second.ciphertext

    def test_explicit_nonce_is_deterministic(self, cipher, key):
        nonce = bytes(range(24))
        assert cipher.encrypt(b"data", key, nonce=nonce) == cipher.encrypt(b"data", key, nonce=nonce)

    def test_accepts_bytearray_inputs(self, cipher, key):
        result = cipher.encrypt(bytearray(b"data"), bytearray(key))
        assert cipher.decrypt(result.ciphertext, result.nonce, bytearray(key)) == b"data"

    def test_caller_buffers_can_be_wiped_after_encrypt(self, cipher, key):
        key_buf = bytearray(key)
        plaintext = bytearray(b"data")
        result = cipher.encrypt(plaintext, key_buf)

        secure_zero(key_buf)
        secure_zero(plaintext)

        assert cipher.decrypt(result.ciphertext, result.nonce, key) == b"data"

    def test_tamper_detected(self, cipher, key):
        result = cipher.encrypt(b"secret message", key)
        tampered = bytearray(result.ciphertext)
        tampered[0] ^= 1

        with pytest.raises(AuthenticationError):
            cipher.decrypt(bytes(tampered), result.nonce, key)

    def test_wrong_key(self, cipher, key):
        result = cipher.encrypt(b"secret message", key)
        with pytest.raises(AuthenticationError):
            cipher.decrypt(result.ciphertext, result.nonce, derive_key("other"))

    def test_aad_is_bound(self, cipher, key):
        result = cipher.encrypt(b"msg", key, aad=b"ctx")
        with pytest.raises(AuthenticationError):
            cipher.decrypt(result.ciphertext, result.nonce, key)

    def test_short_ciphertext(self, cipher, key):
        with pytest.raises(AuthenticationError):
            cipher.decrypt(b"\x00" * 15, bytes(24), key)

    @pytest.mark.parametrize("bad_key", [b"", b"\x00" * 16, b"\x00" * 33])
    def test_key_size_checked(self, cipher, bad_key):
        with pytest.raises(ValueError):
            cipher.encrypt(b"x", bad_key)
        with pytest.raises(ValueError):
            cipher.decrypt(b"\x00" * 16, bytes(24), bad_key)

    def test_nonce_size_checked(self, cipher, key):
        with pytest.raises(ValueError):
            cipher.encrypt(b"x", key, nonce=bytes(12))
        with pytest.raises(ValueError):
            cipher.decrypt(b"\x00" * 16, bytes(12), key)

    def test_repr_has_no_bytes(self, cipher, key):
        assert "ciphertext_len" in repr(cipher.encrypt(b"x", key))


class TestGeneratePassword:

    def test_length(self):
        assert len(generate_password(20)) == 20
        assert len(generate_password(1)) == 1
        assert len(generate_password(255)) == 255

    def test_alphabet_without_symbols(self):
        password = generate_password(64, use_symbols=False)
        assert set(password) <= set(string.ascii_letters + string.digits)

    def test_alphabet_with_symbols(self):
        password = generate_password(200)
        assert set(password) <= set(string.ascii_letters + string.digits + SYMBOLS)

    @pytest.mark.parametrize("length", [0, -1, 256])
    def test_bounds(self, length):
        with pytest.raises(ValueError):
            generate_password(length)
