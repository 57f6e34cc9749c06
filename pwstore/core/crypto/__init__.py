"""
pwstore Cryptographic Core
==========================

Password-derived keys and authenticated encryption for store files.

Architecture:
    1. BLAKE2b(password)[:32] -> key
    2. XChaCha20-Poly1305 with a random 24-byte nonce per save

WARNING: This module handles sensitive cryptographic material.
"""

from pwstore.core.crypto.kdf import KEY_SIZE, derive_key
from pwstore.core.crypto.passgen import generate_password
from pwstore.core.crypto.xchacha20 import (
    XCHACHA_NONCE_SIZE,
    XCHACHA_TAG_SIZE,
    AuthenticationError,
    XChaCha20Cipher,
    XChaChaResult,
)

__all__ = [
    "KEY_SIZE",
    "derive_key",
    "generate_password",
    "XCHACHA_NONCE_SIZE",
    "XCHACHA_TAG_SIZE",
    "AuthenticationError",
    "XChaCha20Cipher",
    "XChaChaResult",
]
