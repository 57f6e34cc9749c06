"""
XChaCha20-Poly1305 Authenticated Encryption
===========================================

Wraps libsodium's XChaCha20-Poly1305 (IETF) AEAD through PyNaCl.

Security Properties:
    - 256-bit key
    - 192-bit nonce, large enough to draw at random for every save
    - 128-bit Poly1305 authentication tag over the whole ciphertext

WARNING:
    - Never reuse (key, nonce) pairs
    - Plaintext is only returned after the tag verifies
    - The bindings only accept bytes, so key and plaintext are copied
      into immutable objects that cannot be wiped; zeroizing the
      caller's buffers is best effort
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Final, Optional

from nacl import bindings
from nacl.exceptions import CryptoError

XCHACHA_KEY_SIZE: Final[int] = bindings.crypto_aead_xchacha20poly1305_ietf_KEYBYTES  # 32
XCHACHA_NONCE_SIZE: Final[int] = bindings.crypto_aead_xchacha20poly1305_ietf_NPUBBYTES  # 24
XCHACHA_TAG_SIZE: Final[int] = bindings.crypto_aead_xchacha20poly1305_ietf_ABYTES  # 16


class AuthenticationError(Exception):
    """Raised when a ciphertext fails tag verification."""
    pass


@dataclass(frozen=True, slots=True)
class XChaChaResult:
    """
    Result of one encryption.

    Attributes:
        ciphertext: Encrypted data with appended Poly1305 tag
        nonce: Nonce used for this encryption
    """

    ciphertext: bytes
    nonce: bytes

    def __repr__(self) -> str:
        return f"XChaChaResult(ciphertext_len={len(self.ciphertext)}, nonce_len={len(self.nonce)})"


class XChaCha20Cipher:
    """
    XChaCha20-Poly1305 AEAD cipher.

    Usage:
        cipher = XChaCha20Cipher()
        result = cipher.encrypt(plaintext, key)
        plaintext = cipher.decrypt(result.ciphertext, result.nonce, key)
    """

    __slots__ = ()

    @staticmethod
    def generate_nonce() -> bytes:
        """24 bytes from the OS CSPRNG."""
        return secrets.token_bytes(XCHACHA_NONCE_SIZE)

    def encrypt(
        self,
        plaintext: bytes,
        key: bytes,
        nonce: Optional[bytes] = None,
        aad: Optional[bytes] = None,
    ) -> XChaChaResult:
        """
        Encrypt plaintext under key.

        Args:
            plaintext: Data to encrypt
            key: 32-byte key
            nonce: Optional 24-byte nonce; a fresh random one when None
            aad: Additional Authenticated Data

        Raises:
            ValueError: If key or nonce is the wrong size
        """
        if len(key) != XCHACHA_KEY_SIZE:
            raise ValueError(f"Key must be exactly {XCHACHA_KEY_SIZE} bytes")
        if nonce is None:
            nonce = self.generate_nonce()
        elif len(nonce) != XCHACHA_NONCE_SIZE:
            raise ValueError(f"Nonce must be exactly {XCHACHA_NONCE_SIZE} bytes")

        ciphertext = bindings.crypto_aead_xchacha20poly1305_ietf_encrypt(
            bytes(plaintext), aad, bytes(nonce), bytes(key)
        )
        return XChaChaResult(ciphertext=ciphertext, nonce=bytes(nonce))

    def decrypt(
        self,
        ciphertext: bytes,
        nonce: bytes,
        key: bytes,
        aad: Optional[bytes] = None,
    ) -> bytes:
        """
        Decrypt and verify ciphertext.

        Raises:
            ValueError: If key or nonce is the wrong size
            AuthenticationError: If the ciphertext is too short to hold a
                tag, or the tag does not verify (wrong key, tampering)
        """
        if len(key) != XCHACHA_KEY_SIZE:
            raise ValueError(f"Key must be exactly {XCHACHA_KEY_SIZE} bytes")
        if len(nonce) != XCHACHA_NONCE_SIZE:
            raise ValueError(f"Nonce must be exactly {XCHACHA_NONCE_SIZE} bytes")
        if len(ciphertext) < XCHACHA_TAG_SIZE:
            raise AuthenticationError("Ciphertext too short (missing authentication tag)")

        try:
            return bindings.crypto_aead_xchacha20poly1305_ietf_decrypt(
                bytes(ciphertext), aad, bytes(nonce), bytes(key)
            )
        except CryptoError as e:
            raise AuthenticationError("Authentication failed") from e
