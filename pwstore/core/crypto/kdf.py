"""
Key Derivation
==============

Password -> cipher key.

The key is the first 32 bytes of BLAKE2b-512 over the UTF-8 password.
There is no salt and no work factor: the same password always yields the
same key, which is what lets a container be opened with nothing but the
file and the password. Changing this function changes the file format.
"""

from __future__ import annotations

from typing import Final

from cryptography.hazmat.primitives import hashes

KEY_SIZE: Final[int] = 32  # XChaCha20-Poly1305 key length
BLAKE2B_DIGEST_SIZE: Final[int] = 64  # the only size cryptography supports


def derive_key(password: str) -> bytes:
    """
    Derive a cipher key from a password.

    Args:
        password: User password (any string, including empty)

    Returns:
        32-byte key
    """
    digest = hashes.Hash(hashes.BLAKE2b(BLAKE2B_DIGEST_SIZE))
    digest.update(password.encode("utf-8"))
    return digest.finalize()[:KEY_SIZE]
