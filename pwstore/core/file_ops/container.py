"""
Encrypted Container
===================

Seals a RecordStore into a single password-protected file and opens it
again.

File Format:
    offset 0   nonce, 24 bytes, fresh per save
    offset 24  XChaCha20-Poly1305 ciphertext || 16-byte tag over
               RecordStore.encode()

There is no header, magic number or version byte; the sizes below are
the format. No associated data is bound. The file never contains the
password or the derived key.

Failure Modes:
    - The file cannot be read or written  -> ContainerIOError
    - Wrong password, or any truncation/modification of the file
                                          -> WrongPasswordOrCorruptError
      (an authenticated cipher cannot tell these apart, so neither do we)
    - Tag verifies but the plaintext does not decode
                                          -> IntegrityError (a bug)
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from pwstore.core.crypto.kdf import derive_key
from pwstore.core.crypto.xchacha20 import (
    XCHACHA_KEY_SIZE,
    XCHACHA_NONCE_SIZE,
    XCHACHA_TAG_SIZE,
    AuthenticationError,
    XChaCha20Cipher,
)
from pwstore.core.memory.zeroization import ZeroizeContext
from pwstore.core.records.store import DecodeError, RecordStore

logger = logging.getLogger(__name__)

NONCE_SIZE: Final[int] = XCHACHA_NONCE_SIZE
KEY_SIZE: Final[int] = XCHACHA_KEY_SIZE
TAG_SIZE: Final[int] = XCHACHA_TAG_SIZE
MIN_CONTAINER_SIZE: Final[int] = NONCE_SIZE + TAG_SIZE


class ContainerError(Exception):
    """Base class for container save/load failures."""
    pass


class ContainerIOError(ContainerError, OSError):
    """
    Raised when the container file cannot be read or written.

    Carries errno/strerror/filename of the underlying OSError, which is
    also chained as __cause__. Never retried.
    """
    pass


class WrongPasswordOrCorruptError(ContainerError):
    """
    Raised when a container does not authenticate.

    Deliberately covers both a wrong password and a damaged file.
    """

    def __init__(self, message: str = "wrong password or corrupted file") -> None:
        super().__init__(message)


class IntegrityError(ContainerError):
    """
    Raised when authenticated plaintext fails to decode.

    Authentication already passed, so this means the writer produced a
    malformed encoding: an internal defect, not a user error.
    """
    pass


@dataclass(frozen=True, slots=True)
class EncryptedContainer:
    """
    In-memory form of a container file.

    Usage:
        container = EncryptedContainer.seal(store, "correct-horse")
        data = container.to_bytes()

        store = EncryptedContainer.from_bytes(data).open("correct-horse")
    """

    nonce: bytes
    ciphertext: bytes

    def __post_init__(self) -> None:
        if len(self.nonce) != NONCE_SIZE:
            raise ValueError(f"Nonce must be exactly {NONCE_SIZE} bytes")

    def to_bytes(self) -> bytes:
        return self.nonce + self.ciphertext

    @classmethod
    def from_bytes(cls, data: bytes) -> EncryptedContainer:
        """
        Split raw file contents into nonce and ciphertext.

        Raises:
            WrongPasswordOrCorruptError: If data is too short to hold a
                nonce and a tag (a truncated file)
        """
        if len(data) < MIN_CONTAINER_SIZE:
            raise WrongPasswordOrCorruptError()
        return cls(nonce=bytes(data[:NONCE_SIZE]), ciphertext=bytes(data[NONCE_SIZE:]))

    @classmethod
    def seal(cls, store: RecordStore, password: str) -> EncryptedContainer:
        """Encrypt the store's canonical encoding under a password-derived key."""
        key = bytearray(derive_key(password))
        plaintext = bytearray(store.encode())

        with ZeroizeContext(key, plaintext):
            result = XChaCha20Cipher().encrypt(plaintext, key)

        return cls(nonce=result.nonce, ciphertext=result.ciphertext)

    def open(self, password: str) -> RecordStore:
        """
        Decrypt and decode into a fresh RecordStore.

        Raises:
            WrongPasswordOrCorruptError: If authentication fails
            IntegrityError: If the authenticated plaintext is malformed
        """
        key = bytearray(derive_key(password))

        with ZeroizeContext(key):
            try:
                decrypted = XChaCha20Cipher().decrypt(self.ciphertext, self.nonce, key)
            except AuthenticationError as e:
                raise WrongPasswordOrCorruptError() from e

        plaintext = bytearray(decrypted)
        del decrypted

        with ZeroizeContext(plaintext):
            try:
                return RecordStore.decode(plaintext)
            except DecodeError as e:
                logger.critical("Authenticated store data failed to decode: %s", e)
                raise IntegrityError(f"authenticated store data is malformed: {e}") from e

    def __repr__(self) -> str:
        return f"EncryptedContainer(ciphertext_len={len(self.ciphertext)})"


def _write_replacing(path: Path, data: bytes) -> None:
    """
    Write data to path, replacing any existing file.

    The bytes go to a temporary file in the same directory which is then
    renamed over path, so a failed write leaves the previous file intact.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def save(path: str | os.PathLike[str], password: str, store: RecordStore) -> None:
    """
    Encrypt store under password and write it to path.

    Any existing file at path is replaced.

    Raises:
        ContainerIOError: If the file cannot be written (missing
            directory, permission denied, disk full)
    """
    path = Path(path)
    data = EncryptedContainer.seal(store, password).to_bytes()

    try:
        _write_replacing(path, data)
    except OSError as e:
        logger.error("Could not save store to %s: %s", path, e.strerror or e)
        raise ContainerIOError(e.errno, e.strerror or str(e), str(path)) from e

    logger.info("Saved %d entries to %s (%d bytes)", len(store), path, len(data))


def load(path: str | os.PathLike[str], password: str) -> RecordStore:
    """
    Read, authenticate and decode the container at path.

    Returns a new RecordStore; the caller replaces its live store with
    it only after this returns.

    Raises:
        ContainerIOError: If the file cannot be opened or read
        WrongPasswordOrCorruptError: Wrong password, or the file was
            truncated, modified or corrupted
        IntegrityError: Authenticated contents failed to decode
    """
    path = Path(path)

    try:
        data = path.read_bytes()
    except OSError as e:
        logger.error("Could not read store from %s: %s", path, e.strerror or e)
        raise ContainerIOError(e.errno, e.strerror or str(e), str(path)) from e

    try:
        store = EncryptedContainer.from_bytes(data).open(password)
    except WrongPasswordOrCorruptError:
        logger.warning("Store at %s did not authenticate", path)
        raise

    logger.info("Loaded %d entries from %s", len(store), path)
    return store
