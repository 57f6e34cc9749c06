"""
pwstore - A Small Personal Secrets Store
========================================

Keeps identifier -> secret pairs in memory and persists them to a single
file encrypted with XChaCha20-Poly1305 under a password-derived key.

Security Notice:
- No secrets are logged
- Fail-closed loading
- Password and derived key are never written to disk

Usage:
    from pwstore import RecordStore, save, load

    store = RecordStore()
    store.add("db", "s3cr3t")
    save("secrets.pws", "correct-horse", store)
    store = load("secrets.pws", "correct-horse")
"""

from pwstore.core.config import PwstoreConfig
from pwstore.core.file_ops.container import (
    ContainerError,
    ContainerIOError,
    IntegrityError,
    WrongPasswordOrCorruptError,
    load,
    save,
)
from pwstore.core.logging import get_secure_logger
from pwstore.core.records.store import DecodeError, RecordStore, StoreStatus, StoreStatusCode

__version__ = "0.1.0"

__all__ = [
    "PwstoreConfig",
    "ContainerError",
    "ContainerIOError",
    "IntegrityError",
    "WrongPasswordOrCorruptError",
    "load",
    "save",
    "get_secure_logger",
    "DecodeError",
    "RecordStore",
    "StoreStatus",
    "StoreStatusCode",
    "__version__",
]
