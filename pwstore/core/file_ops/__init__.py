"""
pwstore File Operations Module
==============================

Saving and loading the encrypted store file.

Security Features:
- Authenticated encryption over the whole encoded store
- Fresh random nonce per save
- Fail-closed load: the live store is only replaced on full success
- Replace-by-rename writes

Components:
- container.py: file format, save and load
"""

from pwstore.core.file_ops.container import (
    KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    ContainerError,
    ContainerIOError,
    EncryptedContainer,
    IntegrityError,
    WrongPasswordOrCorruptError,
    load,
    save,
)

__all__ = [
    "KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "ContainerError",
    "ContainerIOError",
    "EncryptedContainer",
    "IntegrityError",
    "WrongPasswordOrCorruptError",
    "load",
    "save",
]
