"""
Memory Zeroization Utilities
============================

Best-effort wiping of key and plaintext buffers.

Python may hold other copies of the same bytes (immutable ``bytes``
objects, interned strings, allocator free lists), so this narrows the
window sensitive data sits in memory; it does not close it.
"""

from __future__ import annotations

import ctypes
from contextlib import contextmanager
from typing import Iterator


def secure_zero(data: bytearray | memoryview) -> None:
    """
    Overwrite a mutable byte buffer with zeros.

    Args:
        data: bytearray or writable memoryview
    """
    if len(data) == 0:
        return

    if isinstance(data, memoryview):
        data[:] = bytes(len(data))
        return

    addr = ctypes.addressof((ctypes.c_char * len(data)).from_buffer(data))
    ctypes.memset(addr, 0, len(data))


@contextmanager
def ZeroizeContext(*buffers: bytearray) -> Iterator[None]:
    """
    Context manager that zeroizes buffers on exit, normal or exceptional.

    Usage:
        key = bytearray(derive_key(password))
        with ZeroizeContext(key):
            cipher.encrypt(data, key)
        # key is now all zeros
    """
    try:
        yield
    finally:
        for buf in buffers:
            secure_zero(buf)
