"""
pwstore Memory Hygiene
======================

Explicit zeroization of derived keys and decrypted plaintext.

WARNING:
- Python's memory model doesn't guarantee secure erasure
- These are best-effort mitigations
"""

from pwstore.core.memory.zeroization import ZeroizeContext, secure_zero

__all__ = ["ZeroizeContext", "secure_zero"]
