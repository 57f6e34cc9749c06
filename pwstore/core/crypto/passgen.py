"""
Password generation for the shell's ``generate`` command.
"""

from __future__ import annotations

import secrets
import string
from typing import Final

MIN_LENGTH: Final[int] = 1
MAX_LENGTH: Final[int] = 255

SYMBOLS: Final[str] = "!@#$%^&*()_+-="


def generate_password(length: int = 20, use_symbols: bool = True) -> str:
    """
    Generate a random password from letters, digits and optionally symbols.

    Output never contains whitespace, so it can be stored as a value
    as-is.

    Raises:
        ValueError: If length is outside 1..255
    """
    if not MIN_LENGTH <= length <= MAX_LENGTH:
        raise ValueError(f"length must be between {MIN_LENGTH} and {MAX_LENGTH}")

    chars = string.ascii_letters + string.digits
    if use_symbols:
        chars += SYMBOLS

    return "".join(secrets.choice(chars) for _ in range(length))
