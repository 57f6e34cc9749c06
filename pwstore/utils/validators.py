"""
Validation Utilities
====================

Input validation for record identifiers, values and store paths.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final


FIELD_SEPARATOR: Final[str] = "\t"
RECORD_SEPARATOR: Final[str] = "\n"

_RESERVED: Final[tuple[str, ...]] = (FIELD_SEPARATOR, RECORD_SEPARATOR)
_RESERVED_NAMES: Final[dict[str, str]] = {"\t": "tab", "\n": "newline"}


class ValidationError(ValueError):
    """Raised when validation fails."""
    pass


class InvalidEntryError(ValidationError):
    """Raised when an identifier or value cannot be stored without breaking the encoding."""
    pass


def _reject_reserved(text: str, field_name: str) -> None:
    for char in _RESERVED:
        if char in text:
            raise InvalidEntryError(f"{field_name} may not contain a {_RESERVED_NAMES[char]}")
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidEntryError(f"{field_name} is not valid UTF-8 text") from e


def validate_identifier(identifier: str) -> str:
    """
    Validate a record identifier.

    Identifiers must be non-empty strings without tab or newline
    characters, since those delimit the flat-text encoding.

    Raises:
        InvalidEntryError: If the identifier cannot be encoded
    """
    if not isinstance(identifier, str):
        raise InvalidEntryError("identifier must be a string")
    if not identifier:
        raise InvalidEntryError("identifier cannot be empty")
    _reject_reserved(identifier, "identifier")
    return identifier


def validate_value(value: str) -> str:
    """Validate a record value (may be empty, no tab or newline)."""
    if not isinstance(value, str):
        raise InvalidEntryError("value must be a string")
    _reject_reserved(value, "value")
    return value


def validate_store_path(path: str | Path) -> Path:
    """
    Validate a store file path before it is opened.

    Args:
        path: The path the shell or caller supplied

    Returns:
        Path object (not resolved, so relative paths stay relative)

    Raises:
        ValidationError: If the path is empty or names a directory
    """
    if isinstance(path, str) and not path.strip():
        raise ValidationError("path cannot be empty")

    candidate = Path(path)
    if "\x00" in str(candidate):
        raise ValidationError("path contains invalid characters")
    if candidate.is_dir():
        raise ValidationError(f"path is a directory: {candidate}")

    return candidate
