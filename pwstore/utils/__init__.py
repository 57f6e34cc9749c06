"""
Utils module - Utility functions and helpers.
"""

from pwstore.utils.validators import (
    FIELD_SEPARATOR,
    RECORD_SEPARATOR,
    InvalidEntryError,
    ValidationError,
    validate_identifier,
    validate_store_path,
    validate_value,
)

__all__ = [
    "FIELD_SEPARATOR",
    "RECORD_SEPARATOR",
    "InvalidEntryError",
    "ValidationError",
    "validate_identifier",
    "validate_store_path",
    "validate_value",
]
