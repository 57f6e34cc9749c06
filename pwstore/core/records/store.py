"""
Record Store
============

In-memory mapping of identifiers to secret values.

Canonical encoding (the plaintext sealed inside a container):

    <identifier> TAB <value> LF     one line per entry
    ...                             lexicographic by identifier

An empty store encodes to zero bytes. Tab and newline are reserved and
rejected on insert, so every stored entry round-trips.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union

from pwstore.utils.validators import (
    FIELD_SEPARATOR,
    RECORD_SEPARATOR,
    validate_identifier,
    validate_value,
)

logger = logging.getLogger(__name__)


class DecodeError(ValueError):
    """Raised when encoded store data is malformed."""
    pass


class StoreStatusCode(Enum):
    ADDED = "added"
    EXISTS = "exists"
    REMOVED = "removed"
    NOT_FOUND = "not_found"


_MESSAGES = {
    StoreStatusCode.ADDED: "added entry {}",
    StoreStatusCode.EXISTS: "entry {} already exists",
    StoreStatusCode.REMOVED: "removed entry '{}'",
    StoreStatusCode.NOT_FOUND: "could not find entry '{}'",
}


@dataclass(frozen=True, slots=True)
class StoreStatus:
    """
    Outcome of a mutating store call.

    EXISTS and NOT_FOUND are recoverable conditions, not errors: the
    store is left unchanged and the caller prints the message.
    """

    code: StoreStatusCode
    identifier: str

    @property
    def ok(self) -> bool:
        """True when the store was changed."""
        return self.code in (StoreStatusCode.ADDED, StoreStatusCode.REMOVED)

    @property
    def message(self) -> str:
        return _MESSAGES[self.code].format(self.identifier)

    def __str__(self) -> str:
        return self.message


class RecordView:
    """
    Lazy, restartable view over a store's entries.

    Nothing is computed until iteration starts, and each new iteration
    reflects the store as it is at that moment.
    """

    __slots__ = ("_entries", "_prefix")

    def __init__(self, entries: dict[str, str], prefix: Optional[str] = None) -> None:
        self._entries = entries
        self._prefix = prefix

    def __iter__(self) -> Iterator[tuple[str, str]]:
        for identifier, value in sorted(self._entries.items()):
            if self._prefix is None or identifier.startswith(self._prefix):
                yield identifier, value

    def __repr__(self) -> str:
        return f"RecordView(prefix={self._prefix!r})"


class RecordStore:
    """
    Ordered identifier -> value mapping with a canonical flat-text encoding.

    Usage:
        store = RecordStore()
        print(store.add("db", "s3cr3t"))        # added entry db
        print(store.add("db", "other"))         # entry db already exists
        for identifier, value in store.view("d"):
            ...
        data = store.encode()
        same = RecordStore.decode(data)
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[dict[str, str]] = None) -> None:
        self._entries: dict[str, str] = {}
        for identifier, value in (entries or {}).items():
            self._entries[validate_identifier(identifier)] = validate_value(value)

    def add(self, identifier: str, value: str) -> StoreStatus:
        """
        Insert an entry unless the identifier is already taken.

        Raises:
            InvalidEntryError: If the identifier or value contains a
                reserved delimiter, or the identifier is empty
        """
        validate_identifier(identifier)
        validate_value(value)

        if identifier in self._entries:
            return StoreStatus(StoreStatusCode.EXISTS, identifier)

        self._entries[identifier] = value
        logger.debug("Added entry (%d total)", len(self._entries))
        return StoreStatus(StoreStatusCode.ADDED, identifier)

    def remove(self, identifier: str) -> StoreStatus:
        """Delete an entry, reporting NOT_FOUND when it is absent."""
        if self._entries.pop(identifier, None) is None:
            return StoreStatus(StoreStatusCode.NOT_FOUND, identifier)

        logger.debug("Removed entry (%d left)", len(self._entries))
        return StoreStatus(StoreStatusCode.REMOVED, identifier)

    def get(self, identifier: str) -> Optional[str]:
        return self._entries.get(identifier)

    def view(self, prefix: Optional[str] = None) -> RecordView:
        """
        Entries in canonical order, optionally limited to identifiers
        starting with prefix (plain string prefix, no patterns).
        """
        return RecordView(self._entries, prefix)

    def encode(self) -> bytes:
        """Serialize all entries in canonical order."""
        return "".join(
            f"{identifier}{FIELD_SEPARATOR}{value}{RECORD_SEPARATOR}"
            for identifier, value in self.view()
        ).encode("utf-8")

    @classmethod
    def decode(cls, data: Union[bytes, bytearray, memoryview]) -> RecordStore:
        """
        Build a fresh store from encoded bytes.

        The caller's existing store is never touched; swap the result in
        only after this returns.

        Raises:
            DecodeError: If the data is not UTF-8, lacks the trailing
                newline, has a line that is not exactly two tab-separated
                fields, has an empty identifier, or repeats an identifier
        """
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError("store data is not valid UTF-8") from e

        store = cls()
        if not text:
            return store

        if not text.endswith(RECORD_SEPARATOR):
            raise DecodeError("store data is missing the trailing newline")

        for lineno, line in enumerate(text[:-1].split(RECORD_SEPARATOR), start=1):
            fields = line.split(FIELD_SEPARATOR)
            if len(fields) != 2:
                raise DecodeError(f"line {lineno}: expected 2 fields, found {len(fields)}")

            identifier, value = fields
            if not identifier:
                raise DecodeError(f"line {lineno}: empty identifier")
            if identifier in store._entries:
                raise DecodeError(f"line {lineno}: duplicate identifier")

            store._entries[identifier] = value

        return store

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordStore):
            return NotImplemented
        return self._entries == other._entries

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Safe representation without exposing values."""
        return f"RecordStore(entries={len(self._entries)})"
