"""
Record Store - the in-memory identifier -> secret mapping and its
canonical flat-text encoding.
"""

from pwstore.core.records.store import (
    DecodeError,
    RecordStore,
    RecordView,
    StoreStatus,
    StoreStatusCode,
)

__all__ = [
    "DecodeError",
    "RecordStore",
    "RecordView",
    "StoreStatus",
    "StoreStatusCode",
]
