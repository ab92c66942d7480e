"""
Storage Package

Provides the key-value persistence contract, its implementations, and the
versioned blob codec used on top of it.
"""

from money_notes.storage.interface import KeyValueStore, StorageKeys
from money_notes.storage.memory import InMemoryKeyValueStore
from money_notes.storage.file_store import JsonFileKeyValueStore
from money_notes.storage.blobs import (
    BLOB_VERSION,
    BlobEnvelope,
    decode_items,
    encode_items,
    load_items,
    save_items,
)

__all__ = [
    # Interface
    "KeyValueStore",
    "StorageKeys",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Blob codec
    "BLOB_VERSION",
    "BlobEnvelope",
    "decode_items",
    "encode_items",
    "load_items",
    "save_items",
]
