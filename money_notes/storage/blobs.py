"""
Versioned Blob Codec

Everything the ledger core puts in the key-value store is a list of
pydantic models wrapped in an envelope:

    {"version": 1, "items": [...]}

DESIGN DECISION: Blobs are decoded through the same pydantic models that
produced them. A blob that does not parse, or carries a version we do
not understand, raises CorruptBlobError on read instead of leaking a
half-parsed entity into the ledger.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from money_notes.errors import CorruptBlobError
from money_notes.storage.interface import KeyValueStore

BLOB_VERSION = 1

T = TypeVar("T", bound=BaseModel)


class BlobEnvelope(BaseModel, Generic[T]):
    """Version-tagged list of entities."""

    version: int = Field(default=BLOB_VERSION, ge=1)
    items: list[T] = Field(default_factory=list)


def encode_items(items: list[T], model: type[T]) -> str:
    """Serialize a list of models into a versioned blob."""
    return BlobEnvelope[model](version=BLOB_VERSION, items=list(items)).model_dump_json()


def decode_items(raw: str, model: type[T], key: str = "blob") -> list[T]:
    """
    Parse a versioned blob back into models.

    Raises:
        CorruptBlobError: If the blob is malformed or from an unknown version
    """
    try:
        envelope = BlobEnvelope[model].model_validate_json(raw)
    except PydanticValidationError as e:
        raise CorruptBlobError(f"Stored {key} could not be decoded: {e.error_count()} error(s)")
    if envelope.version != BLOB_VERSION:
        raise CorruptBlobError(
            f"Stored {key} has unsupported version {envelope.version} "
            f"(expected {BLOB_VERSION})"
        )
    return list(envelope.items)


def load_items(store: KeyValueStore, key: str, model: type[T]) -> list[T]:
    """Read and decode a blob; an absent key is an empty list."""
    raw: Optional[str] = store.read_string(key)
    if raw is None or raw == "":
        return []
    return decode_items(raw, model, key=key)


def save_items(store: KeyValueStore, key: str, items: list[T], model: type[T]) -> None:
    """Encode and write a blob. Raises PersistenceError on failure."""
    store.write_string(key, encode_items(items, model))
