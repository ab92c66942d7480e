"""In-memory key-value store, used by tests and throwaway sessions."""

from typing import Optional

from money_notes.errors import PersistenceError
from money_notes.storage.interface import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """
    Dictionary-backed store.

    `fail_writes` makes every write raise PersistenceError, which lets
    tests exercise the "could not save locally" paths.
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self.fail_writes = False
        self.write_count = 0

    def read_string(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write_string(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError(f"Simulated write failure for {key}")
        self._data[key] = value
        self.write_count += 1
