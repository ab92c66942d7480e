"""
JSON File Storage Implementation

DESIGN DECISION: All keys live in one JSON document on disk because:
1. The ledger core only stores a handful of small blobs
2. One file is easy to back up, inspect and delete
3. Replacing the file atomically keeps it consistent after a crash

TRADEOFFS:
- Every write rewrites the whole document (fine for a few blobs)
- Not safe for several processes writing at once (one app per file)
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from money_notes.errors import CorruptBlobError, PersistenceError
from money_notes.storage.interface import KeyValueStore

logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStore):
    """
    Key-value store backed by a single JSON object on disk.

    The file is loaded lazily on first access and cached; writes go to a
    temporary file in the same directory which then replaces the target.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        self._cache: Optional[dict[str, str]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if self._cache is None:
            if not self._path.exists():
                self._cache = {}
            else:
                try:
                    raw = self._path.read_text(encoding="utf-8")
                except OSError as e:
                    raise PersistenceError(f"Failed to read {self._path}: {e}")
                try:
                    data = json.loads(raw) if raw.strip() else {}
                except json.JSONDecodeError as e:
                    raise CorruptBlobError(f"Storage file {self._path} is not valid JSON: {e}")
                if not isinstance(data, dict) or not all(
                    isinstance(v, str) for v in data.values()
                ):
                    raise CorruptBlobError(f"Storage file {self._path} is not a string map")
                self._cache = data
        return self._cache

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        reraise=True,
    )
    def _replace_file(self, payload: str) -> None:
        """Write payload to a sibling temp file and move it into place."""
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".money_notes_", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def read_string(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def write_string(self, key: str, value: str) -> None:
        data = dict(self._load())
        data[key] = value
        try:
            self._replace_file(json.dumps(data, ensure_ascii=False, indent=2))
        except OSError as e:
            logger.error("storage_write_failed", path=str(self._path), key=key, error=str(e))
            raise PersistenceError(f"Failed to write {key} to {self._path}: {e}")
        self._cache = data
