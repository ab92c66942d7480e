"""
Locally generated identifiers.

IDs look like `<prefix><millis>_<suffix>`: a millisecond clock that is
forced to be strictly increasing within the generator, plus a random
suffix. A generator never hands out the same ID twice.
"""

import secrets
import time
from typing import Callable, Optional


class IdGenerator:
    """Issues unique, roughly time-ordered IDs with a fixed prefix."""

    def __init__(
        self,
        prefix: str,
        clock: Optional[Callable[[], float]] = None,
        suffix_bytes: int = 3,
    ):
        self._prefix = prefix
        self._clock = clock or time.time
        self._suffix_bytes = suffix_bytes
        self._last_millis = 0
        self._issued: set[str] = set()

    @property
    def prefix(self) -> str:
        return self._prefix

    def reserve(self, existing_id: str) -> None:
        """Mark an ID loaded from storage as taken."""
        self._issued.add(existing_id)

    def next_id(self) -> str:
        millis = int(self._clock() * 1000)
        # Clock went backwards or two calls in the same millisecond
        if millis <= self._last_millis:
            millis = self._last_millis + 1
        self._last_millis = millis

        new_id = f"{self._prefix}{millis}_{secrets.token_hex(self._suffix_bytes)}"
        while new_id in self._issued:
            new_id = f"{self._prefix}{millis}_{secrets.token_hex(self._suffix_bytes)}"
        self._issued.add(new_id)
        return new_id
