from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from typing import Iterator

from ..core.constants import DEFAULT_STORE_TIMEOUT_SECONDS
from ..core.exceptions import StorageTimeout


class InMemoryStore:
    """Process-local store used by the ``memory`` backend and the test-suite.

    Each store owns one lock; every read and every check-then-write runs while
    holding it, so uniqueness checks and inserts cannot interleave.
    """

    def __init__(self, *, timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS):
        self._lock = threading.Lock()
        self._timeout = float(timeout_seconds)
        self._ids = itertools.count(1)

    @contextmanager
    def locked(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self._timeout):
            raise StorageTimeout()
        try:
            yield
        finally:
            self._lock.release()

    def next_id(self) -> int:
        return next(self._ids)
