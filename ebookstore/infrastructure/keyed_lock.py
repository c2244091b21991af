"""
Per-key mutual exclusion for repository adapters.

Both repositories use this to serialize the duplicate lookup and the save
of one DuplicationKey while letting unrelated keys proceed in parallel.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator


class _Entry:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


class KeyedLock:
    """
    A lock per hashable key, created on demand and dropped when unused.

    The holders counter tracks threads that hold or wait for a key, so the
    entry is removed only when nobody references it anymore.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: Dict[Hashable, _Entry] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Block until the key is free, then hold it for the with-block."""
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.holders += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        """Number of keys currently held or awaited."""
        with self._guard:
            return len(self._entries)
