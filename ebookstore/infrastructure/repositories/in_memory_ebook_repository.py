"""
In-memory implementation of the EbookRepository port.

This is the default adapter: records live in process memory and are lost
on restart. Entities are frozen, so handing out stored instances is safe.
"""

import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from ebookstore.domain.entities import Ebook
from ebookstore.domain.ports import EbookRepository
from ebookstore.domain.value_objects import DuplicationKey
from ebookstore.infrastructure.keyed_lock import KeyedLock

from .params import parse_find_params


class InMemoryEbookRepository(EbookRepository):
    """
    Thread-safe in-memory ebook store.

    A store-level lock protects the dictionaries; a KeyedLock provides the
    per-DuplicationKey reservation used by the creation service.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._store_lock = threading.Lock()
        self._by_id: Dict[str, Ebook] = {}
        self._by_key: Dict[Tuple[str, str], List[str]] = {}
        self._reservations = KeyedLock()

    @contextmanager
    def reserve(self, key: DuplicationKey) -> Iterator[None]:
        """Hold exclusive access to a duplication key."""
        with self._reservations.hold(key):
            yield

    def save(self, ebook: Ebook) -> Ebook:
        """Store the ebook and return the stamped copy."""
        if not ebook.has_id():
            raise ValueError("Cannot save an ebook without id")

        stored = ebook.with_timestamps(self._clock())
        key = (stored.title, stored.producer_id)

        with self._store_lock:
            previous = self._by_id.get(stored.id)
            if previous is not None:
                old_key = (previous.title, previous.producer_id)
                self._by_key[old_key].remove(previous.id)
                if not self._by_key[old_key]:
                    del self._by_key[old_key]
            self._by_id[stored.id] = stored
            self._by_key.setdefault(key, []).append(stored.id)

        return stored

    def find_by_title_and_producer(self, title: str, producer_id: str) -> List[Ebook]:
        """Find ebooks with exactly this title and producer."""
        with self._store_lock:
            ids = list(self._by_key.get((title, producer_id), ()))
            return [self._by_id[ebook_id] for ebook_id in ids]

    def find_by_params(self, *params: str) -> List[Ebook]:
        """Positional lookup: (title,) or (title, producer_id)."""
        title, producer_id = parse_find_params(params)
        if producer_id is not None:
            return self.find_by_title_and_producer(title, producer_id)

        with self._store_lock:
            return [ebook for ebook in self._by_id.values() if ebook.title == title]

    def get_by_id(self, ebook_id: str) -> Optional[Ebook]:
        """Retrieve an ebook by id."""
        with self._store_lock:
            return self._by_id.get(ebook_id)

    def count(self) -> int:
        """Get the total number of stored ebooks."""
        with self._store_lock:
            return len(self._by_id)
