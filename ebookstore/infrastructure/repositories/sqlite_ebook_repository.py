"""
SQLite implementation of the EbookRepository port.

This adapter persists Ebook entities to a SQLite database, handling
serialization/deserialization. Uniqueness of (title, info_producer_id) is
a domain invariant: there is no UNIQUE constraint on the table, the key is
checked inside the write transaction instead.
"""

import json
import logging
import sqlite3
from contextlib import closing, contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from ebookstore.domain.entities import Ebook
from ebookstore.domain.errors import DuplicateKeyError, RepositoryError
from ebookstore.domain.ports import EbookRepository
from ebookstore.domain.value_objects import DuplicationKey
from ebookstore.infrastructure.keyed_lock import KeyedLock

from .params import parse_find_params

logger = logging.getLogger(__name__)


class SqliteEbookRepository(EbookRepository):
    """
    Ebooks stored in a single SQLite file.

    Reservations are in-process (KeyedLock). Writers in other processes are
    caught by re-checking the duplication key under BEGIN IMMEDIATE, which
    takes the database write lock before the check.
    """

    def __init__(
        self,
        db_path: Path,
        clock: Optional[Callable[[], datetime]] = None,
        timeout: float = 5.0,
    ) -> None:
        """
        Initialize the repository with a database path
        """
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._timeout = timeout
        self._reservations = KeyedLock()
        self._init_schema()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with row factory, in autocommit mode."""
        conn = sqlite3.connect(
            str(self._db_path), timeout=self._timeout, isolation_level=None
        )
        conn.row_factory = sqlite3.Row  # access columns by name
        return conn

    def _init_schema(self) -> None:
        """Create the ebooks table if it doesn't exist."""
        try:
            with closing(self._get_connection()) as conn:
                conn.execute("""
                CREATE TABLE IF NOT EXISTS ebooks (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    sales_description TEXT NOT NULL DEFAULT '',
                    price INTEGER NOT NULL,
                    promotional_price INTEGER NOT NULL DEFAULT 0,
                    cover_image TEXT NOT NULL DEFAULT '',
                    info_producer_id TEXT NOT NULL,
                    file_ids TEXT NOT NULL DEFAULT '[]',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_ebooks_title_producer "
                    "ON ebooks(title, info_producer_id)"
                )
        except sqlite3.Error as e:
            raise RepositoryError(f"Failed to initialize ebook schema: {e}", e) from e

    def _ebook_to_row(self, ebook: Ebook) -> dict:
        """Convert an Ebook entity to a database row dict."""
        return {
            "id": ebook.id,
            "title": ebook.title,
            "description": ebook.description,
            "sales_description": ebook.sales_description,
            "price": ebook.price,
            "promotional_price": ebook.promotional_price,
            "cover_image": ebook.cover_image,
            "info_producer_id": ebook.producer_id,
            "file_ids": json.dumps(list(ebook.file_ids)),
            "created_at": ebook.created_at.isoformat(),
            "updated_at": ebook.updated_at.isoformat(),
        }

    def _row_to_ebook(self, row: sqlite3.Row) -> Ebook:
        """Convert a database row to an Ebook entity."""
        return Ebook(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            sales_description=row["sales_description"],
            price=row["price"],
            promotional_price=row["promotional_price"],
            cover_image=row["cover_image"],
            producer_id=row["info_producer_id"],
            file_ids=tuple(json.loads(row["file_ids"]) if row["file_ids"] else ()),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _query(self, sql: str, params: tuple) -> List[Ebook]:
        try:
            with closing(self._get_connection()) as conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise RepositoryError(f"Database error while querying ebooks: {e}", e) from e
        return [self._row_to_ebook(row) for row in rows]

    @contextmanager
    def reserve(self, key: DuplicationKey) -> Iterator[None]:
        """Hold exclusive access to a duplication key within this process."""
        with self._reservations.hold(key):
            yield

    def save(self, ebook: Ebook) -> Ebook:
        """Save an ebook and return the stamped copy."""
        if not ebook.has_id():
            raise ValueError("Cannot save an ebook without id")

        stored = ebook.with_timestamps(self._clock())
        row = self._ebook_to_row(stored)

        try:
            with closing(self._get_connection()) as conn:
                conn.execute("BEGIN IMMEDIATE")
                try:
                    clash = conn.execute(
                        "SELECT id FROM ebooks "
                        "WHERE title = ? AND info_producer_id = ? AND id != ?",
                        (stored.title, stored.producer_id, stored.id),
                    ).fetchone()
                    if clash is not None:
                        raise DuplicateKeyError(stored.title, stored.producer_id, clash["id"])

                    conn.execute("""
                        INSERT INTO ebooks
                        (id, title, description, sales_description, price,
                         promotional_price, cover_image, info_producer_id, file_ids,
                         created_at, updated_at)
                        VALUES
                        (:id, :title, :description, :sales_description, :price,
                         :promotional_price, :cover_image, :info_producer_id, :file_ids,
                         :created_at, :updated_at)
                        ON CONFLICT(id) DO UPDATE SET
                            title=excluded.title,
                            description=excluded.description,
                            sales_description=excluded.sales_description,
                            price=excluded.price,
                            promotional_price=excluded.promotional_price,
                            cover_image=excluded.cover_image,
                            info_producer_id=excluded.info_producer_id,
                            file_ids=excluded.file_ids,
                            updated_at=excluded.updated_at
                    """, row)
                except BaseException:
                    conn.execute("ROLLBACK")
                    raise
                conn.execute("COMMIT")

        except sqlite3.Error as e:
            raise RepositoryError(f"Database error while saving ebook: {e}", e) from e
        except (OverflowError, ValueError) as e:
            # Values sqlite3 cannot bind, such as integers beyond 64 bits.
            raise RepositoryError(f"Cannot store ebook {stored.id}: {e}", e) from e

        logger.debug("Stored ebook id=%s in %s", stored.id, self._db_path)
        return stored

    def find_by_title_and_producer(self, title: str, producer_id: str) -> List[Ebook]:
        """Find ebooks with exactly this title and producer."""
        return self._query(
            "SELECT * FROM ebooks WHERE title = ? AND info_producer_id = ? ORDER BY id",
            (title, producer_id),
        )

    def find_by_params(self, *params: str) -> List[Ebook]:
        """Positional lookup: (title,) or (title, producer_id)."""
        title, producer_id = parse_find_params(params)
        if producer_id is not None:
            return self.find_by_title_and_producer(title, producer_id)
        return self._query("SELECT * FROM ebooks WHERE title = ? ORDER BY id", (title,))

    def get_by_id(self, ebook_id: str) -> Optional[Ebook]:
        """Retrieve an ebook by id."""
        found = self._query("SELECT * FROM ebooks WHERE id = ?", (ebook_id,))
        return found[0] if found else None

    def count(self) -> int:
        """Get the total number of ebooks in the store."""
        try:
            with closing(self._get_connection()) as conn:
                result = conn.execute("SELECT COUNT(*) AS cnt FROM ebooks").fetchone()
        except sqlite3.Error as e:
            raise RepositoryError(f"Database error while counting ebooks: {e}", e) from e
        return result["cnt"]
