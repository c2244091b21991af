"""
Repository adapters for the EbookRepository port.
"""

from .in_memory_ebook_repository import InMemoryEbookRepository
from .sqlite_ebook_repository import SqliteEbookRepository

__all__ = [
    "InMemoryEbookRepository",
    "SqliteEbookRepository",
]
