"""
Domain services package.

Services orchestrate domain logic that doesn't naturally belong to a single
entity. They coordinate between entities and ports to implement use cases.
"""

from .ebook_creation_service import EbookCreationService

__all__ = [
    "EbookCreationService",
]
