"""
Domain layer - Core business logic and entities.

This layer contains the Ebook aggregate, its value objects and errors,
and defines the ports (interfaces) that the infrastructure layer must
implement.

It has NO dependencies on external frameworks, databases, or APIs.
"""

from .entities import Ebook
from .errors import (
    DuplicateEntity,
    DuplicateKeyError,
    EbookError,
    GenerationFailed,
    MalformedPayload,
    PersistenceFailed,
    RepositoryError,
    ValidationFailed,
)
from .value_objects import DuplicationKey

__all__ = [
    # Entities
    "Ebook",
    # Value Objects
    "DuplicationKey",
    # Errors
    "EbookError",
    "MalformedPayload",
    "ValidationFailed",
    "DuplicateEntity",
    "PersistenceFailed",
    "GenerationFailed",
    "RepositoryError",
    "DuplicateKeyError",
]
