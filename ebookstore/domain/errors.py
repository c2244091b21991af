"""
Error taxonomy for the ebook creation pipeline.

Every failure path of the pipeline raises one of these types, so callers
(the HTTP adapter, scripts, tests) can map outcomes without inspecting
message strings.
"""

from typing import Dict, Optional


class EbookError(Exception):
    """Base class for all ebook pipeline errors."""


class MalformedPayload(EbookError):
    """The incoming payload could not be parsed into the expected shape."""


class ValidationFailed(EbookError):
    """
    One or more field or invariant constraints were violated.

    Carries a field -> message map. Keys are whatever naming the raising
    layer uses: wire names from the field validator, domain attribute
    names from the creation service.
    """

    def __init__(self, fields: Dict[str, str], message: str = "validation failed") -> None:
        super().__init__(message)
        self.fields = dict(fields)

    def __str__(self) -> str:
        details = "; ".join(f"{name}: {msg}" for name, msg in sorted(self.fields.items()))
        return f"{self.args[0]} ({details})" if details else self.args[0]


class DuplicateEntity(EbookError):
    """An ebook with the same (title, producer_id) already exists."""

    def __init__(self, title: str, producer_id: str) -> None:
        super().__init__(
            f"ebook with title='{title}' already exists for producer '{producer_id}'"
        )
        self.title = title
        self.producer_id = producer_id


class PersistenceFailed(EbookError):
    """The repository could not store or query records."""


class GenerationFailed(EbookError):
    """The identifier generator could not produce an id."""


class RepositoryError(RuntimeError):
    """
    Raised by repository adapters when the storage medium fails.

    The creation service translates it into PersistenceFailed (or
    DuplicateEntity for DuplicateKeyError); the underlying cause stays
    chained for logging.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class DuplicateKeyError(RepositoryError):
    """
    Raised by a repository when another record already holds the
    duplication key of the ebook being saved.

    Only adapters that can see writers outside reserve() (another process
    on the same database) raise it.
    """

    def __init__(self, title: str, producer_id: str, existing_id: str) -> None:
        super().__init__(
            f"ebook (title='{title}', producer='{producer_id}') is already stored "
            f"with id '{existing_id}'"
        )
        self.title = title
        self.producer_id = producer_id
        self.existing_id = existing_id
