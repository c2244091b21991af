"""
Port interfaces (protocols) for the domain layer.

Ports define the contracts between the domain and infrastructure layers.
They are implemented by adapters in the infrastructure layer, allowing
the domain to remain independent of technical details.

Following Hexagonal Architecture principles, the domain layer depends only
on these abstract protocols, never on concrete implementations.
"""

from typing import ContextManager, List, Optional, Protocol

from .entities import Ebook
from .value_objects import DuplicationKey


class IdGenerator(Protocol):
    """
    Port for producing unique, time-ordered string identifiers.
    """

    def generate(self) -> str:
        """
        Produce a new identifier.

        Returns:
            A non-empty string, unique with high probability and sortable
            by creation time.

        Raises:
            GenerationFailed: If no identifier could be produced. Callers
                treat this as a failure of the current request only.
        """
        ...


class EbookRepository(Protocol):
    """
    Port for persisting and querying Ebook records.

    This repository abstracts away the storage medium (memory, SQLite, ...).

    Implementations must:
    - Never mutate the entity passed to save()
    - Return an empty list (not raise) when a query matches nothing
    - Provide mutual exclusion through reserve() so that a duplicate
      lookup followed by save() is atomic per DuplicationKey
    - Raise RepositoryError when the storage medium fails
    """

    def reserve(self, key: DuplicationKey) -> ContextManager[None]:
        """
        Hold exclusive access to a duplication key.

        While the context is held, no other caller can reserve the same key,
        so a find_by_title_and_producer() + save() sequence cannot race with
        another creation of the same (title, producer_id).

        Args:
            key: The duplication key to lock
        """
        ...

    def save(self, ebook: Ebook) -> Ebook:
        """
        Persist a fully-formed ebook (id already assigned).

        Args:
            ebook: The ebook entity to persist

        Returns:
            The stored record, with created_at/updated_at set by storage

        Raises:
            ValueError: If the ebook has no id
            DuplicateKeyError: If another record already holds the key
            RepositoryError: If the storage medium fails
        """
        ...

    def find_by_title_and_producer(self, title: str, producer_id: str) -> List[Ebook]:
        """
        Find ebooks with exactly this title and producer.

        Args:
            title: Exact title to match
            producer_id: Exact producer id to match

        Returns:
            Matching ebooks, empty if none

        Raises:
            RepositoryError: If the storage medium fails
        """
        ...

    def find_by_params(self, *params: str) -> List[Ebook]:
        """
        Positional form of the duplicate lookup.

        Params are order-sensitive: (title,) or (title, producer_id).

        Raises:
            ValueError: If more than two params or non-string params are given
            RepositoryError: If the storage medium fails
        """
        ...

    def get_by_id(self, ebook_id: str) -> Optional[Ebook]:
        """
        Retrieve an ebook by id.

        Returns:
            The Ebook if found, None otherwise
        """
        ...

    def count(self) -> int:
        """
        Get the total number of stored ebooks.
        """
        ...


class EbookCreator(Protocol):
    """
    Port exposed to inbound adapters (HTTP handlers, scripts).
    """

    def create_ebook(self, draft: Ebook) -> Ebook:
        """
        Create and persist a new ebook from a structurally valid draft.

        Raises:
            DuplicateEntity: If (title, producer_id) is already taken
            ValidationFailed: If domain invariants are violated
            PersistenceFailed: If storage fails
            GenerationFailed: If no id could be generated
        """
        ...
