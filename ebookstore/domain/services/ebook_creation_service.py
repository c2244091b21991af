"""
Domain service for ebook creation.

=============================================================================
NOTES: Two validation layers
=============================================================================

Requests reach this service only after the wire-level field validator has
accepted them, so malformed input is rejected before any I/O happens.
This service runs a second, domain-level pass on the fully-formed entity
(id assigned) because some rules only make sense once domain context is
attached: uniqueness of (title, producer_id) needs the repository, and the
invariants must hold for every stored record regardless of which adapter
built the draft.

=============================================================================
NOTES: Check-then-insert atomicity
=============================================================================

The duplicate lookup and the save run inside repository.reserve(key).
Without it two concurrent requests for the same (title, producer_id)
could both pass the lookup and both persist.

=============================================================================
"""

import logging

from ..entities import Ebook
from ..errors import (
    DuplicateEntity,
    DuplicateKeyError,
    GenerationFailed,
    PersistenceFailed,
    RepositoryError,
    ValidationFailed,
)
from ..ports import EbookRepository, IdGenerator

logger = logging.getLogger(__name__)


class EbookCreationService:
    """
    Orchestrates the creation of a single ebook.

    Pipeline:
    1. Look up existing ebooks by (title, producer_id)
    2. Reject duplicates with DuplicateEntity
    3. Assign a fresh id from the IdGenerator
    4. Re-validate the domain invariants on the fully-formed entity
    5. Persist through the repository
    6. Return the stored entity

    The caller gets either a fully valid, persisted ebook or an exception;
    there is no partial state. Nothing is retried here.

    Usage:
        service = EbookCreationService(
            id_generator=Uuid7Generator(),
            repository=InMemoryEbookRepository(),
        )
        ebook = service.create_ebook(draft)
    """

    def __init__(self, id_generator: IdGenerator, repository: EbookRepository) -> None:
        """
        Initialize the service with its ports.

        Args:
            id_generator: Source of unique, time-ordered ids
            repository: Storage for ebooks, also provides per-key locking
        """
        self._id_generator = id_generator
        self._repository = repository

    def create_ebook(self, draft: Ebook) -> Ebook:
        """
        Create and persist a new ebook.

        Args:
            draft: Ebook built from request data, without id

        Returns:
            The persisted ebook with id and timestamps

        Raises:
            ValidationFailed: If the draft already has an id or violates
                domain invariants (keys are domain attribute names)
            DuplicateEntity: If (title, producer_id) already exists
            GenerationFailed: If no id could be generated
            PersistenceFailed: If the repository failed to query or store
        """
        if draft.has_id():
            raise ValidationFailed({"id": "id is assigned by the server and must be empty"})

        key = draft.duplication_key

        with self._repository.reserve(key):
            try:
                existing = self._repository.find_by_title_and_producer(
                    key.title, key.producer_id
                )
            except RepositoryError as e:
                logger.error("Duplicate lookup failed for key %s", key, exc_info=True)
                raise PersistenceFailed("failed to look up existing ebooks") from e

            if existing:
                logger.warning("Rejected duplicate ebook for key %s", key)
                raise DuplicateEntity(key.title, key.producer_id)

            try:
                ebook = draft.with_id(self._id_generator.generate())
            except GenerationFailed:
                logger.error("Id generation failed for key %s", key, exc_info=True)
                raise
            except ValueError as e:
                # An IdGenerator returning an empty id is a generation failure.
                raise GenerationFailed(str(e)) from e

            violations = ebook.invariant_violations()
            if violations:
                logger.warning(
                    "Ebook for key %s violates invariants: %s", key, sorted(violations)
                )
                raise ValidationFailed(violations)

            try:
                stored = self._repository.save(ebook)
            except DuplicateKeyError as e:
                # Another process stored the same key after our lookup.
                logger.warning("Rejected duplicate ebook for key %s at save time", key)
                raise DuplicateEntity(key.title, key.producer_id) from e
            except RepositoryError as e:
                logger.error("Failed to persist ebook id=%s", ebook.id, exc_info=True)
                raise PersistenceFailed("failed to persist ebook") from e

        logger.info("Created ebook id=%s title=%r", stored.id, stored.title)
        return stored
