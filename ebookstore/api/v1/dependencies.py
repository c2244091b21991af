"""
FastAPI dependencies for dependency injection.

All collaborators are built explicitly by build_container() when the app
is created and stored on app.state; the Depends() providers below only
read them back. There are no module-level singletons, so tests can
create an app around any container they like.
"""

import logging
from dataclasses import dataclass

from fastapi import Request

from ebookstore.api.v1.schemas import CreateEbookRequest
from ebookstore.config import Settings
from ebookstore.domain.ports import EbookCreator, EbookRepository, IdGenerator
from ebookstore.domain.services import EbookCreationService
from ebookstore.domain.utils.uuid7 import Uuid7Generator
from ebookstore.infrastructure.repositories import (
    InMemoryEbookRepository,
    SqliteEbookRepository,
)
from ebookstore.validation import FieldValidator, MessageCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    """The wired object graph of the service."""

    validator: FieldValidator
    id_generator: IdGenerator
    repository: EbookRepository
    creation_service: EbookCreator


def build_repository(settings: Settings) -> EbookRepository:
    """Construct the repository selected by settings."""
    if settings.repository == "sqlite":
        logger.info("Using SQLite ebook repository at %s", settings.db_path)
        return SqliteEbookRepository(settings.db_path)
    logger.info("Using in-memory ebook repository")
    return InMemoryEbookRepository()


def build_container(settings: Settings) -> Container:
    """Provide the service graph with all dependencies wired."""
    validator = FieldValidator(
        CreateEbookRequest, MessageCatalog.for_locale(settings.messages_locale)
    )
    id_generator = Uuid7Generator()
    repository = build_repository(settings)
    return Container(
        validator=validator,
        id_generator=id_generator,
        repository=repository,
        creation_service=EbookCreationService(id_generator, repository),
    )


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_field_validator(request: Request) -> FieldValidator:
    """Provide the field validator of the running app."""
    return get_container(request).validator


def get_creation_service(request: Request) -> EbookCreator:
    """Provide the creation service of the running app."""
    return get_container(request).creation_service


def get_repository(request: Request) -> EbookRepository:
    """Provide the ebook repository of the running app."""
    return get_container(request).repository
