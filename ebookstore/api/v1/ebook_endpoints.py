"""
API endpoints for ebook creation.

This module defines the FastAPI routes for creating ebooks. It handles HTTP
concerns (decoding, status codes, error bodies) and delegates to the field
validator and the creation service.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ebookstore.api.v1 import schemas as api
from ebookstore.api.v1.converters import (
    domain_ebook_to_api,
    domain_errors_to_wire,
    request_to_domain,
)
from ebookstore.api.v1.dependencies import (
    get_creation_service,
    get_field_validator,
    get_repository,
)
from ebookstore.domain.errors import (
    DuplicateEntity,
    GenerationFailed,
    MalformedPayload,
    PersistenceFailed,
    RepositoryError,
    ValidationFailed,
)
from ebookstore.domain.ports import EbookCreator, EbookRepository
from ebookstore.validation import FieldValidator

logger = logging.getLogger(__name__)

router = APIRouter()

MALFORMED_MESSAGE = "check the request body"
VALIDATION_MESSAGE = "validation failed"
DUPLICATE_MESSAGE = "ebook already exists"
INTERNAL_MESSAGE = "internal server error"

# Starlette renamed the 422 constant across releases.
HTTP_422_UNPROCESSABLE = 422


def error_response(
    status_code: int,
    message: str,
    fields: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build a JSON error response; fields are omitted when empty."""
    body = api.ErrorResponse(message=message, fields=fields or None)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post(
    "/ebooks",
    response_model=api.EbookResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": api.ErrorResponse},
        409: {"model": api.ErrorResponse},
        422: {"model": api.ErrorResponse},
        500: {"model": api.ErrorResponse},
    },
)
async def create_ebook(
    request: Request,
    validator: FieldValidator = Depends(get_field_validator),
    service: EbookCreator = Depends(get_creation_service),
):
    """
    Create an ebook.

    Returns:
        201 with the stored ebook

    Raises (as responses):
        400: Body is not a JSON object of the expected shape
        409: An ebook with the same title already exists for the producer
        422: Field or domain validation failed, with a field -> message map
        500: Id generation or storage failed
    """
    try:
        create_request = validator.parse_json(await request.body())
    except MalformedPayload as e:
        logger.info("Rejected malformed ebook payload: %s", e)
        return error_response(status.HTTP_400_BAD_REQUEST, MALFORMED_MESSAGE)
    except ValidationFailed as e:
        return error_response(HTTP_422_UNPROCESSABLE, VALIDATION_MESSAGE, e.fields)

    draft = request_to_domain(create_request)

    try:
        created = await run_in_threadpool(service.create_ebook, draft)
    except ValidationFailed as e:
        return error_response(
            HTTP_422_UNPROCESSABLE,
            VALIDATION_MESSAGE,
            domain_errors_to_wire(e.fields),
        )
    except DuplicateEntity:
        return error_response(status.HTTP_409_CONFLICT, DUPLICATE_MESSAGE)
    except (PersistenceFailed, GenerationFailed):
        logger.exception("Ebook creation failed for title=%r", draft.title)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_MESSAGE)

    return domain_ebook_to_api(created)


@router.get("/health", response_model=api.HealthResponse)
def health_check(
    repository: EbookRepository = Depends(get_repository),
):
    """
    Check that the repository answers queries.
    """
    checked_at = datetime.now(timezone.utc)
    try:
        total = repository.count()
    except RepositoryError:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "ebooks": 0, "checked_at": checked_at.isoformat()},
        )

    return api.HealthResponse(status="ok", ebooks=total, checked_at=checked_at)
