"""
Converters between domain entities and API schemas.

This module centralizes all conversion logic between the domain layer
and the API layer, maintaining clean separation of concerns.
"""

from typing import Dict, Mapping

from ebookstore.domain import entities as domain
from ebookstore.api.v1 import schemas as api
from ebookstore.validation import wire_name


def request_to_domain(request: api.CreateEbookRequest) -> domain.Ebook:
    """
    Convert a validated CreateEbookRequest into a draft Ebook (no id).

    URLs and UUIDs are stored in the canonical form pydantic parsed them to.

    Args:
        request: Request that passed the field validator

    Returns:
        Draft Ebook entity
    """
    return domain.Ebook(
        title=request.title,
        description=request.description or "",
        sales_description=request.sales_description or "",
        price=request.price,
        promotional_price=request.promotional_price or 0,
        cover_image=str(request.cover_image) if request.cover_image else "",
        producer_id=request.producer_id,
        file_ids=tuple(str(file_id) for file_id in request.file_ids or ()),
    )


def domain_ebook_to_api(ebook: domain.Ebook) -> api.EbookResponse:
    """
    Convert a domain Ebook entity to an API EbookResponse model.

    Args:
        ebook: Domain Ebook entity

    Returns:
        API EbookResponse model
    """
    return api.EbookResponse(
        id=ebook.id,
        title=ebook.title,
        description=ebook.description,
        sales_description=ebook.sales_description,
        price=ebook.price,
        promotional_price=ebook.promotional_price,
        cover_image=ebook.cover_image,
        producer_id=ebook.producer_id,
        file_ids=list(ebook.file_ids),
        created_at=ebook.created_at,
        updated_at=ebook.updated_at,
    )


def api_ebook_to_domain(response: api.EbookResponse) -> domain.Ebook:
    """
    Convert an API EbookResponse back into a domain Ebook entity.
    """
    return domain.Ebook(
        id=response.id,
        title=response.title,
        description=response.description,
        sales_description=response.sales_description,
        price=response.price,
        promotional_price=response.promotional_price,
        cover_image=response.cover_image,
        producer_id=response.producer_id,
        file_ids=tuple(response.file_ids),
        created_at=response.created_at,
        updated_at=response.updated_at,
    )


def domain_field_to_wire(attribute: str) -> str:
    """Map a domain attribute name to its wire name."""
    if attribute in api.EbookResponse.model_fields:
        return wire_name(api.EbookResponse, attribute)
    return attribute


def domain_errors_to_wire(errors: Mapping[str, str]) -> Dict[str, str]:
    """Re-key a domain error map with wire field names."""
    return {domain_field_to_wire(name): message for name, message in errors.items()}
