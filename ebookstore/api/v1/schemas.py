"""
Wire shapes for the ebook API.

CreateEbookRequest declares every creation constraint with pydantic; the
field validator turns the resulting ValidationError into a wire-named
message map.
"""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    AnyUrl,
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    UrlConstraints,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from ebookstore.domain.entities import (
    DESCRIPTION_MAX_LENGTH,
    PRICE_MAX,
    SALES_DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)

CoverImageUrl = Annotated[AnyUrl, UrlConstraints(host_required=True)]


def is_zero_value(value: Any) -> bool:
    """Check if a decoded JSON value counts as absent: null, "", [] or integer 0."""
    if value is None:
        return True
    if type(value) in (str, list):
        return len(value) == 0
    return type(value) is int and value == 0


class CreateEbookRequest(BaseModel):
    """
    Request body for POST /ebooks.

    Zero values are treated as absent: a required field holding one is
    reported as missing, an optional one is not checked at all.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: StrictStr = Field(max_length=TITLE_MAX_LENGTH, description="Ebook title")
    description: StrictStr | None = Field(
        default=None,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Short description",
    )
    sales_description: StrictStr | None = Field(
        default=None,
        max_length=SALES_DESCRIPTION_MAX_LENGTH,
        description="Sales page copy",
    )
    price: StrictInt = Field(gt=0, le=PRICE_MAX, description="Price in cents")
    promotional_price: StrictInt | None = Field(
        default=None,
        ge=0,
        le=PRICE_MAX,
        description="Promotional price in cents, must be less than price",
    )
    cover_image: CoverImageUrl | None = Field(default=None, description="Cover image URL")
    producer_id: StrictStr = Field(
        alias="info_producer_id",
        description="Identifier of the owning content producer",
    )
    file_ids: list[UUID] | None = Field(
        default=None,
        description="UUIDs of the files delivered with the ebook",
    )

    @model_validator(mode="before")
    @classmethod
    def drop_zero_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if not is_zero_value(value)}
        return data

    @field_validator("promotional_price")
    @classmethod
    def less_than_price(cls, value: int | None, info: ValidationInfo) -> int | None:
        # An absent or rejected price compares as 0.
        price = info.data.get("price", 0)
        if value is not None and value >= price:
            raise PydanticCustomError(
                "less_than_field",
                "must be less than {other}",
                {"other": "price"},
            )
        return value


class EbookResponse(BaseModel):
    """
    API representation of an Ebook entity.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Server-assigned identifier (UUIDv7)")
    title: str = Field(description="Ebook title")
    description: str = Field(default="", description="Short description")
    sales_description: str = Field(default="", description="Sales page copy")
    price: int = Field(description="Price in cents")
    promotional_price: int = Field(default=0, description="Promotional price in cents")
    cover_image: str = Field(default="", description="Cover image URL")
    producer_id: str = Field(
        alias="info_producer_id",
        description="Identifier of the owning content producer",
    )
    file_ids: list[str] = Field(default_factory=list, description="File UUIDs")
    created_at: AwareDatetime | None = Field(
        default=None, description="When the ebook was stored"
    )
    updated_at: AwareDatetime | None = Field(
        default=None, description="When the ebook was last updated"
    )


class ErrorResponse(BaseModel):
    """
    Error body returned for every failed request.
    """

    message: str = Field(description="Human-readable summary")
    fields: dict[str, str] | None = Field(
        default=None,
        description="Field name -> message, for validation failures",
    )


class HealthResponse(BaseModel):
    status: str
    ebooks: int
    checked_at: datetime
