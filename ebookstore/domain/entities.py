"""
Domain entities for the ebook store.

Entities are objects with a unique identity that runs through time and
different representations. The Ebook aggregate is the only entity here.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, Optional, Tuple
from urllib.parse import urlparse
from uuid import UUID

from .value_objects import DuplicationKey

TITLE_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 120
SALES_DESCRIPTION_MAX_LENGTH = 255

# Prices are stored as signed 64-bit integers.
PRICE_MAX = 2**63 - 1


def _is_uuid(value: object) -> bool:
    """Check if value is a UUID in canonical 8-4-4-4-12 textual form."""
    if not isinstance(value, str) or len(value) != 36:
        return False
    try:
        UUID(value)
    except ValueError:
        return False
    return True


def _is_absolute_url(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme and parsed.netloc)


@dataclass(frozen=True)
class Ebook:
    """
    A digital product sold by a content producer.

    An Ebook starts as a draft built from request data (empty id, no
    timestamps). The creation service assigns the id exactly once and the
    repository stamps the timestamps when the record is stored.

    Prices are integers in currency minor units (cents).
    """

    title: str
    """Ebook title, 1..120 characters"""

    price: int
    """List price in cents, must be > 0"""

    producer_id: str
    """Identifier of the owning content producer"""

    id: str = ""
    """Server-assigned identifier, empty until the creation service sets it"""

    description: str = ""
    """Short description, up to 120 characters"""

    sales_description: str = ""
    """Sales page copy, up to 255 characters"""

    promotional_price: int = 0
    """Promotional price in cents, 0 means no promotion"""

    cover_image: str = ""
    """Absolute URL of the cover image, empty when absent"""

    file_ids: Tuple[str, ...] = field(default_factory=tuple)
    """UUIDs of the files delivered with this ebook, in order"""

    created_at: Optional[datetime] = None
    """Set by the storage layer"""

    updated_at: Optional[datetime] = None
    """Set by the storage layer"""

    def __post_init__(self) -> None:
        # Accept any iterable for file_ids but always store a tuple.
        if not isinstance(self.file_ids, tuple):
            object.__setattr__(self, "file_ids", tuple(self.file_ids or ()))

    @property
    def duplication_key(self) -> DuplicationKey:
        """The (title, producer_id) pair used to reject duplicates."""
        return DuplicationKey(title=self.title, producer_id=self.producer_id)

    def has_id(self) -> bool:
        """Check if an identifier has been assigned."""
        return bool(self.id)

    def has_promotion(self) -> bool:
        """Check if a promotional price is set."""
        return self.promotional_price != 0

    def with_id(self, ebook_id: str) -> "Ebook":
        """
        Return a copy of this ebook carrying the given identifier.

        Raises:
            ValueError: If the ebook already has an id or ebook_id is empty.
        """
        if self.has_id():
            raise ValueError(f"Ebook already has id '{self.id}'")
        if not ebook_id:
            raise ValueError("Ebook id cannot be empty")
        return replace(self, id=ebook_id)

    def with_timestamps(self, now: datetime) -> "Ebook":
        """Return a copy stamped as created/updated at the given instant."""
        return replace(self, created_at=self.created_at or now, updated_at=now)

    def invariant_violations(self) -> Dict[str, str]:
        """
        Check the domain invariants of a fully-formed ebook.

        Returns:
            Mapping of attribute name to message; empty when the ebook is valid.
        """
        errors: Dict[str, str] = {}

        if not self.title or not self.title.strip():
            errors["title"] = "title cannot be empty"
        elif len(self.title) > TITLE_MAX_LENGTH:
            errors["title"] = f"title cannot be longer than {TITLE_MAX_LENGTH} characters"

        if len(self.description) > DESCRIPTION_MAX_LENGTH:
            errors["description"] = (
                f"description cannot be longer than {DESCRIPTION_MAX_LENGTH} characters"
            )

        if len(self.sales_description) > SALES_DESCRIPTION_MAX_LENGTH:
            errors["sales_description"] = (
                "sales description cannot be longer than "
                f"{SALES_DESCRIPTION_MAX_LENGTH} characters"
            )

        if self.price <= 0:
            errors["price"] = f"price must be greater than 0, got {self.price}"
        elif self.price > PRICE_MAX:
            errors["price"] = f"price cannot be greater than {PRICE_MAX}"

        if self.promotional_price < 0:
            errors["promotional_price"] = (
                f"promotional price cannot be negative, got {self.promotional_price}"
            )
        elif self.promotional_price > PRICE_MAX:
            errors["promotional_price"] = f"promotional price cannot be greater than {PRICE_MAX}"
        elif self.has_promotion() and self.promotional_price >= self.price:
            errors["promotional_price"] = "promotional price must be less than price"

        if not self.producer_id or not self.producer_id.strip():
            errors["producer_id"] = "producer id cannot be empty"

        if self.cover_image and not _is_absolute_url(self.cover_image):
            errors["cover_image"] = f"cover image must be an absolute URL, got '{self.cover_image}'"

        for position, file_id in enumerate(self.file_ids):
            if not _is_uuid(file_id):
                errors["file_ids"] = f"file id at position {position} is not a valid UUID"
                break

        return errors

    def is_valid(self) -> bool:
        """Check if all domain invariants hold."""
        return not self.invariant_violations()

