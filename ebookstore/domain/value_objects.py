"""
Value objects for the domain layer.

Value objects are immutable objects that represent descriptive aspects
of the domain with no conceptual identity.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class DuplicationKey:
    """
    The (title, producer_id) pair that must be unique across stored ebooks.

    Matching is exact: no case folding or whitespace trimming is applied,
    so "Go Basics" and "go basics" are different keys.
    """

    title: str
    """Ebook title"""

    producer_id: str
    """Identifier of the owning content producer"""

    def __str__(self) -> str:
        return f"({self.title!r}, {self.producer_id!r})"
