"""
Tests for the Ebook entity.

Covers identity assignment, timestamps, duplication key and the domain
invariants checked by invariant_violations().
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from ebookstore.domain.entities import PRICE_MAX, Ebook
from ebookstore.domain.value_objects import DuplicationKey

VALID_FILE_ID = "a9a7275e-9339-4973-9d16-1b343b4b834b"


@pytest.fixture
def draft():
    return Ebook(
        title="Go Basics",
        price=1999,
        promotional_price=999,
        producer_id="p-1",
        cover_image="https://cdn.example.com/go.png",
        file_ids=[VALID_FILE_ID],
    )


class TestEbookIdentity:
    """Tests for id assignment."""

    def test_draft_has_no_id(self, draft):
        assert draft.id == ""
        assert not draft.has_id()

    def test_with_id_returns_copy(self, draft):
        ebook = draft.with_id("ebook-1")

        assert ebook.id == "ebook-1"
        assert draft.id == ""
        assert ebook.title == draft.title

    def test_with_id_rejects_second_assignment(self, draft):
        ebook = draft.with_id("ebook-1")

        with pytest.raises(ValueError, match="already has id"):
            ebook.with_id("ebook-2")

    def test_with_id_rejects_empty_id(self, draft):
        with pytest.raises(ValueError, match="cannot be empty"):
            draft.with_id("")

    def test_entity_is_immutable(self, draft):
        with pytest.raises(FrozenInstanceError):
            draft.id = "forced"


class TestEbookFields:
    """Tests for field normalization and helpers."""

    def test_file_ids_are_stored_as_tuple(self, draft):
        assert draft.file_ids == (VALID_FILE_ID,)

    def test_duplication_key(self, draft):
        assert draft.duplication_key == DuplicationKey(title="Go Basics", producer_id="p-1")

    def test_has_promotion(self, draft):
        assert draft.has_promotion()
        assert not Ebook(title="X", price=10, producer_id="p").has_promotion()

    def test_with_timestamps_sets_both(self, draft):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)

        stamped = draft.with_timestamps(now)

        assert stamped.created_at == now
        assert stamped.updated_at == now
        assert draft.created_at is None

    def test_with_timestamps_keeps_created_at(self, draft):
        created = datetime(2026, 1, 1, tzinfo=timezone.utc)
        later = created + timedelta(hours=1)

        stamped = draft.with_timestamps(created).with_timestamps(later)

        assert stamped.created_at == created
        assert stamped.updated_at == later


class TestEbookInvariants:
    """Tests for invariant_violations()."""

    def test_valid_ebook_has_no_violations(self, draft):
        assert draft.invariant_violations() == {}
        assert draft.is_valid()

    def test_promotional_price_zero_means_no_promotion(self):
        ebook = Ebook(title="X", price=100, producer_id="p-1", promotional_price=0)
        assert ebook.is_valid()

    @pytest.mark.parametrize("promotional_price", [1999, 2500])
    def test_promotional_price_must_be_less_than_price(self, promotional_price):
        ebook = Ebook(
            title="Go Basics",
            price=1999,
            promotional_price=promotional_price,
            producer_id="p-1",
        )

        assert "promotional_price" in ebook.invariant_violations()

    def test_negative_promotional_price(self):
        ebook = Ebook(title="X", price=100, promotional_price=-1, producer_id="p-1")
        assert "promotional_price" in ebook.invariant_violations()

    def test_title_required(self):
        ebook = Ebook(title="  ", price=100, producer_id="p-1")
        assert "title" in ebook.invariant_violations()

    def test_title_max_length(self):
        assert Ebook(title="a" * 120, price=100, producer_id="p-1").is_valid()

        ebook = Ebook(title="a" * 121, price=100, producer_id="p-1")
        assert "title" in ebook.invariant_violations()

    def test_description_lengths(self):
        ebook = Ebook(
            title="X",
            price=100,
            producer_id="p-1",
            description="d" * 121,
            sales_description="s" * 256,
        )

        violations = ebook.invariant_violations()

        assert "description" in violations
        assert "sales_description" in violations

    @pytest.mark.parametrize("price", [0, -10])
    def test_price_must_be_positive(self, price):
        ebook = Ebook(title="X", price=price, producer_id="p-1")
        assert "price" in ebook.invariant_violations()

    def test_prices_fit_in_64_bits(self):
        assert Ebook(title="X", price=PRICE_MAX, producer_id="p-1").is_valid()

        violations = Ebook(
            title="X", price=PRICE_MAX + 1, promotional_price=PRICE_MAX + 1, producer_id="p-1"
        ).invariant_violations()

        assert set(violations) == {"price", "promotional_price"}

    def test_producer_required(self):
        ebook = Ebook(title="X", price=100, producer_id="")
        assert "producer_id" in ebook.invariant_violations()

    def test_cover_image_must_be_absolute_url(self):
        ebook = Ebook(title="X", price=100, producer_id="p-1", cover_image="invalid-url")
        assert "cover_image" in ebook.invariant_violations()

    def test_file_ids_must_be_uuids(self):
        ebook = Ebook(
            title="X",
            price=100,
            producer_id="p-1",
            file_ids=[VALID_FILE_ID, "not-a-uuid"],
        )

        violations = ebook.invariant_violations()

        assert "position 1" in violations["file_ids"]

    def test_all_violations_are_collected(self):
        ebook = Ebook(title="", price=0, producer_id="")

        assert set(ebook.invariant_violations()) == {"title", "price", "producer_id"}
