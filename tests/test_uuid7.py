"""
Tests for the UUIDv7 generator.

Validates RFC 9562 compliance and the guarantees ebook ids rely on:
- Returns valid UUID objects / canonical strings
- Version is 7, variant is RFC 4122
- Ids are unique and strictly increasing, even within one millisecond
- Entropy failures surface as GenerationFailed
"""

import time
from uuid import UUID

import pytest

from ebookstore.domain.errors import GenerationFailed
from ebookstore.domain.utils.uuid7 import Uuid7Factory, Uuid7Generator


class FixedClock:
    """Clock returning a settable millisecond timestamp."""

    def __init__(self, now_ms: int):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms


@pytest.fixture
def factory():
    return Uuid7Factory()


class TestUuid7Basic:
    """Basic tests for a factory on the real clock."""

    def test_returns_uuid_object(self, factory):
        """A factory call should return a UUID instance."""
        assert isinstance(factory(), UUID)

    def test_uuid_version_is_7(self, factory):
        """Generated UUID should have version 7."""
        assert factory().version == 7

    def test_variant_bits_are_correct(self, factory):
        """Bits 64-65 should be 10 (RFC 4122 variant)."""
        uuid_bytes = factory().bytes
        assert (uuid_bytes[8] >> 6) & 0x03 == 2

    def test_uuid_bytes_contain_timestamp(self, factory):
        """First 48 bits should contain Unix timestamp in milliseconds."""
        before_ms = int(time.time() * 1000)
        result = factory()
        after_ms = int(time.time() * 1000)

        extracted_timestamp = int.from_bytes(result.bytes[:6], byteorder="big")

        # The monotonic counter may push the logical timestamp slightly ahead.
        assert before_ms <= extracted_timestamp <= after_ms + 5


class TestUuid7Ordering:
    """Tests for the monotonic ordering guarantee."""

    def test_ids_within_same_millisecond_are_strictly_increasing(self):
        """With a frozen clock the counter keeps ids ordered."""
        factory = Uuid7Factory(clock_ms=FixedClock(1_700_000_000_000))

        ids = [str(factory()) for _ in range(50)]

        assert ids == sorted(ids)
        assert len(set(ids)) == 50

    def test_counter_overflow_advances_timestamp(self):
        """Exhausting the 12-bit counter moves to the next logical millisecond."""
        clock = FixedClock(1_700_000_000_000)
        factory = Uuid7Factory(clock_ms=clock)

        ids = [factory() for _ in range(5000)]

        assert [str(u) for u in ids] == sorted(str(u) for u in ids)
        last_timestamp = int.from_bytes(ids[-1].bytes[:6], byteorder="big")
        assert last_timestamp > clock.now_ms

    def test_clock_going_backwards_keeps_order(self):
        """A clock regression must not produce a smaller id."""
        clock = FixedClock(1_700_000_000_500)
        factory = Uuid7Factory(clock_ms=clock)
        first = factory()

        clock.now_ms -= 400
        second = factory()

        assert str(second) > str(first)

    def test_later_millisecond_sorts_after(self):
        clock = FixedClock(1_700_000_000_000)
        factory = Uuid7Factory(clock_ms=clock)
        first = factory()

        clock.now_ms += 1
        second = factory()

        assert str(second) > str(first)

    def test_many_ids_are_unique(self):
        """All ids should be unique despite same-millisecond generation."""
        generator = Uuid7Generator()
        ids = [generator.generate() for _ in range(1000)]
        assert len(set(ids)) == 1000


class TestUuid7Generator:
    """Tests for the IdGenerator adapter."""

    def test_generate_returns_canonical_string(self):
        value = Uuid7Generator().generate()

        assert isinstance(value, str)
        assert len(value) == 36
        assert UUID(value).version == 7

    def test_entropy_failure_raises_generation_failed(self):
        def broken_entropy(size: int) -> bytes:
            raise OSError("no entropy")

        generator = Uuid7Generator(Uuid7Factory(random_bytes=broken_entropy))

        with pytest.raises(GenerationFailed):
            generator.generate()

    def test_short_entropy_raises_generation_failed(self):
        generator = Uuid7Generator(Uuid7Factory(random_bytes=lambda size: b"\x00"))

        with pytest.raises(GenerationFailed):
            generator.generate()

    def test_negative_clock_raises_generation_failed(self):
        generator = Uuid7Generator(Uuid7Factory(clock_ms=FixedClock(-5)))

        with pytest.raises(GenerationFailed):
            generator.generate()
