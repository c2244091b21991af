"""
Tests for InMemoryEbookRepository, including the concurrent duplicate check.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from ebookstore.domain.entities import Ebook
from ebookstore.domain.errors import DuplicateEntity
from ebookstore.domain.services import EbookCreationService
from ebookstore.domain.utils.uuid7 import Uuid7Generator
from ebookstore.domain.value_objects import DuplicationKey
from ebookstore.infrastructure.repositories import InMemoryEbookRepository

FIXED_NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def repo():
    return InMemoryEbookRepository(clock=lambda: FIXED_NOW)


def make_ebook(ebook_id: str = "ebook-1", **overrides) -> Ebook:
    fields = dict(title="Go Basics", price=1999, producer_id="p-1", id=ebook_id)
    fields.update(overrides)
    return Ebook(**fields)


class TestSave:

    def test_save_returns_stamped_copy(self, repo):
        ebook = make_ebook()

        stored = repo.save(ebook)

        assert stored.created_at == FIXED_NOW
        assert stored.updated_at == FIXED_NOW
        assert ebook.created_at is None

    def test_save_requires_id(self, repo):
        with pytest.raises(ValueError):
            repo.save(make_ebook(ebook_id=""))

        assert repo.count() == 0

    def test_save_same_id_replaces(self, repo):
        repo.save(make_ebook())
        repo.save(make_ebook(title="Go Advanced"))

        assert repo.count() == 1
        assert repo.find_by_title_and_producer("Go Basics", "p-1") == []
        assert len(repo.find_by_title_and_producer("Go Advanced", "p-1")) == 1


class TestQueries:

    def test_find_returns_empty_list_when_no_match(self, repo):
        assert repo.find_by_title_and_producer("Nothing", "p-1") == []

    def test_find_is_exact_match(self, repo):
        repo.save(make_ebook())

        assert repo.find_by_title_and_producer("go basics", "p-1") == []
        assert repo.find_by_title_and_producer("Go Basics", "p-2") == []
        assert len(repo.find_by_title_and_producer("Go Basics", "p-1")) == 1

    def test_find_by_params_two_params(self, repo):
        repo.save(make_ebook())

        found = repo.find_by_params("Go Basics", "p-1")

        assert [e.id for e in found] == ["ebook-1"]

    def test_find_by_params_title_only(self, repo):
        repo.save(make_ebook("ebook-1", producer_id="p-1"))
        repo.save(make_ebook("ebook-2", producer_id="p-2"))

        assert {e.id for e in repo.find_by_params("Go Basics")} == {"ebook-1", "ebook-2"}

    @pytest.mark.parametrize("params", [(), ("a", "b", "c"), (1, "p-1")])
    def test_find_by_params_rejects_unsupported_shapes(self, repo, params):
        with pytest.raises(ValueError):
            repo.find_by_params(*params)

    def test_get_by_id(self, repo):
        repo.save(make_ebook())

        assert repo.get_by_id("ebook-1").title == "Go Basics"
        assert repo.get_by_id("missing") is None


class TestReservation:

    def test_reserve_blocks_same_key(self, repo):
        key = DuplicationKey("Go Basics", "p-1")
        entered = threading.Event()

        def contender():
            with repo.reserve(key):
                entered.set()

        with repo.reserve(key):
            worker = threading.Thread(target=contender)
            worker.start()
            worker.join(timeout=0.2)
            assert not entered.is_set()

        worker.join(timeout=2)
        assert entered.is_set()

    def test_reserve_does_not_block_other_keys(self, repo):
        with repo.reserve(DuplicationKey("A", "p-1")):
            with repo.reserve(DuplicationKey("B", "p-1")):
                pass

    def test_concurrent_creations_persist_exactly_one(self, repo):
        service = EbookCreationService(Uuid7Generator(), repo)
        barrier = threading.Barrier(8)

        def create():
            barrier.wait()
            try:
                return service.create_ebook(Ebook(title="X", price=100, producer_id="p-1"))
            except DuplicateEntity as e:
                return e

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: create(), range(8)))

        created = [r for r in results if isinstance(r, Ebook)]
        duplicates = [r for r in results if isinstance(r, DuplicateEntity)]

        assert len(created) == 1
        assert len(duplicates) == 7
        assert len(repo.find_by_title_and_producer("X", "p-1")) == 1
