"""
Tests for KeyedLock.
"""

import threading

from ebookstore.infrastructure.keyed_lock import KeyedLock


class TestKeyedLock:

    def test_entry_removed_after_release(self):
        locks = KeyedLock()

        with locks.hold("a"):
            assert len(locks) == 1

        assert len(locks) == 0

    def test_entry_removed_after_exception(self):
        locks = KeyedLock()

        try:
            with locks.hold("a"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert len(locks) == 0
        with locks.hold("a"):
            pass

    def test_serializes_same_key(self):
        locks = KeyedLock()
        counter = {"value": 0, "max_inside": 0, "inside": 0}
        guard = threading.Lock()

        def work():
            for _ in range(200):
                with locks.hold("shared"):
                    with guard:
                        counter["inside"] += 1
                        counter["max_inside"] = max(counter["max_inside"], counter["inside"])
                    counter["value"] += 1
                    with guard:
                        counter["inside"] -= 1

        threads = [threading.Thread(target=work) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert counter["value"] == 800
        assert counter["max_inside"] == 1
        assert len(locks) == 0
