"""
Tests for BookingStore
Version: 1.0.0

Tests ordering, copy semantics, pagination windows and locking.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from services.booking_store import BookingStore, ReadWriteLock


def ids(bookings):
    return [b.id for b in bookings]


class TestBookingStore:
    """Test BookingStore class."""

    @pytest.fixture
    def filled_store(self, store, make_booking):
        for booking_id in ("a", "b", "c"):
            store.add(make_booking(booking_id))
        return store

    # ========================================================================
    # ADD / GET
    # ========================================================================

    def test_get_after_add_round_trips(self, store, make_booking):
        booking = make_booking("b-1", guests=4, price=99.5, status="pending")
        store.add(booking)

        assert store.get("b-1") == booking

    def test_get_missing_returns_none(self, store):
        assert store.get("nope") is None

    def test_get_returns_copy(self, store, make_booking):
        store.add(make_booking("b-1"))

        fetched = store.get("b-1")
        fetched.guests = 99

        assert store.get("b-1").guests == 2

    def test_add_stores_copy(self, store, make_booking):
        booking = make_booking("b-1")
        store.add(booking)
        booking.status = "cancelled"

        assert store.get("b-1").status == "confirmed"

    # ========================================================================
    # UPDATE
    # ========================================================================

    def test_update_missing_reports_not_found(self, store, make_booking):
        assert store.update(make_booking("ghost")) is False
        assert store.get("ghost") is None
        assert len(store) == 0

    def test_update_keeps_position(self, filled_store, make_booking):
        assert filled_store.update(make_booking("a", guests=7)) is True

        listed = filled_store.list(0, 10)
        assert ids(listed) == ["a", "b", "c"]
        assert listed[0].guests == 7

    # ========================================================================
    # DELETE
    # ========================================================================

    def test_delete_then_get_and_delete_again(self, filled_store):
        assert filled_store.delete("b") is True

        assert filled_store.get("b") is None
        assert filled_store.delete("b") is False

    def test_delete_preserves_relative_order(self, filled_store, make_booking):
        filled_store.add(make_booking("d"))
        filled_store.delete("b")

        assert ids(filled_store.list(0, 10)) == ["a", "c", "d"]
        assert filled_store.count() == 3

    def test_mixed_sequence_lists_live_records_in_order(self, store, make_booking):
        for booking_id in ("1", "2", "3", "4", "5"):
            store.add(make_booking(booking_id))
        store.delete("2")
        store.update(make_booking("4", price=1.0))
        store.delete("5")
        store.add(make_booking("6"))
        store.update(make_booking("1", status="pending"))

        assert ids(store.list(0, 1000)) == ["1", "3", "4", "6"]

    # ========================================================================
    # LIST
    # ========================================================================

    def test_list_window(self, filled_store):
        assert ids(filled_store.list(0, 2)) == ["a", "b"]
        assert ids(filled_store.list(2, 2)) == ["c"]
        assert ids(filled_store.list(1, 1)) == ["b"]

    @pytest.mark.parametrize("limit", [0, 1, 5, 100])
    def test_list_offset_past_end_is_empty(self, filled_store, limit):
        assert filled_store.list(3, limit) == []
        assert filled_store.list(50, limit) == []

    def test_list_negative_arguments_do_not_raise(self, filled_store):
        assert ids(filled_store.list(-5, 2)) == ["a", "b"]
        assert filled_store.list(0, -1) == []

    def test_list_on_empty_store(self, store):
        assert store.list(0, 20) == []

    # ========================================================================
    # CONCURRENCY
    # ========================================================================

    def test_concurrent_adds_lose_nothing(self, store, make_booking):
        total = 500

        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(lambda i: store.add(make_booking(f"id-{i}")), range(total)))

        listed = store.list(0, total * 2)
        assert store.count() == total
        assert len(set(ids(listed))) == total

    def test_concurrent_reads_and_writes(self, store, make_booking):
        for i in range(50):
            store.add(make_booking(f"seed-{i}"))
        errors = []

        def writer(i):
            store.add(make_booking(f"new-{i}"))
            store.delete(f"seed-{i}")

        def reader(_):
            page = store.list(0, 1000)
            if len(set(ids(page))) != len(page):
                errors.append("duplicate ids in page")

        with ThreadPoolExecutor(max_workers=8) as pool:
            futures = []
            for i in range(50):
                futures.append(pool.submit(writer, i))
                futures.append(pool.submit(reader, i))
            for future in futures:
                future.result()

        assert errors == []
        assert sorted(ids(store.list(0, 1000))) == sorted(f"new-{i}" for i in range(50))


class TestReadWriteLock:
    """Test ReadWriteLock discipline."""

    def test_readers_hold_lock_together(self):
        lock = ReadWriteLock()
        barrier = threading.Barrier(3, timeout=5)
        failures = []

        def reader():
            with lock.read():
                try:
                    barrier.wait()
                except threading.BrokenBarrierError:
                    failures.append("readers were serialized")

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert failures == []

    def test_writer_waits_for_reader(self):
        lock = ReadWriteLock()
        events = []
        reader_inside = threading.Event()
        release_reader = threading.Event()

        def reader():
            with lock.read():
                reader_inside.set()
                release_reader.wait(timeout=5)
                events.append("reader done")

        def writer():
            with lock.write():
                events.append("writer")

        r = threading.Thread(target=reader)
        r.start()
        assert reader_inside.wait(timeout=5)

        w = threading.Thread(target=writer)
        w.start()
        time.sleep(0.05)
        assert events == []

        release_reader.set()
        r.join(timeout=5)
        w.join(timeout=5)

        assert events == ["reader done", "writer"]

    def test_reader_waits_for_writer(self):
        lock = ReadWriteLock()
        events = []
        writer_inside = threading.Event()
        release_writer = threading.Event()

        def writer():
            with lock.write():
                writer_inside.set()
                release_writer.wait(timeout=5)
                events.append("writer done")

        def reader():
            with lock.read():
                events.append("reader")

        w = threading.Thread(target=writer)
        w.start()
        assert writer_inside.wait(timeout=5)

        r = threading.Thread(target=reader)
        r.start()
        time.sleep(0.05)
        assert events == []

        release_writer.set()
        w.join(timeout=5)
        r.join(timeout=5)

        assert events == ["writer done", "reader"]

    def test_lock_released_after_exception(self):
        lock = ReadWriteLock()

        with pytest.raises(RuntimeError):
            with lock.write():
                raise RuntimeError("boom")

        acquired = threading.Event()

        def reader():
            with lock.read():
                acquired.set()

        t = threading.Thread(target=reader)
        t.start()
        t.join(timeout=5)
        assert acquired.is_set()
