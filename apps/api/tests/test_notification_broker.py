"""Notification broker resolution and fan-out tests."""

from __future__ import annotations

import threading
import unittest

from cliprelay.adapters.listeners import Listener, ListenerClosedError
from cliprelay.repositories.memory import InMemoryCompletionStore, InMemorySubscriptionRegistry
from cliprelay.schemas.clip import CompletionRecord
from cliprelay.services.broker import NotificationBroker


class _RecordingListener(Listener):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[CompletionRecord] = []

    def deliver(self, record: CompletionRecord) -> None:
        self.records.append(record)


class _BrokenListener(Listener):
    def deliver(self, record: CompletionRecord) -> None:
        raise ListenerClosedError("gone")


def _record(job_id: str, title: str = "Song") -> CompletionRecord:
    return CompletionRecord(job_id=job_id, title=title, audio_url=f"https://cdn.example/{job_id}.mp3")


def _broker() -> NotificationBroker:
    return NotificationBroker(InMemoryCompletionStore(), InMemorySubscriptionRegistry())


class NotificationBrokerTests(unittest.TestCase):
    def test_resolve_delivers_once_to_each_attached_listener_and_retires_entry(self) -> None:
        broker = _broker()
        first = _RecordingListener()
        second = _RecordingListener()
        self.assertIsNone(broker.attach("job-1", first))
        self.assertIsNone(broker.attach("job-1", second))
        record = _record("job-1")

        result = broker.resolve("job-1", record)

        self.assertTrue(result.first_write)
        self.assertEqual(result.delivered, 2)
        self.assertEqual(first.records, [record])
        self.assertEqual(second.records, [record])
        self.assertNotIn("job-1", broker.registry)

    def test_resolve_without_listeners_caches_for_fast_path(self) -> None:
        broker = _broker()
        record = _record("job-1")

        result = broker.resolve("job-1", record)
        late = _RecordingListener()
        fast_path = broker.attach("job-1", late)

        self.assertEqual(result.delivered, 0)
        self.assertIs(fast_path, record)
        self.assertEqual(late.records, [])
        self.assertNotIn("job-1", broker.registry)

    def test_failed_delivery_does_not_block_other_listeners(self) -> None:
        broker = _broker()
        broken = _BrokenListener()
        healthy = _RecordingListener()
        broker.attach("job-1", broken)
        broker.attach("job-1", healthy)

        result = broker.resolve("job-1", _record("job-1"))

        self.assertEqual(result.delivered, 1)
        self.assertEqual(result.failed, 1)
        self.assertEqual(len(healthy.records), 1)

    def test_second_resolution_keeps_first_record_and_fans_out_stored_record(self) -> None:
        broker = _broker()
        first_record = _record("job-1", "First")
        broker.resolve("job-1", first_record)
        straggler = _RecordingListener()
        # A listener registered directly (bypassing the fast path) still gets the stored record.
        broker.registry.subscribe("job-1", straggler)

        result = broker.resolve("job-1", _record("job-1", "Second"))

        self.assertFalse(result.first_write)
        self.assertIs(result.record, first_record)
        self.assertEqual(straggler.records, [first_record])
        self.assertIs(broker.store.get("job-1"), first_record)

    def test_resolution_only_touches_its_own_job(self) -> None:
        broker = _broker()
        listener = _RecordingListener()
        broker.attach("job-1", listener)
        broker.attach("job-2", listener)

        broker.resolve("job-1", _record("job-1"))

        self.assertEqual([record.job_id for record in listener.records], ["job-1"])
        self.assertEqual(broker.registry.listeners_for("job-2"), [listener])

    def test_detach_is_idempotent(self) -> None:
        broker = _broker()
        listener = _RecordingListener()
        broker.attach("job-1", listener)

        broker.detach(["job-1", "job-unknown"], listener)
        broker.detach(["job-1"], listener)

        self.assertEqual(len(broker.registry), 0)

    def test_concurrent_resolutions_store_one_record_and_deliver_once(self) -> None:
        broker = _broker()
        listener = _RecordingListener()
        broker.attach("job-race", listener)
        records = [_record("job-race", f"T{index}") for index in range(12)]
        barrier = threading.Barrier(len(records))
        results = []
        lock = threading.Lock()

        def _resolver(record: CompletionRecord) -> None:
            barrier.wait()
            result = broker.resolve("job-race", record)
            with lock:
                results.append(result)

        threads = [threading.Thread(target=_resolver, args=(record,)) for record in records]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        stored = broker.store.get("job-race")
        self.assertEqual(sum(1 for result in results if result.first_write), 1)
        self.assertTrue(all(result.record is stored for result in results))
        self.assertEqual(listener.records, [stored])

    def test_listener_close_callbacks_fire_once(self) -> None:
        listener = _RecordingListener()
        calls: list[Listener] = []
        listener.on_close(calls.append)

        listener.close()
        listener.close()
        listener.on_close(calls.append)

        self.assertEqual(calls, [listener, listener])
        self.assertTrue(listener.closed)
