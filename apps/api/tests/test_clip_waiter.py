"""Client wait strategy state machine tests."""

from __future__ import annotations

import asyncio
import unittest

from cliprelay.client import ClipTransport, ClipTransportError, ClipWaiter, ClipWaitTimeout, VirtualClock, WaitPolicy
from cliprelay.domain.wait_fsm import InvalidWaitTransition, WaitState
from cliprelay.schemas.clip import CompletionRecord


def _record(job_id: str = "job-1") -> CompletionRecord:
    return CompletionRecord(job_id=job_id, title="Song", audio_url=f"https://cdn.example/{job_id}.mp3")


class _ScriptedTransport(ClipTransport):
    """Push never resolves unless ``push_record`` is set; polls follow ``poll_script``."""

    def __init__(
        self,
        *,
        push_record: CompletionRecord | None = None,
        push_error: Exception | None = None,
        poll_script: list | None = None,
    ) -> None:
        self.push_record = push_record
        self.push_error = push_error
        self.poll_script = list(poll_script or [])
        self.subscribe_calls = 0
        self.subscribe_cancelled = False
        self.poll_calls = 0
        self.poll_started = asyncio.Event()

    async def subscribe(self, job_ids: list[str]) -> CompletionRecord:
        self.subscribe_calls += 1
        if self.push_error is not None:
            raise self.push_error
        if self.push_record is not None:
            return self.push_record
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.subscribe_cancelled = True
            raise
        raise AssertionError("unreachable")

    async def poll(self, job_ids: list[str]) -> list[CompletionRecord]:
        self.poll_calls += 1
        self.poll_started.set()
        outcome = self.poll_script.pop(0) if self.poll_script else []
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class ClipWaiterTests(unittest.IsolatedAsyncioTestCase):
    async def test_no_result_exhausts_after_push_timeout_plus_poll_spacing(self) -> None:
        clock = VirtualClock()
        transport = _ScriptedTransport()
        waiter = ClipWaiter(
            transport,
            policy=WaitPolicy(push_timeout=1, poll_interval=1, max_poll_attempts=2),
            clock=clock,
        )

        with self.assertRaises(ClipWaitTimeout) as context:
            await waiter.wait(["job-1"])

        self.assertTrue(context.exception.retryable)
        self.assertEqual(context.exception.attempts, 2)
        self.assertEqual(clock.now(), 3)
        self.assertEqual(transport.poll_calls, 2)
        self.assertTrue(transport.subscribe_cancelled)
        self.assertEqual(waiter.state, WaitState.PULL_EXHAUSTED)
        self.assertEqual(
            waiter.history,
            [
                WaitState.STARTED,
                WaitState.AWAITING_PUSH,
                WaitState.AWAITING_PUSH_TIMEOUT,
                WaitState.AWAITING_PULL,
                WaitState.PULL_EXHAUSTED,
            ],
        )

    async def test_push_delivery_resolves_without_polling(self) -> None:
        record = _record()
        transport = _ScriptedTransport(push_record=record)
        waiter = ClipWaiter(transport, policy=WaitPolicy(push_timeout=120), clock=VirtualClock())

        result = await waiter.wait(["job-1"])

        self.assertEqual(result, [record])
        self.assertEqual(transport.poll_calls, 0)
        self.assertEqual(waiter.history, [WaitState.STARTED, WaitState.AWAITING_PUSH, WaitState.RESOLVED])

    async def test_pull_resolves_on_later_attempt_and_transport_errors_count(self) -> None:
        clock = VirtualClock()
        record = _record()
        transport = _ScriptedTransport(poll_script=[ClipTransportError("503"), [], [record]])
        waiter = ClipWaiter(
            transport,
            policy=WaitPolicy(push_timeout=120, poll_interval=5, max_poll_attempts=30),
            clock=clock,
        )

        result = await waiter.wait(["job-1"])

        self.assertEqual(result, [record])
        self.assertEqual(waiter.poll_attempts, 3)
        self.assertEqual(clock.now(), 130)
        self.assertEqual(waiter.state, WaitState.RESOLVED)

    async def test_push_failure_falls_back_to_pull_immediately(self) -> None:
        clock = VirtualClock()
        record = _record()
        transport = _ScriptedTransport(push_error=ClipTransportError("stream refused"), poll_script=[[record]])
        waiter = ClipWaiter(transport, policy=WaitPolicy(push_timeout=120), clock=clock)

        result = await waiter.wait(["job-1"])

        self.assertEqual(result, [record])
        self.assertIn(WaitState.AWAITING_PULL, waiter.history)

    async def test_cancellation_during_push_closes_channel(self) -> None:
        transport = _ScriptedTransport()
        waiter = ClipWaiter(transport, policy=WaitPolicy(push_timeout=3600))
        task = asyncio.create_task(waiter.wait(["job-1"]))
        for _ in range(5):
            await asyncio.sleep(0)

        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task

        self.assertTrue(transport.subscribe_cancelled)
        self.assertEqual(waiter.state, WaitState.CANCELLED)
        self.assertEqual(transport.poll_calls, 0)

    async def test_cancellation_during_pull_stops_polling(self) -> None:
        transport = _ScriptedTransport()
        waiter = ClipWaiter(transport, policy=WaitPolicy(push_timeout=0, poll_interval=3600, max_poll_attempts=30))
        task = asyncio.create_task(waiter.wait(["job-1"]))
        await asyncio.wait_for(transport.poll_started.wait(), timeout=2)

        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task

        self.assertEqual(transport.poll_calls, 1)
        self.assertEqual(waiter.state, WaitState.CANCELLED)

    async def test_waiter_is_single_use(self) -> None:
        waiter = ClipWaiter(_ScriptedTransport(push_record=_record()), clock=VirtualClock())
        await waiter.wait(["job-1"])

        with self.assertRaises(InvalidWaitTransition):
            await waiter.wait(["job-1"])
