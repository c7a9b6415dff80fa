"""Client wait strategy: bounded push wait, then bounded polling."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging

from cliprelay.client.clock import Clock, MonotonicClock
from cliprelay.client.transport import ClipTransport, ClipTransportError
from cliprelay.core.logging_safety import summarize_ids
from cliprelay.domain.wait_fsm import TERMINAL_STATES, WaitState, ensure_transition
from cliprelay.schemas.clip import CompletionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WaitPolicy:
    push_timeout: float = 120.0
    poll_interval: float = 5.0
    max_poll_attempts: int = 30


class ClipWaitTimeout(Exception):
    """No result arrived over push or pull; the caller may start over."""

    retryable = True

    def __init__(self, job_ids: list[str], attempts: int) -> None:
        self.job_ids = list(job_ids)
        self.attempts = attempts
        super().__init__("Generation timed out. Please try again.")


class ClipWaiter:
    """One waiter per generation request; terminal states are final."""

    def __init__(
        self,
        transport: ClipTransport,
        *,
        policy: WaitPolicy | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._transport = transport
        self._policy = policy or WaitPolicy()
        self._clock = clock or MonotonicClock()
        self._state = WaitState.STARTED
        self.history: list[WaitState] = [WaitState.STARTED]
        self.poll_attempts = 0

    @property
    def state(self) -> WaitState:
        return self._state

    def _transition(self, new_state: WaitState) -> None:
        ensure_transition(self._state, new_state)
        logger.info("wait.transition from=%s to=%s at=%.3f", self._state.value, new_state.value, self._clock.now())
        self._state = new_state
        self.history.append(new_state)

    async def wait(self, job_ids: list[str]) -> list[CompletionRecord]:
        """Return resolved records, or raise ``ClipWaitTimeout`` once polling is exhausted."""
        try:
            self._transition(WaitState.AWAITING_PUSH)
            record = await self._await_push(job_ids)
            if record is not None:
                self._transition(WaitState.RESOLVED)
                return [record]

            self._transition(WaitState.AWAITING_PUSH_TIMEOUT)
            self._transition(WaitState.AWAITING_PULL)
            found = await self._await_pull(job_ids)
            if found:
                self._transition(WaitState.RESOLVED)
                return found

            self._transition(WaitState.PULL_EXHAUSTED)
            raise ClipWaitTimeout(job_ids, self.poll_attempts)
        except asyncio.CancelledError:
            if self._state not in TERMINAL_STATES:
                self._transition(WaitState.CANCELLED)
            raise

    async def _await_push(self, job_ids: list[str]) -> CompletionRecord | None:
        push_task = asyncio.ensure_future(self._transport.subscribe(job_ids))
        timer_task = asyncio.ensure_future(self._clock.sleep(self._policy.push_timeout))
        try:
            done, _ = await asyncio.wait({push_task, timer_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            # Closing the push task closes the underlying stream.
            for task in (push_task, timer_task):
                if not task.done():
                    task.cancel()
            await asyncio.gather(push_task, timer_task, return_exceptions=True)

        if push_task not in done or push_task.cancelled():
            logger.info("wait.push_timeout job_ids=%s timeout=%s", summarize_ids(job_ids), self._policy.push_timeout)
            return None

        exc = push_task.exception()
        if exc is not None:
            logger.warning("wait.push_failed job_ids=%s reason=%s", summarize_ids(job_ids), type(exc).__name__)
            return None
        return push_task.result()

    async def _await_pull(self, job_ids: list[str]) -> list[CompletionRecord]:
        while self.poll_attempts < self._policy.max_poll_attempts:
            self.poll_attempts += 1
            try:
                found = await self._transport.poll(job_ids)
            except ClipTransportError as exc:
                logger.warning("wait.poll_failed attempt=%s reason=%s", self.poll_attempts, exc)
                found = []

            if found:
                return found
            await self._clock.sleep(self._policy.poll_interval)
        return []
