"""Polling Scheduler - fixed-interval sampling loop feeding the history store.

State machine::

    IDLE ──start()──▶ POLLING ──stop()──▶ STOPPED

On start one poll is issued immediately, then one per interval. Ticks are
anchored to the start time (tick k is due at ``start + k * interval``), not
to poll completion.

Overlap policy: single-flight. If a tick comes due while the previous poll
is still in flight, that tick is skipped. This keeps history pushes in
strict poll order with exactly one writer.

Cancellation: every poll carries the generation it was issued under.
``stop()`` bumps the generation, so a completion that arrives after stop
mutates nothing.

Date/Time: Uses `whenever` library (UTC-first, Rust-backed).
"""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from whenever import Instant

from whyfi.history import DEFAULT_CAPACITY, MetricHistory, channel_values

if TYPE_CHECKING:
    from collections.abc import Callable

    from whyfi.models import InterferenceAnalysis, MetricSnapshot

logger = logging.getLogger("whyfi.polling")

DEFAULT_POLL_INTERVAL_SEC = 3.0


def _now_iso() -> str:
    """Return current UTC time as ISO 8601 string."""
    return Instant.now().format_iso()


class MetricsSource(Protocol):
    """Request/response boundary to the host platform."""

    async def get_network_metrics(self) -> MetricSnapshot: ...

    async def check_interference(self) -> InterferenceAnalysis: ...


class SchedulerState(StrEnum):
    IDLE = "idle"  # Constructed, not started
    POLLING = "polling"  # Loop running
    STOPPED = "stopped"  # Torn down; terminal


class PollingScheduler:
    """Samples the host at a fixed cadence and owns the metric history.

    Consumers read ``snapshot``, ``history``, ``error`` and ``loading``.
    A failed poll keeps the previous snapshot and history and only sets
    ``error``; a successful poll clears it.
    """

    def __init__(
        self,
        source: MetricsSource,
        *,
        interval_sec: float = DEFAULT_POLL_INTERVAL_SEC,
        history: MetricHistory | None = None,
        on_update: Callable[[PollingScheduler], None] | None = None,
    ) -> None:
        if interval_sec <= 0:
            raise ValueError(f"interval_sec must be positive, got {interval_sec}")
        self._source = source
        self._interval = interval_sec
        self._history = history if history is not None else MetricHistory(DEFAULT_CAPACITY)
        self._on_update = on_update

        self._state = SchedulerState.IDLE
        self._generation = 0
        self._in_flight = False
        self._loop_task: asyncio.Task[None] | None = None
        self._poll_task: asyncio.Task[None] | None = None

        self._snapshot: MetricSnapshot | None = None
        self._error: str | None = None
        self._loading = True
        self._poll_count = 0
        self._skipped_ticks = 0
        self._last_success_at: str | None = None

    # -------------------------------------------------------------------------
    # Published state
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def snapshot(self) -> MetricSnapshot | None:
        return self._snapshot

    @property
    def history(self) -> MetricHistory:
        return self._history

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def loading(self) -> bool:
        """True until the first poll has settled."""
        return self._loading

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def poll_count(self) -> int:
        """Polls whose outcome was applied (success or failure)."""
        return self._poll_count

    @property
    def skipped_ticks(self) -> int:
        return self._skipped_ticks

    @property
    def last_success_at(self) -> str | None:
        return self._last_success_at

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Begin polling. Must be called from a running event loop."""
        if self._state is SchedulerState.POLLING:
            return
        if self._state is SchedulerState.STOPPED:
            raise RuntimeError("A stopped scheduler cannot be restarted")

        self._state = SchedulerState.POLLING
        self._loop_task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Polling started: interval=%.1fs", self._interval)

    def stop(self) -> None:
        """Stop polling. In-flight results arriving after this are discarded."""
        if self._state is SchedulerState.STOPPED:
            return
        self._state = SchedulerState.STOPPED
        self._generation += 1
        self._in_flight = False
        for task in (self._loop_task, self._poll_task):
            if task is not None and not task.done():
                task.cancel()
        self._loop_task = None
        self._poll_task = None
        logger.info("Polling stopped after %d polls", self._poll_count)

    async def poll_once(self) -> None:
        """Issue one poll now and wait for it (manual refresh).

        Does nothing if a poll is already in flight or the scheduler is stopped.
        """
        task = self._issue_poll()
        if task is not None:
            await task

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        anchor = loop.time()
        tick = 0
        while True:
            self._issue_poll()
            tick += 1
            delay = anchor + tick * self._interval - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)

    def _issue_poll(self) -> asyncio.Task[None] | None:
        if self._state is SchedulerState.STOPPED:
            return None
        if self._in_flight:
            self._skipped_ticks += 1
            logger.warning("Previous poll still in flight, skipping tick")
            return None

        self._in_flight = True
        self._poll_task = asyncio.get_running_loop().create_task(self._poll(self._generation))
        return self._poll_task

    async def _poll(self, generation: int) -> None:
        try:
            snapshot = await self._source.get_network_metrics()
        except Exception as e:
            if generation != self._generation:
                return
            logger.error("Poll failed: %s", e)
            self._error = str(e) or type(e).__name__
        else:
            if generation != self._generation:
                logger.debug("Discarding poll result from a stopped scheduler")
                return
            self._apply(snapshot)
        finally:
            if generation == self._generation:
                self._in_flight = False

        self._settle()

    def _apply(self, snapshot: MetricSnapshot) -> None:
        self._snapshot = snapshot
        self._history.record(channel_values(snapshot))
        self._error = None
        self._last_success_at = _now_iso()
        logger.debug(
            "Poll complete: connected=%s router=%s internet=%s",
            snapshot.wifi.connected,
            snapshot.router_ip,
            snapshot.internet_ping is not None,
        )

    def _settle(self) -> None:
        self._poll_count += 1
        self._loading = False
        if self._on_update is not None:
            self._on_update(self)
