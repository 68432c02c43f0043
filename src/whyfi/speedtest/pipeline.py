"""Speed Measurement Pipeline - multi-phase bandwidth and latency probe.

A run walks the plan in order (latency, then downloads of increasing size,
then uploads of increasing size), repeating each phase ``count`` times. A
progress signal fires whenever the phase family changes, so callers can show
"Testing download..." before the run completes.

Aggregation:
- bandwidth: per-transfer bytes/sec, ignoring transfers shorter than
  ``min_request_duration_ms``, then the ``bandwidth_percentile`` value
- latency: median of the latency samples
- jitter: mean absolute difference between consecutive latency samples

Failure anywhere is a single terminal SpeedTestError; no partial result.
After ``pause()`` no progress, completion or error callback fires.
"""

from __future__ import annotations

import asyncio
import logging
import statistics
from typing import TYPE_CHECKING

from whyfi.errors import SpeedTestError
from whyfi.models import (
    BandwidthSample,
    SpeedPhase,
    SpeedSummary,
    SpeedTestPlan,
    SpeedTestResult,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from whyfi.speedtest.probe import SpeedProbe

logger = logging.getLogger("whyfi.speedtest")

PHASE_STATUS = {
    SpeedPhase.LATENCY: "Testing latency...",
    SpeedPhase.DOWNLOAD: "Testing download...",
    SpeedPhase.UPLOAD: "Testing upload...",
}


class PipelinePaused(Exception):
    """Raised inside ``run()`` once the pipeline has been paused."""


def _percentile(values: list[float], pct: float) -> float:
    ordered = sorted(values)
    return ordered[min(int(len(ordered) * pct), len(ordered) - 1)]


def _bandwidth(samples: list[BandwidthSample], plan: SpeedTestPlan) -> float | None:
    if not samples:
        return None
    usable = [s for s in samples if s.duration_ms >= plan.min_request_duration_ms]
    rates = [s.bytes_per_sec for s in (usable or samples)]
    return _percentile(rates, plan.bandwidth_percentile)


def _jitter(latencies: list[float]) -> float | None:
    if len(latencies) < 2:
        return None
    return statistics.mean(abs(b - a) for a, b in zip(latencies, latencies[1:], strict=False))


def summarize(
    latencies: list[float],
    downloads: list[BandwidthSample],
    uploads: list[BandwidthSample],
    plan: SpeedTestPlan | None = None,
) -> SpeedSummary:
    """Aggregate raw measurements into bytes/sec and millisecond scalars."""
    if plan is None:
        plan = SpeedTestPlan()
    return SpeedSummary(
        download_bytes_per_sec=_bandwidth(downloads, plan),
        upload_bytes_per_sec=_bandwidth(uploads, plan),
        latency_ms=statistics.median(latencies) if latencies else None,
        jitter_ms=_jitter(latencies),
    )


class SpeedTestPipeline:
    """One speed test run against a probe.

    Use ``await run()`` directly, or ``play()`` to run in the background with
    callbacks. ``pause()`` stops either form; nothing is reported afterwards.
    """

    def __init__(
        self,
        probe: SpeedProbe,
        plan: SpeedTestPlan | None = None,
        *,
        on_progress: Callable[[SpeedPhase], None] | None = None,
    ) -> None:
        self._probe = probe
        self._plan = plan or SpeedTestPlan()
        self._on_progress = on_progress
        self._paused = False
        self._running = False
        self._task: asyncio.Task[None] | None = None

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def running(self) -> bool:
        return self._running

    async def run(self) -> SpeedTestResult:
        """Execute every phase and return the aggregated result.

        Raises:
            SpeedTestError: any measurement failed.
            PipelinePaused: ``pause()`` was called during the run.
        """
        self._paused = False
        self._running = True
        latencies: list[float] = []
        downloads: list[BandwidthSample] = []
        uploads: list[BandwidthSample] = []
        family: SpeedPhase | None = None

        try:
            for phase in self._plan.phases:
                if phase.kind != family:
                    family = phase.kind
                    self._emit(family)
                for _ in range(phase.count):
                    self._raise_if_paused()
                    match phase.kind:
                        case SpeedPhase.LATENCY:
                            latencies.append(await self._probe.latency())
                        case SpeedPhase.DOWNLOAD:
                            downloads.append(await self._probe.download(phase.bytes))
                        case SpeedPhase.UPLOAD:
                            uploads.append(await self._probe.upload(phase.bytes))
            self._raise_if_paused()
        except (PipelinePaused, SpeedTestError):
            raise
        except Exception as e:
            raise SpeedTestError(f"Speed test failed: {e}") from e
        finally:
            self._running = False

        summary = summarize(latencies, downloads, uploads, self._plan)
        logger.info(
            "Speed test complete: down=%s B/s up=%s B/s latency=%s ms jitter=%s ms",
            summary.download_bytes_per_sec,
            summary.upload_bytes_per_sec,
            summary.latency_ms,
            summary.jitter_ms,
        )
        return SpeedTestResult.from_summary(summary)

    def play(
        self,
        *,
        on_finish: Callable[[SpeedTestResult], None],
        on_error: Callable[[Exception], None],
    ) -> asyncio.Task[None]:
        """Start ``run()`` in the background and report through callbacks."""

        async def _drive() -> None:
            try:
                result = await self.run()
            except PipelinePaused:
                return
            except SpeedTestError as e:
                if not self._paused:
                    on_error(e)
                return
            if not self._paused:
                on_finish(result)

        self._task = asyncio.get_running_loop().create_task(_drive())
        return self._task

    def pause(self) -> None:
        """Stop the run. No further callbacks fire after this returns."""
        if self._paused:
            return
        self._paused = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        logger.info("Speed test paused")

    def _emit(self, family: SpeedPhase) -> None:
        logger.debug("Speed test phase: %s", family.value)
        if self._on_progress is not None and not self._paused:
            self._on_progress(family)

    def _raise_if_paused(self) -> None:
        if self._paused:
            raise PipelinePaused
