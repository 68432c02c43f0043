"""Diagnostic Orchestrator - one on-demand task at a time, one panel on screen.

Three tasks can be started on demand: interference scan, speed test and AI
diagnosis. Rules:

- At most one task runs at a time. Starting any task while another runs is
  rejected (``start_*`` returns False and nothing changes).
- Starting a task resets the active panel to NoPanel; a successful
  completion shows its result (last write wins).
- ``clear(kind)`` drops that task's result and error, cancels it if running
  (the speed test pipeline is paused) and leaves the panel if it showed
  that kind. Late completions are dropped by the task's generation token.
- AI diagnosis needs a stored credential. Without one the start is rejected
  and the Settings panel opens.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from whyfi.agents import DiagnosisEngine
from whyfi.models import (
    AppSettings,
    DiagnosisInput,
    DiagnosisPanel,
    DiagnosisResult,
    InterferenceAnalysis,
    InterferencePanel,
    NoPanel,
    SettingsPanel,
    SpeedTestPanel,
    SpeedTestResult,
)
from whyfi.settings_store import clear_api_key, store_api_key
from whyfi.speedtest import PHASE_STATUS, CloudflareSpeedProbe, SpeedTestPipeline
from whyfi.tasks import DiagnosticTask

if TYPE_CHECKING:
    from collections.abc import Callable

    from whyfi.models import ActivePanel, SpeedPhase, SpeedTestPlan
    from whyfi.polling import MetricsSource, PollingScheduler
    from whyfi.settings_store import SettingsStore
    from whyfi.speedtest import SpeedProbe

logger = logging.getLogger("whyfi.orchestrator")

STATUS_INITIALIZING = "Initializing..."
STATUS_STARTING = "Starting test..."
STATUS_PROCESSING = "Processing results..."


class TaskKind(StrEnum):
    INTERFERENCE = "interference"
    SPEED_TEST = "speed_test"
    DIAGNOSIS = "diagnosis"


class DiagnosticOrchestrator:
    """Coordinates the on-demand tasks and owns the active panel."""

    def __init__(
        self,
        source: MetricsSource,
        scheduler: PollingScheduler,
        settings_store: SettingsStore,
        *,
        engine: DiagnosisEngine | None = None,
        probe: SpeedProbe | None = None,
        speedtest_plan: SpeedTestPlan | None = None,
        on_change: Callable[[DiagnosticOrchestrator], None] | None = None,
    ) -> None:
        self._source = source
        self._scheduler = scheduler
        self._settings_store = settings_store
        self._engine = engine or DiagnosisEngine()
        self._owns_probe = probe is None
        self._probe = probe
        self._plan = speedtest_plan
        self._on_change = on_change

        self._settings = settings_store.load()
        self._panel: ActivePanel = NoPanel()
        self._pipeline: SpeedTestPipeline | None = None

        self.interference: DiagnosticTask[InterferenceAnalysis] = DiagnosticTask(
            "Interference check", on_finish=self._finished
        )
        self.speed_test: DiagnosticTask[SpeedTestResult] = DiagnosticTask(
            "Speed test", on_finish=self._finished, on_cancel=self._pause_pipeline
        )
        self.diagnosis: DiagnosticTask[DiagnosisResult] = DiagnosticTask(
            "AI diagnosis", on_finish=self._finished
        )

    # -------------------------------------------------------------------------
    # Published state
    # -------------------------------------------------------------------------

    @property
    def active_panel(self) -> ActivePanel:
        return self._panel

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def ai_available(self) -> bool:
        return self._settings.has_api_key

    @property
    def any_running(self) -> bool:
        return any(task.loading for task in self._tasks().values())

    @property
    def controls_enabled(self) -> bool:
        """Start controls are disabled while any task runs."""
        return not self.any_running

    def task(self, kind: TaskKind) -> DiagnosticTask:
        return self._tasks()[kind]

    def _tasks(self) -> dict[TaskKind, DiagnosticTask]:
        return {
            TaskKind.INTERFERENCE: self.interference,
            TaskKind.SPEED_TEST: self.speed_test,
            TaskKind.DIAGNOSIS: self.diagnosis,
        }

    # -------------------------------------------------------------------------
    # Task control
    # -------------------------------------------------------------------------

    def start_interference(self) -> bool:
        if not self._may_start(TaskKind.INTERFERENCE):
            return False
        return self._started(self.interference.start(self._run_interference))

    def start_speed_test(self) -> bool:
        if not self._may_start(TaskKind.SPEED_TEST):
            return False
        return self._started(
            self.speed_test.start(self._run_speed_test, status=STATUS_INITIALIZING)
        )

    def start_diagnosis(self) -> bool:
        if not self._may_start(TaskKind.DIAGNOSIS):
            return False
        if not self.ai_available:
            logger.warning("AI diagnosis requested without an API key, opening settings")
            self.open_settings()
            return False
        return self._started(self.diagnosis.start(self._run_diagnosis))

    def clear(self, kind: TaskKind) -> None:
        """Discard a task's result and error; cancels it if running."""
        self._tasks()[kind].clear()
        if self._panel.kind == kind.value:
            self._panel = NoPanel()
        self._notify()

    async def wait(self) -> None:
        """Wait for every running task to settle."""
        for task in self._tasks().values():
            await task.wait()

    async def aclose(self) -> None:
        for kind in TaskKind:
            self._tasks()[kind].clear()
        if self._owns_probe and isinstance(self._probe, CloudflareSpeedProbe):
            await self._probe.aclose()

    def _may_start(self, kind: TaskKind) -> bool:
        if self.any_running:
            logger.warning("Rejected %s start: another task is running", kind)
            return False
        return True

    def _started(self, started: bool) -> bool:
        if started:
            self._panel = NoPanel()
            self._notify()
        return started

    # -------------------------------------------------------------------------
    # Panels and settings
    # -------------------------------------------------------------------------

    def open_settings(self) -> None:
        self._panel = SettingsPanel()
        self._notify()

    def close_panel(self) -> None:
        """Close whatever is shown; a result panel clears its task."""
        for kind in TaskKind:
            if self._panel.kind == kind.value:
                self._tasks()[kind].clear()
        self._panel = NoPanel()
        self._notify()

    def save_api_key(self, api_key: str) -> None:
        self._settings = store_api_key(self._settings_store, api_key)
        self._notify()

    def clear_api_key(self) -> None:
        self._settings = clear_api_key(self._settings_store)
        self._notify()

    # -------------------------------------------------------------------------
    # Task bodies
    # -------------------------------------------------------------------------

    async def _run_interference(self, generation: int) -> InterferenceAnalysis:
        return await self._source.check_interference()

    async def _run_speed_test(self, generation: int) -> SpeedTestResult:
        if self._probe is None:
            self._probe = CloudflareSpeedProbe()

        def progress(phase: SpeedPhase) -> None:
            self.speed_test.set_status(PHASE_STATUS[phase], generation)
            self._notify()

        pipeline = SpeedTestPipeline(self._probe, self._plan, on_progress=progress)
        self._pipeline = pipeline
        self.speed_test.set_status(STATUS_STARTING, generation)
        try:
            result = await pipeline.run()
        finally:
            if self._pipeline is pipeline:
                self._pipeline = None
        self.speed_test.set_status(STATUS_PROCESSING, generation)
        return result

    async def _run_diagnosis(self, generation: int) -> DiagnosisResult:
        diagnosis_input = DiagnosisInput(
            snapshot=self._scheduler.snapshot,
            history=self._scheduler.history.as_dict(),
            interference=self.interference.result,
            speed_test=self.speed_test.result,
        )
        return await self._engine.diagnose(self._settings.openai_api_key or "", diagnosis_input)

    def _pause_pipeline(self) -> None:
        if self._pipeline is not None:
            self._pipeline.pause()
            self._pipeline = None

    def _finished(self, task: DiagnosticTask) -> None:
        if task is self.interference and self.interference.result is not None:
            self._panel = InterferencePanel(analysis=self.interference.result)
        elif task is self.speed_test and self.speed_test.result is not None:
            self._panel = SpeedTestPanel(result=self.speed_test.result)
        elif task is self.diagnosis and self.diagnosis.result is not None:
            self._panel = DiagnosisPanel(result=self.diagnosis.result)
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
