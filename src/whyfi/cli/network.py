"""Network commands: live metrics, interference, speed test, AI diagnosis.

Every command talks to the host service at ``WHYFI_HOST_URL`` and runs on a
single event loop via anyio.
"""

from __future__ import annotations

from typing import Annotated, NoReturn

import anyio
import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel

from whyfi.agents import DiagnosisEngine
from whyfi.cli.render import (
    diagnosis_panel,
    interference_panel,
    metrics_table,
    speed_test_panel,
)
from whyfi.config import WhyFiConfig
from whyfi.history import MetricHistory
from whyfi.host import HostRpcClient
from whyfi.orchestrator import DiagnosticOrchestrator, TaskKind
from whyfi.polling import PollingScheduler
from whyfi.settings_store import JsonFileSettingsStore
from whyfi.speedtest import CloudflareSpeedProbe

app = typer.Typer(no_args_is_help=True)

console = Console()


async def _wait_for_polls(scheduler: PollingScheduler, count: int) -> None:
    while count <= 0 or scheduler.poll_count < count:
        await anyio.sleep(0.1)


async def _wait_for_task(orchestrator: DiagnosticOrchestrator, kind: TaskKind) -> None:
    task = orchestrator.task(kind)
    with console.status(task.status or f"{task.name}...") as status:
        while task.loading:
            status.update(task.status or f"{task.name}...")
            await anyio.sleep(0.1)


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Live metrics
# ---------------------------------------------------------------------------


async def _watch(config: WhyFiConfig, polls: int) -> None:
    async with HostRpcClient(config.host_url) as host:
        with Live(Panel("Waiting for first poll...", border_style="dim"), console=console) as live:

            def refresh(scheduler: PollingScheduler) -> None:
                if scheduler.snapshot is not None:
                    live.update(metrics_table(scheduler.snapshot, scheduler.history))
                if scheduler.error:
                    live.console.print(f"[red]Error:[/red] {scheduler.error}")

            scheduler = PollingScheduler(
                host,
                interval_sec=config.poll_interval_sec,
                history=MetricHistory(config.history_capacity),
                on_update=refresh,
            )
            scheduler.start()
            try:
                await _wait_for_polls(scheduler, polls)
            finally:
                scheduler.stop()


@app.command()
def watch(
    polls: Annotated[
        int, typer.Option("--polls", "-n", help="Stop after N polls (0 = until Ctrl-C)")
    ] = 0,
) -> None:
    """Show live Wi-Fi, router, internet and DNS metrics."""
    config = WhyFiConfig()
    console.print(Panel.fit("WhyFi - figure out why your Wi-Fi sucks", style="bold blue"))
    try:
        anyio.run(_watch, config, polls)
    except KeyboardInterrupt:
        console.print("[dim]Stopped[/dim]")


# ---------------------------------------------------------------------------
# On-demand diagnostics
# ---------------------------------------------------------------------------


def _orchestrator(
    config: WhyFiConfig,
    host: HostRpcClient,
    scheduler: PollingScheduler,
    probe: CloudflareSpeedProbe | None = None,
) -> DiagnosticOrchestrator:
    engine = DiagnosisEngine(
        model_name=config.diagnosis_model, prompt_samples=config.prompt_samples
    )
    return DiagnosticOrchestrator(
        host,
        scheduler,
        JsonFileSettingsStore(config.settings_path),
        engine=engine,
        probe=probe,
        speedtest_plan=config.speedtest,
    )


async def _interference(config: WhyFiConfig) -> None:
    async with HostRpcClient(config.host_url) as host:
        orchestrator = _orchestrator(config, host, PollingScheduler(host))
        orchestrator.start_interference()
        await _wait_for_task(orchestrator, TaskKind.INTERFERENCE)
        if orchestrator.interference.error:
            _fail(orchestrator.interference.error)
        if orchestrator.interference.result is not None:
            console.print(interference_panel(orchestrator.interference.result))


@app.command()
def interference() -> None:
    """Scan nearby networks and rate channel interference."""
    anyio.run(_interference, WhyFiConfig())


async def _speedtest(config: WhyFiConfig) -> None:
    async with (
        HostRpcClient(config.host_url) as host,
        CloudflareSpeedProbe(config.speedtest_url) as probe,
    ):
        orchestrator = _orchestrator(config, host, PollingScheduler(host), probe=probe)
        orchestrator.start_speed_test()
        await _wait_for_task(orchestrator, TaskKind.SPEED_TEST)
        if orchestrator.speed_test.error:
            _fail(orchestrator.speed_test.error)
        if orchestrator.speed_test.result is not None:
            console.print(speed_test_panel(orchestrator.speed_test.result))


@app.command()
def speedtest() -> None:
    """Measure download, upload, latency and jitter."""
    anyio.run(_speedtest, WhyFiConfig())


async def _diagnose(config: WhyFiConfig, samples: int, with_interference: bool) -> None:
    async with HostRpcClient(config.host_url) as host:
        scheduler = PollingScheduler(
            host,
            interval_sec=config.poll_interval_sec,
            history=MetricHistory(config.history_capacity),
        )
        orchestrator = _orchestrator(config, host, scheduler)
        if not orchestrator.ai_available:
            _fail("No OpenAI API key configured. Run [cyan]whyfi key set[/cyan] first.")

        scheduler.start()
        try:
            with console.status(f"Collecting {samples} samples..."):
                await _wait_for_polls(scheduler, samples)
        finally:
            scheduler.stop()
        if scheduler.snapshot is None:
            _fail(scheduler.error or "No metrics collected")

        if with_interference:
            orchestrator.start_interference()
            await _wait_for_task(orchestrator, TaskKind.INTERFERENCE)

        orchestrator.start_diagnosis()
        await _wait_for_task(orchestrator, TaskKind.DIAGNOSIS)
        if orchestrator.diagnosis.error:
            _fail(orchestrator.diagnosis.error)
        if orchestrator.diagnosis.result is not None:
            console.print(diagnosis_panel(orchestrator.diagnosis.result))


@app.command()
def diagnose(
    samples: Annotated[
        int, typer.Option("--samples", "-s", min=1, help="Polls to collect before asking")
    ] = 5,
    with_interference: Annotated[
        bool, typer.Option("--interference/--no-interference", help="Include a channel scan")
    ] = True,
) -> None:
    """Ask the AI to explain what is wrong with the network."""
    anyio.run(_diagnose, WhyFiConfig(), samples, with_interference)
