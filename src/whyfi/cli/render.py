"""Rich renderables for metrics, history and diagnostic results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Group
from rich.panel import Panel
from rich.table import Table

from whyfi.history import Channel
from whyfi.models import MetricStatus
from whyfi.status import (
    download_status,
    interference_level_status,
    jitter_status,
    link_rate_status,
    loss_status,
    ping_status,
    signal_status,
    snr_status,
    speed_latency_status,
    status_label,
    upload_status,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rich.console import RenderableType

    from whyfi.history import MetricHistory
    from whyfi.models import (
        DiagnosisResult,
        InterferenceAnalysis,
        MetricSnapshot,
        SpeedTestResult,
    )

STATUS_STYLE = {
    MetricStatus.GOOD: "green",
    MetricStatus.WARNING: "yellow",
    MetricStatus.BAD: "red",
    MetricStatus.NEUTRAL: "dim",
}

_SPARK_BLOCKS = "▁▂▃▄▅▆▇█"


def sparkline(values: Sequence[float]) -> str:
    """Scale values into block characters, lowest sample to highest."""
    if not values:
        return ""
    low, high = min(values), max(values)
    span = high - low
    last = len(_SPARK_BLOCKS) - 1
    if span == 0:
        return _SPARK_BLOCKS[0] * len(values)
    return "".join(_SPARK_BLOCKS[round((v - low) / span * last)] for v in values)


def _value(value: float | None, unit: str, decimals: int = 0) -> str:
    if value is None:
        return "—"
    return f"{value:.{decimals}f}{unit}"


def _status_cell(status: MetricStatus) -> str:
    style = STATUS_STYLE[status]
    label = status_label(status)
    return f"[{style}]{label}[/{style}]" if label else ""


def metrics_table(snapshot: MetricSnapshot, history: MetricHistory) -> Table:
    table = Table(title=snapshot.wifi.ssid or "Wi-Fi", caption=snapshot.wifi.channel)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Status")
    table.add_column("History")

    wifi = snapshot.wifi
    router = snapshot.router_ping
    internet = snapshot.internet_ping

    rows: list[tuple[str, str, MetricStatus, Channel]] = [
        ("Link Rate", _value(wifi.link_rate_mbps, " Mbps"), link_rate_status(wifi.link_rate_mbps), Channel.LINK_RATE),
        ("Signal", _value(wifi.signal_dbm, " dBm"), signal_status(wifi.signal_dbm), Channel.SIGNAL),
        ("Noise", _value(wifi.noise_dbm, " dBm"), MetricStatus.NEUTRAL, Channel.NOISE),
        ("Router Ping", _value(router and router.latency_ms, " ms", 1), ping_status(router and router.latency_ms), Channel.ROUTER_PING),
        ("Router Jitter", _value(router and router.jitter_ms, " ms", 1), jitter_status(router and router.jitter_ms), Channel.ROUTER_JITTER),
        ("Router Loss", _value(router and router.packet_loss_percent, "%", 1), loss_status(router and router.packet_loss_percent), Channel.ROUTER_LOSS),
        ("Internet Ping", _value(internet and internet.latency_ms, " ms", 1), ping_status(internet and internet.latency_ms), Channel.INTERNET_PING),
        ("Internet Jitter", _value(internet and internet.jitter_ms, " ms", 1), jitter_status(internet and internet.jitter_ms), Channel.INTERNET_JITTER),
        ("Internet Loss", _value(internet and internet.packet_loss_percent, "%", 1), loss_status(internet and internet.packet_loss_percent), Channel.INTERNET_LOSS),
        ("DNS Lookup", _value(snapshot.dns.lookup_latency_ms, " ms"), ping_status(snapshot.dns.lookup_latency_ms), Channel.DNS_LOOKUP),
    ]  # fmt: skip
    for label, value, status, channel in rows:
        table.add_row(label, value, _status_cell(status), sparkline(history.snapshot(channel)))

    if router is None:
        table.add_row("Router", "[dim]No router detected[/dim]", "", "")
    if internet is None:
        table.add_row("Internet", "[red]Cannot reach internet[/red]", "", "")
    return table


def interference_panel(analysis: InterferenceAnalysis) -> Panel:
    level_style = STATUS_STYLE[interference_level_status(analysis.interference_level)]
    snr = f"{analysis.snr_db} dB" if analysis.snr_db is not None else "Unknown"
    snr_style = STATUS_STYLE[snr_status(analysis.snr_db)]
    lines = [
        f"Interference: [{level_style}]{analysis.interference_level}[/{level_style}]",
        f"SNR: [{snr_style}]{snr}[/{snr_style}] ({analysis.snr_quality})",
        f"Channel: {analysis.current_channel or 'Unknown'}",
        f"Same channel: {analysis.same_channel_count}   Overlapping: {analysis.overlapping_count}"
        f"   Nearby: {len(analysis.nearby_networks)}",
        "",
        *(f"• {s}" for s in analysis.suggestions),
    ]
    return Panel("\n".join(lines), title="Interference", border_style="blue")


def speed_test_panel(result: SpeedTestResult) -> Panel:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan")
    table.add_column(justify="right")
    table.add_column()
    table.add_row("Download", f"{result.download_mbps:.1f} Mbps", _status_cell(download_status(result.download_mbps)))
    table.add_row("Upload", f"{result.upload_mbps:.1f} Mbps", _status_cell(upload_status(result.upload_mbps)))
    table.add_row("Latency", f"{result.latency_ms:.0f} ms", _status_cell(speed_latency_status(result.latency_ms)))
    table.add_row("Jitter", f"{result.jitter_ms:.0f} ms", _status_cell(speed_latency_status(result.jitter_ms)))  # fmt: skip
    return Panel(table, title="Speed Test", border_style="blue")


_HEALTH_STYLE = {"good": "green", "warning": "yellow", "poor": "red"}
_SEVERITY_STYLE = {"high": "red", "medium": "yellow", "low": "dim"}


def diagnosis_panel(result: DiagnosisResult) -> Panel:
    health = result.overall_health.value
    style = _HEALTH_STYLE[health]
    parts: list[RenderableType] = [
        f"Overall: [{style}]{health.upper()}[/{style}]",
        "",
        result.summary,
    ]
    if result.issues:
        parts += ["", "[bold]Issues[/bold]"]
        for issue in result.issues:
            sev = issue.severity.value
            parts.append(f"  [{_SEVERITY_STYLE[sev]}]{sev:>6}[/{_SEVERITY_STYLE[sev]}]  {issue.description}")
    if result.recommendations:
        parts += ["", "[bold]Recommendations[/bold]"]
        parts += [f"  {i}. {rec}" for i, rec in enumerate(result.recommendations, start=1)]
    return Panel(Group(*parts), title="AI Diagnosis", border_style="blue")
