"""Telemetry models for one poll of the host platform.

A MetricSnapshot is what the host returns from ``get_network_metrics``.
Absent ``router_ping`` / ``internet_ping`` sub-records mean "unreachable",
which is a valid reading and not an acquisition failure.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class MetricStatus(StrEnum):
    """Health classification of a single metric value."""

    GOOD = "good"
    WARNING = "warning"
    BAD = "bad"
    NEUTRAL = "neutral"  # No reading available


class WifiInfo(BaseModel):
    """Link-layer state of the Wi-Fi interface."""

    model_config = ConfigDict(frozen=True)

    connected: bool = False
    ssid: str | None = None
    frequency_band: str | None = None
    channel: str | None = Field(
        default=None, description="Host channel string, e.g. 'ch 6, 2.4 GHz, 20 MHz'"
    )
    link_rate_mbps: float | None = None
    signal_dbm: float | None = None
    noise_dbm: float | None = None


class PingResult(BaseModel):
    """Round-trip statistics for one ping target."""

    model_config = ConfigDict(frozen=True)

    latency_ms: float | None = None
    jitter_ms: float | None = None
    packet_loss_percent: float | None = None


class DnsInfo(BaseModel):
    """Configured resolvers and the measured lookup latency."""

    model_config = ConfigDict(frozen=True)

    servers: list[str] = Field(default_factory=list)
    lookup_latency_ms: float | None = None


class MetricSnapshot(BaseModel):
    """One complete, point-in-time reading of all telemetry channels."""

    model_config = ConfigDict(frozen=True)

    wifi: WifiInfo = Field(default_factory=WifiInfo)
    router_ip: str | None = None
    router_ping: PingResult | None = Field(
        default=None, description="None when no router was detected"
    )
    internet_ping: PingResult | None = Field(
        default=None, description="None when the internet could not be reached"
    )
    dns: DnsInfo = Field(default_factory=DnsInfo)
