"""Speed test models.

Bandwidth is measured in bytes per second and only converted to megabits
per second when the final SpeedTestResult is produced.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

BITS_PER_BYTE = 8
BITS_PER_MEGABIT = 1_000_000


class SpeedPhase(StrEnum):
    """Phase family reported by the progress signal."""

    LATENCY = "latency"
    DOWNLOAD = "download"
    UPLOAD = "upload"


class MeasurementPhase(BaseModel):
    """One stage of the pipeline, repeated ``count`` times."""

    model_config = ConfigDict(frozen=True)

    kind: SpeedPhase
    bytes: int = Field(default=0, ge=0, description="Payload size; unused for latency")
    count: int = Field(ge=1, description="Trials (packets for latency)")


def _default_phases() -> list[MeasurementPhase]:
    return [
        MeasurementPhase(kind=SpeedPhase.LATENCY, count=20),
        MeasurementPhase(kind=SpeedPhase.DOWNLOAD, bytes=1_000_000, count=4),
        MeasurementPhase(kind=SpeedPhase.DOWNLOAD, bytes=10_000_000, count=4),
        MeasurementPhase(kind=SpeedPhase.DOWNLOAD, bytes=25_000_000, count=4),
        MeasurementPhase(kind=SpeedPhase.UPLOAD, bytes=1_000_000, count=4),
        MeasurementPhase(kind=SpeedPhase.UPLOAD, bytes=5_000_000, count=4),
        MeasurementPhase(kind=SpeedPhase.UPLOAD, bytes=10_000_000, count=4),
    ]


class SpeedTestPlan(BaseModel):
    """Ordered measurement phases for a single run."""

    phases: list[MeasurementPhase] = Field(default_factory=_default_phases)
    min_request_duration_ms: float = Field(
        default=10.0, description="Shorter transfers are too noisy to count toward bandwidth"
    )
    bandwidth_percentile: float = Field(default=0.9, ge=0, le=1)


class BandwidthSample(BaseModel):
    """A single transfer: payload size and wall-clock duration."""

    bytes: int = Field(ge=0)
    duration_ms: float = Field(ge=0)

    @property
    def bytes_per_sec(self) -> float:
        if self.duration_ms <= 0:
            return 0.0
        return self.bytes / (self.duration_ms / 1000)


class SpeedSummary(BaseModel):
    """Aggregated measurements before unit conversion."""

    download_bytes_per_sec: float | None = None
    upload_bytes_per_sec: float | None = None
    latency_ms: float | None = None
    jitter_ms: float | None = None


def bytes_per_sec_to_mbps(value: float) -> float:
    return value * BITS_PER_BYTE / BITS_PER_MEGABIT


class SpeedTestResult(BaseModel):
    """Final four-scalar result of a speed test run."""

    model_config = ConfigDict(frozen=True)

    download_mbps: float
    upload_mbps: float
    latency_ms: float
    jitter_ms: float

    @classmethod
    def from_summary(cls, summary: SpeedSummary) -> "SpeedTestResult":
        """Convert a summary to Mbps; missing aggregates become 0."""
        return cls(
            download_mbps=bytes_per_sec_to_mbps(summary.download_bytes_per_sec or 0),
            upload_mbps=bytes_per_sec_to_mbps(summary.upload_bytes_per_sec or 0),
            latency_ms=summary.latency_ms or 0,
            jitter_ms=summary.jitter_ms or 0,
        )
