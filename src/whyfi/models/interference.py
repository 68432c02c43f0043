"""Interference scan models."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from .metrics import WifiInfo  # noqa: TC001 — Pydantic needs runtime imports


class InterferenceLevel(StrEnum):
    """Discrete interference level derived from SNR and channel congestion."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    SEVERE = "Severe"


class NearbyNetwork(BaseModel):
    """A neighbouring access point seen in a scan."""

    model_config = ConfigDict(frozen=True)

    ssid: str
    channel: int
    frequency_ghz: float


class NearbyScan(BaseModel):
    """Raw scan as supplied by the host: our link plus every neighbour."""

    wifi: WifiInfo = Field(default_factory=WifiInfo)
    networks: list[NearbyNetwork] = Field(default_factory=list)


class InterferenceAnalysis(BaseModel):
    """Point-in-time interference result. Immutable once produced."""

    model_config = ConfigDict(frozen=True)

    snr_db: int | None = Field(default=None, description="Signal minus noise, in dB")
    snr_quality: str = "Unknown"
    current_channel: int | None = None
    current_frequency_ghz: float | None = None
    same_channel_count: int = 0
    overlapping_count: int = 0
    nearby_networks: list[NearbyNetwork] = Field(default_factory=list)
    interference_level: str = Field(
        description="Low, Moderate, High or Severe; kept as str so unknown levels survive"
    )
    suggestions: list[str] = Field(default_factory=list)
