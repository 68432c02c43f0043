"""AI diagnosis models.

The completion service answers in camelCase (``overallHealth``); field
aliases keep the Python side snake_case while validating the wire names.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from whyfi.history import Channel  # noqa: TC001 — Pydantic needs runtime imports

from .interference import InterferenceAnalysis  # noqa: TC001
from .metrics import MetricSnapshot  # noqa: TC001
from .speedtest import SpeedTestResult  # noqa: TC001


class OverallHealth(StrEnum):
    """Overall verdict of a diagnosis."""

    GOOD = "good"
    WARNING = "warning"
    POOR = "poor"


class IssueSeverity(StrEnum):
    """Severity of a single diagnosed issue."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DiagnosisIssue(BaseModel):
    """An identified problem with its severity."""

    model_config = ConfigDict(frozen=True)

    description: str
    severity: IssueSeverity


class DiagnosisResult(BaseModel):
    """Structured report produced by one successful AI call.

    Each new call replaces the previous result entirely.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    summary: str = Field(min_length=1, description="One-paragraph summary of network health")
    overall_health: OverallHealth = Field(alias="overallHealth")
    issues: list[DiagnosisIssue] = Field(description="Top issues, most severe first")
    recommendations: list[str] = Field(description="Actionable recommendations, best first")


class DiagnosisInput(BaseModel):
    """Everything the diagnosis prompt is rendered from.

    Interference and speed-test results are only present while the
    orchestrator still holds them.
    """

    snapshot: MetricSnapshot | None = None
    history: dict[Channel, list[float]] = Field(default_factory=dict)
    interference: InterferenceAnalysis | None = None
    speed_test: SpeedTestResult | None = None
