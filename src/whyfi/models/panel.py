"""The single panel presented to the user.

Exactly one variant is active at a time. The Orchestrator owns the value;
display precedence is the variant itself, not a reconstruction from several
nullable results.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .diagnosis import DiagnosisResult  # noqa: TC001 — Pydantic needs runtime imports
from .interference import InterferenceAnalysis  # noqa: TC001
from .speedtest import SpeedTestResult  # noqa: TC001


class NoPanel(BaseModel):
    """Live metrics view, no diagnostic result on screen."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


class InterferencePanel(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["interference"] = "interference"
    analysis: InterferenceAnalysis


class SpeedTestPanel(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["speed_test"] = "speed_test"
    result: SpeedTestResult


class DiagnosisPanel(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["diagnosis"] = "diagnosis"
    result: DiagnosisResult


class SettingsPanel(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["settings"] = "settings"


ActivePanel = Annotated[
    NoPanel | InterferencePanel | SpeedTestPanel | DiagnosisPanel | SettingsPanel,
    Field(discriminator="kind"),
]
