"""Pydantic models for WhyFi.

- Metrics: one poll of the host (Wi-Fi link, router/internet ping, DNS)
- Interference: nearby-network scan and its analysis
- Speed test: measurement plan, raw samples, final four-scalar result
- Diagnosis: structured AI report
- Panel: the single active result shown to the user
- Settings: the persisted credential record
"""

from .diagnosis import (
    DiagnosisInput,
    DiagnosisIssue,
    DiagnosisResult,
    IssueSeverity,
    OverallHealth,
)
from .interference import InterferenceAnalysis, InterferenceLevel, NearbyNetwork, NearbyScan
from .metrics import DnsInfo, MetricSnapshot, MetricStatus, PingResult, WifiInfo
from .panel import (
    ActivePanel,
    DiagnosisPanel,
    InterferencePanel,
    NoPanel,
    SettingsPanel,
    SpeedTestPanel,
)
from .settings import AppSettings
from .speedtest import (
    BandwidthSample,
    MeasurementPhase,
    SpeedPhase,
    SpeedSummary,
    SpeedTestPlan,
    SpeedTestResult,
    bytes_per_sec_to_mbps,
)

__all__ = [
    # Metrics
    "MetricStatus",
    "WifiInfo",
    "PingResult",
    "DnsInfo",
    "MetricSnapshot",
    # Interference
    "InterferenceLevel",
    "NearbyNetwork",
    "NearbyScan",
    "InterferenceAnalysis",
    # Speed test
    "SpeedPhase",
    "MeasurementPhase",
    "SpeedTestPlan",
    "BandwidthSample",
    "SpeedSummary",
    "SpeedTestResult",
    "bytes_per_sec_to_mbps",
    # Diagnosis
    "OverallHealth",
    "IssueSeverity",
    "DiagnosisIssue",
    "DiagnosisResult",
    "DiagnosisInput",
    # Panel
    "ActivePanel",
    "NoPanel",
    "InterferencePanel",
    "SpeedTestPanel",
    "DiagnosisPanel",
    "SettingsPanel",
    # Settings
    "AppSettings",
]
