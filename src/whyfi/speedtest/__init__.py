"""Speed test: measurement pipeline and its HTTP probe."""

from .pipeline import PHASE_STATUS, PipelinePaused, SpeedTestPipeline, summarize
from .probe import CLOUDFLARE_SPEEDTEST_URL, CloudflareSpeedProbe, SpeedProbe

__all__ = [
    "SpeedTestPipeline",
    "PipelinePaused",
    "PHASE_STATUS",
    "summarize",
    "SpeedProbe",
    "CloudflareSpeedProbe",
    "CLOUDFLARE_SPEEDTEST_URL",
]
