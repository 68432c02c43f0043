"""Configuration for WhyFi.

Defaults reproduce the fixed behaviour of the core (3 s polling, 30-sample
history, last 10 samples per channel in the diagnosis prompt). Every field
can be overridden with a ``WHYFI_`` environment variable.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from whyfi.models import SpeedTestPlan


class WhyFiConfig(BaseSettings):
    """Main configuration for WhyFi."""

    # Host platform
    host_url: str = Field(
        default="http://127.0.0.1:7878", description="Base URL of the host metrics RPC"
    )

    # Polling
    poll_interval_ms: int = Field(default=3000, gt=0, description="Interval between polls")
    history_capacity: int = Field(default=30, ge=1, description="Samples kept per channel")

    # AI diagnosis
    diagnosis_model: str = Field(default="gpt-5-mini", description="OpenAI model identifier")
    prompt_samples: int = Field(
        default=10, ge=1, description="Most recent samples per channel included in the prompt"
    )

    # Speed test
    speedtest_url: str = Field(
        default="https://speed.cloudflare.com", description="Speed test endpoint"
    )
    speedtest: SpeedTestPlan = Field(default_factory=SpeedTestPlan)

    # Settings persistence
    settings_path: Path = Field(
        default=Path("~/.config/whyfi/settings.json"),
        description="JSON file holding the persisted settings record",
    )

    model_config = {"env_prefix": "WHYFI_", "env_nested_delimiter": "__"}

    @property
    def poll_interval_sec(self) -> float:
        return self.poll_interval_ms / 1000
