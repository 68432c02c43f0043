"""Tests for environment-driven configuration."""

from pathlib import Path

from whyfi.config import WhyFiConfig


def test_defaults():
    config = WhyFiConfig()
    assert config.host_url == "http://127.0.0.1:7878"
    assert config.poll_interval_sec == 3.0
    assert config.history_capacity == 30
    assert config.prompt_samples == 10
    assert config.diagnosis_model == "gpt-5-mini"
    assert len(config.speedtest.phases) == 7


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("WHYFI_POLL_INTERVAL_MS", "1500")
    monkeypatch.setenv("WHYFI_HISTORY_CAPACITY", "60")
    monkeypatch.setenv("WHYFI_SETTINGS_PATH", "/tmp/whyfi/settings.json")
    config = WhyFiConfig()
    assert config.poll_interval_sec == 1.5
    assert config.history_capacity == 60
    assert config.settings_path == Path("/tmp/whyfi/settings.json")
