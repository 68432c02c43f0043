"""Property tests for the status classifier and interference analysis.

- Classifiers are total: any finite reading maps to a status
- Live telemetry never reports BAD for a reading better than a GOOD one
- Interference analysis is deterministic and its counts are bounded by the scan
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from whyfi.interference import analyze_interference
from whyfi.models import InterferenceLevel, MetricStatus
from whyfi.status import (
    download_status,
    jitter_status,
    loss_status,
    ping_status,
    signal_status,
    upload_status,
)

from .strategies import finite, nearby_networks, wifi_infos

_RANK = {MetricStatus.GOOD: 0, MetricStatus.WARNING: 1, MetricStatus.BAD: 2}


@given(value=finite)
@settings(max_examples=300)
def test_classifiers_are_total(value: float):
    """Property: every classifier returns a status for any finite input."""
    for classify in (signal_status, ping_status, jitter_status, loss_status):
        assert classify(value) in MetricStatus
    assert download_status(value) is not MetricStatus.NEUTRAL
    assert upload_status(value) is not MetricStatus.NEUTRAL


@given(a=st.floats(min_value=0, max_value=1000), b=st.floats(min_value=0, max_value=1000))
@settings(max_examples=300)
def test_ping_is_monotonic(a: float, b: float):
    """Property: a lower ping never classifies worse than a higher one."""
    low, high = sorted((a, b))
    assert _RANK[ping_status(low)] <= _RANK[ping_status(high)]


@given(a=st.floats(min_value=-100, max_value=0), b=st.floats(min_value=-100, max_value=0))
@settings(max_examples=300)
def test_signal_is_monotonic(a: float, b: float):
    """Property: a stronger signal never classifies worse than a weaker one."""
    weak, strong = sorted((a, b))
    assert _RANK[signal_status(strong)] <= _RANK[signal_status(weak)]


@given(wifi=wifi_infos(), nearby=st.lists(nearby_networks(), max_size=80))
@settings(max_examples=200)
def test_interference_analysis_is_consistent(wifi, nearby):
    """Property: valid level, bounded counts, at least one suggestion, deterministic."""
    analysis = analyze_interference(wifi, nearby)
    assert analysis.interference_level in {level.value for level in InterferenceLevel}
    assert analysis.same_channel_count + analysis.overlapping_count <= len(nearby)
    assert len(analysis.nearby_networks) <= 50
    assert analysis.suggestions
    assert analyze_interference(wifi, nearby) == analysis
