"""Boundary tests for the status classifier.

Every threshold is asserted on both sides.
"""

import pytest

from whyfi.models import MetricStatus
from whyfi.status import (
    download_status,
    interference_level_status,
    jitter_status,
    link_rate_status,
    loss_status,
    ping_status,
    signal_status,
    snr_status,
    speed_latency_status,
    status_label,
    upload_status,
)

GOOD = MetricStatus.GOOD
WARNING = MetricStatus.WARNING
BAD = MetricStatus.BAD
NEUTRAL = MetricStatus.NEUTRAL


@pytest.mark.parametrize(
    ("dbm", "expected"),
    [(-59, GOOD), (-60, WARNING), (-75, WARNING), (-76, BAD), (-30, GOOD), (None, NEUTRAL)],
)
def test_signal(dbm, expected):
    assert signal_status(dbm) == expected


@pytest.mark.parametrize(
    ("ms", "expected"),
    [(19.9, GOOD), (20, WARNING), (100, WARNING), (100.1, BAD), (0, GOOD), (None, NEUTRAL)],
)
def test_ping(ms, expected):
    assert ping_status(ms) == expected


@pytest.mark.parametrize(
    ("ms", "expected"),
    [(9.9, GOOD), (10, WARNING), (50, WARNING), (50.1, BAD), (None, NEUTRAL)],
)
def test_jitter(ms, expected):
    assert jitter_status(ms) == expected


@pytest.mark.parametrize(
    ("pct", "expected"),
    [(0, GOOD), (0.1, WARNING), (5, WARNING), (5.1, BAD), (None, NEUTRAL)],
)
def test_packet_loss(pct, expected):
    assert loss_status(pct) == expected


@pytest.mark.parametrize(
    ("mbps", "expected"),
    [(200, GOOD), (199.9, WARNING), (50, WARNING), (49.9, BAD), (None, NEUTRAL)],
)
def test_link_rate(mbps, expected):
    assert link_rate_status(mbps) == expected


@pytest.mark.parametrize(
    ("db", "expected"),
    [(25, GOOD), (24.9, WARNING), (15, WARNING), (14.9, BAD), (None, NEUTRAL)],
)
def test_snr(db, expected):
    assert snr_status(db) == expected


class TestSpeedTestScales:
    """Missing speed-test values mean the measurement failed: BAD, not NEUTRAL."""

    @pytest.mark.parametrize(
        ("mbps", "expected"),
        [(50, GOOD), (49.9, WARNING), (10, WARNING), (9.9, BAD), (None, BAD)],
    )
    def test_download(self, mbps, expected):
        assert download_status(mbps) == expected

    @pytest.mark.parametrize(
        ("mbps", "expected"),
        [(10, GOOD), (9.9, WARNING), (3, WARNING), (2.9, BAD), (None, BAD)],
    )
    def test_upload(self, mbps, expected):
        assert upload_status(mbps) == expected

    @pytest.mark.parametrize(
        ("ms", "expected"),
        [(30, GOOD), (30.1, WARNING), (100, WARNING), (100.1, BAD), (None, BAD)],
    )
    def test_latency_and_jitter(self, ms, expected):
        assert speed_latency_status(ms) == expected


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        ("Low", GOOD),
        ("Moderate", WARNING),
        ("High", BAD),
        ("Severe", BAD),
        ("Extreme", NEUTRAL),
        ("", NEUTRAL),
    ],
)
def test_interference_level(level, expected):
    assert interference_level_status(level) == expected


def test_status_labels():
    assert status_label(GOOD) == "Good"
    assert status_label(WARNING) == "OK"
    assert status_label(BAD) == "Bad"
    assert status_label(NEUTRAL) == ""
