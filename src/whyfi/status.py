"""Status Classifier - deterministic thresholds, metric value → health status.

Every function is pure and total. Live telemetry returns NEUTRAL when the
reading is absent; the speed-test functions return BAD instead, since a
missing speed-test value means the measurement failed.

Thresholds (boundaries as written):
- Signal dBm:      good > -60,  warning >= -75
- Ping ms:         good < 20,   warning <= 100
- Jitter ms:       good < 10,   warning <= 50
- Packet loss %:   good == 0,   warning <= 5
- Link rate Mbps:  good >= 200, warning >= 50
- SNR dB:          good >= 25,  warning >= 15
- Download Mbps:   good >= 50,  warning >= 10
- Upload Mbps:     good >= 10,  warning >= 3
- Speed-test latency / jitter ms: good <= 30, warning <= 100
"""

from whyfi.models import InterferenceLevel, MetricStatus

SIGNAL_GOOD_ABOVE_DBM = -60.0
SIGNAL_WARNING_MIN_DBM = -75.0

PING_GOOD_BELOW_MS = 20.0
PING_WARNING_MAX_MS = 100.0

JITTER_GOOD_BELOW_MS = 10.0
JITTER_WARNING_MAX_MS = 50.0

LOSS_WARNING_MAX_PCT = 5.0

LINK_RATE_GOOD_MBPS = 200.0
LINK_RATE_WARNING_MBPS = 50.0

SNR_GOOD_DB = 25.0
SNR_WARNING_DB = 15.0

DOWNLOAD_GOOD_MBPS = 50.0
DOWNLOAD_WARNING_MBPS = 10.0

UPLOAD_GOOD_MBPS = 10.0
UPLOAD_WARNING_MBPS = 3.0

SPEED_LATENCY_GOOD_MS = 30.0
SPEED_LATENCY_WARNING_MS = 100.0


# =============================================================================
# LIVE TELEMETRY (absent → NEUTRAL)
# =============================================================================


def signal_status(dbm: float | None) -> MetricStatus:
    if dbm is None:
        return MetricStatus.NEUTRAL
    if dbm > SIGNAL_GOOD_ABOVE_DBM:
        return MetricStatus.GOOD
    if dbm >= SIGNAL_WARNING_MIN_DBM:
        return MetricStatus.WARNING
    return MetricStatus.BAD


def ping_status(ms: float | None) -> MetricStatus:
    """Also used for DNS lookup latency."""
    if ms is None:
        return MetricStatus.NEUTRAL
    if ms < PING_GOOD_BELOW_MS:
        return MetricStatus.GOOD
    if ms <= PING_WARNING_MAX_MS:
        return MetricStatus.WARNING
    return MetricStatus.BAD


def jitter_status(ms: float | None) -> MetricStatus:
    if ms is None:
        return MetricStatus.NEUTRAL
    if ms < JITTER_GOOD_BELOW_MS:
        return MetricStatus.GOOD
    if ms <= JITTER_WARNING_MAX_MS:
        return MetricStatus.WARNING
    return MetricStatus.BAD


def loss_status(percent: float | None) -> MetricStatus:
    if percent is None:
        return MetricStatus.NEUTRAL
    if percent == 0:
        return MetricStatus.GOOD
    if percent <= LOSS_WARNING_MAX_PCT:
        return MetricStatus.WARNING
    return MetricStatus.BAD


def link_rate_status(mbps: float | None) -> MetricStatus:
    if mbps is None:
        return MetricStatus.NEUTRAL
    if mbps >= LINK_RATE_GOOD_MBPS:
        return MetricStatus.GOOD
    if mbps >= LINK_RATE_WARNING_MBPS:
        return MetricStatus.WARNING
    return MetricStatus.BAD


def snr_status(snr_db: float | None) -> MetricStatus:
    if snr_db is None:
        return MetricStatus.NEUTRAL
    if snr_db >= SNR_GOOD_DB:
        return MetricStatus.GOOD
    if snr_db >= SNR_WARNING_DB:
        return MetricStatus.WARNING
    return MetricStatus.BAD


def interference_level_status(level: str) -> MetricStatus:
    """Map an interference level name; anything unrecognised is NEUTRAL."""
    match level:
        case InterferenceLevel.LOW:
            return MetricStatus.GOOD
        case InterferenceLevel.MODERATE:
            return MetricStatus.WARNING
        case InterferenceLevel.HIGH | InterferenceLevel.SEVERE:
            return MetricStatus.BAD
        case _:
            return MetricStatus.NEUTRAL


# =============================================================================
# SPEED TEST (absent → BAD)
# =============================================================================


def download_status(mbps: float | None) -> MetricStatus:
    if mbps is None:
        return MetricStatus.BAD
    if mbps >= DOWNLOAD_GOOD_MBPS:
        return MetricStatus.GOOD
    if mbps >= DOWNLOAD_WARNING_MBPS:
        return MetricStatus.WARNING
    return MetricStatus.BAD


def upload_status(mbps: float | None) -> MetricStatus:
    if mbps is None:
        return MetricStatus.BAD
    if mbps >= UPLOAD_GOOD_MBPS:
        return MetricStatus.GOOD
    if mbps >= UPLOAD_WARNING_MBPS:
        return MetricStatus.WARNING
    return MetricStatus.BAD


def speed_latency_status(ms: float | None) -> MetricStatus:
    """Latency and jitter measured by the speed test share one scale."""
    if ms is None:
        return MetricStatus.BAD
    if ms <= SPEED_LATENCY_GOOD_MS:
        return MetricStatus.GOOD
    if ms <= SPEED_LATENCY_WARNING_MS:
        return MetricStatus.WARNING
    return MetricStatus.BAD


_LABELS = {
    MetricStatus.GOOD: "Good",
    MetricStatus.WARNING: "OK",
    MetricStatus.BAD: "Bad",
    MetricStatus.NEUTRAL: "",
}


def status_label(status: MetricStatus) -> str:
    """Short label shown next to a metric value."""
    return _LABELS[status]
