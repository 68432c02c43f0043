"""Hypothesis strategies for generating WhyFi domain objects."""

from hypothesis import strategies as st

from whyfi.models import DnsInfo, MetricSnapshot, NearbyNetwork, PingResult, WifiInfo

finite = st.floats(allow_nan=False, allow_infinity=False)
samples = st.floats(min_value=-1000, max_value=1000, allow_nan=False, allow_infinity=False)
maybe_ms = st.none() | st.floats(min_value=0, max_value=5000, allow_nan=False)

# =============================================================================
# TELEMETRY
# =============================================================================


@st.composite
def wifi_infos(draw):
    return WifiInfo(
        connected=draw(st.booleans()),
        ssid=draw(st.none() | st.text(max_size=32)),
        channel=draw(st.none() | st.sampled_from(["ch 1, 2.4 GHz", "ch 6", "ch 149, 5 GHz"])),
        link_rate_mbps=draw(st.none() | st.floats(min_value=0, max_value=2400, allow_nan=False)),
        signal_dbm=draw(st.none() | st.floats(min_value=-100, max_value=0, allow_nan=False)),
        noise_dbm=draw(st.none() | st.floats(min_value=-110, max_value=0, allow_nan=False)),
    )


@st.composite
def ping_results(draw):
    return PingResult(
        latency_ms=draw(maybe_ms),
        jitter_ms=draw(maybe_ms),
        packet_loss_percent=draw(st.none() | st.floats(min_value=0, max_value=100)),
    )


@st.composite
def metric_snapshots(draw):
    return MetricSnapshot(
        wifi=draw(wifi_infos()),
        router_ip=draw(st.none() | st.just("192.168.1.1")),
        router_ping=draw(st.none() | ping_results()),
        internet_ping=draw(st.none() | ping_results()),
        dns=DnsInfo(servers=["1.1.1.1"], lookup_latency_ms=draw(maybe_ms)),
    )


# =============================================================================
# INTERFERENCE
# =============================================================================


@st.composite
def nearby_networks(draw):
    channel = draw(st.integers(min_value=1, max_value=14) | st.sampled_from([36, 44, 149, 157]))
    return NearbyNetwork(
        ssid=draw(st.text(min_size=1, max_size=16)),
        channel=channel,
        frequency_ghz=2.4 if channel <= 14 else 5.0,
    )
