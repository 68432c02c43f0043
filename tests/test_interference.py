"""Unit tests for SNR quality, channel congestion and interference level."""

import pytest

from whyfi.interference import (
    MAX_NEARBY_NETWORKS,
    analyze_interference,
    build_suggestions,
    channel_congestion,
    classify_interference,
    classify_snr,
    parse_channel_info,
)
from whyfi.models import InterferenceLevel, NearbyNetwork, WifiInfo


def _net(channel: int, ghz: float | None = None, ssid: str = "Neighbor") -> NearbyNetwork:
    return NearbyNetwork(
        ssid=ssid, channel=channel, frequency_ghz=ghz if ghz is not None else (2.4 if channel <= 14 else 5.0)
    )


@pytest.mark.parametrize(
    ("snr", "expected"),
    [(45, "Excellent"), (40, "Excellent"), (30, "Good"), (25, "Good"), (20, "Fair"),
     (15, "Fair"), (12, "Poor"), (10, "Poor"), (5, "Very Poor"), (None, "Unknown")],
)  # fmt: skip
def test_classify_snr(snr, expected):
    assert classify_snr(snr) == expected


class TestParseChannelInfo:
    def test_24ghz(self):
        assert parse_channel_info("ch 6, 2.4 GHz, 20 MHz") == (6, 2.4)

    def test_5ghz(self):
        assert parse_channel_info("ch 149, 5 GHz, 80 MHz") == (149, 5.0)

    def test_band_inferred_from_channel(self):
        assert parse_channel_info("ch 11") == (11, 2.4)
        assert parse_channel_info("ch 36") == (36, 5.0)

    @pytest.mark.parametrize("raw", [None, "", "unknown"])
    def test_unparseable(self, raw):
        assert parse_channel_info(raw) == (None, None)


class TestChannelCongestion:
    def test_24ghz_overlap_within_four_channels(self):
        nearby = [_net(6), _net(4), _net(9), _net(1), _net(11), _net(36)]
        # 4 and 9 overlap; 1 and 11 are 5 away; 36 is another band
        assert channel_congestion(6, 2.4, nearby) == (1, 2)

    def test_5ghz_overlap_within_40mhz(self):
        nearby = [_net(149), _net(153), _net(157), _net(6)]
        # 153 is 20 MHz away, 157 is 40 MHz away
        assert channel_congestion(149, 5.0, nearby) == (1, 1)

    def test_no_channel_means_no_congestion(self):
        assert channel_congestion(None, None, [_net(6)]) == (0, 0)


class TestClassifyInterference:
    def test_cases(self):
        assert classify_interference(45, 0, 0) is InterferenceLevel.LOW
        assert classify_interference(30, 1, 2) is InterferenceLevel.MODERATE
        assert classify_interference(12, 3, 4) is InterferenceLevel.SEVERE

    def test_unknown_snr_scores_as_good(self):
        assert classify_interference(None, 0, 0) is InterferenceLevel.LOW
        assert classify_interference(None, 0, 1) is InterferenceLevel.MODERATE

    def test_high(self):
        # fair SNR (2) + two same-channel with few overlaps (2)
        assert classify_interference(20, 2, 3) is InterferenceLevel.HIGH


class TestSuggestions:
    def test_clean_environment(self):
        assert build_suggestions(45, "Excellent", 149, 5.0, 0, 0, []) == [
            "Your Wi-Fi environment looks good!"
        ]

    def test_nothing_applies(self):
        assert build_suggestions(None, "Unknown", None, None, 0, 0, []) == [
            "No major issues detected"
        ]

    def test_weak_crowded_24ghz(self):
        suggestions = build_suggestions(12, "Poor", 3, 2.4, 2, 3, [_net(3), _net(3)])
        assert suggestions == [
            "Move closer to your router or remove physical obstructions",
            "2 networks on the same channel. Consider changing to a less congested channel",
            "Many overlapping networks. Try using 5 GHz if available",
            "Consider switching to 5 GHz band for less interference",
            "Channel 3 overlaps with neighbors. Use channel 1, 6, or 11 on 2.4 GHz",
        ]

    def test_busy_5ghz_neighbourhood_skips_band_advice(self):
        nearby = [_net(36), _net(44), _net(149)]
        suggestions = build_suggestions(30, "Good", 6, 2.4, 0, 0, nearby)
        assert "Consider switching to 5 GHz band for less interference" not in suggestions


class TestAnalyzeInterference:
    def test_end_to_end(self):
        wifi = WifiInfo(
            connected=True, channel="ch 149, 5 GHz, 80 MHz", signal_dbm=-45, noise_dbm=-90
        )
        analysis = analyze_interference(wifi, [_net(6), _net(36)])

        assert analysis.snr_db == 45
        assert analysis.snr_quality == "Excellent"
        assert analysis.current_channel == 149
        assert analysis.current_frequency_ghz == 5.0
        assert analysis.same_channel_count == 0
        assert analysis.overlapping_count == 0
        assert analysis.interference_level == "Low"
        assert analysis.suggestions == ["Your Wi-Fi environment looks good!"]
        assert len(analysis.nearby_networks) == 2

    def test_missing_noise_means_unknown_snr(self):
        analysis = analyze_interference(WifiInfo(signal_dbm=-60), [])
        assert analysis.snr_db is None
        assert analysis.snr_quality == "Unknown"

    def test_nearby_list_is_bounded(self):
        nearby = [_net(1 + i % 11, ssid=f"net{i}") for i in range(MAX_NEARBY_NETWORKS + 20)]
        analysis = analyze_interference(WifiInfo(channel="ch 6, 2.4 GHz"), nearby)
        assert len(analysis.nearby_networks) == MAX_NEARBY_NETWORKS
        # counts still cover every network seen
        assert analysis.same_channel_count == sum(1 for n in nearby if n.channel == 6)
