"""Interference analysis - SNR quality plus channel congestion.

Inputs are the current Wi-Fi link and the neighbouring access points from a
scan. The level is the sum of two scores:

- SNR score: 0 (>= 40 dB), 1 (>= 25 dB or unknown), 2 (>= 15 dB), 3 otherwise
- Congestion score from (same-channel, overlapping) neighbour counts, 0..3

Total 0-1 is Low, 2-3 Moderate, 4-5 High, anything above Severe.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from whyfi.models import InterferenceAnalysis, InterferenceLevel

if TYPE_CHECKING:
    from collections.abc import Sequence

    from whyfi.models import NearbyNetwork, WifiInfo

logger = logging.getLogger("whyfi.interference")

MAX_NEARBY_NETWORKS = 50

BAND_24_GHZ = 2.4
BAND_5_GHZ = 5.0
# Anything below this is treated as the 2.4 GHz band
BAND_SPLIT_GHZ = 3.0

OVERLAP_CHANNEL_DISTANCE_24 = 5
OVERLAP_WIDTH_MHZ_5 = 40.0
NON_OVERLAPPING_24 = (1, 6, 11)

_CHANNEL_RE = re.compile(r"ch\s*(\d+)")
_GHZ_RE = re.compile(r"(\d+(?:\.\d+)?)\s*GHz")


def default_band(channel: int) -> float:
    return BAND_24_GHZ if channel <= 14 else BAND_5_GHZ


def parse_channel_info(channel: str | None) -> tuple[int | None, float | None]:
    """Parse the host channel string, e.g. ``"ch 6, 2.4 GHz, 20 MHz"``.

    Returns ``(channel, frequency_ghz)``; frequency falls back to the band
    implied by the channel number when the string does not name one.
    """
    if not channel:
        return None, None
    ch_match = _CHANNEL_RE.search(channel)
    if ch_match is None:
        return None, None
    number = int(ch_match.group(1))
    ghz_match = _GHZ_RE.search(channel)
    frequency = float(ghz_match.group(1)) if ghz_match else default_band(number)
    return number, frequency


def snr_db(wifi: WifiInfo) -> int | None:
    if wifi.signal_dbm is None or wifi.noise_dbm is None:
        return None
    return round(wifi.signal_dbm - wifi.noise_dbm)


def classify_snr(snr: int | None) -> str:
    if snr is None:
        return "Unknown"
    if snr >= 40:
        return "Excellent"
    if snr >= 25:
        return "Good"
    if snr >= 15:
        return "Fair"
    if snr >= 10:
        return "Poor"
    return "Very Poor"


def _center_mhz_5ghz(channel: int) -> float:
    return 5000.0 + channel * 5.0


def channel_congestion(
    channel: int | None,
    frequency_ghz: float | None,
    nearby: Sequence[NearbyNetwork],
) -> tuple[int, int]:
    """Count neighbours on our channel and on channels that overlap it."""
    if channel is None:
        return 0, 0
    freq = frequency_ghz if frequency_ghz is not None else default_band(channel)
    on_24 = freq < BAND_SPLIT_GHZ

    same = overlapping = 0
    for network in nearby:
        if network.channel == channel:
            same += 1
        elif on_24 and network.frequency_ghz < BAND_SPLIT_GHZ:
            if abs(network.channel - channel) < OVERLAP_CHANNEL_DISTANCE_24:
                overlapping += 1
        elif not on_24 and network.frequency_ghz >= BAND_5_GHZ:
            gap = abs(_center_mhz_5ghz(channel) - _center_mhz_5ghz(network.channel))
            if gap < OVERLAP_WIDTH_MHZ_5:
                overlapping += 1
    return same, overlapping


def _snr_score(snr: int | None) -> int:
    if snr is None:
        return 1
    if snr >= 40:
        return 0
    if snr >= 25:
        return 1
    if snr >= 15:
        return 2
    return 3


def _congestion_score(same: int, overlapping: int) -> int:
    if same == 0 and overlapping == 0:
        return 0
    if same == 0 and overlapping <= 2:
        return 1
    if same <= 1:
        return 1
    if same <= 2 and overlapping <= 3:
        return 2
    return 3


def classify_interference(snr: int | None, same: int, overlapping: int) -> InterferenceLevel:
    total = _snr_score(snr) + _congestion_score(same, overlapping)
    if total <= 1:
        return InterferenceLevel.LOW
    if total <= 3:
        return InterferenceLevel.MODERATE
    if total <= 5:
        return InterferenceLevel.HIGH
    return InterferenceLevel.SEVERE


def build_suggestions(
    snr: int | None,
    snr_quality: str,
    channel: int | None,
    frequency_ghz: float | None,
    same: int,
    overlapping: int,
    nearby: Sequence[NearbyNetwork],
) -> list[str]:
    """Plain-language advice, most actionable first."""
    suggestions: list[str] = []

    if snr is not None and snr < 15:
        suggestions.append("Move closer to your router or remove physical obstructions")

    if same >= 2:
        suggestions.append(
            f"{same} networks on the same channel. "
            "Consider changing to a less congested channel"
        )

    if overlapping >= 3:
        suggestions.append("Many overlapping networks. Try using 5 GHz if available")

    on_24 = frequency_ghz is not None and frequency_ghz < BAND_SPLIT_GHZ
    if on_24 and sum(1 for n in nearby if n.frequency_ghz >= BAND_5_GHZ) < 3:
        suggestions.append("Consider switching to 5 GHz band for less interference")

    if on_24 and channel is not None and channel not in NON_OVERLAPPING_24:
        suggestions.append(
            f"Channel {channel} overlaps with neighbors. Use channel 1, 6, or 11 on 2.4 GHz"
        )

    if snr_quality == "Excellent" and same == 0 and overlapping <= 1:
        suggestions.append("Your Wi-Fi environment looks good!")

    if not suggestions:
        suggestions.append("No major issues detected")
    return suggestions


def analyze_interference(
    wifi: WifiInfo, networks: Sequence[NearbyNetwork]
) -> InterferenceAnalysis:
    """Combine the link state and a neighbour scan into one analysis."""
    snr = snr_db(wifi)
    quality = classify_snr(snr)
    channel, frequency = parse_channel_info(wifi.channel)
    same, overlapping = channel_congestion(channel, frequency, networks)
    level = classify_interference(snr, same, overlapping)

    logger.debug(
        "Interference: snr=%s channel=%s same=%d overlapping=%d level=%s",
        snr,
        channel,
        same,
        overlapping,
        level,
    )

    return InterferenceAnalysis(
        snr_db=snr,
        snr_quality=quality,
        current_channel=channel,
        current_frequency_ghz=frequency,
        same_channel_count=same,
        overlapping_count=overlapping,
        nearby_networks=list(networks[:MAX_NEARBY_NETWORKS]),
        interference_level=level.value,
        suggestions=build_suggestions(
            snr, quality, channel, frequency, same, overlapping, networks
        ),
    )
