"""Rolling history of numeric telemetry, one fixed-capacity buffer per channel.

Memory is bounded by ``capacity`` per channel no matter how many polls
happen. A successful poll always pushes one value to every channel (a
missing reading becomes the sentinel 0), so each channel's length equals
the poll count until it reaches capacity.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from whyfi.models import MetricSnapshot

DEFAULT_CAPACITY = 30
MISSING_SAMPLE = 0.0


class Channel(StrEnum):
    """Numeric telemetry series tracked in history."""

    LINK_RATE = "link_rate"
    SIGNAL = "signal"
    NOISE = "noise"
    ROUTER_PING = "router_ping"
    ROUTER_JITTER = "router_jitter"
    ROUTER_LOSS = "router_loss"
    INTERNET_PING = "internet_ping"
    INTERNET_JITTER = "internet_jitter"
    INTERNET_LOSS = "internet_loss"
    DNS_LOOKUP = "dns_lookup"


class RingBuffer:
    """Circular buffer of floats with a fixed capacity."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._buffer = [0.0] * capacity
        self._head = 0  # next write position
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._size

    def push(self, value: float) -> None:
        """Append a sample, overwriting the oldest one when full."""
        self._buffer[self._head] = value
        self._head = (self._head + 1) % self._capacity
        if self._size < self._capacity:
            self._size += 1

    def to_list(self) -> list[float]:
        """Return the samples oldest first."""
        if self._size < self._capacity:
            return self._buffer[: self._size]
        return [self._buffer[(self._head + i) % self._capacity] for i in range(self._capacity)]

    def __repr__(self) -> str:
        return f"RingBuffer(capacity={self._capacity}, size={self._size})"


class MetricHistory:
    """Per-channel ring buffers. Only the polling scheduler writes to it."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self._buffers = {channel: RingBuffer(capacity) for channel in Channel}
        self._capacity = capacity

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, channel: Channel, value: float) -> None:
        self._buffers[channel].push(value)

    def record(self, values: Mapping[Channel, float]) -> None:
        """Push one sample per channel, in a single step."""
        for channel, value in values.items():
            self.push(channel, value)

    def snapshot(self, channel: Channel) -> list[float]:
        """Current sequence for ``channel``, oldest first. Does not mutate."""
        return self._buffers[channel].to_list()

    def as_dict(self) -> dict[Channel, list[float]]:
        return {channel: buffer.to_list() for channel, buffer in self._buffers.items()}

    def __len__(self) -> int:
        """Number of samples held per channel (all channels move together)."""
        return len(self._buffers[Channel.SIGNAL])


def _magnitude(dbm: float | None) -> float:
    # 0 dBm is treated as "no reading" by the host, same as None
    return abs(dbm) if dbm else MISSING_SAMPLE


def _or_missing(value: float | None) -> float:
    return MISSING_SAMPLE if value is None else value


def channel_values(snapshot: MetricSnapshot) -> dict[Channel, float]:
    """Map a successful poll to one history sample per channel.

    Signal and noise are stored as absolute magnitudes so a reading closer
    to zero plots as a larger bar. Absent readings become the sentinel 0.
    """
    wifi = snapshot.wifi
    router = snapshot.router_ping
    internet = snapshot.internet_ping
    return {
        Channel.LINK_RATE: _or_missing(wifi.link_rate_mbps),
        Channel.SIGNAL: _magnitude(wifi.signal_dbm),
        Channel.NOISE: _magnitude(wifi.noise_dbm),
        Channel.ROUTER_PING: _or_missing(router.latency_ms if router else None),
        Channel.ROUTER_JITTER: _or_missing(router.jitter_ms if router else None),
        Channel.ROUTER_LOSS: _or_missing(router.packet_loss_percent if router else None),
        Channel.INTERNET_PING: _or_missing(internet.latency_ms if internet else None),
        Channel.INTERNET_JITTER: _or_missing(internet.jitter_ms if internet else None),
        Channel.INTERNET_LOSS: _or_missing(internet.packet_loss_percent if internet else None),
        Channel.DNS_LOOKUP: _or_missing(snapshot.dns.lookup_latency_ms),
    }
