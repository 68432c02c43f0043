"""Unit tests for the ring buffer and per-channel metric history."""

import pytest

from whyfi.history import Channel, MetricHistory, RingBuffer, channel_values

from .fakes import make_snapshot


class TestRingBuffer:
    def test_starts_empty(self):
        buf = RingBuffer(3)
        assert len(buf) == 0
        assert buf.to_list() == []

    def test_below_capacity_keeps_everything_in_order(self):
        buf = RingBuffer(5)
        for v in (1.0, 2.0, 3.0):
            buf.push(v)
        assert buf.to_list() == [1.0, 2.0, 3.0]
        assert len(buf) == 3

    def test_overflow_keeps_last_capacity_values(self):
        buf = RingBuffer(3)
        for v in range(1, 8):
            buf.push(float(v))
        assert buf.to_list() == [5.0, 6.0, 7.0]
        assert len(buf) == 3

    def test_exactly_full(self):
        buf = RingBuffer(2)
        buf.push(1.0)
        buf.push(2.0)
        assert buf.to_list() == [1.0, 2.0]

    def test_to_list_does_not_mutate(self):
        buf = RingBuffer(2)
        buf.push(1.0)
        snapshot = buf.to_list()
        snapshot.append(99.0)
        assert buf.to_list() == [1.0]

    @pytest.mark.parametrize("capacity", [0, -1])
    def test_rejects_non_positive_capacity(self, capacity):
        with pytest.raises(ValueError):
            RingBuffer(capacity)


class TestMetricHistory:
    def test_record_pushes_every_channel(self, sample_snapshot):
        history = MetricHistory(30)
        history.record(channel_values(sample_snapshot))
        assert len(history) == 1
        assert all(len(values) == 1 for values in history.as_dict().values())

    def test_capacity_bounds_every_channel(self, sample_snapshot):
        history = MetricHistory(4)
        for _ in range(10):
            history.record(channel_values(sample_snapshot))
        assert len(history) == 4
        assert all(len(values) == 4 for values in history.as_dict().values())

    def test_signal_stored_as_magnitude(self):
        history = MetricHistory()
        for dbm in (-50.0, -65.0, -90.0):
            history.record(channel_values(make_snapshot(signal_dbm=dbm)))
        assert history.snapshot(Channel.SIGNAL) == [50.0, 65.0, 90.0]


class TestChannelValues:
    def test_absent_readings_become_zero(self):
        values = channel_values(
            make_snapshot(signal_dbm=None, noise_dbm=None, router_ms=None, internet_ms=None)
        )
        assert values[Channel.SIGNAL] == 0.0
        assert values[Channel.NOISE] == 0.0
        assert values[Channel.ROUTER_PING] == 0.0
        assert values[Channel.ROUTER_LOSS] == 0.0
        assert values[Channel.INTERNET_JITTER] == 0.0

    def test_zero_dbm_is_treated_as_missing(self):
        values = channel_values(make_snapshot(signal_dbm=0.0))
        assert values[Channel.SIGNAL] == 0.0

    def test_every_channel_present(self, sample_snapshot):
        assert set(channel_values(sample_snapshot)) == set(Channel)

    def test_values_copied_from_snapshot(self, sample_snapshot):
        values = channel_values(sample_snapshot)
        assert values[Channel.LINK_RATE] == 866.0
        assert values[Channel.NOISE] == 92.0
        assert values[Channel.ROUTER_PING] == 4.0
        assert values[Channel.INTERNET_PING] == 18.0
        assert values[Channel.DNS_LOOKUP] == 22.0
