"""Property tests for bounded history.

- A ring buffer holds the last ``capacity`` pushes, in push order
- Below capacity it holds the full push history
- Every successful poll moves all channels together
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from whyfi.history import Channel, MetricHistory, RingBuffer, channel_values

from .strategies import metric_snapshots, samples


@given(capacity=st.integers(min_value=1, max_value=50), values=st.lists(samples, max_size=200))
@settings(max_examples=300)
def test_ring_buffer_keeps_last_capacity_values(capacity: int, values: list[float]):
    """Property: contents equal the last min(n, C) pushes in order."""
    buf = RingBuffer(capacity)
    for v in values:
        buf.push(v)
    assert buf.to_list() == values[-capacity:]
    assert len(buf) == min(len(values), capacity)


@given(snapshots=st.lists(metric_snapshots(), max_size=40))
@settings(max_examples=100)
def test_channels_stay_aligned(snapshots):
    """Property: every channel length equals min(polls, capacity)."""
    history = MetricHistory(10)
    for snapshot in snapshots:
        history.record(channel_values(snapshot))
    expected = min(len(snapshots), 10)
    assert {len(v) for v in history.as_dict().values()} == {expected}


@given(snapshot=metric_snapshots())
@settings(max_examples=200)
def test_channel_values_never_negative_for_signal(snapshot):
    """Property: signal and noise are stored as magnitudes."""
    values = channel_values(snapshot)
    assert values[Channel.SIGNAL] >= 0
    assert values[Channel.NOISE] >= 0
