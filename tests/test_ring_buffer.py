"""
Tests for the bounded event ring buffer.
"""
import pytest

from eventlog import Event, RingBuffer


def make_events(first: int, last: int) -> list[Event]:
    return [Event(sequence=seq, name=f"E{seq}") for seq in range(first, last + 1)]


def fill(buffer: RingBuffer, count: int) -> None:
    for event in make_events(1, count):
        buffer.append(event)


class TestRingBufferBasics:
    """Test capacity handling and bookkeeping."""

    @pytest.mark.parametrize("capacity", [0, -1])
    def test_rejects_non_positive_capacity(self, capacity):
        with pytest.raises(ValueError):
            RingBuffer(capacity)

    def test_empty_buffer(self):
        buffer = RingBuffer(5)
        assert len(buffer) == 0
        assert buffer.min_sequence is None
        assert buffer.max_sequence is None
        replay = buffer.since(0)
        assert replay.events == []
        assert replay.truncated is False

    def test_append_tracks_range(self):
        buffer = RingBuffer(5)
        fill(buffer, 3)
        assert len(buffer) == 3
        assert buffer.min_sequence == 1
        assert buffer.max_sequence == 3

    def test_never_exceeds_capacity(self):
        buffer = RingBuffer(4)
        fill(buffer, 11)
        assert len(buffer) == 4
        assert buffer.capacity == 4
        assert [event.sequence for event in buffer] == [8, 9, 10, 11]

    def test_rejects_sequence_gap(self):
        buffer = RingBuffer(4)
        buffer.append(Event(sequence=1, name="A"))
        with pytest.raises(ValueError):
            buffer.append(Event(sequence=3, name="C"))

    def test_rejects_repeated_sequence(self):
        buffer = RingBuffer(4)
        buffer.append(Event(sequence=1, name="A"))
        with pytest.raises(ValueError):
            buffer.append(Event(sequence=1, name="A"))

    def test_first_event_may_start_anywhere(self):
        buffer = RingBuffer(4)
        buffer.append(Event(sequence=41, name="A"))
        buffer.append(Event(sequence=42, name="B"))
        assert buffer.min_sequence == 41

    def test_clear(self):
        buffer = RingBuffer(4)
        fill(buffer, 3)
        buffer.clear()
        assert len(buffer) == 0


class TestRingBufferSince:
    """Test replay lookups."""

    def test_since_zero_returns_everything(self):
        buffer = RingBuffer(10)
        fill(buffer, 5)
        replay = buffer.since(0)
        assert [event.sequence for event in replay.events] == [1, 2, 3, 4, 5]
        assert replay.truncated is False

    def test_since_middle(self):
        buffer = RingBuffer(10)
        fill(buffer, 5)
        replay = buffer.since(2)
        assert [event.sequence for event in replay.events] == [3, 4, 5]
        assert replay.truncated is False

    def test_since_latest_is_empty(self):
        buffer = RingBuffer(10)
        fill(buffer, 5)
        assert buffer.since(5).events == []
        assert buffer.since(9).events == []

    def test_after_overflow_since_zero_returns_last_capacity_events(self):
        capacity = 10
        buffer = RingBuffer(capacity)
        fill(buffer, capacity + 7)
        replay = buffer.since(0)
        assert [event.sequence for event in replay.events] == list(range(8, 18))
        assert replay.truncated is True

    def test_just_before_oldest_is_not_truncated(self):
        buffer = RingBuffer(3)
        fill(buffer, 6)
        replay = buffer.since(3)
        assert [event.sequence for event in replay.events] == [4, 5, 6]
        assert replay.truncated is False

    def test_evicted_cursor_is_truncated(self):
        buffer = RingBuffer(3)
        fill(buffer, 6)
        replay = buffer.since(2)
        assert replay.truncated is True
        assert [event.sequence for event in replay.events] == [4, 5, 6]
