"""Bounded, overwrite-oldest storage of the most recent events."""

from collections import deque
from dataclasses import dataclass, field
from itertools import islice
from typing import Iterator

from .events import Event


@dataclass(frozen=True)
class Replay:
    """Result of RingBuffer.since().

    ``truncated`` is set when part of the requested history has already
    been evicted; ``events`` then holds whatever is still retained.
    """

    events: list[Event] = field(default_factory=list)
    truncated: bool = False


class RingBuffer:
    """Holds the last ``capacity`` events as a contiguous sequence range."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._events: deque[Event] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._events.maxlen or 0

    @property
    def min_sequence(self) -> int | None:
        return self._events[0].sequence if self._events else None

    @property
    def max_sequence(self) -> int | None:
        return self._events[-1].sequence if self._events else None

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def append(self, event: Event) -> None:
        """Append an event, evicting the oldest one when full."""
        last = self.max_sequence
        if last is not None and event.sequence != last + 1:
            raise ValueError(
                f"sequence {event.sequence} does not follow {last}"
            )
        self._events.append(event)

    def since(self, sequence: int) -> Replay:
        """Return retained events with a sequence greater than ``sequence``."""
        if not self._events:
            return Replay()

        first = self._events[0].sequence
        last = self._events[-1].sequence
        if sequence >= last:
            return Replay()

        truncated = sequence < first - 1
        # The range is contiguous, so the start offset is plain arithmetic.
        start = max(sequence - first + 1, 0)
        events = list(islice(self._events, start, None))
        return Replay(events=events, truncated=truncated)

    def clear(self) -> None:
        self._events.clear()
