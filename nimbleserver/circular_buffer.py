"""Fixed-capacity FIFO ring of octets, used as a free list of ids."""

from __future__ import annotations

import logging

DEFAULT_CAPACITY = 32

_log = logging.getLogger(__name__)


class CircularBuffer:
    """A bounded first-in, first-out queue of values in the range 0..255."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._data = [0] * capacity
        self.head = 0
        self.tail = 0
        self._full = False

    def write(self, data: int) -> None:
        """Append an octet; raises OverflowError if the buffer is full."""
        if not 0 <= data <= 0xFF:
            raise ValueError(f"value {data} does not fit in an octet")
        if self._full:
            _log.error("overwriting circular buffer")
            raise OverflowError("circular buffer is full")
        self._data[self.head] = data
        self.head = (self.head + 1) % self.capacity
        self._full = self.head == self.tail

    def read(self) -> int:
        """Remove and return the oldest octet; raises IndexError if empty."""
        if self.is_empty():
            _log.error("buffer was empty")
            raise IndexError("circular buffer is empty")
        data = self._data[self.tail]
        self.tail = (self.tail + 1) % self.capacity
        self._full = False
        return data

    def is_empty(self) -> bool:
        return self.head == self.tail and not self._full

    def is_full(self) -> bool:
        return self._full

    def count(self) -> int:
        """Number of octets currently stored."""
        if self._full:
            return self.capacity
        if self.head >= self.tail:
            return self.head - self.tail
        return self.capacity + self.head - self.tail

    def __len__(self) -> int:
        return self.count()