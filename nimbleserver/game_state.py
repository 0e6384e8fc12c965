"""Holds the latest serialized game state together with its step id."""

from __future__ import annotations

import logging

_log = logging.getLogger(__name__)


class GameStateCapacityError(ValueError):
    """The game state does not fit in the reserved capacity."""


class GameState:
    """A copy of an application game state, bounded in size."""

    def __init__(self, capacity: int, log: logging.Logger | None = None) -> None:
        self.capacity = capacity
        self.step_id = 0
        self._data = b""
        self.log = log or _log

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def octet_count(self) -> int:
        return len(self._data)

    def set(self, step_id: int, data: bytes) -> bool:
        """Store a state; return False if it is not newer than the current one."""
        if self.octet_count != 0 and step_id <= self.step_id:
            self.log.warning(
                "ignoring old game state. we have %08X, but tried to set %08X",
                self.step_id,
                step_id,
            )
            return False
        diff = step_id - self.step_id
        if diff < 5:
            self.log.info("was set to a new state, but not that much newer %d", diff)
        if self.capacity < len(data):
            self.log.warning(
                "can not set gamestate. Not enough capacity %d vs %d",
                len(data),
                self.capacity,
            )
            raise GameStateCapacityError(
                f"game state of {len(data)} octets exceeds capacity {self.capacity}"
            )
        self._data = bytes(data)
        self.step_id = step_id
        self.log.debug(
            "A GameState set to stepId:%08X and octetCount:%d", step_id, len(data)
        )
        return True

    def copy_from(self, other: GameState) -> bool:
        """Copy another game state into this one."""
        return self.set(other.step_id, other.data)