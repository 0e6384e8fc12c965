"""Game participants and the buffer of predicted steps each one provides."""

from __future__ import annotations

import enum
import logging
from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .local_party import LocalParty

WINDOW_SIZE = 64

_log = logging.getLogger(__name__)


class ParticipantState(enum.Enum):
    JUST_JOINED = enum.auto()
    NORMAL = enum.auto()
    WAITING_FOR_REJOIN = enum.auto()
    LEAVING = enum.auto()
    DESTROYED = enum.auto()


class StepBuffer:
    """Consecutive steps, each an octet payload, keyed by increasing step id."""

    def __init__(
        self,
        max_octet_count: int,
        capacity: int = WINDOW_SIZE,
        log: logging.Logger | None = None,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.max_octet_count = max_octet_count
        self.capacity = capacity
        self.log = log or _log
        self._steps: deque[bytes] = deque()
        self.expected_read_id = 0
        self.expected_write_id = 0

    @property
    def steps_count(self) -> int:
        return len(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def reinit(self, step_id: int) -> None:
        """Discard all steps and expect the next write at ``step_id``."""
        self._steps.clear()
        self.expected_read_id = step_id
        self.expected_write_id = step_id

    def write(self, step_id: int, payload: bytes) -> None:
        """Append the payload for ``step_id``, which must be the next id expected."""
        if step_id != self.expected_write_id:
            raise ValueError(
                f"expected step {self.expected_write_id:08X}, got {step_id:08X}"
            )
        if len(payload) > self.max_octet_count:
            raise ValueError(
                f"step of {len(payload)} octets exceeds maximum {self.max_octet_count}"
            )
        if len(self._steps) >= self.capacity:
            raise OverflowError("step buffer is full")
        self._steps.append(bytes(payload))
        self.expected_write_id += 1

    def read_exact(self, step_id: int) -> bytes | None:
        """Remove and return the payload for ``step_id``.

        Older steps are discarded on the way. Returns None when no step for
        ``step_id`` is stored yet; raises LookupError if it was already consumed.
        """
        if not self._steps:
            return None
        if step_id < self.expected_read_id:
            raise LookupError(
                f"step {step_id:08X} is older than first stored {self.expected_read_id:08X}"
            )
        while self._steps and self.expected_read_id < step_id:
            self._steps.popleft()
            self.expected_read_id += 1
        if not self._steps:
            return None
        self.expected_read_id += 1
        return self._steps.popleft()


class Participant:
    """One player in the game, with the steps it has predicted."""

    def __init__(
        self,
        participant_id: int,
        max_step_octet_count: int,
        log: logging.Logger | None = None,
    ) -> None:
        self.id = participant_id
        self.log = log or _log
        self.is_used = False
        self.state = ParticipantState.DESTROYED
        self.in_party: LocalParty | None = None
        self.local_index = 0
        self.steps = StepBuffer(max_step_octet_count, log=self.log)

    def __repr__(self) -> str:
        return f"Participant(id={self.id}, state={self.state.name}, is_used={self.is_used})"

    def reinit(self, party: LocalParty, authoritative_step_id: int) -> None:
        """Reuse the participant for ``party``, starting at the given step id."""
        if party is None:
            raise ValueError("party must be valid")
        self.steps.reinit(authoritative_step_id)
        self.in_party = party
        self.is_used = True
        self.state = ParticipantState.JUST_JOINED

    def destroy(self) -> None:
        """Mark the participant as no longer used."""
        self.is_used = False
        self.in_party = None
        self.local_index = 0
        self.state = ParticipantState.DESTROYED

    def mark_as_leaving(self) -> None:
        self.state = ParticipantState.LEAVING