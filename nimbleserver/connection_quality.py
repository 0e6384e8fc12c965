"""Tracks how reliably a connection provides its steps in time."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

FORCED_STEPS_THRESHOLD = 20
FORCED_STEPS_THRESHOLD_BEFORE_FIRST_ACCEPTED = 200


class DisconnectReason(enum.Enum):
    KEEP = enum.auto()
    NOT_PROVIDING_STEPS_IN_TIME = enum.auto()


@dataclass
class ConnectionQuality:
    """Counters describing the step delivery of one connection."""

    provided_steps_in_a_row: int = 0
    forced_step_in_row_counter: int = 0
    has_added_first_accepted_steps: bool = False
    added_steps_to_buffer_counter: int = 0
    log: logging.Logger = field(
        default_factory=lambda: logging.getLogger(__name__), repr=False, compare=False
    )

    def reset(self) -> None:
        """Clear all counters, keeping the log."""
        self.provided_steps_in_a_row = 0
        self.forced_step_in_row_counter = 0
        self.has_added_first_accepted_steps = False
        self.added_steps_to_buffer_counter = 0

    def provided_usable_step(self) -> None:
        """A step from this connection became part of an authoritative step."""
        self.forced_step_in_row_counter = 0
        self.provided_steps_in_a_row += 1
        self.has_added_first_accepted_steps = True
        self.added_steps_to_buffer_counter = 0

    def added_steps_to_buffer(self, count: int) -> None:
        """Steps were accepted into the incoming buffer."""
        self.added_steps_to_buffer_counter += count

    def added_forced_steps(self, count: int) -> None:
        """Forced steps were used in place of this connection's steps."""
        self.provided_steps_in_a_row = 0
        self.forced_step_in_row_counter += count

    def _is_failing_to_provide_steps_in_time(self) -> bool:
        threshold = (
            FORCED_STEPS_THRESHOLD
            if self.has_added_first_accepted_steps
            else FORCED_STEPS_THRESHOLD_BEFORE_FIRST_ACCEPTED
        )
        return self.forced_step_in_row_counter >= threshold

    def evaluate(self) -> DisconnectReason:
        if self._is_failing_to_provide_steps_in_time():
            return DisconnectReason.NOT_PROVIDING_STEPS_IN_TIME
        return DisconnectReason.KEEP

    def describe(self) -> str:
        """Human readable description of the current decision."""
        if self.evaluate() is DisconnectReason.KEEP:
            return "connection should be kept"
        return (
            "not receiving steps from client in time. "
            f"{self.forced_step_in_row_counter} forced steps in a row"
        )

    def should_disconnect(self) -> bool:
        return self.evaluate() is not DisconnectReason.KEEP