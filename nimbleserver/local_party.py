"""A local party: the participants that share one transport connection."""

from __future__ import annotations

import enum
import logging
from typing import Any

from .connection_quality import ConnectionQuality
from .delayed_quality import DelayedConnectionQuality
from .participant import ParticipantState
from .participant_references import ParticipantReferences

WAITING_FOR_RECONNECT_MAX_TICKS = 62 * 20


class LocalPartyState(enum.Enum):
    NORMAL = enum.auto()
    WAITING_FOR_REJOIN = enum.auto()
    DISSOLVED = enum.auto()


class LocalParty:
    """Participants joined through the same connection, with its quality tracking."""

    def __init__(self, party_id: int, log: logging.Logger | None = None) -> None:
        self.log = log or logging.getLogger(f"{__name__}.party.{party_id}")
        self.log.debug("initialize local party")
        self.id = party_id
        self.participant_references = ParticipantReferences()
        self.waiting_for_reconnect_max_timer = WAITING_FOR_RECONNECT_MAX_TICKS
        self.is_used = False
        self.highest_received_step_id = 0
        self.steps_in_buffer_count = 0
        quality_log = self.log.getChild("quality")
        self.quality = ConnectionQuality(log=quality_log)
        self.delayed_quality = DelayedConnectionQuality(log=quality_log)
        self.state = LocalPartyState.NORMAL
        self.transport_connection: Any = None
        self.waiting_for_reconnect_timer = 0
        self.warning_count = 0
        self.warning_about_zero_added_steps = 0
        self.reinit(None)

    def __repr__(self) -> str:
        return f"LocalParty(id={self.id}, state={self.state.name}, is_used={self.is_used})"

    def reinit(self, transport_connection: Any) -> None:
        """Start over in the normal state on ``transport_connection``."""
        self.state = LocalPartyState.NORMAL
        self.quality.reset()
        self.delayed_quality.reset()
        self.transport_connection = transport_connection
        self.waiting_for_reconnect_timer = 0
        self.warning_count = 0
        self.warning_about_zero_added_steps = 0

    def reset(self) -> None:
        """Release the party so that it can be reused."""
        self.is_used = False
        self.participant_references.replace([])
        self.waiting_for_reconnect_timer = 0
        self.warning_count = 0
        self.warning_about_zero_added_steps = 0
        self.quality.reset()
        self.delayed_quality.reset()

    def rejoin(self, transport_connection: Any) -> None:
        """The party comes back through a new transport connection."""
        self.log.debug("rejoined from transport connection %r", transport_connection)
        self.reinit(transport_connection)

    def dissolve(self) -> None:
        self.log.debug("dissolved the party")
        self.state = LocalPartyState.DISSOLVED

    def _set_to_waiting_for_rejoin(self) -> None:
        self.log.debug("setting state to: waiting for rejoin")
        self.state = LocalPartyState.WAITING_FOR_REJOIN
        self.waiting_for_reconnect_timer = 0
        for participant in self.participant_references:
            participant.state = ParticipantState.WAITING_FOR_REJOIN

    def _tick_waiting_for_reconnect(self) -> bool:
        self.waiting_for_reconnect_timer += 1
        if self.waiting_for_reconnect_timer < self.waiting_for_reconnect_max_timer:
            return True
        self.log.debug(
            "gave up on reconnect, waited %d ticks. recommending the party to be dissolved",
            self.waiting_for_reconnect_timer,
        )
        return False

    def _tick_normal(self) -> None:
        should_keep = self.delayed_quality.tick(self.quality)
        if not should_keep and self.state is not LocalPartyState.WAITING_FOR_REJOIN:
            self.log.debug(
                "connection quality recommended waiting for rejoin, so setting it to waiting for rejoin"
            )
            self._set_to_waiting_for_rejoin()

    def tick(self) -> bool:
        """Advance one tick; return False if the party should be dissolved."""
        if self.state is LocalPartyState.NORMAL:
            self._tick_normal()
        elif self.state is LocalPartyState.WAITING_FOR_REJOIN:
            return self._tick_waiting_for_reconnect()
        return True

    def has_participant_id(self, participant_id: int) -> bool:
        return self.participant_references.find(participant_id) is not None