"""A fixed pool of local parties, reserved and released as connections come and go."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from .local_party import LocalParty
from .participant import Participant
from .participant_references import MAX_LOCAL_PARTICIPANT_COUNT

_log = logging.getLogger(__name__)


class OutOfPartyMemoryError(RuntimeError):
    """Every party in the pre-allocated pool is in use."""


class LocalParties:
    """A pool of parties with a fixed capacity."""

    def __init__(
        self,
        capacity: int,
        max_local_party_participant_count: int = MAX_LOCAL_PARTICIPANT_COUNT,
        max_single_participant_step_octet_count: int = 0,
        log: logging.Logger | None = None,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.log = log or _log
        self.capacity = capacity
        self.max_local_party_participant_count = max_local_party_participant_count
        self.max_single_participant_step_octet_count = (
            max_single_participant_step_octet_count
        )
        self.parties_count = 0
        self._parties = [
            LocalParty(party_id, self.log.getChild(f"party.{party_id}"))
            for party_id in range(capacity)
        ]

    @property
    def parties(self) -> tuple[LocalParty, ...]:
        return tuple(self._parties)

    def __iter__(self) -> Iterator[LocalParty]:
        return (party for party in self._parties if party.is_used)

    def __len__(self) -> int:
        return self.parties_count

    def reset(self) -> None:
        """Release every party in the pool."""
        for party in self._parties:
            party.reset()
        self.parties_count = 0

    def find_party(self, party_id: int) -> LocalParty:
        """Return the party stored at ``party_id``; raises IndexError if out of range."""
        if not 0 <= party_id < self.capacity:
            self.log.error("Illegal party id: %d", party_id)
            raise IndexError(f"illegal party id {party_id}")
        return self._parties[party_id]

    def find_party_for_transport(self, transport_connection_id: int) -> LocalParty | None:
        """Return the used party on the given transport connection, or None."""
        for party in self._parties:
            connection = party.transport_connection
            if (
                party.is_used
                and connection is not None
                and getattr(connection, "transport_connection_id", None)
                == transport_connection_id
            ):
                return party
        return None

    def _find_free_party(self) -> LocalParty:
        for index, party in enumerate(self._parties):
            if party.is_used:
                continue
            party.id = index
            self.log.debug(
                "found free local party to use at #%d. capacity before allocating: (%d/%d)",
                index,
                self.parties_count,
                self.capacity,
            )
            return party
        self.log.info("out of parties from the pre-allocated pool")
        raise OutOfPartyMemoryError("could not join, because out of party memory")

    def add(self, transport_connection: Any, participants: Iterable[Participant]) -> LocalParty:
        """Reserve a party for ``transport_connection`` holding ``participants``."""
        party = self._find_free_party()
        members = list(participants)
        party.reinit(transport_connection)
        party.participant_references.replace(members)
        self.parties_count += 1
        party.is_used = True
        party.log.debug("party is ready. All participants have joined")
        return party

    def remove(self, party: LocalParty) -> None:
        """Release ``party`` back to the pool."""
        if not party.is_used:
            raise ValueError("party must be in use to be removed")
        if self.parties_count == 0:
            raise ValueError(f"parties count is wrong {self.parties_count}")
        self.log.debug("removing party %d", party.id)
        self.parties_count -= 1
        self.log.info("now has %d parties left", self.parties_count)
        party.reset()