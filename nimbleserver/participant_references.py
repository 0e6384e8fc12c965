"""The participants that belong to one local party."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .participant import Participant

MAX_LOCAL_PARTICIPANT_COUNT = 16


class ParticipantReferences:
    """An ordered collection of participants, looked up by participant id."""

    def __init__(self, participants: Iterable[Participant] = ()) -> None:
        self._participants: list[Participant] = []
        self.replace(participants)

    def __len__(self) -> int:
        return len(self._participants)

    def __iter__(self) -> Iterator[Participant]:
        return iter(self._participants)

    def __getitem__(self, index: int) -> Participant:
        return self._participants[index]

    def find(self, participant_id: int) -> Participant | None:
        """Return the participant with ``participant_id``, or None."""
        return next((p for p in self._participants if p.id == participant_id), None)

    def replace(self, participants: Iterable[Participant]) -> None:
        """Make the collection hold exactly ``participants``."""
        new_participants = list(participants)
        if len(new_participants) > MAX_LOCAL_PARTICIPANT_COUNT:
            raise ValueError(
                f"at most {MAX_LOCAL_PARTICIPANT_COUNT} participants fit in a party"
            )
        self._participants = new_participants