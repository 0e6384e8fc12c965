import pytest

from nimbleserver.participant import Participant
from nimbleserver.participant_references import (
    MAX_LOCAL_PARTICIPANT_COUNT,
    ParticipantReferences,
)


def test_find_existing_participant():
    first = Participant(2, 8)
    second = Participant(4, 8)
    refs = ParticipantReferences([first, second])
    assert refs.find(4) is second
    assert refs.find(2) is first


def test_find_missing_participant_returns_none():
    refs = ParticipantReferences([Participant(2, 8)])
    assert refs.find(3) is None


def test_empty_references():
    refs = ParticipantReferences()
    assert len(refs) == 0
    assert refs.find(0) is None


def test_replace_swaps_contents():
    old = Participant(1, 8)
    new = Participant(5, 8)
    refs = ParticipantReferences([old])
    refs.replace([new])
    assert list(refs) == [new]
    assert refs.find(1) is None
    assert refs[0] is new


def test_replace_with_too_many_raises():
    refs = ParticipantReferences()
    too_many = [Participant(i, 1) for i in range(MAX_LOCAL_PARTICIPANT_COUNT + 1)]
    with pytest.raises(ValueError):
        refs.replace(too_many)
    assert len(refs) == 0