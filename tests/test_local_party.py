from nimbleserver.delayed_quality import MAX_IMPEDING_DISCONNECT_COUNT
from nimbleserver.local_party import (
    WAITING_FOR_RECONNECT_MAX_TICKS,
    LocalParty,
    LocalPartyState,
)
from nimbleserver.participant import Participant, ParticipantState


def _party_with_participants(*ids):
    party = LocalParty(0)
    participants = [Participant(pid, 8) for pid in ids]
    for participant in participants:
        participant.reinit(party, 0)
    party.participant_references.replace(participants)
    return party, participants


def test_new_party_defaults():
    party = LocalParty(5)
    assert party.id == 5
    assert party.is_used is False
    assert party.state is LocalPartyState.NORMAL
    assert party.transport_connection is None
    assert party.waiting_for_reconnect_max_timer == WAITING_FOR_RECONNECT_MAX_TICKS


def test_has_participant_id():
    party, _ = _party_with_participants(2, 4)
    assert party.has_participant_id(4) is True
    assert party.has_participant_id(3) is False


def test_reset_clears_participants_and_counters():
    party, _ = _party_with_participants(1)
    party.is_used = True
    party.warning_count = 7
    party.quality.added_forced_steps(3)
    party.reset()
    assert party.is_used is False
    assert len(party.participant_references) == 0
    assert party.warning_count == 0
    assert party.quality.forced_step_in_row_counter == 0


def test_rejoin_sets_transport_and_normal_state():
    party = LocalParty(1)
    party.dissolve()
    connection = object()
    party.rejoin(connection)
    assert party.transport_connection is connection
    assert party.state is LocalPartyState.NORMAL


def test_dissolve_and_tick_keeps_party():
    party = LocalParty(1)
    party.dissolve()
    assert party.state is LocalPartyState.DISSOLVED
    assert party.tick() is True
    assert party.state is LocalPartyState.DISSOLVED


def test_normal_tick_with_good_quality_stays_normal():
    party, _ = _party_with_participants(1)
    assert all(party.tick() for _ in range(MAX_IMPEDING_DISCONNECT_COUNT + 5))
    assert party.state is LocalPartyState.NORMAL


def test_bad_quality_moves_to_waiting_for_rejoin():
    party, participants = _party_with_participants(1, 2)
    party.quality.added_forced_steps(1000)
    for _ in range(MAX_IMPEDING_DISCONNECT_COUNT):
        assert party.tick() is True
    assert party.state is LocalPartyState.NORMAL
    assert party.tick() is True
    assert party.state is LocalPartyState.WAITING_FOR_REJOIN
    assert party.waiting_for_reconnect_timer == 0
    assert all(p.state is ParticipantState.WAITING_FOR_REJOIN for p in participants)


def test_waiting_for_rejoin_gives_up_after_max_timer():
    party, _ = _party_with_participants(1)
    party.quality.added_forced_steps(1000)
    while party.state is LocalPartyState.NORMAL:
        party.tick()
    party.waiting_for_reconnect_max_timer = 3
    assert party.tick() is True
    assert party.tick() is True
    assert party.tick() is False
    assert party.waiting_for_reconnect_timer == party.waiting_for_reconnect_max_timer


def test_reinit_resets_quality_and_state():
    party, _ = _party_with_participants(1)
    party.quality.added_forced_steps(1000)
    party.tick()
    assert party.delayed_quality.impeding_disconnect_counter == 1
    party.reinit(None)
    assert party.delayed_quality.impeding_disconnect_counter == 0
    assert party.quality.should_disconnect() is False
    assert party.state is LocalPartyState.NORMAL