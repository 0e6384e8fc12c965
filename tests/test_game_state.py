import pytest

from nimbleserver.game_state import GameState, GameStateCapacityError


def test_new_state_is_empty():
    state = GameState(32)
    assert state.octet_count == 0
    assert state.step_id == 0
    assert state.data == b""


def test_set_stores_data_and_step():
    state = GameState(32)
    assert state.set(0, bytes([42])) is True
    assert state.data == bytes([42])
    assert state.octet_count == 1
    assert state.step_id == 0


def test_older_or_equal_state_is_ignored():
    state = GameState(32)
    state.set(10, b"new")
    assert state.set(10, b"same") is False
    assert state.set(3, b"old") is False
    assert state.data == b"new"
    assert state.step_id == 10


def test_newer_state_replaces():
    state = GameState(32)
    state.set(10, b"a")
    assert state.set(40, b"bb") is True
    assert state.step_id == 40
    assert state.data == b"bb"


def test_capacity_exceeded_raises_and_keeps_previous():
    state = GameState(2)
    state.set(1, b"ok")
    with pytest.raises(GameStateCapacityError):
        state.set(2, b"too long")
    assert state.data == b"ok"
    assert state.step_id == 1


def test_exact_capacity_is_accepted():
    state = GameState(4)
    assert state.set(1, b"abcd") is True
    assert state.octet_count == state.capacity


def test_copy_from_round_trip():
    source = GameState(16)
    source.set(7, b"payload")
    target = GameState(16)
    assert target.copy_from(source) is True
    assert target.data == source.data
    assert target.step_id == source.step_id


def test_copy_from_respects_capacity():
    source = GameState(16)
    source.set(7, b"payload")
    target = GameState(3)
    with pytest.raises(GameStateCapacityError):
        target.copy_from(source)