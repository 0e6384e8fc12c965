"""Composes authoritative steps from the predicted steps of all participants."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable

from .participant import WINDOW_SIZE, Participant, ParticipantState, StepBuffer

MAX_COMPOSED_STEP_OCTET_COUNT = 1024
MAX_AUTHORITATIVE_STEP_COUNT_SINCE_STATE = WINDOW_SIZE // 2
SPECIAL_STEP_MASK = 0x80

_log = logging.getLogger(__name__)


class StepType(enum.IntEnum):
    NORMAL = 0
    STEP_NOT_PROVIDED_IN_TIME = 1
    WAITING_FOR_REJOIN = 2
    JOINED = 3
    LEFT = 4


class AuthoritativeStepError(RuntimeError):
    """An authoritative step could not be composed or stored."""


def _octet(value: int, what: str) -> int:
    if not 0 <= value <= 0xFF:
        raise AuthoritativeStepError(f"{what} {value} does not fit in an octet")
    return value


def compose_one_authoritative_step(
    participants: Iterable[Participant], looking_for: int
) -> bytes:
    """Combine every used participant's step for ``looking_for`` into one step."""
    slots = list(participants)
    used_count = sum(1 for participant in slots if participant.is_used)
    out = bytearray([_octet(used_count, "participant count")])
    found_count = 0

    for participant in slots:
        if not participant.is_used:
            continue
        found_count += 1
        party = participant.in_party
        if party is None:
            raise AuthoritativeStepError(
                f"participant {participant.id} is used but not in a party"
            )

        step_type = StepType.NORMAL
        try:
            payload = participant.steps.read_exact(looking_for)
        except LookupError as error:
            participant.log.error("steps for participant is corrupt. error %s", error)
            raise AuthoritativeStepError(
                f"steps for participant {participant.id} are corrupt"
            ) from error
        if payload is None:
            party.quality.added_forced_steps(1)
            participant.log.debug(
                "no steps stored (party: %d). server is looking for %08X. using a forced step",
                party.id,
                looking_for,
            )
            step_type = StepType.STEP_NOT_PROVIDED_IN_TIME
            payload = b""
        else:
            party.quality.provided_usable_step()
        payload_count = _octet(len(payload), "step octet count")

        state = participant.state
        if state is ParticipantState.WAITING_FOR_REJOIN:
            step_type = StepType.WAITING_FOR_REJOIN
        elif state is ParticipantState.JUST_JOINED:
            step_type = StepType.JOINED
            participant.state = ParticipantState.NORMAL
        elif state is ParticipantState.LEAVING:
            participant.destroy()
            step_type = StepType.LEFT

        mask = SPECIAL_STEP_MASK if step_type is not StepType.NORMAL else 0
        out.append(_octet(mask | participant.id, "participant id"))
        if mask:
            out.append(step_type.value)
            if step_type is StepType.JOINED:
                out.append(_octet(party.id, "party id"))
        if step_type in (StepType.NORMAL, StepType.JOINED):
            out.append(payload_count)
            out += payload

        if len(out) > MAX_COMPOSED_STEP_OCTET_COUNT:
            raise AuthoritativeStepError(
                f"composed step exceeds {MAX_COMPOSED_STEP_OCTET_COUNT} octets"
            )
        participant.log.debug(
            "wrote authoritative step %08X (octetCount %d) (%s)",
            looking_for,
            payload_count,
            step_type.name,
        )

    if found_count != used_count:
        raise AuthoritativeStepError(
            "did not find the same amount of participants as in participant count"
        )
    _log.debug(
        "authoritative step %08X done. participant count %d, total octet count: %d",
        looking_for,
        found_count,
        len(out),
    )
    return bytes(out)


def _max_predicted_step_contribution(
    participants: Iterable[Participant], looking_for: int
) -> tuple[int, int]:
    """Return the most steps any participant can advance, and how many can not contribute."""
    max_advance = 0
    could_not_contribute = 0
    for participant in participants:
        if not participant.is_used:
            continue
        steps = participant.steps
        advance = 0
        if steps.steps_count > 0 and steps.expected_write_id > looking_for:
            advance = steps.expected_write_id - looking_for + 1
        else:
            could_not_contribute += 1
        max_advance = max(max_advance, advance)
    return max_advance, could_not_contribute


def should_compose_new_authoritative_step(
    participants: Iterable[Participant], looking_for: int
) -> bool:
    """Decide whether enough predicted steps are available to compose ``looking_for``."""
    max_ahead, could_not_contribute = _max_predicted_step_contribution(
        participants, looking_for
    )
    should_compose = (max_ahead > 3 and could_not_contribute == 0) or max_ahead > 5
    _log.debug(
        "available steps for composing:%d (%08X-%08X) couldNotContribute:%d willCompose:%s",
        max_ahead,
        looking_for,
        (looking_for + max_ahead - 1) & 0xFFFFFFFF,
        could_not_contribute,
        should_compose,
    )
    return should_compose


def _can_advance_due_to_distance_from_last_state(authoritative_steps: StepBuffer) -> bool:
    allowed = authoritative_steps.steps_count < MAX_AUTHORITATIVE_STEP_COUNT_SINCE_STATE
    if not allowed:
        _log.warning(
            "we have too many steps in authoritative buffer (%d). "
            "Waiting for state from client or locally on server",
            authoritative_steps.steps_count,
        )
    return allowed


def compose_authoritative_steps(
    participants: Iterable[Participant], authoritative_steps: StepBuffer
) -> int:
    """Compose as many authoritative steps as possible; return how many were written."""
    slots = list(participants)
    first_looking_for = authoritative_steps.expected_write_id
    written = 0
    while should_compose_new_authoritative_step(
        slots, authoritative_steps.expected_write_id
    ) and _can_advance_due_to_distance_from_last_state(authoritative_steps):
        looking_for = authoritative_steps.expected_write_id
        composed = compose_one_authoritative_step(slots, looking_for)
        try:
            authoritative_steps.write(looking_for, composed)
        except (ValueError, OverflowError) as error:
            _log.warning("authoritative: couldn't write")
            raise AuthoritativeStepError(str(error)) from error
        written += 1

    if written:
        _log.debug(
            "authoritative: written steps from %08X to %08X (%d)",
            first_looking_for,
            first_looking_for + written - 1,
            written,
        )
    return written