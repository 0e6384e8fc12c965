# nimbleserver

Server-side bookkeeping for deterministic lockstep multiplayer games. Each
participant stores its predicted steps in a buffer. The server merges those
steps into *authoritative* steps, and every client then simulates the
authoritative steps in the same order.

## Modules

- `nimbleserver.circular_buffer`
  - `CircularBuffer` is a fixed-size first-in, first-out ring of octets. Its
    default capacity is 32, and it is suited to a free list of ids.
  - `write` raises `OverflowError` when the ring is full, and `ValueError` for
    a value outside 0..255.
  - `read` raises `IndexError` when the ring is empty.
- `nimbleserver.connection_quality`
  - `ConnectionQuality` counts the forced steps and the provided steps of a
    party.
  - `evaluate` returns a `DisconnectReason`.
  - A party is considered failing after 20 forced steps in a row. Before its
    first accepted step the limit is 200.
- `nimbleserver.delayed_quality`
  - `DelayedConnectionQuality.tick` only recommends dropping a connection,
    by returning `False`, after more than 180 net ticks of bad quality.
  - Each good tick reduces that count by one.
- `nimbleserver.game_state`
  - `GameState` holds the latest serialized game state and its step id.
  - `set` returns `False` and ignores a state that is not newer than the one
    held.
  - `set` raises `GameStateCapacityError` when the data exceeds the capacity.
  - `copy_from` copies another `GameState`.
- `nimbleserver.participant`
  - `Participant` is a player, with its lifecycle in `ParticipantState`.
  - `StepBuffer` is a queue of step payloads keyed by consecutive step ids,
    holding at most 64 steps.
  - `StepBuffer.write` accepts only the next expected id.
  - `StepBuffer.read_exact` removes the step for an id, discarding older ones.
    It returns `None` if that step is not stored yet.
- `nimbleserver.participant_references`
  - `ParticipantReferences` is the ordered list of participants in one party,
    with at most 16 members.
  - `find` looks a participant up by id.
- `nimbleserver.local_party`
  - `LocalParty` is the group of participants behind one transport connection.
    Its state is a `LocalPartyState`.
  - `tick` runs the quality checks. A party in normal state whose quality stays
    bad moves to waiting for rejoin, and so do its participants.
  - A party waiting for rejoin makes `tick` return `False` after 1240 ticks.
    That is the recommendation to dissolve it.
- `nimbleserver.local_parties`
  - `LocalParties` is a pool of parties with a fixed capacity.
  - `add` reserves a free party and raises `OutOfPartyMemoryError` when none is
    left.
  - `remove` releases a party.
  - `find_party_for_transport` matches on a `transport_connection_id`
    attribute of the party's transport connection.
- `nimbleserver.authoritative_steps`
  - `compose_one_authoritative_step` builds one step from every used
    participant.
  - `should_compose_new_authoritative_step` decides whether a new step is due.
  - `compose_authoritative_steps` composes as many steps as it may into a
    `StepBuffer` and returns how many it wrote.
  - Failures raise `AuthoritativeStepError`. `StepType` is the step kind that is
    written for each participant.

## Installation

```
pip install .
```

Install the test extra and run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from nimbleserver.authoritative_steps import compose_authoritative_steps
from nimbleserver.local_parties import LocalParties
from nimbleserver.participant import Participant, StepBuffer

parties = LocalParties(capacity=4)
player = Participant(participant_id=1, max_step_octet_count=8)
party = parties.add(transport_connection=None, participants=[player])
player.reinit(party, authoritative_step_id=0)

for step_id in range(6):
    player.steps.write(step_id, b"\x01")

authoritative = StepBuffer(max_octet_count=64)
written = compose_authoritative_steps([player], authoritative)   # 4

# participant count, 0x80 | id, JOINED, party id, payload length, payload
assert authoritative.read_exact(0) == b"\x01\x81\x03\x00\x01\x01"
```

## Layout of an authoritative step

An authoritative step is a sequence of octets:

1. One octet gives the number of used participants.
2. Each used participant then writes:
   - its id;
   - for any step type other than normal, the id with `0x80` set, followed by
     the `StepType` value;
   - for a joined step, the party id after that;
   - for normal and joined steps, the payload length and the payload.

A participant that is just joined reports `JOINED` once and then becomes
normal. A leaving participant reports `LEFT` and is destroyed.

## When steps are composed

A new authoritative step is composed in either of two cases:

- some participant can advance more than three steps and every participant can
  contribute;
- some participant can advance more than five steps.

A participant with no stored step for the wanted id gets a step of type
`STEP_NOT_PROVIDED_IN_TIME` and no payload. This counts as a forced step against
its party's `ConnectionQuality`.

Composition also stops while the authoritative `StepBuffer` holds 32 steps or
more. Reading steps out of it with `read_exact`, or calling `reinit`, makes
room again.

## What this package does not do

- It opens no sockets and runs no server loop.
- It does not decode predicted steps from incoming datagrams.
- It does not allocate participant ids. It has no join or host-migration
  handling.
- It never links a `GameState` to the authoritative buffer.

The caller creates the `Participant` objects and fills their `StepBuffer`s. The
caller also decides when to drain or reset the authoritative buffer.