"""Participants, local parties, connection quality and authoritative step composition for lockstep game servers."""

__version__ = "0.23.0"

__all__ = [
    "authoritative_steps",
    "circular_buffer",
    "connection_quality",
    "delayed_quality",
    "game_state",
    "local_parties",
    "local_party",
    "participant",
    "participant_references",
]