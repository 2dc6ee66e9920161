"""Plumbing for threshold signature scheme parties: curves, identities, parameters, messages, rounds and routing."""

__version__ = "0.1.0"

__all__ = [
    "classify",
    "curve",
    "errors",
    "message",
    "params",
    "participant",
    "party",
    "party_id",
]