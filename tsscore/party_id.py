"""Participant identities, sorted participant lists and peer contexts."""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from typing import Iterable, Optional


def _int_to_bytes(value: int) -> bytes:
    value = abs(value)
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


@dataclass(eq=False)
class PartyID:
    """A participant in the protocol rounds.

    ``id`` is meant to be a unique string form of ``key``; ``moniker`` is free text.
    ``index`` stays -1 until the party list is sorted.
    """

    id: str
    moniker: str
    key: Optional[bytes]
    index: int = -1

    def key_int(self) -> int:
        """The key as a non-negative integer."""
        return int.from_bytes(self.key or b"", "big")

    def validate_basic(self) -> bool:
        return self.key is not None and self.index >= 0

    def __str__(self) -> str:
        return f"{{{self.index},{self.moniker}}}"


def new_party_id(party_id: str, moniker: str, key: int) -> PartyID:
    """Build a PartyID; ``key`` should stay the same between runs for each party."""
    return PartyID(id=party_id, moniker=moniker, key=_int_to_bytes(key), index=-1)


class SortedPartyIDs(list):
    """A list of PartyIDs in ascending key order."""

    def keys(self) -> list[int]:
        return [pid.key_int() for pid in self]

    def find_by_key(self, key: int) -> Optional[PartyID]:
        return next((pid for pid in self if pid.key_int() == key), None)

    def exclude(self, excluded: PartyID) -> "SortedPartyIDs":
        drop = excluded.key_int()
        return SortedPartyIDs(pid for pid in self if pid.key_int() != drop)


def sort_party_ids(ids: Iterable[PartyID], start_at: int = 0) -> SortedPartyIDs:
    """Sort parties by key and assign their indexes, counting from ``start_at``."""
    ordered = SortedPartyIDs(sorted(ids, key=PartyID.key_int))
    for position, pid in enumerate(ordered):
        pid.index = position + start_at
    return ordered


def generate_test_party_ids(count: int, start_at: int = 0) -> SortedPartyIDs:
    """Generate ``count`` mock parties with consecutive keys, for tests."""
    base = secrets.randbits(256)
    ids = [
        PartyID(
            id=str(i + 1),
            moniker=f"P[{i + 1}]",
            key=_int_to_bytes(base - (count - i)),
            index=i,
        )
        for i in range(start_at, count + start_at)
    ]
    return sort_party_ids(ids, start_at)


@dataclass
class PeerContext:
    """The sorted set of parties taking part in a protocol run."""

    ids: SortedPartyIDs = field(default_factory=SortedPartyIDs)