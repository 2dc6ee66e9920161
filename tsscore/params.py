"""Parameters of a protocol run and of a resharing run."""

from __future__ import annotations

import os
from datetime import timedelta
from typing import Callable

from .curve import Curve
from .party_id import PartyID, PeerContext

DEFAULT_SAFE_PRIME_GEN_TIMEOUT = timedelta(minutes=5)

RandomSource = Callable[[int], bytes]


class Parameters:
    """Curve, parties and tuning knobs for one protocol run.

    ``rand`` and ``partial_key_rand`` are callables returning that many random bytes.
    ``concurrency`` should be at least 1.
    """

    def __init__(self, ec: Curve, parties: PeerContext, party_id: PartyID, party_count: int, threshold: int) -> None:
        self.ec = ec
        self.parties = parties
        self.party_id = party_id
        self.party_count = party_count
        self.threshold = threshold
        self.concurrency: int = os.cpu_count() or 1
        self.safe_prime_gen_timeout: timedelta = DEFAULT_SAFE_PRIME_GEN_TIMEOUT
        self.nonce: int = 0
        self.no_proof_mod: bool = False
        self.no_proof_fac: bool = False
        self.partial_key_rand: RandomSource = os.urandom
        self.rand: RandomSource = os.urandom


class ReSharingParameters(Parameters):
    """Parameters for moving a shared key from an old committee to a new one."""

    def __init__(
        self,
        ec: Curve,
        parties: PeerContext,
        new_parties: PeerContext,
        party_id: PartyID,
        party_count: int,
        threshold: int,
        new_party_count: int,
        new_threshold: int,
    ) -> None:
        super().__init__(ec, parties, party_id, party_count, threshold)
        self.new_parties = new_parties
        self.new_party_count = new_party_count
        self.new_threshold = new_threshold

    def old_parties(self) -> PeerContext:
        return self.parties

    def old_party_count(self) -> int:
        return self.party_count

    def old_and_new_parties(self) -> list[PartyID]:
        return [*self.parties.ids, *self.new_parties.ids]

    def old_and_new_party_count(self) -> int:
        return self.old_party_count() + self.new_party_count

    def is_old_committee(self) -> bool:
        key = self.party_id.key_int()
        return any(pj.key_int() == key for pj in self.parties.ids)

    def is_new_committee(self) -> bool:
        key = self.party_id.key_int()
        return any(pj.key_int() == key for pj in self.new_parties.ids)