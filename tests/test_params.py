from datetime import timedelta

import pytest

from tsscore.curve import edwards, s256
from tsscore.params import Parameters, ReSharingParameters
from tsscore.party_id import PeerContext, generate_test_party_ids, new_party_id, sort_party_ids


@pytest.fixture
def committees():
    old = sort_party_ids([new_party_id(f"o{k}", f"o{k}", k) for k in (1, 2, 3)])
    new = sort_party_ids([new_party_id(f"n{k}", f"n{k}", k) for k in (10, 20)])
    return old, new


def test_parameters_defaults():
    ids = generate_test_party_ids(3)
    params = Parameters(s256(), PeerContext(ids), ids[0], 3, 1)
    assert params.ec is s256()
    assert params.parties.ids is ids
    assert params.party_id is ids[0]
    assert params.party_count == 3
    assert params.threshold == 1
    assert params.safe_prime_gen_timeout == timedelta(minutes=5)
    assert params.concurrency >= 1
    assert params.no_proof_mod is False and params.no_proof_fac is False
    assert len(params.rand(16)) == 16
    assert len(params.partial_key_rand(8)) == 8


def test_parameters_settings_are_mutable():
    ids = generate_test_party_ids(2)
    params = Parameters(edwards(), PeerContext(ids), ids[1], 2, 1)
    params.concurrency = 2
    params.safe_prime_gen_timeout = timedelta(seconds=30)
    params.no_proof_mod = True
    params.rand = lambda n: b"\x00" * n
    assert params.concurrency == 2
    assert params.safe_prime_gen_timeout == timedelta(seconds=30)
    assert params.no_proof_mod is True
    assert params.rand(3) == b"\x00\x00\x00"


def test_resharing_counts_and_parties(committees):
    old, new = committees
    params = ReSharingParameters(s256(), PeerContext(old), PeerContext(new), old[0], 3, 1, 2, 1)
    assert params.old_parties().ids is old
    assert params.old_party_count() == 3
    assert params.new_party_count == 2
    assert params.new_threshold == 1
    assert params.old_and_new_party_count() == 5
    assert params.old_and_new_parties() == [*old, *new]
    assert len(old) == 3


def test_old_member_committee_flags(committees):
    old, new = committees
    params = ReSharingParameters(s256(), PeerContext(old), PeerContext(new), old[1], 3, 1, 2, 1)
    assert params.is_old_committee() is True
    assert params.is_new_committee() is False


def test_new_member_committee_flags(committees):
    old, new = committees
    params = ReSharingParameters(s256(), PeerContext(old), PeerContext(new), new[0], 3, 1, 2, 1)
    assert params.is_old_committee() is False
    assert params.is_new_committee() is True


def test_membership_compares_keys_not_identity(committees):
    old, new = committees
    twin = new_party_id("other", "other", old[2].key_int())
    params = ReSharingParameters(s256(), PeerContext(old), PeerContext(new), twin, 3, 1, 2, 1)
    assert params.is_old_committee() is True