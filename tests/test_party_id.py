import pytest

from tsscore.party_id import (
    PartyID,
    PeerContext,
    SortedPartyIDs,
    generate_test_party_ids,
    new_party_id,
    sort_party_ids,
)


def test_new_party_id_key_round_trip():
    pid = new_party_id("a", "a:keygen", 123456789)
    assert pid.key_int() == 123456789
    assert pid.index == -1
    assert pid.id == "a"
    assert pid.moniker == "a:keygen"


def test_new_party_id_key_bytes_from_string():
    key = int.from_bytes(b"party1", "big")
    pid = new_party_id("party1", "party1:keygen", key)
    assert pid.key == b"party1"


def test_validate_basic_depends_on_index():
    pid = new_party_id("a", "a", 5)
    assert pid.validate_basic() is False
    pid.index = 0
    assert pid.validate_basic() is True


def test_validate_basic_without_key():
    pid = PartyID(id="x", moniker="x", key=None, index=0)
    assert pid.validate_basic() is False


def test_str_format():
    pid = new_party_id("a", "alice", 1)
    pid.index = 2
    assert str(pid) == "{2,alice}"


def test_sort_assigns_indexes_in_key_order():
    c = new_party_id("c", "c", 30)
    a = new_party_id("a", "a", 10)
    b = new_party_id("b", "b", 20)
    ordered = sort_party_ids([c, a, b])
    assert [p.id for p in ordered] == ["a", "b", "c"]
    assert [p.index for p in ordered] == [0, 1, 2]
    assert isinstance(ordered, SortedPartyIDs)


def test_sort_with_start_at():
    ids = [new_party_id(str(k), str(k), k) for k in (9, 3, 6)]
    ordered = sort_party_ids(ids, 4)
    assert [p.key_int() for p in ordered] == [3, 6, 9]
    assert [p.index for p in ordered] == [4, 5, 6]


@pytest.mark.parametrize("count", [1, 3, 5])
def test_generate_test_party_ids(count):
    ids = generate_test_party_ids(count)
    assert len(ids) == count
    assert [p.index for p in ids] == list(range(count))
    assert [p.id for p in ids] == [str(i + 1) for i in range(count)]
    assert [p.moniker for p in ids] == [f"P[{i + 1}]" for i in range(count)]
    keys = ids.keys()
    assert keys == sorted(keys)
    assert all(later - earlier == 1 for earlier, later in zip(keys, keys[1:]))


def test_generate_test_party_ids_start_at():
    ids = generate_test_party_ids(3, 2)
    assert [p.index for p in ids] == [2, 3, 4]
    assert [p.id for p in ids] == ["3", "4", "5"]


def test_keys_and_find_by_key():
    ids = sort_party_ids([new_party_id(str(k), str(k), k) for k in (7, 2, 5)])
    assert ids.keys() == [2, 5, 7]
    assert ids.find_by_key(5).id == "5"
    assert ids.find_by_key(42) is None


def test_exclude():
    ids = sort_party_ids([new_party_id(str(k), str(k), k) for k in (1, 2, 3)])
    other = new_party_id("dup", "dup", 2)
    remaining = ids.exclude(other)
    assert [p.key_int() for p in remaining] == [1, 3]
    assert isinstance(remaining, SortedPartyIDs)
    assert len(ids) == 3


def test_peer_context_ids_replaceable():
    first = generate_test_party_ids(2)
    second = generate_test_party_ids(3)
    ctx = PeerContext(first)
    assert ctx.ids is first
    ctx.ids = second
    assert len(ctx.ids) == 3