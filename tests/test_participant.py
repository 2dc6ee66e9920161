import logging
import threading

import pytest

from tsscore.curve import edwards, s256
from tsscore.errors import TssError
from tsscore.message import Message, MessageContent, MessageRouting, new_message_wrapper
from tsscore.participant import Participant, create_sorted_party_ids, get_local_party_index


class _Content(MessageContent):
    def __init__(self, payload: bytes = b"payload") -> None:
        self.payload = payload

    def type_name(self) -> str:
        return "test.Content"

    def to_bytes(self) -> bytes:
        return self.payload

    def validate_basic(self) -> bool:
        return True


def _message(from_party, broadcast=True):
    routing = MessageRouting(from_party=from_party, is_broadcast=broadcast)
    content = _Content()
    return Message(routing, content, new_message_wrapper(routing, content))


class _RecordingParty:
    def __init__(self, result=True, error=None):
        self.calls = []
        self.result = result
        self.error = error

    def update_from_bytes(self, wire_bytes, from_party, is_broadcast):
        self.calls.append((wire_bytes, from_party, is_broadcast))
        if self.error is not None:
            raise self.error
        return self.result


def test_new_participant_identity():
    p = Participant("party1")
    assert p.party_id.id == "party1"
    assert p.party_id.moniker == "party1:keygen"
    assert p.party_id.key_int() == int.from_bytes(b"party1", "big")
    assert p.party_id.index == -1
    assert p.curve is None


def test_create_sorted_party_ids_orders_by_key():
    ids = create_sorted_party_ids(["party3", "party1", "party2"])
    assert [pid.id for pid in ids] == ["party1", "party2", "party3"]
    assert [pid.index for pid in ids] == [0, 1, 2]
    keys = ids.keys()
    assert keys == sorted(keys)


def test_get_local_party_index():
    ids = create_sorted_party_ids(["party2", "party1"])
    assert get_local_party_index(ids, "party2") == 1
    assert get_local_party_index(ids, "nobody") == -1


def test_hash_to_int_without_curve_is_none():
    assert Participant("p").hash_to_int(b"\x01\x02") is None


def test_hash_to_int_secp256k1_truncates_to_order_bytes():
    p = Participant("p")
    p.curve = s256()
    data = bytes(range(40))
    assert p.hash_to_int(data) == int.from_bytes(data[:32], "big")
    assert p.hash_to_int(b"\x05") == 5


def test_hash_to_int_edwards_fits_order_width():
    p = Participant("p")
    p.curve = edwards()
    result = p.hash_to_int(b"\xff" * 32)
    assert result == 2**253 - 1
    assert result.bit_length() <= edwards().order_bits()


def test_init_sets_params_and_forwards_outgoing():
    received = []
    done = threading.Event()

    def sender(msg):
        received.append(msg)
        done.set()

    p = Participant("party2")
    p.curve = s256()
    p.init(["party1", "party2", "party3"], 1, sender)
    try:
        assert p.party_id.index == 1
        assert p.params.party_count == 3
        assert p.params.threshold == 1
        assert p.params.ec == s256()
        assert [pid.id for pid in p.params.parties.ids] == ["party1", "party2", "party3"]
        msg = _message(p.party_id)
        p.outgoing.put(msg)
        assert done.wait(5)
        assert received == [msg]
    finally:
        p.close()


def test_init_reshare_new_party_index_and_committees():
    p = Participant("party2-reshare")
    p.init_reshare(["party1", "party2"], ["party1-reshare", "party2-reshare"], 1, 1, None)
    try:
        params = p.reshare_params
        assert p.party_id.index == 1
        assert params.old_party_count() == 2
        assert params.new_party_count == 2
        assert params.new_threshold == 1
        assert params.is_new_committee()
        assert not params.is_old_committee()
        assert params.old_and_new_party_count() == 4
    finally:
        p.close()


def test_init_reshare_keeps_existing_index():
    p = Participant("party1")
    p.party_id.index = 0
    p.init_reshare(["party1", "party2"], ["zz-new"], 1, 0, None)
    try:
        assert p.party_id.index == 0
        assert p.reshare_params.is_old_committee()
    finally:
        p.close()


def test_on_msg_queues_until_closed():
    p = Participant("p")
    msg = _message(p.party_id)
    p.on_msg(msg)
    assert p.incoming.get_nowait() is msg
    p.close()
    p.on_msg(msg)
    assert p.incoming.empty()


def test_close_twice_raises():
    p = Participant("p")
    p.close()
    with pytest.raises(RuntimeError):
        p.close()


def test_context_manager_closes():
    with Participant("p") as p:
        assert not p.closed
    assert p.closed


def test_process_msg_passes_wire_form():
    sender = create_sorted_party_ids(["a"])[0]
    msg = _message(sender, broadcast=True)
    local = _RecordingParty()
    assert Participant("b").process_msg(local, msg) is True
    wire_bytes, from_party, is_broadcast = local.calls[0]
    assert wire_bytes == msg.wire_bytes()[0]
    assert from_party is sender
    assert is_broadcast is True


def test_process_msg_propagates_errors():
    sender = create_sorted_party_ids(["a"])[0]
    err = TssError(ValueError("bad"), "keygen", 1, sender)
    local = _RecordingParty(error=err)
    with pytest.raises(TssError) as info:
        Participant("b").process_msg(local, _message(sender))
    assert info.value is err


def test_notify_error_drains_then_returns(caplog):
    p = Participant("p")
    p.errors.put(ValueError("first problem"))
    p.errors.put(ValueError("second problem"))
    p.close()
    with caplog.at_level(logging.WARNING, logger="tsscore.participant"):
        p.notify_error()
    text = caplog.text
    assert "first problem" in text
    assert "second problem" in text
    assert p.errors.empty()