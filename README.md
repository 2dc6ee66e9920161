# tsscore

Plumbing for parties in a threshold signature scheme (TSS). Every keygen,
signing or resharing protocol needs the same pieces around its cryptography:
curve selection, party identities, run parameters, message envelopes, a
round-by-round state machine and a way to route messages between parties.
This package provides those pieces.

## Modules

- `tsscore.curve` – `Curve` (domain parameters `p`, `n`, `gx`, `gy`,
  `bit_size`, and `order_bits()`), `CurveName`, the built-in curves `s256()`
  (secp256k1) and `edwards()` (ed25519), a registry with `register_curve()`,
  `get_curve_by_name()`, `get_curve_name()` and `same_curve()`, and a
  process-wide default returned by `ec()` (secp256k1 unless changed with
  `set_curve()`, which raises `ValueError` for `None`).
- `tsscore.errors` – `TssError`, raised when a protocol run fails. It carries
  `cause`, `task`, `round`, `victim` and `culprits`.
- `tsscore.party_id` – `PartyID`, `new_party_id()`, `sort_party_ids()`,
  `generate_test_party_ids()`, `SortedPartyIDs` (with `keys()`,
  `find_by_key()` and `exclude()`) and `PeerContext`.
- `tsscore.params` – `Parameters` for keygen and signing, and
  `ReSharingParameters` for moving a key from an old committee to a new one.
- `tsscore.message` – `MessageContent`, `MessageRouting`, `MessageWrapper`,
  `new_message_wrapper()`, `Message`, `register_content_type()` and
  `parse_wire_message()`.
- `tsscore.party` – the abstract `Round` and `BaseParty`, whose
  `base_start()` and `base_update()` drive a protocol from round to round.
- `tsscore.participant` – `Participant`, a queue-backed endpoint that ties a
  party identity, its parameters and a message sender together, plus
  `create_sorted_party_ids()` and `get_local_party_index()`.
- `tsscore.classify` – `classify_ecdsa_msg()` and `classify_eddsa_msg()`.

## Installation

```
pip install tsscore
```

## Party identities

Parties are ordered by key, and sorting assigns each party its index:

```python
from tsscore.party_id import new_party_id, sort_party_ids

alice = new_party_id("alice", "alice:keygen", 2)
bob = new_party_id("bob", "bob:keygen", 1)

ordered = sort_party_ids([alice, bob], 0)
print([str(p) for p in ordered])        # ['{0,bob:keygen}', '{1,alice:keygen}']
print(ordered.find_by_key(2) is alice)  # True
```

A `PartyID` has index `-1` until it is sorted, and `validate_basic()` is true
only once it has a key and a non-negative index.

`create_sorted_party_ids()` does the same for a list of plain string
identifiers, taking each key from the identifier's bytes;
`get_local_party_index()` tells where an identifier ended up, or `-1`.

## Parameters

`Parameters(ec, parties, party_id, party_count, threshold)` holds the curve,
the `PeerContext` of the run, the local party and the sizes, plus settings a
protocol may read: `concurrency` (the CPU count), `safe_prime_gen_timeout`
(five minutes), `no_proof_mod`, `no_proof_fac`, and the random sources
`rand` and `partial_key_rand` (callables returning that many bytes,
`os.urandom` by default).

`ReSharingParameters` adds the new committee: `new_parties`,
`new_party_count`, `new_threshold`, `old_parties()`, `old_party_count()`,
`old_and_new_parties()`, `old_and_new_party_count()`, and
`is_old_committee()` / `is_new_committee()`, which compare the local party's
key with the members of each committee.

## Messages

A protocol defines its payloads by subclassing `MessageContent`
(`type_name()`, `to_bytes()`, `validate_basic()`). `new_message_wrapper()`
packs a payload into a protobuf `Any` with the type URL
`type.googleapis.com/<type_name>`, and `Message.wire_bytes()` returns the
encoded `Any` together with the routing.

On the receiving side, register a decoder for each payload type and parse:

```python
from tsscore.message import parse_wire_message, register_content_type

register_content_type("example.Round1", decode_round1)
msg = parse_wire_message(wire_bytes, sender_party_id, True)
```

`parse_wire_message()` raises `ValueError` for bytes that do not decode, for
a type with no registered decoder, and for a decoder that does not return a
`MessageContent`.

## Rounds and parties

A protocol implements `Round` (`params`, `round_number`, `start()`,
`update()`, `can_accept()`, `can_proceed()`, `next_round()`,
`waiting_for()`, `wrap_error()`) and subclasses `BaseParty`, supplying
`store_message()` and `party_id()`.

- `base_start(task, prepare=None)` checks the party identity, installs the
  first round, calls the optional single prepare function with it and starts
  it. More than one prepare function raises `TssError`.
- `base_update(msg, task)` validates the message, stores it, updates the
  current round and, while rounds can proceed, moves to the next one and
  starts it. It returns `False` if the message was not stored.
- `running()`, `waiting_for()` and `str(party)` (`"round: N"` or
  `"No more rounds"`) report progress.

Failures are raised as `TssError`. Its string form names the task, the party,
the round and, where known, the culprits:

```
task signing, party {0,P[1]}, round 3, culprits [{2,P[3]}]: bad proof
```

## Participants

```python
from tsscore.curve import s256
from tsscore.participant import Participant

outbox = []
with Participant("party1") as party:
    party.curve = s256()
    party.init(["party1", "party2", "party3"], 1, outbox.append)
```

`init()` builds the sorted party list, sets the local index and
`party.params`, and starts a background thread running `send_messages()`,
which hands every message put on `party.outgoing` to the sender.
`init_reshare()` does the same for resharing and fills `party.reshare_params`.
A participant has no curve until `party.curve` is set; the parameters use
whatever curve is set at the time of `init()` or `init_reshare()`.

- `on_msg()` puts a peer's message on `party.incoming`; it is dropped once the
  participant is closed.
- `process_msg(local_party, msg)` passes the message's wire bytes to
  `local_party.update_from_bytes()`.
- `notify_error()` logs everything put on `party.errors` until the
  participant is closed and the queue is empty.
- `hash_to_int(digest)` turns a digest into an integer no wider than the
  curve order (or `None` without a curve).
- `close()` stops delivery and waits for the sender thread; closing twice
  raises `RuntimeError`. Leaving the `with` block closes the participant.

## Routing messages

```python
from tsscore.classify import classify_ecdsa_msg

round_number, is_broadcast = classify_ecdsa_msg(wire_bytes)
```

`wire_bytes` is the encoded `Any` from `Message.wire_bytes()`. The result
tells a transport whether to send the message to everyone or only to its
recipients. Round numbers above 4 in the internal table are reduced by 4;
unknown message types give round `0` and not broadcast; bytes that do not
decode raise `ValueError`.

## What this package does not do

The package holds no protocol rounds of its own: it performs no key
generation, signing or resharing, and no elliptic-curve arithmetic (`Curve`
only describes a curve). It has no network transport either; moving
messages between participants is left to the sender functions you supply.

## Running the tests

```
pip install "tsscore[test]"
pytest
```