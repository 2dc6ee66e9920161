"""A networked participant that feeds wire messages into a local protocol party."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Iterable, Optional, Protocol

from .curve import Curve
from .message import Message
from .params import Parameters, ReSharingParameters
from .party_id import PartyID, PeerContext, SortedPartyIDs, new_party_id, sort_party_ids

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 1000
_POLL_INTERVAL = 0.05

Sender = Callable[[Message], None]


class WireUpdatable(Protocol):
    """A local protocol party that accepts messages as wire bytes."""

    def update_from_bytes(self, wire_bytes: bytes, from_party: Optional[PartyID], is_broadcast: bool) -> bool:
        ...


def _keygen_moniker(party_id: str) -> str:
    return f"{party_id}:keygen"


def _make_party_id(party_id: str) -> PartyID:
    return new_party_id(party_id, _keygen_moniker(party_id), int.from_bytes(party_id.encode(), "big"))


def create_sorted_party_ids(participants: Iterable[str]) -> SortedPartyIDs:
    """Build PartyIDs for the named participants and sort them by key."""
    return sort_party_ids(_make_party_id(name) for name in participants)


def get_local_party_index(party_ids: Iterable[PartyID], party_id: str) -> int:
    """Position of the party with id ``party_id``, or -1 if it is absent."""
    return next((i for i, pid in enumerate(party_ids) if pid.id == party_id), -1)


class Participant:
    """One participant: queues for incoming, outgoing and error traffic plus run parameters."""

    def __init__(self, party_id: str) -> None:
        self.party_id: PartyID = _make_party_id(party_id)
        self.params: Optional[Parameters] = None
        self.reshare_params: Optional[ReSharingParameters] = None
        self.incoming: "queue.Queue[Message]" = queue.Queue(DEFAULT_QUEUE_SIZE)
        self.outgoing: "queue.Queue[Message]" = queue.Queue(DEFAULT_QUEUE_SIZE)
        self.errors: "queue.Queue[BaseException]" = queue.Queue(DEFAULT_QUEUE_SIZE)
        self.sender: Optional[Sender] = None
        self.curve: Optional[Curve] = None
        self._closed = threading.Event()
        self._sender_thread: Optional[threading.Thread] = None

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def __enter__(self) -> "Participant":
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self.closed:
            self.close()

    def on_msg(self, msg: Message) -> None:
        """Queue a message received from a peer; dropped once the participant is closed."""
        while not self._closed.is_set():
            try:
                self.incoming.put(msg, timeout=_POLL_INTERVAL)
                return
            except queue.Full:
                continue

    def send_messages(self) -> None:
        """Hand outgoing messages to the sender until the participant is closed."""
        while not self._closed.is_set():
            try:
                msg = self.outgoing.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                continue
            if self.sender is not None:
                self.sender(msg)

    def notify_error(self) -> None:
        """Log every reported error; returns once closed and drained."""
        while True:
            try:
                err = self.errors.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                if self._closed.is_set():
                    return
                continue
            logger.warning("Party %s received error: %s", self.party_id.id, err)

    def close(self) -> None:
        """Stop message delivery. Raises RuntimeError if already closed."""
        if self._closed.is_set():
            raise RuntimeError(f"party {self.party_id.id} is already closed")
        self._closed.set()
        thread = self._sender_thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _start_sending(self, sender: Optional[Sender]) -> None:
        self.sender = sender
        thread = threading.Thread(
            target=self.send_messages, name=f"sender-{self.party_id.id}", daemon=True
        )
        self._sender_thread = thread
        thread.start()

    def init(self, participants: list[str], threshold: int, sender: Optional[Sender]) -> None:
        """Prepare for keygen or signing among ``participants`` and start sending."""
        sorted_ids = create_sorted_party_ids(participants)
        self.party_id.index = get_local_party_index(sorted_ids, self.party_id.id)
        self.params = Parameters(
            self.curve, PeerContext(sorted_ids), self.party_id, len(participants), threshold
        )
        self._start_sending(sender)

    def init_reshare(
        self,
        old_participants: list[str],
        new_participants: list[str],
        old_threshold: int,
        new_threshold: int,
        sender: Optional[Sender],
    ) -> None:
        """Prepare for moving a key from the old committee to the new one and start sending."""
        old_ids = create_sorted_party_ids(old_participants)
        new_ids = create_sorted_party_ids(new_participants)
        if self.party_id.index == -1:
            self.party_id.index = get_local_party_index(new_ids, self.party_id.id)
        self.reshare_params = ReSharingParameters(
            self.curve,
            PeerContext(old_ids),
            PeerContext(new_ids),
            self.party_id,
            len(old_participants),
            old_threshold,
            len(new_participants),
            new_threshold,
        )
        self._start_sending(sender)

    def process_msg(self, local_party: WireUpdatable, msg: Message) -> bool:
        """Feed ``msg`` to ``local_party`` in wire form; errors from the party propagate."""
        wire_bytes, _ = msg.wire_bytes()
        return local_party.update_from_bytes(wire_bytes, msg.from_party, msg.is_broadcast())

    def hash_to_int(self, data: bytes) -> Optional[int]:
        """Convert a hash to an integer no wider than the curve order; None without a curve."""
        if self.curve is None:
            return None
        order_bits = self.curve.order_bits()
        order_bytes = (order_bits + 7) // 8
        data = data[:order_bytes]
        value = int.from_bytes(data, "big")
        excess = len(data) * 8 - order_bits
        if excess > 0:
            value >>= excess
        return value