"""Protocol messages, their routing metadata and their wire encoding."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional

from google.protobuf import any_pb2
from google.protobuf.message import DecodeError

from .party_id import PartyID

TYPE_URL_PREFIX = "type.googleapis.com/"

ContentDecoder = Callable[[bytes], "MessageContent"]

_decoders: dict[str, ContentDecoder] = {}


class MessageContent(ABC):
    """The inner payload of a protocol message, with its own validation."""

    @abstractmethod
    def type_name(self) -> str:
        """Fully qualified message type name, as used in the Any type URL."""

    @abstractmethod
    def to_bytes(self) -> bytes:
        """The serialized payload."""

    @abstractmethod
    def validate_basic(self) -> bool:
        """True if the payload is well formed."""


@dataclass
class MessageRouting:
    """Delivery metadata consumed by the transport.

    ``to`` set to None means the message goes to every party.
    """

    from_party: Optional[PartyID]
    to: Optional[list[PartyID]] = None
    is_broadcast: bool = False
    is_to_old_committee: bool = False
    is_to_old_and_new_committees: bool = False


@dataclass
class MessageWrapper:
    """The envelope of a message: routing flags plus the packed content."""

    from_party: Optional[PartyID]
    message: any_pb2.Any = field(default_factory=any_pb2.Any)
    to: Optional[list[PartyID]] = None
    is_broadcast: bool = False
    is_to_old_committee: bool = False
    is_to_old_and_new_committees: bool = False


def _pack(content: MessageContent) -> any_pb2.Any:
    return any_pb2.Any(type_url=TYPE_URL_PREFIX + content.type_name(), value=content.to_bytes())


def new_message_wrapper(routing: MessageRouting, content: MessageContent) -> MessageWrapper:
    """Build the wire envelope for ``content`` from its routing metadata."""
    return MessageWrapper(
        from_party=routing.from_party,
        message=_pack(content),
        to=list(routing.to) if routing.to is not None else None,
        is_broadcast=routing.is_broadcast,
        is_to_old_committee=routing.is_to_old_committee,
        is_to_old_and_new_committees=routing.is_to_old_and_new_committees,
    )


class Message:
    """A message produced by or delivered to a local party."""

    def __init__(self, routing: MessageRouting, content: MessageContent, wire: MessageWrapper) -> None:
        self.routing = routing
        self.content = content
        self.wire = wire

    @property
    def from_party(self) -> Optional[PartyID]:
        return self.routing.from_party

    @property
    def to(self) -> Optional[list[PartyID]]:
        return self.routing.to

    def type(self) -> str:
        """The type name of the inner content."""
        return self.content.type_name()

    def is_broadcast(self) -> bool:
        return self.wire.is_broadcast

    def is_to_old_committee(self) -> bool:
        return self.wire.is_to_old_committee

    def is_to_old_and_new_committees(self) -> bool:
        return self.wire.is_to_old_and_new_committees

    def wire_bytes(self) -> tuple[bytes, MessageRouting]:
        """The encoded content to send over the wire, with its routing."""
        return self.wire.message.SerializeToString(), self.routing

    def validate_basic(self) -> bool:
        return self.content.validate_basic()

    def __str__(self) -> str:
        to_str = "all"
        if self.to is not None:
            to_str = "[" + " ".join(str(pid) for pid in self.to) + "]"
        extra = " (To Old Committee)" if self.is_to_old_committee() else ""
        return f"Type: {self.type()}, From: {self.from_party}, To: {to_str}{extra}"


def register_content_type(type_name: str, decoder: ContentDecoder) -> None:
    """Make ``decoder`` the parser for payloads of ``type_name``."""
    _decoders[type_name] = decoder


def parse_wire_message(wire_bytes: bytes, from_party: PartyID, is_broadcast: bool) -> Message:
    """Decode bytes received from ``from_party`` into a Message.

    Raises ValueError when the bytes cannot be decoded or hold an unknown type.
    """
    packed = any_pb2.Any()
    try:
        packed.ParseFromString(wire_bytes)
    except DecodeError as exc:
        raise ValueError(f"could not decode wire message: {exc}") from exc
    wire = MessageWrapper(from_party=from_party, message=packed, is_broadcast=is_broadcast)
    type_name = packed.type_url.rsplit("/", 1)[-1]
    decoder = _decoders.get(type_name)
    if decoder is None:
        raise ValueError(f"unknown message type: {packed.type_url!r}")
    content = decoder(packed.value)
    if not isinstance(content, MessageContent):
        raise ValueError("ParseWireMessage: the message contained unknown content")
    routing = MessageRouting(from_party=from_party, is_broadcast=wire.is_broadcast)
    return Message(routing, content, wire)