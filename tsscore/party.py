"""Protocol rounds and the state machine that drives a local party through them."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .errors import TssError
from .message import Message
from .params import Parameters
from .party_id import PartyID

logger = logging.getLogger(__name__)


class Round(ABC):
    """One round of a protocol run."""

    @property
    @abstractmethod
    def params(self) -> Parameters:
        """Parameters of the run this round belongs to."""

    @property
    @abstractmethod
    def round_number(self) -> int:
        """The 1-based number of this round."""

    @abstractmethod
    def start(self) -> None:
        """Begin the round; raise TssError on failure."""

    @abstractmethod
    def update(self) -> bool:
        """Process stored messages; raise TssError on failure."""

    @abstractmethod
    def can_accept(self, msg: Message) -> bool:
        """True if ``msg`` belongs to this round."""

    @abstractmethod
    def can_proceed(self) -> bool:
        """True once every message this round needs has arrived."""

    @abstractmethod
    def next_round(self) -> Optional["Round"]:
        """The round that follows, or None when the run is complete."""

    @abstractmethod
    def waiting_for(self) -> list[PartyID]:
        """Parties whose messages this round still needs."""

    @abstractmethod
    def wrap_error(self, err: BaseException, *args: PartyID) -> TssError:
        """Wrap ``err`` with this round's context; ``args`` are the culprits."""


class BaseParty(ABC):
    """Shared lifecycle of a local party: starting, validating and updating rounds."""

    def __init__(self, first_round: Round) -> None:
        self.first_round = first_round
        self._round: Optional[Round] = None
        self._lock = threading.Lock()

    @abstractmethod
    def store_message(self, msg: Message) -> bool:
        """Store ``msg`` for the current round; raise TssError on failure."""

    @abstractmethod
    def party_id(self) -> Optional[PartyID]:
        """The identity of this party."""

    def running(self) -> bool:
        return self._round is not None

    def waiting_for(self) -> list[PartyID]:
        with self._lock:
            if self._round is None:
                return []
            return self._round.waiting_for()

    def wrap_error(self, err: BaseException, *args: PartyID) -> TssError:
        """Wrap ``err`` with the current round's context; ``args`` are the culprits."""
        if self._round is None:
            return TssError(err, "", -1, None, *args)
        return self._round.wrap_error(err, *args)

    def validate_message(self, msg: Optional[Message]) -> bool:
        """Check a message before it is stored; raise TssError if it is unusable."""
        if msg is None or msg.content is None:
            raise self.wrap_error(ValueError(f"received nil msg: {msg}"))
        sender = msg.from_party
        if sender is None or not sender.validate_basic():
            raise self.wrap_error(ValueError(f"received msg with an invalid sender: {msg}"))
        if not msg.validate_basic():
            raise self.wrap_error(ValueError(f"message failed ValidateBasic: {msg}"), sender)
        return True

    def _set_round(self, rnd: Round) -> None:
        if self._round is not None:
            raise self.wrap_error(RuntimeError("a round is already set on this party"))
        self._round = rnd

    def base_start(self, task: str, *args: Callable[[Round], None]) -> None:
        """Start the first round; ``args`` may hold one prepare function called with it."""
        with self._lock:
            pid = self.party_id()
            if pid is None or not pid.validate_basic():
                raise self.wrap_error(
                    ValueError(f"could not start. this party has an invalid PartyID: {pid!r}")
                )
            if self._round is not None:
                raise self.wrap_error(
                    RuntimeError(
                        "could not start. this party is in an unexpected state. "
                        "use the constructor and Start()"
                    )
                )
            rnd = self.first_round
            self._set_round(rnd)
            if len(args) > 1:
                raise self.wrap_error(ValueError("too many prepare functions given to Start(); 1 allowed"))
            if args:
                args[0](rnd)
            logger.info("party %s: %s round %d starting", rnd.params.party_id, task, 1)
            try:
                rnd.start()
            finally:
                logger.debug("party %s: %s round %d finished", rnd.params.party_id, task, 1)

    def base_update(self, msg: Message, task: str) -> bool:
        """Store ``msg`` and advance through every round it lets finish.

        Returns False if the message was not stored; raises TssError on failure.
        """
        while True:
            self.validate_message(msg)
            with self._lock:
                logger.debug("party %s received message: %s", self.party_id(), msg)
                if self._round is not None:
                    logger.debug(
                        "party %s round %d update: %s", self.party_id(), self._round.round_number, msg
                    )
                if not self.store_message(msg):
                    return False
                rnd = self._round
                if rnd is None:
                    return True
                logger.debug("party %s: %s round %d update", rnd.params.party_id, task, rnd.round_number)
                rnd.update()
                if not rnd.can_proceed():
                    return True
                self._round = rnd.next_round()
                if self._round is not None:
                    self._round.start()
                    logger.info(
                        "party %s: %s round %d started",
                        self._round.params.party_id,
                        task,
                        self._round.round_number,
                    )
                else:
                    logger.info("party %s: %s finished!", self.party_id(), task)
            # re-run the update against the new round, or finish

    def __str__(self) -> str:
        if self._round is not None:
            return f"round: {self._round.round_number}"
        return "No more rounds"