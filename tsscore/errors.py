"""The error raised by TSS protocol rounds."""

from __future__ import annotations

from typing import Any, Optional


class TssError(Exception):
    """An error in a protocol task, naming the round, victim and culprits."""

    def __init__(self, cause: Optional[BaseException], task: str, round: int, victim: Any, *args: Any) -> None:
        super().__init__(cause)
        self._cause = cause
        self._task = task
        self._round = round
        self._victim = victim
        self._culprits = list(args)
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    @property
    def cause(self) -> Optional[BaseException]:
        return self._cause

    @property
    def task(self) -> str:
        return self._task

    @property
    def round(self) -> int:
        return self._round

    @property
    def victim(self) -> Any:
        return self._victim

    @property
    def culprits(self) -> list:
        return self._culprits

    def __str__(self) -> str:
        if self._cause is None:
            return "Error is nil"
        victim = "<nil>" if self._victim is None else str(self._victim)
        if self._culprits:
            culprits = "[" + " ".join("<nil>" if c is None else str(c) for c in self._culprits) + "]"
            return (
                f"task {self._task}, party {victim}, round {self._round}, "
                f"culprits {culprits}: {self._cause}"
            )
        return f"task {self._task}, party {victim}, round {self._round}: {self._cause}"