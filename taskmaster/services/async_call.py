from __future__ import annotations

from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class CallState(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    SETTLED = "settled"


class AsyncCall(Generic[T]):
    """
    Observable state of one external call.

    A settled call always carries a usable value. Starting a new call while one
    is pending keeps the flag raised until the last of them settles.
    """

    def __init__(self) -> None:
        self.state = CallState.IDLE
        self.value: T | None = None
        self._in_flight = 0

    @property
    def pending(self) -> bool:
        return self.state == CallState.PENDING

    def begin(self) -> None:
        self._in_flight += 1
        self.state = CallState.PENDING

    def settle(self, value: T) -> None:
        self._in_flight = max(self._in_flight - 1, 0)
        self.value = value
        if self._in_flight == 0:
            self.state = CallState.SETTLED

