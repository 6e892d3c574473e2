# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import time
from abc import ABC, abstractmethod

from zk_payroll.config import HostConfig


class LedgerClock(ABC):
    """
    Source of the host's notion of "now".

    ``timestamp()`` is the close time of the current ledger in whole seconds
    and ``sequence()`` its sequence number. Both are read freshly on every
    call and never cached by the protocol.
    """

    @abstractmethod
    def timestamp(self) -> int:
        ...

    @abstractmethod
    def sequence(self) -> int:
        ...


class ManualClock(LedgerClock):
    """
    A clock that only moves when told to. Used by tests and simulations.

    Example::

        clock = ManualClock(timestamp=1_700_000_000)
        clock.advance(seconds=60, ledgers=12)
    """

    def __init__(self, timestamp: int = 0, sequence: int = 0) -> None:
        if timestamp < 0 or sequence < 0:
            raise ValueError("timestamp and sequence must be >= 0.")
        self._timestamp = timestamp
        self._sequence = sequence

    def timestamp(self) -> int:
        return self._timestamp

    def sequence(self) -> int:
        return self._sequence

    def set_timestamp(self, timestamp: int) -> None:
        if timestamp < 0:
            raise ValueError(f"timestamp must be >= 0; got {timestamp}.")
        self._timestamp = timestamp

    def set_sequence(self, sequence: int) -> None:
        if sequence < 0:
            raise ValueError(f"sequence must be >= 0; got {sequence}.")
        self._sequence = sequence

    def advance(self, seconds: int = 0, ledgers: int = 0) -> None:
        """Move the clock forward. Going backwards is not allowed."""
        if seconds < 0 or ledgers < 0:
            raise ValueError("the clock cannot move backwards.")
        self._timestamp += seconds
        self._sequence += ledgers


class SystemClock(LedgerClock):
    """
    Wall-clock time in UTC seconds, with a sequence number derived from a
    fixed ledger close interval.
    """

    def __init__(self, ledger_close_seconds: int = 5) -> None:
        if ledger_close_seconds <= 0:
            raise ValueError(
                f"ledger_close_seconds must be > 0; got {ledger_close_seconds}."
            )
        self._ledger_close_seconds = ledger_close_seconds

    @classmethod
    def from_config(cls, config: HostConfig) -> SystemClock:
        return cls(ledger_close_seconds=config.ledger_close_seconds)

    def timestamp(self) -> int:
        return int(time.time())

    def sequence(self) -> int:
        return self.timestamp() // self._ledger_close_seconds
