# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from zk_payroll.errors import InsufficientBalance, InvalidAmount
from zk_payroll.host.environment import HostEnvironment

logger = logging.getLogger("zk_payroll.token")

_NAMESPACE = "token"


class TokenLedger(ABC):
    """
    The fungible-token interface the payroll executor settles through.

    The executor is a caller of this ledger, never an owner of its state.
    """

    @abstractmethod
    def mint(self, to: str, amount: int) -> None:
        ...

    @abstractmethod
    def balance(self, holder: str) -> int:
        ...

    @abstractmethod
    def transfer(self, from_: str, to: str, amount: int) -> None:
        ...


class MemoryTokenLedger(TokenLedger):
    """
    Balance ledger kept in host storage, so balances roll back with the
    surrounding transaction.

    ``transfer`` requires the sender's signature. ``mint`` requires the
    signature of ``admin`` when one is configured.

    Example::

        ledger = MemoryTokenLedger(host)
        ledger.mint("GTREASURY", 10_000)
        ledger.transfer("GTREASURY", "GEMP", 5_000)
        assert ledger.balance("GEMP") == 5_000
    """

    def __init__(self, host: HostEnvironment, admin: str | None = None) -> None:
        self._host = host
        self._admin = admin

    def mint(self, to: str, amount: int) -> None:
        if amount <= 0:
            raise InvalidAmount(amount)
        with self._host.invoke("mint"):
            if self._admin is not None:
                self._host.require_auth(self._admin)
            self._host.storage.set(_NAMESPACE, to, self.balance(to) + amount)
            logger.info("tokens_minted", extra={"to": to})

    def balance(self, holder: str) -> int:
        return self._host.storage.get(_NAMESPACE, holder) or 0

    def transfer(self, from_: str, to: str, amount: int) -> None:
        """
        Move ``amount`` from ``from_`` to ``to``.

        Raises:
            InvalidAmount: If ``amount`` is not positive.
            Unauthorized: If ``from_`` has not signed.
            InsufficientBalance: If ``from_`` holds less than ``amount``.
        """
        if amount <= 0:
            raise InvalidAmount(amount)
        with self._host.invoke("transfer"):
            self._host.require_auth(from_)
            available = self.balance(from_)
            if available < amount:
                raise InsufficientBalance(from_, amount, available)
            self._host.storage.set(_NAMESPACE, from_, available - amount)
            self._host.storage.set(_NAMESPACE, to, self.balance(to) + amount)
            logger.debug("tokens_transferred", extra={"from": from_, "to": to})
