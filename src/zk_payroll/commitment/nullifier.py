# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging

from pydantic import BaseModel

from zk_payroll.errors import NullifierAlreadyUsed
from zk_payroll.host.environment import HostEnvironment
from zk_payroll.types import Digest

logger = logging.getLogger("zk_payroll.nullifier")

_NAMESPACE = "nullifier"


class Nullifier(BaseModel, frozen=True):
    """A consumed one-time payment token and when it was consumed."""

    value: Digest
    used_at: int


class NullifierRegistry:
    """
    The set of consumed payment nullifiers.

    Presence is permanent: there is no delete operation, so a nullifier can
    be recorded exactly once for the lifetime of the protocol. This registry
    is the only double-payment guard.
    """

    def __init__(self, host: HostEnvironment) -> None:
        self._host = host

    def record_nullifier(self, value: bytes) -> Nullifier:
        """
        Consume ``value``.

        Raises:
            NullifierAlreadyUsed: If ``value`` was recorded before.
        """
        with self._host.invoke("record_nullifier"):
            key = bytes(value)
            if self._host.storage.has(_NAMESPACE, key):
                raise NullifierAlreadyUsed(key)
            nullifier = Nullifier(value=key, used_at=self._host.now())
            self._host.storage.set(_NAMESPACE, key, nullifier)
            logger.debug("nullifier_recorded", extra={"nullifier": key.hex()[:16]})
            return nullifier

    def is_nullifier_used(self, value: bytes) -> bool:
        return self._host.storage.has(_NAMESPACE, bytes(value))

    def get_nullifier(self, value: bytes) -> Nullifier | None:
        return self._host.storage.get(_NAMESPACE, bytes(value))
