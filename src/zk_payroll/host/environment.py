# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from zk_payroll.config import HostConfig
from zk_payroll.errors import ZkPayrollError
from zk_payroll.host.auth import Authenticator, MockAuthenticator
from zk_payroll.host.clock import LedgerClock, ManualClock
from zk_payroll.host.events import EventLog
from zk_payroll.host.storage import ContractStorage, MemoryStorage

logger = logging.getLogger("zk_payroll.host")


class HostEnvironment:
    """
    The transactional execution environment every component runs inside.

    Bundles the ledger clock, the authorization primitive, the two-tier
    contract storage and the event feed, and provides :meth:`invoke`, the
    transaction boundary. Components never hold state outside ``storage``,
    so restoring a storage snapshot restores the whole protocol.

    The host is not thread-safe; callers must serialize invocations.

    Args:
        clock: Source of the current timestamp and ledger sequence.
            Defaults to a :class:`ManualClock` at zero.
        authenticator: Authorization primitive. Defaults to a
            :class:`MockAuthenticator` that authorizes everyone.
        storage: Contract storage. Defaults to an empty :class:`MemoryStorage`.
        config: Host configuration. Defaults to ``HostConfig()``.

    Example::

        host = HostEnvironment(clock=ManualClock(timestamp=1_700_000_000))
        with host.invoke("register_company"):
            host.require_auth("GADMIN")
            host.storage.set("registry", "company_count", 1)
    """

    def __init__(
        self,
        clock: LedgerClock | None = None,
        authenticator: Authenticator | None = None,
        storage: ContractStorage | None = None,
        config: HostConfig | None = None,
    ) -> None:
        self.config = config or HostConfig()
        self.clock = clock or ManualClock()
        self.auth = authenticator or MockAuthenticator()
        self.storage = storage or MemoryStorage()
        self.events = EventLog(self.clock)
        self._depth = 0

    # ------------------------------------------------------------------
    # Ambient reads
    # ------------------------------------------------------------------

    def now(self) -> int:
        return self.clock.timestamp()

    def sequence(self) -> int:
        return self.clock.sequence()

    def require_auth(self, principal: str) -> None:
        self.auth.require_auth(principal)

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    # ------------------------------------------------------------------
    # Transaction boundary
    # ------------------------------------------------------------------

    @contextmanager
    def invoke(self, operation: str) -> Iterator[None]:
        """
        Run a block as one atomic host transaction.

        The outermost invocation snapshots storage and the event feed. If an
        exception escapes the block, both are restored before the exception
        propagates; when writes were discarded, protocol errors are marked
        with ``reverted=True``. Nested invocations (cross-component calls)
        join the enclosing transaction and share its fate.

        Args:
            operation: Name of the entry point, used for logging.
        """
        if self._depth > 0:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        snapshot = self.storage.snapshot()
        mark = self.events.mark()
        self._depth = 1
        try:
            yield
        except Exception as exc:
            wrote = (
                self.storage.write_count() != snapshot.write_count
                or len(self.events) != mark
            )
            self.storage.restore(snapshot)
            self.events.truncate(mark)
            if wrote and isinstance(exc, ZkPayrollError):
                exc.reverted = True
            logger.info(
                "transaction_reverted",
                extra={
                    "operation": operation,
                    "error": type(exc).__name__,
                    "discarded_writes": wrote,
                },
            )
            raise
        finally:
            self._depth = 0

        if self.config.evict_on_commit:
            self.evict_expired()

    def evict_expired(self) -> int:
        """Sweep expired entries from the temporary storage tier."""
        evicted = self.storage.evict_expired(self.now(), self.sequence())
        if evicted:
            logger.debug("temporary_entries_evicted", extra={"count": evicted})
        return evicted
