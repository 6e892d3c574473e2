# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging

from zk_payroll.audit.module import AuditModule
from zk_payroll.commitment.nullifier import NullifierRegistry
from zk_payroll.commitment.store import CommitmentStore
from zk_payroll.config import ProtocolConfig
from zk_payroll.crypto.commitment import CommitmentScheme
from zk_payroll.crypto.groth16 import PairingBackend
from zk_payroll.errors import ConfigurationError
from zk_payroll.executor.executor import PaymentExecutor
from zk_payroll.host.auth import Authenticator
from zk_payroll.host.clock import LedgerClock
from zk_payroll.host.environment import HostEnvironment
from zk_payroll.host.events import EventFilter, PaymentProcessedEvent, payment_events
from zk_payroll.host.storage import ContractStorage
from zk_payroll.registry import PayrollRegistry
from zk_payroll.token import MemoryTokenLedger, TokenLedger
from zk_payroll.verifier import ProofVerifier

logger = logging.getLogger("zk_payroll.protocol")


class PayrollProtocol:
    """
    Every protocol component wired over one shared host.

    This is the single entry point most applications need. It builds the
    commitment store, nullifier registry, proof verifier, registry, token
    ledger, payment executor and audit module, and exposes each of them as
    an attribute. Each component can also be constructed on its own.

    Args:
        config: Protocol configuration. Defaults to ``ProtocolConfig()``.
        host: An existing host. When None one is built from ``clock``,
            ``authenticator`` and ``storage``.
        clock: Ledger clock for a newly built host.
        authenticator: Authorization primitive for a newly built host.
        storage: Contract storage for a newly built host.
        scheme: Commitment scheme. Defaults to SHA-256.
        backend: Pairing backend. Defaults to the structural development
            backend.
        token: Token ledger. Defaults to a :class:`MemoryTokenLedger` over
            the same host.

    Example::

        protocol = PayrollProtocol(clock=ManualClock(timestamp=1_700_000_000))
        protocol.verifier.initialize_verifier(vk)
        company_id = protocol.registry.register_company("GADMIN", "GTREASURY")
        protocol.registry.add_employee(company_id, "GEMP", commitment)
        protocol.token.mint("GTREASURY", 10_000)
        protocol.executor.execute_payment(
            company_id, "GEMP", 5_000, proof, nullifier, period=1,
        )
    """

    def __init__(
        self,
        config: ProtocolConfig | None = None,
        host: HostEnvironment | None = None,
        clock: LedgerClock | None = None,
        authenticator: Authenticator | None = None,
        storage: ContractStorage | None = None,
        scheme: CommitmentScheme | None = None,
        backend: PairingBackend | None = None,
        token: TokenLedger | None = None,
    ) -> None:
        if host is not None and any(part is not None for part in (clock, authenticator, storage)):
            raise ConfigurationError(
                "Pass either an existing host or clock/authenticator/storage, not both."
            )
        self.config = config or ProtocolConfig()
        self.host = host or HostEnvironment(
            clock=clock,
            authenticator=authenticator,
            storage=storage,
            config=self.config.host,
        )
        self.commitments = CommitmentStore(self.host, scheme)
        self.nullifiers = NullifierRegistry(self.host)
        self.verifier = ProofVerifier(self.host, backend)
        self.registry = PayrollRegistry(self.host, self.commitments)
        self.token = token or MemoryTokenLedger(self.host)
        self.executor = PaymentExecutor(
            self.host,
            self.registry,
            self.commitments,
            self.nullifiers,
            self.verifier,
            self.token,
            config=self.config.executor,
        )
        self.audit = AuditModule(
            self.host,
            self.commitments,
            registry=self.registry,
            executor=self.executor,
            config=self.config.audit,
        )
        logger.debug(
            "protocol_initialised",
            extra={
                "max_batch_size": self.config.executor.max_batch_size,
                "expiry_basis": self.config.audit.expiry_basis,
            },
        )

    def payment_events(self, event_filter: EventFilter | None = None) -> list[PaymentProcessedEvent]:
        """Settled-payment events from the host feed, for reconciliation."""
        return payment_events(self.host.events, event_filter)
