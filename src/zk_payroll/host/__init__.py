# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
zk_payroll.host: the in-process transactional execution environment.

Exports the ledger clocks, the authorization primitive, contract storage,
the event feed and :class:`HostEnvironment`.
"""

from zk_payroll.host.auth import Authenticator, MockAuthenticator
from zk_payroll.host.clock import LedgerClock, ManualClock, SystemClock
from zk_payroll.host.environment import HostEnvironment
from zk_payroll.host.events import (
    PAYROLL_PROCESSED,
    ContractEvent,
    EventFilter,
    EventLog,
    PaymentProcessedEvent,
    filter_events,
    payment_events,
)
from zk_payroll.host.storage import ContractStorage, MemoryStorage, StorageSnapshot, TemporaryEntry

__all__ = [
    "Authenticator",
    "ContractEvent",
    "ContractStorage",
    "EventFilter",
    "EventLog",
    "HostEnvironment",
    "LedgerClock",
    "ManualClock",
    "MemoryStorage",
    "MockAuthenticator",
    "PAYROLL_PROCESSED",
    "PaymentProcessedEvent",
    "StorageSnapshot",
    "SystemClock",
    "TemporaryEntry",
    "filter_events",
    "payment_events",
]
