# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field

from zk_payroll.host.clock import LedgerClock

logger = logging.getLogger("zk_payroll.host.events")

PAYROLL_PROCESSED = "PayrollProcessed"


class ContractEvent(BaseModel, frozen=True):
    """
    One entry of the host's append-only event feed.

    Attributes:
        topics: Indexed fields; the first topic names the event.
        data: Unindexed payload.
        timestamp: Host clock time at publication.
        sequence: Ledger sequence at publication.
    """

    topics: tuple[Any, ...]
    data: tuple[Any, ...]
    timestamp: int
    sequence: int

    @property
    def name(self) -> str | None:
        if not self.topics:
            return None
        first = self.topics[0]
        return first if isinstance(first, str) else None


class PaymentProcessedEvent(BaseModel, frozen=True):
    """
    Typed view of a ``PayrollProcessed`` event, as consumed by off-chain
    reconciliation.
    """

    company_id: int
    employee: str
    amount: int
    period: int
    timestamp: int

    @classmethod
    def from_event(cls, event: ContractEvent) -> PaymentProcessedEvent:
        """
        Decode a raw ``PayrollProcessed`` event.

        Raises:
            ValueError: If ``event`` is not a well-formed PayrollProcessed event.
        """
        if event.name != PAYROLL_PROCESSED or len(event.topics) != 2 or len(event.data) != 3:
            raise ValueError(f"not a {PAYROLL_PROCESSED} event: topics={event.topics!r}")
        employee, amount, period = event.data
        return cls(
            company_id=event.topics[1],
            employee=employee,
            amount=amount,
            period=period,
            timestamp=event.timestamp,
        )


class EventFilter(BaseModel, frozen=True):
    """
    Read-side filter for payment events. All set fields are AND-ed together.

    ``since`` and ``until`` bound the event timestamp inclusively.
    """

    company_id: int | None = None
    employee: str | None = None
    period: int | None = None
    since: int | None = Field(default=None, ge=0)
    until: int | None = Field(default=None, ge=0)


class EventLog:
    """
    Append-only event feed owned by the host.

    Events published inside a failed transaction are discarded together with
    its storage writes; see :meth:`~zk_payroll.host.environment.HostEnvironment.invoke`.
    """

    def __init__(self, clock: LedgerClock) -> None:
        self._clock = clock
        self._events: list[ContractEvent] = []

    def publish(self, topics: tuple[Any, ...], data: tuple[Any, ...]) -> ContractEvent:
        event = ContractEvent(
            topics=tuple(topics),
            data=tuple(data),
            timestamp=self._clock.timestamp(),
            sequence=self._clock.sequence(),
        )
        self._events.append(event)
        logger.debug("event_published", extra={"event_name": event.name})
        return event

    def all(self) -> list[ContractEvent]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def mark(self) -> int:
        """Return a position that :meth:`truncate` can roll back to."""
        return len(self._events)

    def truncate(self, mark: int) -> None:
        del self._events[mark:]


def filter_events(
    events: list[PaymentProcessedEvent],
    event_filter: EventFilter | None,
) -> list[PaymentProcessedEvent]:
    """
    Apply an optional EventFilter to a list of payment events.
    Returns a new list; the input is not modified.
    """
    if event_filter is None:
        return list(events)

    results: list[PaymentProcessedEvent] = []
    for event in events:
        if event_filter.company_id is not None and event.company_id != event_filter.company_id:
            continue
        if event_filter.employee is not None and event.employee != event_filter.employee:
            continue
        if event_filter.period is not None and event.period != event_filter.period:
            continue
        if event_filter.since is not None and event.timestamp < event_filter.since:
            continue
        if event_filter.until is not None and event.timestamp > event_filter.until:
            continue
        results.append(event)

    return results


def payment_events(
    log: EventLog,
    event_filter: EventFilter | None = None,
) -> list[PaymentProcessedEvent]:
    """Decode every ``PayrollProcessed`` event in ``log`` and apply ``event_filter``."""
    decoded = [
        PaymentProcessedEvent.from_event(event)
        for event in log.all()
        if event.name == PAYROLL_PROCESSED
    ]
    return filter_events(decoded, event_filter)
