# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any

from zk_payroll.types import ExpiryBasis


@dataclass(frozen=True)
class TemporaryEntry:
    """
    A value held in the time-limited storage tier.

    ``basis`` says which clock ``expires_at`` is measured against. On the
    timestamp basis the entry is live while ``timestamp < expires_at``; on
    the sequence basis it is live while ``sequence <= expires_at``.
    """

    value: Any
    expires_at: int
    basis: ExpiryBasis = "timestamp"

    def is_live(self, timestamp: int, sequence: int) -> bool:
        if self.basis == "sequence":
            return sequence <= self.expires_at
        return timestamp < self.expires_at


@dataclass(frozen=True)
class StorageSnapshot:
    """Opaque point-in-time copy of both storage tiers."""

    persistent: dict[tuple[str, Hashable], Any]
    temporary: dict[tuple[str, Hashable], TemporaryEntry]
    write_count: int


class ContractStorage(ABC):
    """
    Minimal persistence contract for protocol state.

    Two tiers are exposed:

    - **persistent**: a durable map; records stay until removed.
    - **temporary**: a TTL-indexed map; each entry carries an expiry and is
      treated as logically absent by :meth:`has_temporary` once the host
      clock passes it. Expired entries stay readable through
      :meth:`get_temporary` until :meth:`evict_expired` sweeps them.

    Keys are ``(namespace, key)`` pairs so that every component owns its own
    key space. Implementations must hand out copies so that callers cannot
    mutate stored state without a write.
    """

    # ─── Persistent tier ─────────────────────────────────────────────────────

    @abstractmethod
    def get(self, namespace: str, key: Hashable) -> Any | None:
        ...

    @abstractmethod
    def set(self, namespace: str, key: Hashable, value: Any) -> None:
        ...

    @abstractmethod
    def has(self, namespace: str, key: Hashable) -> bool:
        ...

    @abstractmethod
    def remove(self, namespace: str, key: Hashable) -> bool:
        ...

    @abstractmethod
    def items(self, namespace: str) -> list[tuple[Hashable, Any]]:
        ...

    # ─── Temporary tier ──────────────────────────────────────────────────────

    @abstractmethod
    def set_temporary(
        self,
        namespace: str,
        key: Hashable,
        value: Any,
        expires_at: int,
        basis: ExpiryBasis = "timestamp",
    ) -> None:
        ...

    @abstractmethod
    def get_temporary(self, namespace: str, key: Hashable) -> TemporaryEntry | None:
        ...

    @abstractmethod
    def has_temporary(
        self, namespace: str, key: Hashable, timestamp: int, sequence: int
    ) -> bool:
        ...

    @abstractmethod
    def remove_temporary(self, namespace: str, key: Hashable) -> bool:
        ...

    @abstractmethod
    def temporary_entries(self, namespace: str) -> list[tuple[Hashable, TemporaryEntry]]:
        ...

    @abstractmethod
    def evict_expired(self, timestamp: int, sequence: int) -> int:
        ...

    # ─── Transactions ────────────────────────────────────────────────────────

    @abstractmethod
    def snapshot(self) -> StorageSnapshot:
        ...

    @abstractmethod
    def restore(self, snapshot: StorageSnapshot) -> None:
        ...

    @abstractmethod
    def write_count(self) -> int:
        ...
