# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

import copy
from collections.abc import Hashable
from typing import Any

from zk_payroll.host.storage.interface import ContractStorage, StorageSnapshot, TemporaryEntry
from zk_payroll.types import ExpiryBasis


class MemoryStorage(ContractStorage):
    """
    In-process memory store for single-process use and testing.

    All state is lost when the process exits. Values are deep-copied on the
    way in and on the way out, so a snapshot only needs to copy the outer
    maps.
    """

    def __init__(self) -> None:
        self._persistent: dict[tuple[str, Hashable], Any] = {}
        self._temporary: dict[tuple[str, Hashable], TemporaryEntry] = {}
        self._writes = 0

    # ─── Persistent tier ─────────────────────────────────────────────────────

    def get(self, namespace: str, key: Hashable) -> Any | None:
        value = self._persistent.get((namespace, key))
        return copy.deepcopy(value)

    def set(self, namespace: str, key: Hashable, value: Any) -> None:
        self._persistent[(namespace, key)] = copy.deepcopy(value)
        self._writes += 1

    def has(self, namespace: str, key: Hashable) -> bool:
        return (namespace, key) in self._persistent

    def remove(self, namespace: str, key: Hashable) -> bool:
        if (namespace, key) not in self._persistent:
            return False
        del self._persistent[(namespace, key)]
        self._writes += 1
        return True

    def items(self, namespace: str) -> list[tuple[Hashable, Any]]:
        return [
            (key, copy.deepcopy(value))
            for (space, key), value in self._persistent.items()
            if space == namespace
        ]

    # ─── Temporary tier ──────────────────────────────────────────────────────

    def set_temporary(
        self,
        namespace: str,
        key: Hashable,
        value: Any,
        expires_at: int,
        basis: ExpiryBasis = "timestamp",
    ) -> None:
        self._temporary[(namespace, key)] = TemporaryEntry(
            value=copy.deepcopy(value),
            expires_at=expires_at,
            basis=basis,
        )
        self._writes += 1

    def get_temporary(self, namespace: str, key: Hashable) -> TemporaryEntry | None:
        entry = self._temporary.get((namespace, key))
        if entry is None:
            return None
        return TemporaryEntry(
            value=copy.deepcopy(entry.value),
            expires_at=entry.expires_at,
            basis=entry.basis,
        )

    def has_temporary(
        self, namespace: str, key: Hashable, timestamp: int, sequence: int
    ) -> bool:
        entry = self._temporary.get((namespace, key))
        return entry is not None and entry.is_live(timestamp, sequence)

    def remove_temporary(self, namespace: str, key: Hashable) -> bool:
        if (namespace, key) not in self._temporary:
            return False
        del self._temporary[(namespace, key)]
        self._writes += 1
        return True

    def temporary_entries(self, namespace: str) -> list[tuple[Hashable, TemporaryEntry]]:
        entries: list[tuple[Hashable, TemporaryEntry]] = []
        for (space, key) in list(self._temporary):
            if space != namespace:
                continue
            entry = self.get_temporary(space, key)
            if entry is not None:
                entries.append((key, entry))
        return entries

    def evict_expired(self, timestamp: int, sequence: int) -> int:
        expired = [
            full_key
            for full_key, entry in self._temporary.items()
            if not entry.is_live(timestamp, sequence)
        ]
        for full_key in expired:
            del self._temporary[full_key]
        if expired:
            self._writes += 1
        return len(expired)

    # ─── Transactions ────────────────────────────────────────────────────────

    def snapshot(self) -> StorageSnapshot:
        return StorageSnapshot(
            persistent=dict(self._persistent),
            temporary=dict(self._temporary),
            write_count=self._writes,
        )

    def restore(self, snapshot: StorageSnapshot) -> None:
        self._persistent = dict(snapshot.persistent)
        self._temporary = dict(snapshot.temporary)

    def write_count(self) -> int:
        return self._writes
