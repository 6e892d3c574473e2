# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from zk_payroll.host.storage.interface import ContractStorage, StorageSnapshot, TemporaryEntry
from zk_payroll.host.storage.memory import MemoryStorage

__all__ = ["ContractStorage", "MemoryStorage", "StorageSnapshot", "TemporaryEntry"]
