# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from zk_payroll.commitment.nullifier import Nullifier, NullifierRegistry
from zk_payroll.commitment.store import CommitmentStore, EmployeeCommitment

__all__ = ["CommitmentStore", "EmployeeCommitment", "Nullifier", "NullifierRegistry"]
