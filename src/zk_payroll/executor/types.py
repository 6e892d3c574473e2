# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field

from zk_payroll.types import Digest, PaymentState, Principal


class PaymentRecord(BaseModel, frozen=True):
    """
    A settled payment. At most one exists per ``(employee, period)``.

    Attributes:
        company_id: The paying company.
        employee: The payee.
        amount: Amount transferred, in token base units.
        proof_hash: The payment nullifier, which uniquely identifies the proof.
        timestamp: Host timestamp at settlement.
        period: Caller-defined payroll period number.
    """

    company_id: int
    employee: Principal
    amount: Annotated[int, Field(gt=0)]
    proof_hash: Digest
    timestamp: int
    period: Annotated[int, Field(ge=0)]


# Valid transitions: {from_state: {allowed_to_states}}
_TRANSITIONS: dict[PaymentState, set[PaymentState]] = {
    PaymentState.PENDING: {PaymentState.VERIFIED, PaymentState.REJECTED},
    PaymentState.VERIFIED: {PaymentState.SETTLED, PaymentState.REJECTED},
    # Terminal states
    PaymentState.SETTLED: set(),
    PaymentState.REJECTED: set(),
}


class PaymentAttempt:
    """
    Tracks one batch entry through PENDING → VERIFIED → SETTLED, or to
    REJECTED. Fail-closed: any other transition raises ValueError.
    """

    def __init__(self, index: int, employee: str) -> None:
        self.index = index
        self.employee = employee
        self.state = PaymentState.PENDING

    def advance(self, target: PaymentState) -> None:
        allowed = _TRANSITIONS.get(self.state, set())
        if target not in allowed:
            allowed_str = ", ".join(sorted(s.value for s in allowed))
            raise ValueError(
                f"Invalid payment transition: {self.state.value} → {target.value}. "
                f"Allowed from {self.state.value}: [{allowed_str}]"
            )
        self.state = target

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS.get(self.state)

    @staticmethod
    def valid_transitions(state: PaymentState) -> set[PaymentState]:
        return set(_TRANSITIONS.get(state, set()))
