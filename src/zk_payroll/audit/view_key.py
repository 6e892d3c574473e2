# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import hashlib
from typing import Annotated

from pydantic import BaseModel, Field

from zk_payroll.types import AuditScope, ExpiryBasis, Principal

_VIEW_KEY_DOMAIN = b"zk-payroll/view-key/v1"


def derive_view_key_id(company_id: int, auditor: str, nonce: int) -> str:
    """
    Key id for the ``nonce``-th key issued by a company to an auditor.

    ``sha256(domain ‖ company_id ‖ auditor ‖ nonce)`` as lowercase hex.
    Distinct nonces give distinct ids, so re-issuing to the same auditor
    never overwrites an earlier key.
    """
    preimage = (
        _VIEW_KEY_DOMAIN
        + b"\x00"
        + company_id.to_bytes(8, "big")
        + auditor.encode("utf-8")
        + b"\x00"
        + nonce.to_bytes(8, "big")
    )
    return hashlib.sha256(preimage).hexdigest()


class ViewKey(BaseModel, frozen=True):
    """
    A time-bounded, scope-limited grant of audit access.

    Attributes:
        id: Hex key id from :func:`derive_view_key_id`.
        company_id: The company whose payroll the key opens.
        auditor: The only principal that may present the key.
        granted_by: The admin that issued the key; the only one who may
            revoke it.
        created_at: Host timestamp at issuance.
        expires_at: End of validity, measured on ``expiry_basis``.
        scope: What the holder may examine.
        nonce: Per-(company, auditor) issuance counter.
        expiry_basis: ``'timestamp'`` (valid while ``now < expires_at``) or
            ``'sequence'`` (valid while ``sequence <= expires_at``).
        employees: Covered employees, for EMPLOYEE_LIST keys only.
        period_start: Start of the covered window, for TIME_RANGE keys only.
        period_end: End of the covered window, for TIME_RANGE keys only.
    """

    id: Annotated[str, Field(min_length=64, max_length=64)]
    company_id: int
    auditor: Principal
    granted_by: Principal
    created_at: int
    expires_at: int
    scope: AuditScope
    nonce: Annotated[int, Field(ge=0)]
    expiry_basis: ExpiryBasis = "timestamp"
    employees: tuple[str, ...] | None = None
    period_start: int | None = None
    period_end: int | None = None

    def is_active(self, timestamp: int, sequence: int) -> bool:
        if self.expiry_basis == "sequence":
            return sequence <= self.expires_at
        return timestamp < self.expires_at

    def covers_employee(self, employee: str) -> bool:
        if self.scope is AuditScope.EMPLOYEE_LIST:
            return self.employees is not None and employee in self.employees
        return self.scope.reveals_individuals()

    def covers_period(self, start: int, end: int) -> bool:
        if self.scope is not AuditScope.TIME_RANGE:
            return True
        if self.period_start is None or self.period_end is None:
            return False
        return self.period_start <= start and end <= self.period_end
