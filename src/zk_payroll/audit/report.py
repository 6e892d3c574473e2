# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field


class AuditReport(BaseModel, frozen=True):
    """
    Aggregate payroll snapshot returned to an auditor. Individual salaries
    are never included.

    Attributes:
        company_id: The audited company.
        total_employees: Employees covered by the report.
        total_paid: Sum of settled payments in the period, in base units.
        payment_count: Number of settled payments in the period.
        period_start: Inclusive start of the reporting window.
        period_end: Inclusive end of the reporting window.
        verified: True when the totals were read from live payment records.
            False means the module was not wired to a registry and an
            executor, and the totals are placeholders; callers must check it.
    """

    company_id: int
    total_employees: Annotated[int, Field(ge=0)] = 0
    total_paid: Annotated[int, Field(ge=0)] = 0
    payment_count: Annotated[int, Field(ge=0)] = 0
    period_start: int
    period_end: int
    verified: bool = False
