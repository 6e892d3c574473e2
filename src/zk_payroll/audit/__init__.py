# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from zk_payroll.audit.module import AuditModule
from zk_payroll.audit.report import AuditReport
from zk_payroll.audit.view_key import ViewKey, derive_view_key_id

__all__ = ["AuditModule", "AuditReport", "ViewKey", "derive_view_key_id"]
